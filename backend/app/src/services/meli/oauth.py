"""OAuth 2.0 authorization-code flow for Mercado Livre."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests
from pydantic import ValidationError

from src.models.meli.meli_models import TokenResponse

OAUTH_AUTH_URL = "https://auth.mercadolivre.com.br/authorization"
OAUTH_TOKEN_URL = "https://api.mercadolibre.com/oauth/token"

logger = logging.getLogger("meli.oauth")


class OAuthError(RuntimeError):
    """Raised when the token exchange fails."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class OAuthClient:
    """Build authorization URLs and exchange codes for access tokens."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        auth_url: str = OAUTH_AUTH_URL,
        token_url: str = OAUTH_TOKEN_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Any) -> Optional["OAuthClient"]:
        """Return a client, or ``None`` when credentials are incomplete."""
        if not settings.oauth_configured:
            logger.warning(
                "Credenciais OAuth incompletas. ML_CLIENT_ID, ML_CLIENT_SECRET e "
                "ML_REDIRECT_URI são obrigatórios."
            )
            return None
        return cls(
            client_id=settings.ML_CLIENT_ID,
            client_secret=settings.ML_CLIENT_SECRET,
            redirect_uri=settings.ML_REDIRECT_URI,
            auth_url=settings.MELI_AUTH_URL,
            token_url=settings.MELI_TOKEN_URL,
            timeout=settings.MELI_HTTP_TIMEOUT,
        )

    def close(self) -> None:
        self.session.close()

    def authorization_url(self) -> str:
        # redirect_uri must match the one registered in the DevCenter exactly
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
        }
        return f"{self.auth_url}?{urlencode(params)}"

    def exchange_code(self, code: str) -> TokenResponse:
        """Exchange an authorization code for an access token."""
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        try:
            response = self.session.post(
                self.token_url, data=data, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Falha de rede na troca do código OAuth: %s", exc)
            raise OAuthError(f"oauth token exchange failed: {exc}") from exc

        if response.status_code != 200:
            raise OAuthError(
                f"oauth token exchange failed: status {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise OAuthError(
                f"oauth token exchange returned an invalid payload: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.info("Token OAuth obtido para o usuário %s", token.user_id)
        return token
