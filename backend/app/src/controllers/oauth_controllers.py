"""OAuth login flow against Mercado Livre.

The access token lives in an HTTP-only cookie; nothing is kept in process
memory between requests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse

from configs import settings
from src.controllers.dependencies import (
    ACCESS_TOKEN_COOKIE,
    USER_ID_COOKIE,
    get_access_token,
    get_oauth_client,
)
from src.models.marketing_models import AuthDebugResponse, AuthStatusResponse
from src.services.meli.oauth import OAuthClient, OAuthError

logger = logging.getLogger("oauth.controllers")

oauth_router = APIRouter(tags=["OAuth"])

COOKIE_MAX_AGE = 86400


@oauth_router.get("/auth/login")
def login(
    oauth_client: Optional[OAuthClient] = Depends(get_oauth_client),
) -> RedirectResponse:
    """Redirect the user to the Mercado Livre authorization page."""
    if oauth_client is None:
        return RedirectResponse("/oauth-help", status_code=status.HTTP_302_FOUND)

    auth_url = oauth_client.authorization_url()
    logger.info("Redirecionando para OAuth: %s", auth_url)
    return RedirectResponse(auth_url, status_code=status.HTTP_302_FOUND)


@oauth_router.get("/oauth-help")
def oauth_help() -> Dict[str, Any]:
    return {
        "message": "OAuth não configurado.",
        "required_env": ["ML_CLIENT_ID", "ML_CLIENT_SECRET", "ML_REDIRECT_URI"],
        "note": "ML_REDIRECT_URI deve ser idêntica à cadastrada no DevCenter.",
    }


@oauth_router.get("/callback")
def callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    oauth_client: Optional[OAuthClient] = Depends(get_oauth_client),
):
    """Exchange the authorization code and store the token in cookies."""
    if oauth_client is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="OAuth not configured",
        )

    if not code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Authorization failed",
                "error_code": error,
                "error_description": error_description,
            },
        )

    try:
        token = oauth_client.exchange_code(code)
    except OAuthError as exc:
        logger.error("Falha na troca do código OAuth: %s", exc.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to exchange code for token: {exc.message}",
        )

    user_id = "" if token.user_id is None else str(token.user_id)
    response = RedirectResponse(
        f"/?auth=success&user_id={user_id}", status_code=status.HTTP_302_FOUND
    )
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token.access_token,
        max_age=COOKIE_MAX_AGE,
        path="/",
        httponly=True,
    )
    response.set_cookie(
        USER_ID_COOKIE, user_id, max_age=COOKIE_MAX_AGE, path="/", httponly=True
    )
    return response


@oauth_router.get("/auth/status", response_model=AuthStatusResponse)
def auth_status(token: Optional[str] = Depends(get_access_token)) -> AuthStatusResponse:
    if not token:
        return AuthStatusResponse(
            authenticated=False,
            message="Not authenticated. Visit /auth/login to authenticate",
        )
    return AuthStatusResponse(authenticated=True, message="Authenticated successfully")


@oauth_router.get("/auth/logout")
def logout() -> JSONResponse:
    response = JSONResponse({"message": "Logged out successfully"})
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(USER_ID_COOKIE, path="/")
    return response


@oauth_router.get("/auth/debug", response_model=AuthDebugResponse)
def auth_debug(
    oauth_client: Optional[OAuthClient] = Depends(get_oauth_client),
) -> AuthDebugResponse:
    """Show the OAuth configuration without exposing the client secret."""
    return AuthDebugResponse(
        configured=oauth_client is not None,
        client_id=settings.ML_CLIENT_ID,
        redirect_uri=settings.ML_REDIRECT_URI,
        has_secret=bool(settings.ML_CLIENT_SECRET),
        auth_url=oauth_client.authorization_url() if oauth_client else None,
    )
