"""FastAPI dependencies wiring Mercado Livre clients per request."""

from __future__ import annotations

import logging
from typing import Generator, Optional

from fastapi import Cookie, Depends, HTTPException, status

from configs import settings
from src.services.marketing_service import MarketingService
from src.services.meli.meli_client import MeliClient, ResolverConfig
from src.services.meli.oauth import OAuthClient
from src.services.price_resolution import PriceResolver

ACCESS_TOKEN_COOKIE = "ml_access_token"
USER_ID_COOKIE = "ml_user_id"

logger = logging.getLogger("controllers.dependencies")


def get_access_token(
    ml_access_token: Optional[str] = Cookie(default=None),
) -> Optional[str]:
    """Return the token from the session cookie, else the one from the env."""
    if ml_access_token:
        return ml_access_token
    if settings.ML_ACCESS_TOKEN:
        logger.debug("Token não encontrado no cookie, usando ML_ACCESS_TOKEN")
        return settings.ML_ACCESS_TOKEN
    return None


def require_access_token(token: Optional[str] = Depends(get_access_token)) -> str:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Autenticação necessária. Por favor, faça login primeiro.",
        )
    return token


def get_meli_client(
    token: Optional[str] = Depends(get_access_token),
) -> Generator[MeliClient, None, None]:
    """Yield a client for the request token and close its session afterwards."""
    client = MeliClient(ResolverConfig.from_settings(settings, access_token=token))
    try:
        yield client
    finally:
        client.close()


def get_price_resolver(client: MeliClient = Depends(get_meli_client)) -> PriceResolver:
    return PriceResolver(client.config, client=client)


def get_marketing_service(
    client: MeliClient = Depends(get_meli_client),
    resolver: PriceResolver = Depends(get_price_resolver),
) -> MarketingService:
    return MarketingService(client, resolver)


def get_oauth_client() -> Generator[Optional[OAuthClient], None, None]:
    oauth_client = OAuthClient.from_settings(settings)
    try:
        yield oauth_client
    finally:
        if oauth_client is not None:
            oauth_client.close()
