"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Mercado Livre API
    MELI_BASE_URL: str = "https://api.mercadolibre.com"
    MELI_SITE_ID: str = "MLB"
    MELI_HTTP_TIMEOUT: float = 10.0

    # OAuth credentials (DevCenter application)
    ML_CLIENT_ID: Optional[str] = None
    ML_CLIENT_SECRET: Optional[str] = None
    ML_REDIRECT_URI: Optional[str] = None
    ML_ACCESS_TOKEN: Optional[str] = None
    MELI_AUTH_URL: str = "https://auth.mercadolivre.com.br/authorization"
    MELI_TOKEN_URL: str = "https://api.mercadolibre.com/oauth/token"

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    TRENDS_DEFAULT_LIMIT: int = 10

    # Values from the repository root .env override the app one
    model_config = SettingsConfigDict(
        env_file=(APP_DIR / ".env", APP_DIR.parent.parent / ".env"),
        extra="ignore",
    )

    @property
    def oauth_configured(self) -> bool:
        """Whether all three OAuth credentials are present."""
        return bool(self.ML_CLIENT_ID and self.ML_CLIENT_SECRET and self.ML_REDIRECT_URI)


settings = Settings()
