"""FastAPI application."""

import argparse
import logging

from fastapi import FastAPI

from configs import settings
from src.controllers.marketing_controllers import marketing_router
from src.controllers.oauth_controllers import oauth_router
from src.logger_config import get_logger
from src.models.marketing_models import HealthResponse


logging.basicConfig(level=logging.INFO)
logger = get_logger(__name__)

if not settings.oauth_configured:
    logger.warning(
        "OAuth credentials not fully configured. ML_CLIENT_ID, ML_CLIENT_SECRET "
        "and ML_REDIRECT_URI are required for /auth/login."
    )

logger.info("Starting FastAPI application...")
app = FastAPI(
    title="Melibot API - Pricing",
    root_path=settings.ROOT_PATH_BACKEND,
    description="Best prices, trends and categories from Mercado Livre",
)
app.include_router(oauth_router)
app.include_router(marketing_router)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Simple health check route."""
    return HealthResponse(status="ok")


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0", help="Application host.")
    parser.add_argument("--port", default="8080", help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()
    logger.info("Servidor iniciado na porta %s", args.port)
    uvicorn.run("app:app", host=args.host, port=int(args.port), reload=args.reload)
