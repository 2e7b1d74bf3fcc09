"""Marketing endpoints: categories, trends and product best prices."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from configs import settings
from src.controllers.dependencies import (
    get_marketing_service,
    get_price_resolver,
    require_access_token,
)
from src.models.marketing_models import BestPriceResponse
from src.models.meli.meli_models import Category, CategoryPrediction, SearchItem
from src.services.marketing_service import MarketingService
from src.services.meli.meli_client import MeliAPIError
from src.services.meli.utils import format_brl
from src.services.price_resolution import (
    NoActiveListing,
    PriceResolutionError,
    PriceResolver,
    ValidationFailed,
)

logger = logging.getLogger("marketing.controllers")

marketing_router = APIRouter(prefix="/api", tags=["Marketing"])


@marketing_router.get("/categories", response_model=List[Category])
def get_categories(
    service: MarketingService = Depends(get_marketing_service),
) -> List[Category]:
    """Return the root categories of the configured site."""
    try:
        return service.root_categories()
    except MeliAPIError as exc:
        logger.error("Falha ao listar categorias: %s", exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


@marketing_router.get(
    "/trends",
    response_model=List[SearchItem],
    dependencies=[Depends(require_access_token)],
)
def get_top_trends(
    category_id: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    service: MarketingService = Depends(get_marketing_service),
) -> List[SearchItem]:
    """Return the best sellers of a category with their lowest active price."""
    if not category_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="category_id is required"
        )
    try:
        return service.top_trends_by_category(
            category_id, limit or settings.TRENDS_DEFAULT_LIMIT
        )
    except (MeliAPIError, PriceResolutionError) as exc:
        logger.error("Falha ao buscar tendências de %s: %s", category_id, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@marketing_router.get(
    "/category_suggest",
    response_model=List[CategoryPrediction],
    dependencies=[Depends(require_access_token)],
)
def suggest_category(
    q: Optional[str] = Query(default=None),
    service: MarketingService = Depends(get_marketing_service),
) -> List[CategoryPrediction]:
    """Suggest categories from free text using the category predictor."""
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="q is required")
    try:
        return service.suggest_categories(q)
    except MeliAPIError as exc:
        logger.error("Falha ao sugerir categorias para '%s': %s", q, exc.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


@marketing_router.get(
    "/products/{product_id}/best_price",
    response_model=BestPriceResponse,
    dependencies=[Depends(require_access_token)],
)
def get_best_price(
    product_id: str,
    resolver: PriceResolver = Depends(get_price_resolver),
) -> BestPriceResponse:
    """Resolve the lowest active listing price of a catalog product."""
    try:
        resolved = resolver.resolve_best_price(product_id)
    except NoActiveListing as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValidationFailed as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except PriceResolutionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    return BestPriceResponse(
        product_id=product_id,
        price=resolved.price,
        price_text=format_brl(resolved.price),
        listing_id=resolved.listing_id,
        title=resolved.title,
        permalink=resolved.permalink,
    )
