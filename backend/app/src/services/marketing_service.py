"""Business logic for marketing and sales analysis over Mercado Livre data."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from src.models.meli.meli_models import Category, CategoryPrediction, SearchItem
from src.services.meli.meli_client import (
    PRODUCT_HIGHLIGHT,
    MeliAPIError,
    MeliClient,
    RequestCancelled,
)
from src.services.price_resolution import (
    PriceResolutionError,
    PriceResolver,
    ResolutionCancelled,
)

logger = logging.getLogger("marketing.service")


class MarketingService:
    """Coordinate catalog lookups and best-price resolution for trend reports."""

    DEFAULT_TRENDS_LIMIT = 10

    def __init__(self, client: MeliClient, resolver: PriceResolver) -> None:
        self.client = client
        self.resolver = resolver

    def top_trends_by_category(
        self,
        category_id: str,
        limit: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[SearchItem]:
        """Return the best sellers of a category priced at their cheapest listing.

        Highlights whose detail or price cannot be obtained are skipped.
        """
        max_items = limit or self.DEFAULT_TRENDS_LIMIT
        highlights = self.client.highlights(category_id, cancel_event=cancel_event)

        items: List[SearchItem] = []
        for highlight in highlights.content[:max_items]:
            try:
                item = self.client.highlight_detail(
                    highlight.id, highlight.type, cancel_event=cancel_event
                )
            except RequestCancelled:
                raise
            except MeliAPIError as exc:
                logger.error(
                    "Falha ao obter detalhe do destaque %s: %s", highlight.id, exc.message
                )
                continue

            if highlight.type == PRODUCT_HIGHLIGHT:
                try:
                    resolved = self.resolver.resolve_best_price(
                        item.id, cancel_event=cancel_event
                    )
                except ResolutionCancelled:
                    raise
                except PriceResolutionError as exc:
                    logger.error(
                        "Falha ao obter melhor preço do produto %s: %s", item.id, exc
                    )
                    continue
                item.price = resolved.price
                item.link_venda = resolved.permalink or None
            else:
                item.link_venda = item.permalink or None

            items.append(item)

        logger.info(
            "Categoria %s: %d de %d destaques com preço",
            category_id,
            len(items),
            len(highlights.content),
        )
        return items

    def root_categories(self) -> List[Category]:
        return self.client.root_categories()

    def suggest_categories(self, query: str) -> List[CategoryPrediction]:
        """Suggest categories for a free-text query."""
        return self.client.predict_category(query)
