"""End-to-end best-price resolution for a catalog product."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from src.services.meli.meli_client import MeliClient, ResolverConfig

from .accumulator import BestPriceAccumulator
from .fetcher import ListingsFetcher
from .models import NoActiveListing, PriceResolutionError, ResolvedPrice
from .shapes import ResponseShapeParser
from .validator import ActiveListingValidator

logger = logging.getLogger("price_resolution.resolver")


class PriceResolver:
    """Find the cheapest active listing of a product and confirm it is live.

    Each call walks every listings page, folds them into a running minimum and
    confirms the winner. All per-call state lives in the call itself, so one
    resolver may serve concurrent resolutions.
    """

    def __init__(
        self,
        config: ResolverConfig,
        client: Optional[MeliClient] = None,
        parser: Optional[ResponseShapeParser] = None,
    ) -> None:
        self.config = config
        self.client = client or MeliClient(config)
        self.fetcher = ListingsFetcher(self.client, parser)
        self.validator = ActiveListingValidator(self.client)

    def resolve_best_price(
        self,
        product_id: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolvedPrice:
        """Return the best price of ``product_id`` or raise a ``PriceResolutionError``."""
        accumulator = BestPriceAccumulator(product_id)
        pages = 0
        try:
            for page in self.fetcher.iter_pages(product_id, cancel_event):
                pages += 1
                accumulator.fold(page.listings)

            best = accumulator.best
            if best is None:
                raise NoActiveListing(product_id)

            logger.debug(
                "[%s] Antes da validação: price=%.2f item=%s (%d páginas, %d elegíveis)",
                product_id,
                best.price,
                best.listing_id,
                pages,
                accumulator.eligible_count,
            )
            resolved = self.validator.confirm(product_id, best, cancel_event)
        except PriceResolutionError as exc:
            logger.error(
                "Falha ao resolver melhor preço de %s na etapa %s: %s",
                product_id,
                exc.stage.value,
                exc.message,
            )
            raise

        logger.info(
            "[%s] Melhor preço: %.2f (anúncio %s)",
            product_id,
            resolved.price,
            resolved.listing_id,
        )
        return resolved
