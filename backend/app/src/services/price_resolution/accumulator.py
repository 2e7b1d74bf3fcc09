"""Running minimum over the eligible listings of successive pages."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import Listing, ResolvedPrice

logger = logging.getLogger("price_resolution.accumulator")


class BestPriceAccumulator:
    """Fold listings page by page, keeping the cheapest active one.

    Listings with a non-positive price or a status other than ``active`` are
    skipped. A candidate only replaces the current best when strictly cheaper,
    so ties keep the first listing seen.
    """

    def __init__(self, product_id: Optional[str] = None) -> None:
        self.product_id = product_id
        self._best: Optional[ResolvedPrice] = None
        self.eligible_count = 0
        self.skipped_count = 0

    @property
    def best(self) -> Optional[ResolvedPrice]:
        return self._best

    def fold(self, listings: Iterable[Listing]) -> Optional[ResolvedPrice]:
        """Fold one page into the running minimum and return the current best."""
        for listing in listings:
            if not listing.is_eligible:
                self.skipped_count += 1
                logger.debug(
                    "[%s] Ignorando anúncio %s: price=%.2f status=%s",
                    self.product_id,
                    listing.listing_id,
                    listing.price,
                    listing.status,
                )
                continue

            self.eligible_count += 1
            if self._best is None or listing.price < self._best.price:
                self._best = ResolvedPrice.from_listing(listing)
                logger.debug(
                    "[%s] Novo melhor preço: %.2f do anúncio %s",
                    self.product_id,
                    listing.price,
                    listing.listing_id,
                )
        return self._best
