"""Domain models and failures for best-price resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

ACTIVE_STATUS = "active"


@dataclass(slots=True)
class Listing:
    """A sellable instance of a catalog product, as seen on one listings page."""

    listing_id: str
    price: float
    status: str
    title: str = ""
    permalink: str = ""
    condition: Optional[str] = None

    @property
    def is_eligible(self) -> bool:
        return self.price > 0 and self.status == ACTIVE_STATUS


@dataclass(frozen=True, slots=True)
class PagingDescriptor:
    """``{total, offset, limit}`` triple sent with paged listings responses."""

    total: int
    offset: int
    limit: int

    def follow_up_offsets(self) -> Iterator[int]:
        """Yield the offsets of every page after the one this descriptor came with."""
        if self.total <= 0 or self.limit <= 0:
            return
        offset = self.offset + self.limit
        while offset < self.total:
            yield offset
            offset += self.limit


@dataclass(frozen=True, slots=True)
class ResolvedPrice:
    """Lowest active price found for a product and the listing that holds it."""

    price: float
    listing_id: str
    title: str = ""
    permalink: str = ""

    @classmethod
    def from_listing(cls, listing: Listing) -> "ResolvedPrice":
        return cls(
            price=listing.price,
            listing_id=listing.listing_id,
            title=listing.title,
            permalink=listing.permalink,
        )


class ResolutionStage(str, Enum):
    """Step of a resolution at which a failure happened."""

    FETCH_PAGE = "fetch_page"
    PARSE_PAGE = "parse_page"
    SELECT_BEST = "select_best"
    VALIDATE = "validate"


class PriceResolutionError(RuntimeError):
    """Base class for every terminal failure of a resolution."""

    def __init__(
        self,
        product_id: Optional[str],
        stage: ResolutionStage,
        message: str,
    ) -> None:
        super().__init__(f"[{product_id}] {stage.value}: {message}")
        self.product_id = product_id
        self.stage = stage
        self.message = message


class TransportError(PriceResolutionError):
    """Connection failure or timeout on a required fetch."""


class UnexpectedStatus(PriceResolutionError):
    """A required fetch answered with a non-success HTTP status."""

    def __init__(
        self,
        product_id: Optional[str],
        stage: ResolutionStage,
        status_code: int,
        body: bytes,
    ) -> None:
        super().__init__(
            product_id,
            stage,
            f"meli product items: status={status_code} - "
            f"{body.decode('utf-8', errors='replace')}",
        )
        self.status_code = status_code
        self.body = body


class UnknownShape(PriceResolutionError):
    """A listings body matched none of the known response formats."""

    def __init__(self, product_id: Optional[str], body: bytes) -> None:
        super().__init__(
            product_id,
            ResolutionStage.PARSE_PAGE,
            "unknown items response format - body: "
            f"{body.decode('utf-8', errors='replace')}",
        )
        self.body = body


class NoActiveListing(PriceResolutionError):
    """Every listing on every page was filtered out."""

    def __init__(self, product_id: Optional[str]) -> None:
        super().__init__(
            product_id,
            ResolutionStage.SELECT_BEST,
            f"no active items with price for product {product_id}",
        )


class ValidationFailed(PriceResolutionError):
    """The winning listing was confirmed to be no longer active."""

    def __init__(self, product_id: Optional[str], listing_id: str, status: str) -> None:
        super().__init__(
            product_id,
            ResolutionStage.VALIDATE,
            f"best price item {listing_id} is not active (status={status})",
        )
        self.listing_id = listing_id
        self.status = status


class ResolutionCancelled(PriceResolutionError):
    """The caller cancelled the resolution while a fetch was pending."""
