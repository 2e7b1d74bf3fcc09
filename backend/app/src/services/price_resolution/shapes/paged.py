"""``{"paging": {...}, "results": [...]}`` listings response."""

from __future__ import annotations

from typing import Any, List, Optional

from src.models.meli.meli_models import MeliModel

from ..models import ACTIVE_STATUS, Listing, PagingDescriptor
from .base import BaseShapeDecoder, ParsedPage, ResponseShape


class PagingPayload(MeliModel):
    total: int = 0
    offset: int = 0
    limit: int = 0


class PagedResult(MeliModel):
    """Paged entries only carry the listing id, its price and condition."""

    item_id: Optional[str] = None
    price: Optional[float] = None
    condition: Optional[str] = None
    currency_id: Optional[str] = None
    status: Optional[str] = None

    def to_listing(self) -> Listing:
        # The paged format lists live offers only; a status is honoured when sent.
        return Listing(
            listing_id=self.item_id or "",
            price=self.price or 0.0,
            status=self.status or ACTIVE_STATUS,
            condition=self.condition,
        )


class PagedResultsPayload(MeliModel):
    paging: Optional[PagingPayload] = None
    results: Optional[List[PagedResult]] = None


class PagedShapeDecoder(BaseShapeDecoder):
    shape = ResponseShape.PAGED

    def _decode_impl(self, document: Any) -> ParsedPage:
        payload = PagedResultsPayload.model_validate(document, strict=True)
        paging = payload.paging or PagingPayload()
        return ParsedPage(
            shape=self.shape,
            listings=[result.to_listing() for result in payload.results or []],
            paging=PagingDescriptor(
                total=paging.total, offset=paging.offset, limit=paging.limit
            ),
        )
