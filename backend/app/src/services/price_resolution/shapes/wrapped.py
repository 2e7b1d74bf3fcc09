"""``{"items": [...]}`` listings response."""

from __future__ import annotations

from typing import Any, List, Optional

from src.models.meli.meli_models import Item, MeliModel

from .base import BaseShapeDecoder, ParsedPage, ResponseShape, listing_from_item


class WrappedItemsPayload(MeliModel):
    items: Optional[List[Item]] = None


class WrappedShapeDecoder(BaseShapeDecoder):
    """Listings wrapped in an object under ``items``; never paged."""

    shape = ResponseShape.WRAPPED

    def _decode_impl(self, document: Any) -> ParsedPage:
        payload = WrappedItemsPayload.model_validate(document, strict=True)
        listings = [listing_from_item(item) for item in payload.items or []]
        return ParsedPage(shape=self.shape, listings=listings)
