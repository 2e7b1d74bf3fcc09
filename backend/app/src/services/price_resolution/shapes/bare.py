"""Plain ``[...]`` listings response."""

from __future__ import annotations

from typing import Any, List

from pydantic import TypeAdapter

from src.models.meli.meli_models import Item

from .base import BaseShapeDecoder, ParsedPage, ResponseShape, listing_from_item

_ITEMS_ADAPTER = TypeAdapter(List[Item])


class BareShapeDecoder(BaseShapeDecoder):
    shape = ResponseShape.BARE

    def _decode_impl(self, document: Any) -> ParsedPage:
        items = _ITEMS_ADAPTER.validate_python(document, strict=True)
        return ParsedPage(
            shape=self.shape,
            listings=[listing_from_item(item) for item in items],
        )
