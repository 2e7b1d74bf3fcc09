"""Detect which listings response shape a body carries and decode it."""

from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

from ..models import UnknownShape
from .bare import BareShapeDecoder
from .base import BaseShapeDecoder, ParsedPage
from .paged import PagedShapeDecoder
from .wrapped import WrappedShapeDecoder

logger = logging.getLogger("price_resolution.parser")


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-finite number {name} is not valid JSON")


class ResponseShapeParser:
    """Try each known shape in a fixed order; the first non-empty decode wins."""

    def __init__(self, decoders: Sequence[BaseShapeDecoder] | None = None) -> None:
        self.decoders: Sequence[BaseShapeDecoder] = decoders or (
            WrappedShapeDecoder(),
            BareShapeDecoder(),
            PagedShapeDecoder(),
        )

    def parse(self, body: bytes, product_id: Optional[str] = None) -> ParsedPage:
        """Decode ``body`` or raise ``UnknownShape`` carrying the original bytes."""
        try:
            document = json.loads(body, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.debug("Corpo não é JSON válido para %s: %s", product_id, exc)
            raise UnknownShape(product_id, body) from exc

        for decoder in self.decoders:
            page = decoder.decode(document)
            if page is not None:
                logger.debug(
                    "[%s] Formato %s com %d anúncios (paging=%s)",
                    product_id,
                    page.shape.value,
                    len(page.listings),
                    page.paging,
                )
                return page

        raise UnknownShape(product_id, body)
