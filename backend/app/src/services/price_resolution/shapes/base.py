"""Base classes for listings response shape decoders."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from pydantic import ValidationError

from src.models.meli.meli_models import Item

from ..models import Listing, PagingDescriptor

logger = logging.getLogger("price_resolution.shapes")


class ResponseShape(str, Enum):
    """Known formats of the ``/products/{id}/items`` response."""

    WRAPPED = "wrapped"
    BARE = "bare"
    PAGED = "paged"


@dataclass(slots=True)
class ParsedPage:
    """One listings page decoded into a uniform structure."""

    shape: ResponseShape
    listings: List[Listing] = field(default_factory=list)
    paging: Optional[PagingDescriptor] = None


class BaseShapeDecoder(ABC):
    """Decode one candidate response shape."""

    shape: ResponseShape

    def decode(self, document: Any) -> Optional[ParsedPage]:
        """Return the decoded page, or ``None`` when the document is not this shape.

        A document that validates but carries no listings is not accepted either,
        so the next candidate shape gets its turn.
        """
        try:
            page = self._decode_impl(document)
        except ValidationError as exc:
            logger.debug(
                "Documento não corresponde ao formato %s (%d erros)",
                self.shape.value,
                exc.error_count(),
            )
            return None
        if not page.listings:
            return None
        return page

    @abstractmethod
    def _decode_impl(self, document: Any) -> ParsedPage:
        """Strictly validate ``document`` against this shape or raise ``ValidationError``."""
        raise NotImplementedError


def listing_from_item(item: Item) -> Listing:
    return Listing(
        listing_id=item.id or "",
        price=item.price or 0.0,
        status=item.status or "",
        title=item.title or "",
        permalink=item.permalink or "",
        condition=item.condition,
    )
