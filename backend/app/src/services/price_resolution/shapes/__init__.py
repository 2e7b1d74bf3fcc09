"""Decoders for the listings response formats of ``/products/{id}/items``."""

from .bare import BareShapeDecoder
from .base import BaseShapeDecoder, ParsedPage, ResponseShape
from .paged import PagedShapeDecoder
from .parser import ResponseShapeParser
from .wrapped import WrappedShapeDecoder

__all__ = [
    "BareShapeDecoder",
    "BaseShapeDecoder",
    "PagedShapeDecoder",
    "ParsedPage",
    "ResponseShape",
    "ResponseShapeParser",
    "WrappedShapeDecoder",
]
