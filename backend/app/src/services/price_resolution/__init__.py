"""Best-price resolution over the Mercado Livre listings endpoint."""

from .accumulator import BestPriceAccumulator
from .fetcher import ListingsFetcher
from .models import (
    Listing,
    NoActiveListing,
    PagingDescriptor,
    PriceResolutionError,
    ResolutionCancelled,
    ResolutionStage,
    ResolvedPrice,
    TransportError,
    UnexpectedStatus,
    UnknownShape,
    ValidationFailed,
)
from .resolver import PriceResolver
from .shapes import ParsedPage, ResponseShape, ResponseShapeParser
from .validator import ActiveListingValidator

__all__ = [
    "ActiveListingValidator",
    "BestPriceAccumulator",
    "Listing",
    "ListingsFetcher",
    "NoActiveListing",
    "PagingDescriptor",
    "ParsedPage",
    "PriceResolutionError",
    "PriceResolver",
    "ResolutionCancelled",
    "ResolutionStage",
    "ResolvedPrice",
    "ResponseShape",
    "ResponseShapeParser",
    "TransportError",
    "UnexpectedStatus",
    "UnknownShape",
    "ValidationFailed",
]
