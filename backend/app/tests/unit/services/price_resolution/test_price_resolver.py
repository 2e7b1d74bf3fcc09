"""Test end-to-end best-price resolution against a fake Mercado Livre client."""

import json
import threading
from typing import Any, Dict, List, Optional, Tuple

import pytest

from src.services.meli.meli_client import (
    MeliStatusError,
    MeliTransportError,
    RequestCancelled,
    ResolverConfig,
)
from src.services.price_resolution import (
    ListingsFetcher,
    NoActiveListing,
    PriceResolver,
    ResolutionCancelled,
    ResolutionStage,
    ResolvedPrice,
    ResponseShape,
    TransportError,
    UnexpectedStatus,
    UnknownShape,
    ValidationFailed,
)

PRODUCT_ID = "MLB123"
ITEMS_PATH = f"/products/{PRODUCT_ID}/items"


class FakeMeliClient:
    """Serve canned bodies keyed by ``(path, offset)`` and record every call."""

    def __init__(self, responses: Dict[Tuple[str, Optional[int]], Any]) -> None:
        self.responses = responses
        self.calls: List[Tuple[str, Optional[Dict[str, Any]]]] = []
        self.config = ResolverConfig()

    def get_bytes(self, path, params=None, cancel_event=None):
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelled(path, "Request cancelled by caller")
        self.calls.append((path, params))
        response = self.responses[(path, (params or {}).get("offset"))]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response()
        return response

    @property
    def item_lookups(self) -> List[str]:
        return [path for path, _ in self.calls if path.startswith("/items/")]


def _body(document) -> bytes:
    return json.dumps(document).encode("utf-8")


def _item(item_id: str, price: float, status: str = "active") -> Dict[str, Any]:
    return {
        "id": item_id,
        "price": price,
        "status": status,
        "title": f"Produto {item_id}",
        "permalink": f"https://produto.mercadolivre.com.br/{item_id}",
    }


def _paged(total: int, offset: int, limit: int, results) -> bytes:
    return _body(
        {
            "paging": {"total": total, "offset": offset, "limit": limit},
            "results": [
                {"item_id": item_id, "price": price, "condition": "new"}
                for item_id, price in results
            ],
        }
    )


def _resolver(client: FakeMeliClient) -> PriceResolver:
    return PriceResolver(client.config, client=client)


def test_single_wrapped_page_scenario():
    # Arrange
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body(
                {"items": [_item("A", 100), _item("B", 80, status="inactive")]}
            ),
            ("/items/A", None): _body({"id": "A", "status": "active"}),
        }
    )

    # Act
    resolved = _resolver(client).resolve_best_price(PRODUCT_ID)

    # Assert
    assert resolved.price == 100
    assert resolved.listing_id == "A"
    assert resolved.title == "Produto A"
    assert client.calls == [(ITEMS_PATH, None), ("/items/A", None)]


@pytest.mark.parametrize("shape", list(ResponseShape))
def test_equivalent_listings_resolve_identically_for_every_shape(shape):
    listings = [("A", 300.0, "active"), ("B", 120.0, "active"), ("C", 50.0, "paused")]
    if shape is ResponseShape.WRAPPED:
        body = _body({"items": [_item(i, p, s) for i, p, s in listings]})
    elif shape is ResponseShape.BARE:
        body = _body([_item(i, p, s) for i, p, s in listings])
    else:
        body = _body(
            {
                "paging": {"total": 3, "offset": 0, "limit": 50},
                "results": [
                    {"item_id": i, "price": p, "status": s} for i, p, s in listings
                ],
            }
        )
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): body,
            ("/items/B", None): _body({"id": "B", "status": "active"}),
        }
    )

    resolved = _resolver(client).resolve_best_price(PRODUCT_ID)

    assert (resolved.price, resolved.listing_id) == (120.0, "B")


def test_paging_fetches_every_page_before_selecting():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _paged(25, 0, 10, [("P1", 300), ("P2", 280)]),
            (ITEMS_PATH, 10): _paged(25, 10, 10, [("P3", 500)]),
            (ITEMS_PATH, 20): _paged(25, 20, 10, [("P4", 90), ("P5", 95)]),
            ("/items/P4", None): _body({"id": "P4", "status": "active"}),
        }
    )

    resolved = _resolver(client).resolve_best_price(PRODUCT_ID)

    page_calls = [params for path, params in client.calls if path == ITEMS_PATH]
    assert page_calls == [
        None,
        {"offset": 10, "limit": 10},
        {"offset": 20, "limit": 10},
    ]
    assert resolved == ResolvedPrice(price=90, listing_id="P4")


def test_follow_up_pages_may_use_another_shape():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _paged(4, 0, 2, [("P1", 300)]),
            (ITEMS_PATH, 2): _body({"items": [_item("W1", 150)]}),
            ("/items/W1", None): _body({"id": "W1", "status": "active"}),
        }
    )

    resolved = _resolver(client).resolve_best_price(PRODUCT_ID)

    assert resolved.listing_id == "W1"
    assert resolved.permalink == "https://produto.mercadolivre.com.br/W1"


def test_unpaged_response_issues_a_single_page_request():
    client = FakeMeliClient({(ITEMS_PATH, None): _body([_item("A", 10)])})
    fetcher = ListingsFetcher(client)

    pages = list(fetcher.iter_pages(PRODUCT_ID))

    assert len(pages) == 1
    assert client.calls == [(ITEMS_PATH, None)]


def test_paging_with_zero_limit_stops_after_first_page():
    client = FakeMeliClient({(ITEMS_PATH, None): _paged(25, 0, 0, [("P1", 10)])})

    pages = list(ListingsFetcher(client).iter_pages(PRODUCT_ID))

    assert len(pages) == 1


def test_winner_confirmed_paused_fails_without_fallback():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body({"items": [_item("A", 100), _item("B", 150)]}),
            ("/items/A", None): _body({"id": "A", "status": "paused"}),
            ("/items/B", None): _body({"id": "B", "status": "active"}),
        }
    )

    with pytest.raises(ValidationFailed) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID)

    error = exc_info.value
    assert error.product_id == PRODUCT_ID
    assert error.stage is ResolutionStage.VALIDATE
    assert error.listing_id == "A"
    assert error.status == "paused"
    assert client.item_lookups == ["/items/A"]


def test_confirmation_without_status_is_rejected():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body([_item("A", 100)]),
            ("/items/A", None): _body({"id": "A"}),
        }
    )

    with pytest.raises(ValidationFailed):
        _resolver(client).resolve_best_price(PRODUCT_ID)


@pytest.mark.parametrize(
    "confirmation",
    [
        MeliTransportError("/items/A", "Timeout error: read timed out"),
        MeliTransportError("/items/A", "Connection error: refused"),
        MeliStatusError("/items/A", 503, b"unavailable"),
        b"not json",
    ],
)
def test_unconfirmable_winner_is_accepted(confirmation):
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body([_item("A", 100)]),
            ("/items/A", None): confirmation,
        }
    )

    resolved = _resolver(client).resolve_best_price(PRODUCT_ID)

    assert resolved.listing_id == "A"


def test_no_active_listing():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body(
                [_item("A", 0), _item("B", 10, status="closed")]
            ),
        }
    )

    with pytest.raises(NoActiveListing) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID)

    assert exc_info.value.stage is ResolutionStage.SELECT_BEST
    assert client.item_lookups == []


def test_unknown_shape_on_later_page_aborts_resolution():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _paged(20, 0, 10, [("P1", 10)]),
            (ITEMS_PATH, 10): b'{"error": "bad_request"}',
        }
    )

    with pytest.raises(UnknownShape) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID)

    assert exc_info.value.body == b'{"error": "bad_request"}'
    assert exc_info.value.product_id == PRODUCT_ID
    assert client.item_lookups == []


def test_transport_error_on_first_page():
    client = FakeMeliClient(
        {(ITEMS_PATH, None): MeliTransportError(ITEMS_PATH, "Timeout error")}
    )

    with pytest.raises(TransportError) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID)

    assert exc_info.value.stage is ResolutionStage.FETCH_PAGE
    assert exc_info.value.product_id == PRODUCT_ID


def test_unexpected_status_on_later_page_discards_folded_pages():
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _paged(20, 0, 10, [("P1", 10)]),
            (ITEMS_PATH, 10): MeliStatusError(ITEMS_PATH, 500, b"internal error"),
        }
    )

    with pytest.raises(UnexpectedStatus) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID)

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == b"internal error"
    assert client.item_lookups == []


def test_cancelled_before_start_issues_no_request():
    client = FakeMeliClient({})
    cancel_event = threading.Event()
    cancel_event.set()

    with pytest.raises(ResolutionCancelled) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID, cancel_event=cancel_event)

    assert exc_info.value.stage is ResolutionStage.FETCH_PAGE
    assert client.calls == []


def test_cancelled_between_pages():
    cancel_event = threading.Event()

    def first_page() -> bytes:
        cancel_event.set()
        return _paged(20, 0, 10, [("P1", 10)])

    client = FakeMeliClient({(ITEMS_PATH, None): first_page})

    with pytest.raises(ResolutionCancelled):
        _resolver(client).resolve_best_price(PRODUCT_ID, cancel_event=cancel_event)

    assert len(client.calls) == 1


def test_cancelled_during_validation_is_not_accepted():
    cancel_event = threading.Event()
    client = FakeMeliClient(
        {
            (ITEMS_PATH, None): _body([_item("A", 100)]),
            ("/items/A", None): RequestCancelled("/items/A", "Request cancelled by caller"),
        }
    )

    with pytest.raises(ResolutionCancelled) as exc_info:
        _resolver(client).resolve_best_price(PRODUCT_ID, cancel_event=cancel_event)

    assert exc_info.value.stage is ResolutionStage.VALIDATE
