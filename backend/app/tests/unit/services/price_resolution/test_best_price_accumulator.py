"""Test the running best-price minimum."""

from src.services.price_resolution import BestPriceAccumulator, Listing, ResolvedPrice


def _listing(listing_id: str, price: float, status: str = "active") -> Listing:
    return Listing(
        listing_id=listing_id,
        price=price,
        status=status,
        title=f"title {listing_id}",
        permalink=f"https://produto.mercadolivre.com.br/{listing_id}",
    )


def test_starts_without_candidate():
    accumulator = BestPriceAccumulator()
    assert accumulator.best is None
    assert accumulator.fold([]) is None


def test_keeps_cheapest_active_listing():
    accumulator = BestPriceAccumulator("MLB123")

    best = accumulator.fold([_listing("A", 120), _listing("B", 95), _listing("C", 110)])

    assert best == ResolvedPrice(
        price=95,
        listing_id="B",
        title="title B",
        permalink="https://produto.mercadolivre.com.br/B",
    )
    assert accumulator.eligible_count == 3


def test_ineligible_listings_never_win_regardless_of_price():
    accumulator = BestPriceAccumulator()

    best = accumulator.fold(
        [
            _listing("paused", 1, status="paused"),
            _listing("closed", 2, status="closed"),
            _listing("upper", 3, status="Active"),
            _listing("free", 0),
            _listing("negative", -10),
            _listing("ok", 500),
        ]
    )

    assert best is not None
    assert best.listing_id == "ok"
    assert accumulator.skipped_count == 5


def test_only_ineligible_listings_leave_no_candidate():
    accumulator = BestPriceAccumulator()

    accumulator.fold([_listing("A", 0), _listing("B", 10, status="inactive")])

    assert accumulator.best is None


def test_ties_keep_first_seen_across_pages():
    accumulator = BestPriceAccumulator()

    accumulator.fold([_listing("first", 50), _listing("second", 50)])
    accumulator.fold([_listing("third", 50)])

    assert accumulator.best.listing_id == "first"


def test_minimum_never_increases_between_pages():
    accumulator = BestPriceAccumulator()
    pages = [
        [_listing("A", 300), _listing("B", 250)],
        [_listing("C", 400)],
        [_listing("D", 100), _listing("E", 0)],
        [_listing("F", 120, status="paused"), _listing("G", 90, status="paused")],
    ]

    seen = []
    for page in pages:
        seen.append(accumulator.fold(page).price)

    assert seen == [250, 250, 100, 100]
    assert accumulator.best.listing_id == "D"
