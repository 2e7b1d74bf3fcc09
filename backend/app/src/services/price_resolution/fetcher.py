"""Fetch every listings page of a catalog product."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterator, Optional

from src.services.meli.meli_client import (
    MeliClient,
    MeliStatusError,
    MeliTransportError,
    RequestCancelled,
)

from .models import (
    ResolutionCancelled,
    ResolutionStage,
    TransportError,
    UnexpectedStatus,
)
from .shapes import ParsedPage, ResponseShapeParser

logger = logging.getLogger("price_resolution.fetcher")


class ListingsFetcher:
    """Walk ``/products/{id}/items`` page by page.

    The first page is requested without ``offset``/``limit``. When it comes back
    with a paging descriptor, the remaining pages are requested at
    ``offset + limit`` steps until ``total`` is reached. Pages are produced
    lazily so each request only happens after the previous page was consumed.
    """

    def __init__(
        self,
        client: MeliClient,
        parser: Optional[ResponseShapeParser] = None,
    ) -> None:
        self.client = client
        self.parser = parser or ResponseShapeParser()

    def iter_pages(
        self,
        product_id: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[ParsedPage]:
        first_page = self._fetch_page(product_id, None, cancel_event)
        yield first_page

        paging = first_page.paging
        if paging is None:
            return

        for offset in paging.follow_up_offsets():
            params = {"offset": offset, "limit": paging.limit}
            yield self._fetch_page(product_id, params, cancel_event)

    def _fetch_page(
        self,
        product_id: str,
        params: Optional[Dict[str, Any]],
        cancel_event: Optional[threading.Event],
    ) -> ParsedPage:
        path = f"/products/{product_id}/items"
        logger.debug("[%s] Buscando página de anúncios params=%s", product_id, params)
        try:
            body = self.client.get_bytes(path, params=params, cancel_event=cancel_event)
        except RequestCancelled as exc:
            raise ResolutionCancelled(
                product_id, ResolutionStage.FETCH_PAGE, exc.message
            ) from exc
        except MeliStatusError as exc:
            raise UnexpectedStatus(
                product_id, ResolutionStage.FETCH_PAGE, exc.status_code, exc.body
            ) from exc
        except MeliTransportError as exc:
            raise TransportError(
                product_id, ResolutionStage.FETCH_PAGE, exc.message
            ) from exc

        return self.parser.parse(body, product_id=product_id)
