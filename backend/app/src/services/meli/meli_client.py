"""HTTP client for the Mercado Livre public API."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from src.logger_config import mask_secret
from src.models.meli.meli_models import (
    Category,
    CategoryPrediction,
    CategoryPredictorResponse,
    HighlightResponse,
    Item,
    Product,
    SearchItem,
)

from .utils import DEFAULT_HEADERS

DEFAULT_BASE_URL = "https://api.mercadolibre.com"
DEFAULT_SITE_ID = "MLB"
DEFAULT_HTTP_TIMEOUT = 10.0
BODY_CHUNK_SIZE = 8192

PRODUCT_HIGHLIGHT = "PRODUCT"


@dataclass(frozen=True)
class ResolverConfig:
    """Connection settings handed to every client and resolver instance."""

    base_url: str = DEFAULT_BASE_URL
    access_token: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT
    site_id: str = DEFAULT_SITE_ID

    @classmethod
    def from_settings(
        cls, settings: Any, access_token: Optional[str] = None
    ) -> "ResolverConfig":
        """Build a config from application settings and a per-request token."""
        return cls(
            base_url=settings.MELI_BASE_URL,
            access_token=access_token,
            timeout=settings.MELI_HTTP_TIMEOUT,
            site_id=settings.MELI_SITE_ID,
        )


class MeliAPIError(RuntimeError):
    """Raised when a Mercado Livre request cannot be completed."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class MeliTransportError(MeliAPIError):
    """Connection failure or timeout before a response was received."""


class MeliStatusError(MeliAPIError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, url: str, status_code: int, body: bytes) -> None:
        super().__init__(
            url,
            f"status={status_code} - {body.decode('utf-8', errors='replace')}",
        )
        self.status_code = status_code
        self.body = body


class MeliDecodeError(MeliAPIError):
    """The response body could not be decoded into the expected payload."""

    def __init__(self, url: str, reason: str, body: bytes) -> None:
        super().__init__(
            url,
            f"json decode: {reason} - body: {body.decode('utf-8', errors='replace')}",
        )
        self.body = body


class RequestCancelled(MeliAPIError):
    """The caller's cancellation signal was set while the request was pending."""


class MeliClient:
    """Thin wrapper around the Mercado Livre endpoints used by the service."""

    def __init__(
        self,
        config: ResolverConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session or requests.Session()
        self.logger = logging.getLogger("meli.client")

    def _headers(self) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _decode_error(self, path: str, exc: Exception, payload: Any) -> MeliDecodeError:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return MeliDecodeError(f"{self.base_url}{path}", str(exc), body)

    def close(self) -> None:
        """Release the pooled connections of the underlying session."""
        self.session.close()

    def get_bytes(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """Issue an authenticated GET and return the raw body of a 200 response.

        The body is streamed in chunks and ``cancel_event`` is checked between
        them, so a cancelled call stops at the next chunk instead of reading on.
        """
        url = f"{self.base_url}{path}"
        _raise_if_cancelled(url, cancel_event)
        if not self.config.access_token:
            self.logger.debug("Requisição sem token de acesso: %s", url)

        try:
            response = self.session.get(
                url,
                headers=self._headers(),
                params=params,
                timeout=self.config.timeout,
                stream=True,
            )
        except requests.exceptions.Timeout as timeout_err:
            self.logger.error("Timeout ao consultar %s: %s", url, timeout_err)
            raise MeliTransportError(url, f"Timeout error: {timeout_err}") from timeout_err
        except requests.exceptions.ConnectionError as conn_err:
            self.logger.error("Erro de conexão ao consultar %s: %s", url, conn_err)
            raise MeliTransportError(url, f"Connection error: {conn_err}") from conn_err
        except requests.exceptions.RequestException as req_err:
            self.logger.error("Erro inesperado ao consultar %s: %s", url, req_err)
            raise MeliTransportError(url, f"Request error: {req_err}") from req_err

        try:
            body = self._read_body(url, response, cancel_event)
            if response.status_code != 200:
                raise MeliStatusError(url, response.status_code, body)
            return body
        finally:
            response.close()

    def _read_body(
        self,
        url: str,
        response: requests.Response,
        cancel_event: Optional[threading.Event],
    ) -> bytes:
        chunks: List[bytes] = []
        _raise_if_cancelled(url, cancel_event)
        try:
            for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
                chunks.append(chunk)
                _raise_if_cancelled(url, cancel_event)
        except requests.exceptions.RequestException as read_err:
            self.logger.error("Erro ao ler resposta de %s: %s", url, read_err)
            raise MeliTransportError(url, f"Read error: {read_err}") from read_err
        return b"".join(chunks)

    def get_json(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        body = self.get_bytes(path, params=params, cancel_event=cancel_event)
        try:
            return json.loads(body)
        except ValueError as exc:
            raise MeliDecodeError(url, str(exc), body) from exc

    def root_categories(
        self, cancel_event: Optional[threading.Event] = None
    ) -> List[Category]:
        """Return the main categories for the configured site."""
        path = f"/sites/{self.config.site_id}/categories"
        payload = self.get_json(path, cancel_event=cancel_event)
        try:
            return TypeAdapter(List[Category]).validate_python(payload)
        except ValidationError as exc:
            raise self._decode_error(path, exc, payload) from exc

    def predict_category(
        self, query: str, cancel_event: Optional[threading.Event] = None
    ) -> List[CategoryPrediction]:
        """Suggest categories for a free-text query using the category predictor."""
        path = f"/sites/{self.config.site_id}/category_predictor/predict"
        payload = self.get_json(path, params={"q": query}, cancel_event=cancel_event)
        try:
            return CategoryPredictorResponse.model_validate(payload).predictions
        except ValidationError as exc:
            raise self._decode_error(path, exc, payload) from exc

    def highlights(
        self, category_id: str, cancel_event: Optional[threading.Event] = None
    ) -> HighlightResponse:
        """Return the best sellers highlighted for a category."""
        path = f"/highlights/{self.config.site_id}/category/{category_id}"
        if not self.config.access_token:
            self.logger.warning(
                "Token de acesso vazio para highlights da categoria %s", category_id
            )
        else:
            self.logger.debug(
                "Consultando highlights de %s com token %s",
                category_id,
                mask_secret(self.config.access_token),
            )
        payload = self.get_json(path, cancel_event=cancel_event)
        try:
            return HighlightResponse.model_validate(payload)
        except ValidationError as exc:
            raise self._decode_error(path, exc, payload) from exc

    def highlight_detail(
        self,
        highlight_id: str,
        highlight_type: Optional[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchItem:
        """Fetch a highlighted product or item and flatten it into a ``SearchItem``."""
        if highlight_type == PRODUCT_HIGHLIGHT:
            path = f"/products/{highlight_id}"
        else:
            path = f"/items/{highlight_id}"

        body = self.get_bytes(path, cancel_event=cancel_event)
        try:
            if highlight_type == PRODUCT_HIGHLIGHT:
                return SearchItem.from_product(Product.model_validate_json(body))
            return SearchItem.from_item(Item.model_validate_json(body))
        except ValidationError as exc:
            raise MeliDecodeError(self.base_url + path, str(exc), body) from exc


def _raise_if_cancelled(url: str, cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelled(url, "Request cancelled by caller")
