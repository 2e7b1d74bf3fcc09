"""Confirm that the winning listing is still active."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import ValidationError

from src.models.meli.meli_models import Item
from src.services.meli.meli_client import (
    MeliClient,
    MeliStatusError,
    MeliTransportError,
    RequestCancelled,
)

from .models import (
    ACTIVE_STATUS,
    ResolutionCancelled,
    ResolutionStage,
    ResolvedPrice,
    ValidationFailed,
)

logger = logging.getLogger("price_resolution.validator")


class ActiveListingValidator:
    """Re-check the winner with a single ``/items/{id}`` lookup.

    A lookup that cannot be completed (network error, timeout, non-200 status,
    undecodable body) keeps the candidate. A lookup that answers with any
    status other than ``active`` fails the resolution; no other candidate is
    tried.
    """

    def __init__(self, client: MeliClient) -> None:
        self.client = client

    def confirm(
        self,
        product_id: str,
        candidate: ResolvedPrice,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolvedPrice:
        if not candidate.listing_id:
            logger.debug("[%s] Melhor preço sem id de anúncio; sem validação", product_id)
            return candidate

        path = f"/items/{candidate.listing_id}"
        try:
            body = self.client.get_bytes(path, cancel_event=cancel_event)
        except RequestCancelled as exc:
            raise ResolutionCancelled(
                product_id, ResolutionStage.VALIDATE, exc.message
            ) from exc
        except (MeliTransportError, MeliStatusError) as exc:
            logger.warning(
                "[%s] Não foi possível confirmar o anúncio %s (%s); mantendo o candidato",
                product_id,
                candidate.listing_id,
                exc.message,
            )
            return candidate

        try:
            confirmed = Item.model_validate_json(body)
        except ValidationError:
            logger.warning(
                "[%s] Resposta de confirmação ilegível para %s; mantendo o candidato",
                product_id,
                candidate.listing_id,
            )
            return candidate

        status = confirmed.status or ""
        if status != ACTIVE_STATUS:
            logger.info(
                "[%s] Anúncio %s não está ativo (status=%s), rejeitando",
                product_id,
                candidate.listing_id,
                status,
            )
            raise ValidationFailed(product_id, candidate.listing_id, status)

        logger.debug("[%s] Anúncio %s validado como ativo", product_id, candidate.listing_id)
        return candidate
