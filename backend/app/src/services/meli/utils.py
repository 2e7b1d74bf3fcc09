"""Utilities shared by the Mercado Livre clients."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union


DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
    "Accept": "application/json",
    "Accept-Language": "pt-BR,pt;q=0.9",
    "Referer": "https://www.mercadolivre.com.br/",
}


def format_brl(value: Union[Decimal, float, None]) -> Optional[str]:
    """Format prices using Brazilian currency notation."""
    if value is None:
        return None

    quantized = Decimal(str(value)).quantize(Decimal("0.01"))
    formatted = f"R$ {quantized:,.2f}"
    return formatted.replace(",", "X").replace(".", ",").replace("X", ".")
