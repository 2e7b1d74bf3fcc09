"""Pydantic models describing Mercado Livre API payloads.

Every field is optional: the public API omits or nulls fields freely and a
missing value must never make an otherwise usable payload undecodable.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MeliModel(BaseModel):
    """Base model shared by every Mercado Livre payload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)


class ItemPicture(MeliModel):
    id: Optional[str] = None
    url: Optional[str] = None


class Attribute(MeliModel):
    id: Optional[str] = None
    name: Optional[str] = None
    value_id: Optional[str] = None
    value_name: Optional[str] = None


class Item(MeliModel):
    """A listing (``/items/{id}``) as returned by the API."""

    id: Optional[str] = None
    title: Optional[str] = None
    category_id: Optional[str] = None
    price: Optional[float] = None
    currency_id: Optional[str] = None
    available_quantity: Optional[int] = None
    sold_quantity: Optional[int] = None
    condition: Optional[str] = None
    permalink: Optional[str] = None
    thumbnail: Optional[str] = None
    pictures: Optional[List[ItemPicture]] = None
    seller_id: Optional[int] = None
    status: Optional[str] = None
    attributes: Optional[List[Attribute]] = None


class ProductPicture(MeliModel):
    id: Optional[str] = None
    url: Optional[str] = None
    max_width: Optional[int] = None
    max_height: Optional[int] = None


class Product(MeliModel):
    """A catalog product (``/products/{id}``)."""

    id: Optional[str] = None
    catalog_product_id: Optional[str] = None
    status: Optional[str] = None
    domain_id: Optional[str] = None
    permalink: Optional[str] = None
    name: Optional[str] = None
    family_name: Optional[str] = None
    type: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    thumbnail: Optional[str] = None
    pictures: Optional[List[ProductPicture]] = None
    short_description: Any = None
    created_at: Optional[str] = Field(default=None, alias="date_created")
    updated_at: Optional[str] = Field(default=None, alias="last_updated")

    def first_picture_url(self) -> str:
        if self.pictures:
            return self.pictures[0].url or ""
        return ""

    def description_text(self) -> str:
        return short_description_text(self.short_description)


class HighlightQueryData(MeliModel):
    highlight_type: Optional[str] = None
    criteria: Optional[str] = None
    id: Optional[str] = None


class HighlightContent(MeliModel):
    id: str
    position: Optional[int] = None
    type: Optional[str] = None


class HighlightResponse(MeliModel):
    """Best sellers of a category (``/highlights/{site}/category/{id}``)."""

    query_data: Optional[HighlightQueryData] = None
    content: List[HighlightContent] = Field(default_factory=list)


class Category(MeliModel):
    id: str
    name: str


class CategoryPrediction(MeliModel):
    """Simplified view of the category predictor output."""

    id: str
    name: str
    prob: float = Field(default=0.0, alias="prediction_probability")


class CategoryPredictorResponse(MeliModel):
    predictions: List[CategoryPrediction] = Field(default_factory=list)


class SearchItem(MeliModel):
    """Flattened view of a highlighted product or item used by the trends flow."""

    id: str
    title: str = ""
    price: float = 0.0
    thumbnail: str = ""
    sold_quantity: int = 0
    health: str = ""
    category_id: str = ""
    permalink: str = ""
    status: str = ""
    link_venda: Optional[str] = Field(
        default=None,
        description="Link to the listing that holds the best price.",
    )
    description: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product) -> "SearchItem":
        """Map a catalog product; its price must be resolved from its listings."""
        return cls(
            id=product.id or "",
            title=product.name or "",
            category_id=product.domain_id or "",
            price=0.0,
            thumbnail=product.first_picture_url(),
            permalink=product.permalink or "",
            status=product.status or "",
            description=product.description_text() or None,
        )

    @classmethod
    def from_item(cls, item: Item) -> "SearchItem":
        return cls(
            id=item.id or "",
            title=item.title or "",
            category_id=item.category_id or "",
            price=item.price or 0.0,
            thumbnail=item.thumbnail or "",
            sold_quantity=item.sold_quantity or 0,
            permalink=item.permalink or "",
            status=item.status or "",
        )


class TokenResponse(MeliModel):
    """OAuth token endpoint response."""

    access_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    user_id: Optional[int] = None


def short_description_text(raw: Any) -> str:
    """Extract readable text from a product ``short_description``.

    The field is either a plain string or an object carrying ``plain_text``,
    ``text`` or a list of ``blocks`` with ``text`` entries. Anything else is
    returned as its JSON representation.
    """
    if raw is None or raw == "":
        return ""
    if isinstance(raw, str):
        return raw

    if isinstance(raw, dict):
        plain_text = raw.get("plain_text")
        if isinstance(plain_text, str):
            return plain_text
        text = raw.get("text")
        if isinstance(text, str):
            return text
        blocks = raw.get("blocks")
        if isinstance(blocks, list):
            lines = [
                block["text"]
                for block in blocks
                if isinstance(block, dict)
                and isinstance(block.get("text"), str)
                and block["text"]
            ]
            if lines:
                return "\n".join(lines)

    return json.dumps(raw, ensure_ascii=False)
