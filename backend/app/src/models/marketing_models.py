"""Response models for the marketing and auth controllers."""

from typing import Optional

from pydantic import BaseModel, Field


class BestPriceResponse(BaseModel):
    """Data model for the best price of a catalog product."""

    product_id: str = Field(..., description="Catalog product identifier.")
    price: float = Field(..., description="Lowest active listing price.")
    price_text: Optional[str] = Field(
        default=None, description="Price formatted in Brazilian currency notation."
    )
    listing_id: str = Field(..., description="Listing that holds the lowest price.")
    title: str = Field(default="", description="Title of the winning listing.")
    permalink: str = Field(default="", description="Link to the winning listing.")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Health of the service (ok).")


class AuthStatusResponse(BaseModel):
    """Data model for the authentication status endpoint."""

    authenticated: bool = Field(..., description="Whether an access token is available.")
    message: str


class AuthDebugResponse(BaseModel):
    """OAuth configuration without the client secret."""

    configured: bool
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None
    has_secret: bool
    auth_url: Optional[str] = None
