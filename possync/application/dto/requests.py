"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. The register UI speaks
camelCase, so every field also accepts its camelCase alias.
"""

from pydantic import BaseModel, ConfigDict, Field


class SaleItemRequest(BaseModel):
    """One rung-up line item."""

    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(
        ...,
        alias="productName",
        min_length=1,
        description="Product name as printed on the receipt",
        examples=["Basmati Rice 10kg"],
    )
    product_id: str | int | None = Field(
        default=None,
        alias="productId",
        description="Catalog product ID",
    )
    quantity: float = Field(..., gt=0, description="Quantity sold")
    price: float = Field(..., ge=0, description="Unit price")


class SubmitSaleRequest(BaseModel):
    """A completed sale handed over by the register."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[SaleItemRequest] = Field(
        ...,
        min_length=1,
        description="Line items",
    )
    total: float = Field(..., ge=0, description="Precomputed grand total")
    customer_name: str | None = Field(
        default=None,
        alias="customerName",
        description="Customer name for the receipt",
    )
    customer_id: str | int | None = Field(
        default=None,
        alias="customerId",
        description="Customer account ID",
    )
    payment_method: str = Field(
        default="Cash",
        alias="paymentMethod",
        description="Payment method",
        examples=["Cash", "Card"],
    )
    notes: str | None = Field(default=None, description="Free-form notes")


class ConnectivityRequest(BaseModel):
    """Network state pushed in by the register shell."""

    online: bool = Field(..., description="True when the register has network access")
