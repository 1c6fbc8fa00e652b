"""
Product request and response schemas.

These Pydantic models define the API contract and provide
automatic validation and documentation.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, StrictInt, StrictStr

from core.storage import ProductDraft, ProductRecord


# Range of the integer columns in the product table
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class ProductWriteRequest(BaseModel):
    """
    Request body for creating or replacing a product.

    The Indonesian field labels (nama, harga, stok) are accepted as
    aliases; responses always use the English names.
    """

    name: StrictStr = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("name", "nama"),
        description="Product label",
        examples=["Widget"],
    )
    price: StrictInt = Field(
        ...,
        ge=INT32_MIN,
        le=INT32_MAX,
        validation_alias=AliasChoices("price", "harga"),
        description="Price in the minor currency unit",
        examples=[1000],
    )
    stock: StrictInt = Field(
        ...,
        ge=INT32_MIN,
        le=INT32_MAX,
        validation_alias=AliasChoices("stock", "stok"),
        description="Units in stock",
        examples=[5],
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Widget", "price": 1000, "stock": 5},
            ]
        }
    }

    def to_draft(self) -> ProductDraft:
        return ProductDraft(name=self.name, price=self.price, stock=self.stock)


class ProductCreateRequest(ProductWriteRequest):
    """Request body for POST /api/produk."""
    pass


class ProductUpdateRequest(ProductWriteRequest):
    """Request body for PUT /api/produk/{id}. Every field is replaced."""
    pass


class ProductResponse(BaseModel):
    """A stored product."""

    id: int = Field(..., description="Storage-assigned identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    name: str
    price: int
    stock: int

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductResponse":
        return cls(**record.to_dict())


class ProductDeleteResponse(BaseModel):
    """Confirmation returned after a delete."""

    id: int
    message: str = Field(
        default="Product deleted successfully",
        description="Human-readable status message",
    )
