from pydantic import BaseModel, BeforeValidator, Field, ConfigDict, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, Optional
import enum

from app.models.product import ProductStatus

# Prices stay exact in Python and render as JSON numbers on the wire
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _status_token(value: Any) -> Optional[str]:
    """Turn any non-null status input into a string token for the service to parse."""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if value is None or isinstance(value, str):
        return value
    return str(value)


StatusToken = Annotated[Optional[str], BeforeValidator(_status_token)]


class ProductRequest(BaseModel):
    """
    Schema for creating or updating a product.

    ``status`` is kept as a raw token: it is ignored on create and parsed
    by the service on update, so an unknown value is reported as an
    invalid status rather than as a field validation failure.
    """
    name: str = Field(..., min_length=2, max_length=100, description="Product name")
    description: Optional[str] = Field(None, max_length=500, description="Product description")
    price: Decimal = Field(
        ..., ge=0, max_digits=12, decimal_places=2,
        description="Product price (must be non-negative, at most 2 decimal places)",
    )
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")
    status: StatusToken = Field(
        None,
        description="Product status (ACTIVE, BLOCKED, DELETED); ignored on create",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("blank", "Name cannot be blank")
        return value


class ProductResponse(BaseModel):
    """Schema for product response including server-assigned fields."""
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price: Price
    stock: int
    status: Optional[ProductStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error body shared by every failing REST response."""
    message: str
    field_errors: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
