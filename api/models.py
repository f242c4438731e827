"""
API request and response models for CarStock REST endpoints.

These Pydantic v2 models define the HTTP transport contract only: field
names on the wire (PascalCase, e.g. "StockLevel") and JSON types. Range and
length rules are NOT declared here -- they live in api/validation.py and run
explicitly in each route before any store call.

They are intentionally separate from the dataclasses in inventory/models.py,
which own the internal domain representation. Route handlers map between the
two.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventory.models import Car

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login.

    DealerId is a digit string on the wire. A JSON number is accepted too and
    converted to its string form before validation. Nothing is stripped:
    surrounding whitespace is part of a password.
    """

    model_config = ConfigDict(populate_by_name=True)

    dealer_id: str = Field(alias="DealerId")
    password: str = Field(alias="Password")

    @field_validator("dealer_id", mode="before")
    @classmethod
    def stringify_dealer_id(cls, value: Union[str, int]) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CarCreate(BaseModel):
    """Request body for POST /api/cars. The owner comes from the token."""

    model_config = ConfigDict(populate_by_name=True)

    make: str = Field(alias="Make")
    model: str = Field(alias="Model")
    year: int = Field(alias="Year")
    stock_level: int = Field(alias="StockLevel")


class CarDelete(BaseModel):
    """Request body for DELETE /api/cars."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")


class StockUpdate(BaseModel):
    """Request body for PUT /api/cars/stock."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")
    new_stock_level: int = Field(alias="NewStockLevel")


class CarSearch(BaseModel):
    """Request body for POST /api/cars/search. Both filters are optional."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    make: Optional[str] = Field(default=None, alias="Make")
    model: Optional[str] = Field(default=None, alias="Model")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CarResponse(BaseModel):
    """One car as returned by GET /api/cars and POST /api/cars/search."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(alias="Id")
    make: str = Field(alias="Make")
    model: str = Field(alias="Model")
    year: int = Field(alias="Year")
    stock_level: int = Field(alias="StockLevel")
    dealer_id: int = Field(alias="DealerId")

    @classmethod
    def from_car(cls, car: Car) -> "CarResponse":
        """Build a CarResponse from an inventory Car dataclass."""
        return cls(
            id=car.id,
            make=car.make,
            model=car.model,
            year=car.year,
            stock_level=car.stock_level,
            dealer_id=car.dealer_id,
        )


class MessageResponse(BaseModel):
    """Envelope used by every non-collection response, success or failure."""

    message: str


class ValidationErrorResponse(BaseModel):
    """400 body: a summary message plus one message per offending field."""

    message: str
    errors: dict[str, str]


class HealthResponse(BaseModel):
    """Response body for GET /api/health."""

    status: str = "healthy"
    version: str
    components: dict[str, str]
