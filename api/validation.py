"""
api/validation.py -- Explicit input validation for CarStock requests.

Each validate_* function inspects already-parsed request values and returns a
ValidationResult. Nothing here raises: routes call these before touching any
store and turn a failed result into a 400 response via validation_response().

Field keys in ValidationResult.errors are the wire names ("Make", "Year", ...)
so clients can map messages straight back to their form inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from fastapi.responses import JSONResponse

from auth.tokens import DEALER_ID_MAX, DEALER_ID_MIN

MAX_NAME_LENGTH = 50
MIN_YEAR = 1900
MAX_YEAR = 2024
MAX_PASSWORD_LENGTH = 255
# Ids and stock levels are stored as 32-bit integers.
MAX_INT = 2**31 - 1


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass. Empty errors means the input is valid."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Field checks -- each returns an error message or None
# ---------------------------------------------------------------------------


def _check_dealer_id(value: str) -> Optional[str]:
    if not value or not (value.isascii() and value.isdigit()):
        return "DealerId must be a four-digit number."
    if not DEALER_ID_MIN <= int(value) <= DEALER_ID_MAX:
        return "DealerId must be a four-digit number."
    return None


def _check_name(label: str, value: Optional[str], required: bool) -> Optional[str]:
    if not value or not value.strip():
        return f"{label} is required." if required else None
    if len(value) > MAX_NAME_LENGTH:
        return f"{label} can't be longer than {MAX_NAME_LENGTH} characters."
    return None


def _check_year(value: int) -> Optional[str]:
    if not MIN_YEAR <= value <= MAX_YEAR:
        return f"Year must be between {MIN_YEAR} and {MAX_YEAR}."
    return None


def _check_stock_level(label: str, value: int) -> Optional[str]:
    if value < 0:
        return f"{label} must be zero or a positive number."
    if value > MAX_INT:
        return f"{label} can't be greater than {MAX_INT}."
    return None


def _check_car_id(value: int) -> Optional[str]:
    if not 0 <= value <= MAX_INT:
        return f"Id must be between 0 and {MAX_INT}."
    return None


def _check_password(value: str) -> Optional[str]:
    if not value:
        return "Password is required."
    if len(value) > MAX_PASSWORD_LENGTH:
        return f"Password can't be longer than {MAX_PASSWORD_LENGTH} characters."
    return None


def _collect(**checks: Optional[str]) -> ValidationResult:
    return ValidationResult({name: msg for name, msg in checks.items() if msg is not None})


# ---------------------------------------------------------------------------
# Request-level validators
# ---------------------------------------------------------------------------


def validate_dealer_id(value: str) -> ValidationResult:
    """DealerId must be all digits and within 1000-9999."""
    return _collect(DealerId=_check_dealer_id(value))


def validate_login(dealer_id: str, password: str) -> ValidationResult:
    return _collect(
        DealerId=_check_dealer_id(dealer_id),
        Password=_check_password(password),
    )


def validate_new_car(make: str, model: str, year: int, stock_level: int) -> ValidationResult:
    """Make/Model 1-50 non-blank chars, Year 1900-2024, StockLevel 0 to MAX_INT."""
    return _collect(
        Make=_check_name("Make", make, required=True),
        Model=_check_name("Model", model, required=True),
        Year=_check_year(year),
        StockLevel=_check_stock_level("StockLevel", stock_level),
    )


def validate_car_id(car_id: int) -> ValidationResult:
    return _collect(Id=_check_car_id(car_id))


def validate_stock_update(car_id: int, new_stock_level: int) -> ValidationResult:
    return _collect(
        Id=_check_car_id(car_id),
        NewStockLevel=_check_stock_level("NewStockLevel", new_stock_level),
    )


def validate_search(make: Optional[str], model: Optional[str]) -> ValidationResult:
    """Both filters optional; when given, each is capped at 50 characters."""
    return _collect(
        Make=_check_name("Make", make, required=False),
        Model=_check_name("Model", model, required=False),
    )


def validation_response(result: ValidationResult) -> JSONResponse:
    """Render a failed ValidationResult as the 400 error envelope."""
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed.", "errors": result.errors},
    )
