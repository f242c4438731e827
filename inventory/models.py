"""
inventory/models.py -- Domain dataclass for the CarStock inventory.

Pure data container with zero logic. Ownership scoping lives in
inventory/store.py; input validation lives in api/validation.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Car:
    """A stock line for one make/model/year held by one dealer.

    dealer_id is always taken from the authenticated token, never from the
    request body. id is None before the record is written to the database.
    """

    make: str
    model: str
    year: int
    stock_level: int
    dealer_id: int
    id: Optional[int] = None
