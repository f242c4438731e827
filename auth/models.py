"""
auth/models.py -- Domain dataclass for dealer credentials.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in inventory/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Dealer:
    """A dealer login identity.

    dealer_id is the four-digit number (1000-9999) that scopes every car
    record. Dealers are seeded out-of-band (see `main.py add-dealer`); the
    HTTP API never creates, changes or deletes them.
    """

    dealer_id: int
    hashed_password: str  # bcrypt
