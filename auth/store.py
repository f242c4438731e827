"""
auth/store.py -- SQLAlchemy Core persistence layer for dealer credentials.

Pattern: Repository + Data Mapper (same as inventory/store.py).
DealerStore is the repository; _row_to_dealer is the mapper.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.
  dealer_id is the primary key, so the one-credential-per-dealer invariant is
  enforced by the database, not by application code.

The engine is shared with CarStore and owned by the caller (the app lifespan
or the CLI), which is responsible for disposing it.

Layer rule: no imports from api/ or inventory/.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Integer, MetaData, Table, Text
from sqlalchemy.ext.asyncio import AsyncEngine

from auth.models import Dealer

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("dealer_id", Integer, primary_key=True, autoincrement=False),
    Column("hashed_password", Text, nullable=False),
    CheckConstraint("dealer_id BETWEEN 1000 AND 9999", name="ck_users_dealer_id"),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class DealerStore:
    """Repository for Dealer credential records.

    Usage:
        store = DealerStore(engine)
        await store.create_schema()
        await store.create_dealer(Dealer(dealer_id=1001, hashed_password=hash_password("secret")))
        dealer = await store.get_by_dealer_id(1001)
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def create_schema(self) -> None:
        """Create the users table if it does not exist. Idempotent."""
        async with self.engine.begin() as conn:
            await conn.run_sync(_metadata.create_all)

    async def get_by_dealer_id(self, dealer_id: int) -> Dealer | None:
        """Look up a dealer's credentials. Returns None if not found."""
        async with self.engine.connect() as conn:
            result = await conn.execute(_users.select().where(_users.c.dealer_id == dealer_id))
            row = result.fetchone()
        return _row_to_dealer(row) if row is not None else None

    async def create_dealer(self, dealer: Dealer) -> None:
        """Insert a dealer credential record.

        Raises sqlalchemy.exc.IntegrityError if the dealer id already exists
        or is outside 1000-9999. The CLI reports that to the operator.
        """
        async with self.engine.connect() as conn:
            await conn.execute(
                _users.insert().values(
                    dealer_id=dealer.dealer_id,
                    hashed_password=dealer.hashed_password,
                )
            )
            await conn.commit()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_dealer(row) -> Dealer:
    return Dealer(dealer_id=row.dealer_id, hashed_password=row.hashed_password)
