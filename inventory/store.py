"""
inventory/store.py -- SQLAlchemy-backed persistence layer for car inventory.

Uses SQLAlchemy Core (not ORM) on an AsyncEngine so the domain dataclass in
inventory/models.py remains the authoritative representation and every
round-trip to the database is awaitable. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. CarStore is the repository; _row_to_car is
the mapper. Route handlers never touch SQL directly.

Ownership: every method takes the caller's dealer_id and puts it in the WHERE
clause of the single statement it runs. A car owned by another dealer is
indistinguishable from a car that does not exist -- both give zero rows.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = CarStore(engine)
    await store.create_schema()
    await store.add_car(Car(make="Toyota", model="Corolla", year=2020, stock_level=15, dealer_id=1001))
    cars = await store.list_cars(1001)
    await store.update_stock(car_id, 1001, 3)
    await store.delete_car(car_id, 1001)
"""

from typing import Optional

from sqlalchemy import CheckConstraint, Column, Integer, MetaData, String, Table, func, select, text
from sqlalchemy.ext.asyncio import AsyncEngine

from inventory.models import Car

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_cars = Table(
    "cars",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("make", String(50), nullable=False),
    Column("model", String(50), nullable=False),
    Column("year", Integer, nullable=False),
    Column("stock_level", Integer, nullable=False),
    Column("dealer_id", Integer, nullable=False, index=True),
    CheckConstraint("year BETWEEN 1900 AND 2024", name="ck_cars_year"),
    CheckConstraint("stock_level >= 0", name="ck_cars_stock_level"),
    CheckConstraint("dealer_id BETWEEN 1000 AND 9999", name="ck_cars_dealer_id"),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CarStore:
    """Repository for Car entities, always scoped to one dealer per call."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def create_schema(self) -> None:
        """Create the cars table and its dealer_id index if missing. Idempotent."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def add_car(self, car: Car) -> int:
        """Insert a car and return the number of rows inserted.

        Callers treat anything other than 1 as a failed write.
        Raises sqlalchemy.exc.IntegrityError if a CHECK constraint fails.
        """
        async with self.engine.connect() as conn:
            result = await conn.execute(
                _cars.insert().values(
                    make=car.make,
                    model=car.model,
                    year=car.year,
                    stock_level=car.stock_level,
                    dealer_id=car.dealer_id,
                )
            )
            await conn.commit()
        return result.rowcount

    async def delete_car(self, car_id: int, dealer_id: int) -> bool:
        """Delete a car owned by dealer_id.

        Returns True if a row was deleted, False if not found or wrong owner.
        Deleting the same id twice returns False the second time.
        """
        async with self.engine.connect() as conn:
            result = await conn.execute(
                _cars.delete().where((_cars.c.id == car_id) & (_cars.c.dealer_id == dealer_id))
            )
            await conn.commit()
        return result.rowcount > 0

    async def list_cars(self, dealer_id: int) -> list[Car]:
        """Return every car owned by dealer_id, oldest first."""
        async with self.engine.connect() as conn:
            result = await conn.execute(
                _cars.select().where(_cars.c.dealer_id == dealer_id).order_by(_cars.c.id)
            )
            rows = result.fetchall()
        return [_row_to_car(r) for r in rows]

    async def update_stock(self, car_id: int, dealer_id: int, stock_level: int) -> bool:
        """Set the stock level of a car owned by dealer_id.

        Returns True if a row was updated, False if not found or wrong owner.
        """
        async with self.engine.connect() as conn:
            result = await conn.execute(
                _cars.update()
                .where((_cars.c.id == car_id) & (_cars.c.dealer_id == dealer_id))
                .values(stock_level=stock_level)
            )
            await conn.commit()
        return result.rowcount > 0

    async def search_cars(
        self,
        dealer_id: int,
        make: Optional[str] = None,
        model: Optional[str] = None,
    ) -> list[Car]:
        """Return dealer_id's cars matching make and/or model, case-insensitively.

        Each filter is exact equality after lower-casing both sides. An empty
        or None filter is skipped, so passing neither returns every car the
        dealer owns.
        """
        query = select(_cars).where(_cars.c.dealer_id == dealer_id)
        if make:
            query = query.where(func.lower(_cars.c.make) == func.lower(make))
        if model:
            query = query.where(func.lower(_cars.c.model) == func.lower(model))
        async with self.engine.connect() as conn:
            result = await conn.execute(query.order_by(_cars.c.id))
            rows = result.fetchall()
        return [_row_to_car(r) for r in rows]


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_car(row) -> Car:
    return Car(
        id=row.id,
        make=row.make,
        model=row.model,
        year=row.year,
        stock_level=row.stock_level,
        dealer_id=row.dealer_id,
    )
