#!/usr/bin/env python3
"""
CarStock -- operator CLI.

Dealer credentials are created out-of-band; the HTTP API never creates or
changes them. This script is that out-of-band path.

Usage:
  python main.py init-db
  python main.py add-dealer 1001
  python main.py add-dealer 1001 --password password123

Environment variables (same as the API server, .env is honoured):
  DATABASE_URL   SQLAlchemy async URL, e.g. sqlite+aiosqlite:///carstock.db
  JWT_KEY, JWT_ISSUER, JWT_AUDIENCE   required so a misconfigured
                 environment is caught here rather than at server start
"""

import argparse
import asyncio
import getpass
import sys
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from api.validation import validate_dealer_id
from auth.models import Dealer
from auth.store import DealerStore
from auth.tokens import hash_password
from core.config import Settings
from core.database import create_store_engine
from inventory.store import CarStore


async def _init_db(settings: Settings) -> None:
    engine = create_store_engine(settings.database_url)
    try:
        await DealerStore(engine).create_schema()
        await CarStore(engine).create_schema()
    finally:
        await engine.dispose()


async def _add_dealer(settings: Settings, dealer: Dealer) -> None:
    engine = create_store_engine(settings.database_url)
    try:
        store = DealerStore(engine)
        await store.create_schema()
        await store.create_dealer(dealer)
    finally:
        await engine.dispose()


def _read_password(given: Optional[str]) -> str:
    """Return --password if given, otherwise prompt twice without echo."""
    if given:
        return given
    first = getpass.getpass("  Password: ")
    second = getpass.getpass("  Confirm password: ")
    if first != second:
        print("  [!] Passwords do not match.")
        return ""
    return first


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="carstock",
        description="Manage the CarStock database and dealer credentials.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py init-db
  python main.py add-dealer 1001
  DATABASE_URL=sqlite+aiosqlite:///carstock.db python main.py add-dealer 1002 --password s3cret
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.add_parser("init-db", help="Create the users and cars tables if missing")
    add = sub.add_parser("add-dealer", help="Create login credentials for a dealer")
    add.add_argument("dealer_id", metavar="DEALER_ID", help="Four-digit dealer id (1000-9999)")
    add.add_argument(
        "--password",
        metavar="PASSWORD",
        help="Plaintext password. Prompted for (without echo) when omitted.",
    )
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"  [!] Invalid configuration: {exc}")
        return 1

    if args.command == "init-db":
        asyncio.run(_init_db(settings))
        print("  Database schema ready.")
        return 0

    check = validate_dealer_id(args.dealer_id)
    if not check.ok:
        print(f"  [!] {check.errors['DealerId']}")
        return 1

    password = _read_password(args.password)
    if not password:
        print("  [!] A password is required.")
        return 1

    dealer = Dealer(dealer_id=int(args.dealer_id), hashed_password=hash_password(password))
    try:
        asyncio.run(_add_dealer(settings, dealer))
    except IntegrityError:
        print(f"  [!] Dealer {dealer.dealer_id} already exists.")
        return 1
    print(f"  Dealer {dealer.dealer_id} created.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
