"""
asgi.py -- ASGI entry point for CarStock.

Settings are read from the environment here, once, at import time. A missing
JWT_KEY, JWT_ISSUER, JWT_AUDIENCE or DATABASE_URL makes this import fail, so
the server never starts half-configured.

Run with:  uvicorn asgi:app --reload
"""

from api.main import create_app
from core.config import Settings

app = create_app(Settings())
