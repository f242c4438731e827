"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for CarStock happen here. No module should
call os.getenv() or os.environ.get() directly -- build a Settings instance
once at process start and pass it down.

Design:
  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_key -> JWT_KEY). Type coercion and validation are built in.

  frozen=True: a Settings instance is immutable after construction. The app
      factory (api.main.create_app) and the CLI each build one and hand it to
      the components that need it. There is no module-level singleton.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Every required value that is missing is
      reported in a single error so the operator can fix them all at once.

Security notes:
  JWT_KEY shorter than 32 chars is rejected outright. HS256 signing relies on
  key entropy -- a short key weakens every token issued with it.

  There is no dev-mode fallback key. A missing JWT_KEY, JWT_ISSUER,
  JWT_AUDIENCE or DATABASE_URL aborts startup.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or inventory/.
"""

import logging

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("carstock.config")

_MIN_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Required fields default to "" (the "not configured" sentinel) so that the
    model_validator can report all of them together instead of pydantic
    failing on the first one.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    database_url: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    jwt_key: str = ""
    jwt_issuer: str = ""
    jwt_audience: str = ""
    # Only disable for plain-HTTP local development; browsers drop Secure
    # cookies set over http://.
    secure_cookies: bool = True

    # ------------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost:5039"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Refuse to build settings that cannot run the service.

        Signing key, issuer, audience and database URL are all required.
        Absence is a startup failure, not something discovered on the first
        request.
        """
        required = {
            "JWT_KEY": self.jwt_key,
            "JWT_ISSUER": self.jwt_issuer,
            "JWT_AUDIENCE": self.jwt_audience,
            "DATABASE_URL": self.database_url,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set them in your environment or .env file."
            )
        if len(self.jwt_key) < _MIN_KEY_LENGTH:
            raise ValueError(f"JWT_KEY must be at least {_MIN_KEY_LENGTH} characters.")
        return self
