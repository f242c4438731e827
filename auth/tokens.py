"""
auth/tokens.py -- JWT issuance/validation, password hashing, and the auth cookie.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry dealerId, a random jti, iss, aud,
       iat and exp (exactly one hour after iat). Validation checks signature,
       issuer, audience and expiry with zero leeway. It returns the dealer id
       or None -- it never raises and never partially succeeds. The route
       layer turns None into a 401.

  Tokens are stateless. There is no revocation list and no refresh: a token
       is valid until it expires, even after logout.

  Passwords: bcrypt used directly (no passlib wrapper). The _DUMMY_HASH
       constant enables timing equalization in authenticate_dealer() so
       response time does not reveal whether a dealer id exists.

  Cookie: the token travels only in the "jwt" cookie -- HttpOnly, Secure,
       SameSite=Strict, with Max-Age matching the token lifetime.

Layer rule: no imports from api/ or inventory/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

if TYPE_CHECKING:
    from auth.models import Dealer
    from auth.store import DealerStore
    from core.config import Settings

logger = logging.getLogger("carstock.auth")

_ALGORITHM = "HS256"

TOKEN_LIFETIME = timedelta(hours=1)
COOKIE_NAME = "jwt"
DEALER_ID_CLAIM = "dealerId"

DEALER_ID_MIN = 1000
DEALER_ID_MAX = 9999

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Passwords longer than 72 bytes are truncated by bcrypt (a known bcrypt
    limitation). The login route caps passwords at 255 characters.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or oversized input -- treat as a mismatch.
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("carstock_timing_dummy")


# ---------------------------------------------------------------------------
# Token service
# ---------------------------------------------------------------------------


class TokenService:
    """Issues and validates dealer tokens.

    Built once at startup from the immutable Settings and kept on app.state.
    Holds no mutable state, so one instance serves all concurrent requests.
    """

    def __init__(self, settings: Settings) -> None:
        self._key = settings.jwt_key
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience

    def issue(self, dealer_id: int, now: datetime | None = None) -> str:
        """Encode a signed JWT for dealer_id expiring TOKEN_LIFETIME after issue.

        Args:
            dealer_id: Authenticated four-digit dealer id.
            now:       Issue time. Defaults to the current UTC time; tests pass
                       a fixed value to produce already-expired tokens.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            DEALER_ID_CLAIM: str(dealer_id),
            "jti": str(uuid.uuid4()),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        return jwt.encode(payload, self._key, algorithm=_ALGORITHM)

    def validate(self, token: str | None) -> int | None:
        """Verify a token and return its dealer id, or None on any failure.

        Failure cases: missing/empty token, bad signature, wrong issuer or
        audience, expired (no clock-skew grace), missing jti, and a dealerId
        claim that is absent, non-numeric, or outside 1000-9999.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[_ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "leeway": 0,
                    "require_exp": True,
                    "require_iss": True,
                    "require_aud": True,
                    "require_jti": True,
                },
            )
        except JWTError:
            return None

        try:
            dealer_id = int(payload[DEALER_ID_CLAIM])
        except (KeyError, TypeError, ValueError):
            return None
        if not DEALER_ID_MIN <= dealer_id <= DEALER_ID_MAX:
            return None
        return dealer_id


# ---------------------------------------------------------------------------
# Dealer authentication (constant-time)
# ---------------------------------------------------------------------------


async def authenticate_dealer(store: DealerStore, dealer_id: int, password: str) -> Dealer | None:
    """Authenticate a dealer id/password login with timing equalization.

    Always runs bcrypt whether or not the dealer exists:
    - Unknown dealer: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the Dealer on success, None on any failure.
    """
    dealer = await store.get_by_dealer_id(dealer_id)
    if dealer is None:
        # Do NOT return before running bcrypt.
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, dealer.hashed_password):
        return None
    return dealer


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_auth_cookie(response, token: str, secure: bool = True) -> None:
    """Write the JWT as the "jwt" cookie on the response.

    httponly=True: JS cannot read the cookie (XSS mitigation).
    samesite="strict": never sent on cross-site requests (CSRF mitigation).
    secure: only sent over HTTPS. Disabled only via SECURE_COOKIES=false.
    max_age/expires: match the JWT lifetime so both expire together.
    """
    lifetime = int(TOKEN_LIFETIME.total_seconds())
    response.set_cookie(
        COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="strict",
        secure=secure,
        max_age=lifetime,
        expires=lifetime,
    )


def clear_auth_cookie(response, secure: bool = True) -> None:
    """Delete the "jwt" cookie. The token itself stays valid until it expires."""
    response.delete_cookie(COOKIE_NAME, httponly=True, samesite="strict", secure=secure)
