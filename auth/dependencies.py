"""
auth/dependencies.py -- FastAPI Depends() helper for dealer authentication.

The dealer identity comes from exactly one place: the "jwt" cookie set by
POST /api/auth/login. There is no Authorization header or API key path.

TokenService.validate() returns the dealer id or None. This module is the
seam where None becomes an HTTP 401, before any store is touched.

Layer rule: no imports from api/ or inventory/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.tokens import COOKIE_NAME, TokenService


def get_current_dealer(request: Request) -> int:
    """Require a valid token cookie. Returns the caller's dealer id.

    Use as a FastAPI dependency:
        @router.get("/cars")
        async def route(dealer_id: int = Depends(get_current_dealer)): ...

    Every failure (no cookie, bad signature, expired, missing claim) yields
    the same generic 401 so clients cannot tell the reasons apart.
    """
    token_service: TokenService = request.app.state.token_service
    dealer_id = token_service.validate(request.cookies.get(COOKIE_NAME))
    if dealer_id is None:
        raise HTTPException(status_code=401, detail="Authentication required.")
    return dealer_id
