"""
api/routes/v1/auth.py -- Dealer login and logout endpoints.

Routes:
  POST /api/auth/login   -- dealer id + password login; sets the jwt cookie
  POST /api/auth/logout  -- clears the jwt cookie; 200

Security:
  POST /login is rate-limited to 10 requests/minute per IP.
  authenticate_dealer() provides timing equalization -- use it, never inline
  get_by_dealer_id() + verify_password().
  Unknown dealer and wrong password produce the same 401 body.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import LoginRequest, MessageResponse, ValidationErrorResponse
from api.validation import validate_login, validation_response
from auth.store import DealerStore
from auth.tokens import TokenService, authenticate_dealer, clear_auth_cookie, set_auth_cookie

logger = logging.getLogger("carstock.auth")

# Auth policy:
# - POST /api/auth/login:   public -- login endpoint must be unauthenticated
# - POST /api/auth/logout:  public -- clearing a cookie needs no prior auth
router = APIRouter()

_BAD_CREDENTIALS = "Invalid dealer id or password"


@limiter.limit("10/minute")  # brute-force mitigation -- must be ABOVE @router to preserve FastAPI introspection
@router.post(
    "/auth/login",
    response_model=MessageResponse,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": MessageResponse}},
)
async def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate a dealer and set the jwt cookie.

    Returns the same generic error for an unknown dealer id and a wrong
    password to avoid leaking which dealer ids exist.
    """
    result = validate_login(body.dealer_id, body.password)
    if not result.ok:
        return validation_response(result)

    dealer_store: DealerStore = request.app.state.dealer_store
    dealer_id = int(body.dealer_id)
    dealer = await authenticate_dealer(dealer_store, dealer_id, body.password)
    if dealer is None:
        logger.info("Login failed for dealer %s", dealer_id)
        resp = JSONResponse(status_code=401, content={"message": _BAD_CREDENTIALS})
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token_service: TokenService = request.app.state.token_service
    token = token_service.issue(dealer.dealer_id)
    resp = JSONResponse(status_code=200, content={"message": "Logged in successfully"})
    set_auth_cookie(resp, token, secure=request.app.state.settings.secure_cookies)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(request: Request) -> JSONResponse:
    """Clear the jwt cookie. The token stays valid until it expires."""
    resp = JSONResponse(content={"message": "Logged out successfully"})
    clear_auth_cookie(resp, secure=request.app.state.settings.secure_cookies)
    return resp
