"""
api/routes/v1/cars.py -- Dealer-scoped car inventory routes.

Routes:
  GET    /cars          -- list the caller's cars
  POST   /cars          -- add a car owned by the caller
  DELETE /cars          -- delete one of the caller's cars by Id
  PUT    /cars/stock    -- set the stock level of one of the caller's cars
  POST   /cars/search   -- filter the caller's cars by make and/or model

Ownership:
  The dealer id always comes from get_current_dealer (the jwt cookie), never
  from the request body, and is passed to every store call. A car that
  belongs to another dealer gets the same 404 as a car that does not exist.

Empty collections:
  GET /cars and POST /cars/search answer 404 rather than 200 [] when nothing
  matches. Clients of the existing API rely on that status.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.models import (
    CarCreate,
    CarDelete,
    CarResponse,
    CarSearch,
    MessageResponse,
    StockUpdate,
    ValidationErrorResponse,
)
from api.validation import (
    validate_car_id,
    validate_new_car,
    validate_search,
    validate_stock_update,
    validation_response,
)
from auth.dependencies import get_current_dealer
from inventory.models import Car
from inventory.store import CarStore

logger = logging.getLogger("carstock.inventory")

# Every route on this router requires a valid jwt cookie.
router = APIRouter(
    responses={401: {"model": MessageResponse}},
)

_CAR_NOT_FOUND = "Car not found"


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


# ---------------------------------------------------------------------------
# GET /cars -- list the caller's cars
# ---------------------------------------------------------------------------


@router.get(
    "/cars",
    response_model=list[CarResponse],
    responses={404: {"model": MessageResponse}},
)
async def list_cars(request: Request, dealer_id: int = Depends(get_current_dealer)):
    """Return every car the authenticated dealer owns."""
    store: CarStore = request.app.state.car_store
    cars = await store.list_cars(dealer_id)
    if not cars:
        return _message(404, "No cars found.")
    return [CarResponse.from_car(c) for c in cars]


# ---------------------------------------------------------------------------
# POST /cars -- add a car
# ---------------------------------------------------------------------------


@router.post(
    "/cars",
    response_model=MessageResponse,
    responses={400: {"model": ValidationErrorResponse}, 500: {"model": MessageResponse}},
)
async def add_car(request: Request, body: CarCreate, dealer_id: int = Depends(get_current_dealer)):
    """Add a car owned by the authenticated dealer.

    Succeeds only if exactly one row was written. A store error is logged and
    reported as a 500 with a generic message.
    """
    result = validate_new_car(body.make, body.model, body.year, body.stock_level)
    if not result.ok:
        return validation_response(result)

    store: CarStore = request.app.state.car_store
    car = Car(
        make=body.make,
        model=body.model,
        year=body.year,
        stock_level=body.stock_level,
        dealer_id=dealer_id,
    )
    try:
        inserted = await store.add_car(car)
    except SQLAlchemyError:
        logger.exception("Insert failed for dealer %s", dealer_id)
        inserted = 0
    if inserted != 1:
        return _message(500, "Failed to add car")
    return MessageResponse(message="Car added successfully")


# ---------------------------------------------------------------------------
# DELETE /cars -- delete a car by Id
# ---------------------------------------------------------------------------


@router.delete(
    "/cars",
    response_model=MessageResponse,
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": MessageResponse}},
)
async def delete_car(request: Request, body: CarDelete, dealer_id: int = Depends(get_current_dealer)):
    """Delete one of the authenticated dealer's cars.

    Passes both the car id and the caller's dealer id to the store; the
    store's WHERE clause requires both to match.
    """
    result = validate_car_id(body.id)
    if not result.ok:
        return validation_response(result)

    store: CarStore = request.app.state.car_store
    deleted = await store.delete_car(body.id, dealer_id)
    if not deleted:
        return _message(404, _CAR_NOT_FOUND)
    return MessageResponse(message="Car deleted successfully")


# ---------------------------------------------------------------------------
# PUT /cars/stock -- update stock level
# ---------------------------------------------------------------------------


@router.put(
    "/cars/stock",
    response_model=MessageResponse,
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": MessageResponse}},
)
async def update_stock(request: Request, body: StockUpdate, dealer_id: int = Depends(get_current_dealer)):
    """Set the stock level of one of the authenticated dealer's cars."""
    result = validate_stock_update(body.id, body.new_stock_level)
    if not result.ok:
        return validation_response(result)

    store: CarStore = request.app.state.car_store
    updated = await store.update_stock(body.id, dealer_id, body.new_stock_level)
    if not updated:
        return _message(404, _CAR_NOT_FOUND)
    return MessageResponse(message="Stock level updated successfully")


# ---------------------------------------------------------------------------
# POST /cars/search -- filter by make / model
# ---------------------------------------------------------------------------


@router.post(
    "/cars/search",
    response_model=list[CarResponse],
    responses={400: {"model": ValidationErrorResponse}, 404: {"model": MessageResponse}},
)
async def search_cars(request: Request, body: CarSearch, dealer_id: int = Depends(get_current_dealer)):
    """Search the authenticated dealer's cars.

    Make and Model are case-insensitive exact matches. A missing, null or
    empty filter is ignored, so an empty body returns all of the dealer's cars.
    """
    result = validate_search(body.make, body.model)
    if not result.ok:
        return validation_response(result)

    store: CarStore = request.app.state.car_store
    cars = await store.search_cars(dealer_id, make=body.make, model=body.model)
    if not cars:
        return _message(404, "No cars found matching the criteria.")
    return [CarResponse.from_car(c) for c in cars]
