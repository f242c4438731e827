"""Unit tests for api/validation.py -- explicit range and length checks.

Boundaries:
  Year 1900 and 2024 accepted, 1899 and 2025 rejected.
  Stock and Id 0 to 2**31-1 accepted, -1 and 2**31 rejected.
  DealerId 1000 and 9999 accepted, 999 and 10000 rejected.
  Make/Model 50 chars accepted, 51 rejected, empty or blank rejected on add but
  ignored on search.
"""

import pytest

from api.validation import (
    MAX_INT,
    validate_car_id,
    validate_dealer_id,
    validate_login,
    validate_new_car,
    validate_search,
    validate_stock_update,
)


@pytest.mark.parametrize("year", [1900, 2024])
def test_year_in_range_accepted(year):
    assert validate_new_car("Toyota", "Corolla", year, 1).ok


@pytest.mark.parametrize("year", [1899, 2025])
def test_year_out_of_range_rejected(year):
    result = validate_new_car("Toyota", "Corolla", year, 1)
    assert not result.ok
    assert set(result.errors) == {"Year"}


def test_stock_zero_accepted():
    assert validate_new_car("Toyota", "Corolla", 2020, 0).ok
    assert validate_stock_update(1, 0).ok


def test_negative_stock_rejected():
    assert "StockLevel" in validate_new_car("Toyota", "Corolla", 2020, -1).errors
    assert "NewStockLevel" in validate_stock_update(1, -1).errors


@pytest.mark.parametrize("dealer_id", ["1000", "9999"])
def test_dealer_id_in_range_accepted(dealer_id):
    assert validate_dealer_id(dealer_id).ok


@pytest.mark.parametrize("dealer_id", ["999", "10000", "", "abcd", "12a4", "-1000", "１００１"])
def test_dealer_id_rejected(dealer_id):
    assert not validate_dealer_id(dealer_id).ok


def test_make_and_model_required_on_add():
    result = validate_new_car("", "", 2020, 1)
    assert result.errors == {"Make": "Make is required.", "Model": "Model is required."}


def test_name_length_limit():
    assert validate_new_car("M" * 50, "X" * 50, 2020, 1).ok
    result = validate_new_car("M" * 51, "Corolla", 2020, 1)
    assert set(result.errors) == {"Make"}


def test_all_errors_reported_together():
    result = validate_new_car("", "X" * 51, 1800, -5)
    assert set(result.errors) == {"Make", "Model", "Year", "StockLevel"}


def test_search_filters_optional():
    assert validate_search(None, None).ok
    assert validate_search("toyota", "").ok
    assert "Model" in validate_search("toyota", "X" * 51).errors


def test_login_requires_password():
    result = validate_login("1001", "")
    assert set(result.errors) == {"Password"}


def test_login_password_length_limit():
    assert validate_login("1001", "p" * 255).ok
    result = validate_login("1001", "p" * 256)
    assert set(result.errors) == {"Password"}


def test_blank_make_and_model_rejected_on_add():
    result = validate_new_car("   ", "\t", 2020, 1)
    assert result.errors == {"Make": "Make is required.", "Model": "Model is required."}


def test_stock_upper_bound():
    assert validate_new_car("Toyota", "Corolla", 2020, MAX_INT).ok
    assert "StockLevel" in validate_new_car("Toyota", "Corolla", 2020, MAX_INT + 1).errors
    assert validate_stock_update(1, MAX_INT).ok
    assert "NewStockLevel" in validate_stock_update(1, 2**63).errors


@pytest.mark.parametrize("car_id", [0, 1, MAX_INT])
def test_car_id_in_range_accepted(car_id):
    assert validate_car_id(car_id).ok


@pytest.mark.parametrize("car_id", [-1, MAX_INT + 1, 2**63])
def test_car_id_out_of_range_rejected(car_id):
    assert set(validate_car_id(car_id).errors) == {"Id"}
    assert "Id" in validate_stock_update(car_id, 1).errors
