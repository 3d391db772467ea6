"""Tests for the static operation catalog and argument models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.domain.arguments import OrderFilters, StatusUpdateArguments
from core.domain.catalog import CATALOG, OPERATIONS


def test_catalog_has_sixteen_unique_operations() -> None:
    names = [d.name for d in CATALOG]
    assert len(names) == 16
    assert len(set(names)) == 16
    assert all(name.startswith("dropi_") for name in names)


@pytest.mark.parametrize(
    ("name", "required"),
    [
        ("dropi_login", []),
        ("dropi_get_cities", ["department_id"]),
        ("dropi_get_order", ["order_id"]),
        ("dropi_get_order_by_guide", ["guide_number"]),
        ("dropi_generate_guides_massive", ["order_ids"]),
        ("dropi_update_order_status", ["order_id", "status"]),
        ("dropi_get_shipping_quote", ["origin_dane_code", "destination_dane_code", "amount"]),
        ("dropi_get_orders", []),
    ],
)
def test_required_arguments(name: str, required: list[str]) -> None:
    assert sorted(OPERATIONS[name].required) == sorted(required)


def test_create_order_requires_customer_and_products() -> None:
    required = set(OPERATIONS["dropi_create_order"].required)
    assert required == {"state", "city", "name", "surname", "address", "phone", "total_order", "products"}


def test_list_schema_uses_api_spelling_and_advertises_defaults() -> None:
    schema = OPERATIONS["dropi_get_orders"].input_schema()
    props = schema["properties"]

    assert "from" in props
    assert "textToSearch" in props
    assert props["result_number"]["default"] == 50
    assert props["filter_date_by"]["default"] == "FECHA DE CREADO"
    assert props["orderBy"]["default"] == "id"


def test_empty_argument_schema() -> None:
    schema = OPERATIONS["dropi_login"].input_schema()
    assert schema["type"] == "object"
    assert schema["properties"] == {}
    assert schema["required"] == []


def test_order_filters_reject_unknown_status() -> None:
    with pytest.raises(ValidationError):
        OrderFilters.model_validate({"status": "PERDIDO"})


def test_status_update_accepts_numeric_strings() -> None:
    args = StatusUpdateArguments.model_validate({"order_id": "42", "status": "CANCELADO"})
    assert args.order_id == 42
