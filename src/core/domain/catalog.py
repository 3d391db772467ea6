"""Catálogo fijo de operaciones expuestas al host.

Por qué datos y no clases:
- Cada descriptor solo asocia un nombre con su modelo de argumentos; el
  comportamiento vive en el dispatcher.
- El host recibe el JSON schema generado desde el mismo modelo que valida.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.domain.arguments import (
    Arguments,
    CitiesArguments,
    CreateOrderArguments,
    GuideArguments,
    MassiveGuideArguments,
    NoArguments,
    OrderFilters,
    OrderIdArguments,
    ProductFilters,
    ShippingQuoteArguments,
    StatusUpdateArguments,
    WalletHistoryFilters,
)

LOGIN = "dropi_login"
GET_DEPARTMENTS = "dropi_get_departments"
GET_CITIES = "dropi_get_cities"
CREATE_ORDER = "dropi_create_order"
GET_ORDER = "dropi_get_order"
GET_ORDER_BY_GUIDE = "dropi_get_order_by_guide"
GET_ORDERS = "dropi_get_orders"
UPDATE_ORDER_STATUS = "dropi_update_order_status"
GENERATE_GUIDE = "dropi_generate_guide"
GENERATE_GUIDES_MASSIVE = "dropi_generate_guides_massive"
CANCEL_ORDER = "dropi_cancel_order"
GET_WALLET_BALANCE = "dropi_get_wallet_balance"
GET_WALLET_HISTORY = "dropi_get_wallet_history"
GET_TRANSPORT_COMPANIES = "dropi_get_transport_companies"
GET_SHIPPING_QUOTE = "dropi_get_shipping_quote"
GET_PRODUCTS = "dropi_get_products"


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    description: str
    arguments: type[Arguments]

    def input_schema(self) -> dict[str, Any]:
        schema = self.arguments.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    @property
    def required(self) -> list[str]:
        return list(self.input_schema()["required"])


CATALOG: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(LOGIN, "Autenticarse en Dropi y obtener el balance del wallet", NoArguments),
    OperationDescriptor(GET_DEPARTMENTS, "Obtener lista de departamentos disponibles para envio", NoArguments),
    OperationDescriptor(GET_CITIES, "Obtener lista de ciudades de un departamento", CitiesArguments),
    OperationDescriptor(CREATE_ORDER, "Crear un nuevo pedido en Dropi", CreateOrderArguments),
    OperationDescriptor(GET_ORDER, "Obtener detalles de una orden por ID", OrderIdArguments),
    OperationDescriptor(GET_ORDER_BY_GUIDE, "Obtener orden por numero de guia", GuideArguments),
    OperationDescriptor(GET_ORDERS, "Listar ordenes con filtros", OrderFilters),
    OperationDescriptor(UPDATE_ORDER_STATUS, "Cambiar el estado de una orden", StatusUpdateArguments),
    OperationDescriptor(GENERATE_GUIDE, "Generar guia de transporte para una orden", OrderIdArguments),
    OperationDescriptor(GENERATE_GUIDES_MASSIVE, "Generar guias masivamente", MassiveGuideArguments),
    OperationDescriptor(CANCEL_ORDER, "Cancelar una orden", OrderIdArguments),
    OperationDescriptor(GET_WALLET_BALANCE, "Obtener balance del wallet", NoArguments),
    OperationDescriptor(GET_WALLET_HISTORY, "Obtener historial del wallet", WalletHistoryFilters),
    OperationDescriptor(GET_TRANSPORT_COMPANIES, "Obtener transportadoras disponibles", NoArguments),
    OperationDescriptor(GET_SHIPPING_QUOTE, "Cotizar costo de envio", ShippingQuoteArguments),
    OperationDescriptor(GET_PRODUCTS, "Obtener lista de productos", ProductFilters),
)

OPERATIONS: dict[str, OperationDescriptor] = {op.name: op for op in CATALOG}
