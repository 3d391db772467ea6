"""Argument models for every exposed operation.

Each operation accepts an untyped argument bag from the host. The bag is
validated against one of these models before any request is shaped, so call
sites never check for key presence themselves.

Conventions:
- `extra="ignore"`: unknown keys are dropped, which doubles as the allow-list
  for query filters.
- Optional filters default to `None` and are never sent when absent. The
  default the host sees in the schema (e.g. `result_number=50`) is the one the
  remote API applies on its side.
- Field aliases carry the remote API spelling (`from`, `textToSearch`...).
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

Amount = Union[int, float]

OrderStatus = Literal[
    "PENDIENTE",
    "GUIA_GENERADA",
    "EN_RUTA",
    "ENTREGADO",
    "DEVOLUCION",
    "CANCELADO",
    "NO_EFECTIVO",
]
RateType = Literal["CON RECAUDO", "SIN RECAUDO"]
DateFilter = Literal[
    "FECHA DE CREADO",
    "FECHA DE PRIMERA IMPRESION",
    "FECHA DE CAMBIO DE ESTATUS",
]
WalletMovement = Literal["ENTRADA", "SALIDA"]

STATUS_GUIDE_GENERATED: OrderStatus = "GUIA_GENERADA"
STATUS_CANCELLED: OrderStatus = "CANCELADO"


class Arguments(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class NoArguments(Arguments):
    """Operations that take nothing."""


class QueryFilters(Arguments):
    """Base for list operations: the fields, in declaration order, are the query.

    Falsy filters (`None`, `""`, `start=0`) are left out, same as the API's
    own defaults.
    """

    def query_params(self) -> list[tuple[str, Any]]:
        params: list[tuple[str, Any]] = []
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None or value == "" or value == 0:
                continue
            params.append((field.alias or name, value))
        return params


class OrderedQueryFilters(QueryFilters):
    """List filters that always send an ordering, `id desc` unless given."""

    order_by: str | None = Field(default=None, alias="orderBy", json_schema_extra={"default": "id"})
    order_direction: Literal["asc", "desc"] | None = Field(
        default=None,
        alias="orderDirection",
        json_schema_extra={"default": "desc"},
    )

    @field_validator("order_by", "order_direction", mode="before")
    @classmethod
    def _blank_means_default(cls, value: Any) -> Any:
        return None if value == "" else value

    def query_params(self) -> list[tuple[str, Any]]:
        params = [(key, value) for key, value in super().query_params() if key not in ("orderBy", "orderDirection")]
        params.append(("orderBy", self.order_by or "id"))
        params.append(("orderDirection", self.order_direction or "desc"))
        return params


class OrderFilters(OrderedQueryFilters):
    from_: str | None = Field(default=None, alias="from", description="Fecha desde YYYY-MM-DD")
    until: str | None = Field(default=None, description="Fecha hasta YYYY-MM-DD")
    status: OrderStatus | None = None
    result_number: int | None = Field(default=None, ge=1, json_schema_extra={"default": 50})
    start: int | None = Field(default=None, ge=0, json_schema_extra={"default": 0})
    text_to_search: str | None = Field(default=None, alias="textToSearch")
    filter_date_by: DateFilter | None = Field(
        default=None,
        json_schema_extra={"default": "FECHA DE CREADO"},
    )


class WalletHistoryFilters(OrderedQueryFilters):
    from_: str | None = Field(default=None, alias="from", description="Fecha desde YYYY-MM-DD")
    until: str | None = Field(default=None, description="Fecha hasta YYYY-MM-DD")
    type: WalletMovement | None = None
    result_number: int | None = Field(default=None, ge=1, json_schema_extra={"default": 50})
    start: int | None = Field(default=None, ge=0, json_schema_extra={"default": 0})


class ProductFilters(QueryFilters):
    result_number: int | None = Field(default=None, ge=1, json_schema_extra={"default": 50})
    start: int | None = Field(default=None, ge=0, json_schema_extra={"default": 0})
    text_to_search: str | None = Field(default=None, alias="textToSearch")


class CitiesArguments(Arguments):
    department_id: int = Field(..., description="ID del departamento")
    rate_type: Literal["CON RECAUDO", "SIN RECAUDO", ""] = Field(
        default="",
        description="CON RECAUDO o SIN RECAUDO",
    )


class OrderIdArguments(Arguments):
    order_id: int = Field(..., description="ID de la orden")


class GuideArguments(Arguments):
    guide_number: str = Field(..., min_length=1, description="Numero de guia")


class StatusUpdateArguments(Arguments):
    order_id: int = Field(..., description="ID de la orden")
    status: OrderStatus = Field(..., description="Nuevo estado")


class MassiveGuideArguments(Arguments):
    order_ids: list[int] = Field(..., min_length=1, description="Lista de IDs")


class ProductLine(Arguments):
    id: int
    price: Amount
    quantity: int = Field(..., ge=1)
    variation_id: int | None = None


class CreateOrderArguments(Arguments):
    state: str = Field(..., min_length=1, description="Departamento destino")
    city: str = Field(..., min_length=1, description="Ciudad destino")
    name: str = Field(..., min_length=1, description="Nombre cliente")
    surname: str = Field(..., description="Apellido cliente")
    address: str = Field(..., min_length=1, description="Direccion entrega")
    phone: str = Field(..., min_length=1, description="Telefono cliente")
    email: str | None = Field(default=None, description="Email (opcional)")
    notes: str | None = Field(default=None, description="Notas (opcional)")
    total_order: Amount = Field(..., description="Total orden")
    rate_type: RateType = "CON RECAUDO"
    dni: str | None = Field(default=None, description="Cedula (opcional)")
    distribution_company_id: int | None = Field(default=None, description="ID transportadora (opcional)")
    products: list[ProductLine] = Field(..., min_length=1)


class ShippingQuoteArguments(Arguments):
    origin_dane_code: str = Field(..., min_length=1, description="Codigo DANE origen")
    destination_dane_code: str = Field(..., min_length=1, description="Codigo DANE destino")
    amount: Amount = Field(..., description="Valor total")
    with_collection: bool = True
