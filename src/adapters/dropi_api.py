"""Llamadas remotas a la API de Dropi.

Estas funciones están en adapters porque son I/O puro (HTTP):
- Cada método arma el request que espera la API (query, body) a partir de
  argumentos ya validados.
- Ninguno lanza: todo termina en `Success` o `Failure`. Un 2xx sin cuerpo
  es `Success(payload=None)`.
- Un solo intento por llamada, sin reintentos.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from core.domain.arguments import (
    CreateOrderArguments,
    OrderFilters,
    OrderStatus,
    ProductFilters,
    ShippingQuoteArguments,
    WalletHistoryFilters,
)
from core.domain.failures import FailureKind
from core.domain.models import Failure, Result, Success

logger = logging.getLogger(__name__)


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def failure_from_error(exc: Exception) -> Failure:
    """Normaliza un error de transporte/HTTP.

    Prioridad del mensaje: `message` del payload de error remoto, luego la
    descripción del error.
    """

    description = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.HTTPStatusError):
        data = _error_payload(exc.response)
        message = None
        if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
            message = data["message"]
        return Failure(
            message=message or description,
            debug={"status_code": exc.response.status_code, "error_data": data},
            kind=FailureKind.REMOTE,
        )
    return Failure(message=description, kind=FailureKind.TRANSPORT)


def build_order_payload(args: CreateOrderArguments) -> dict[str, Any]:
    """Plantilla fija de `myorders` + campos del cliente; opcionales ausentes no se envían."""

    payload: dict[str, Any] = {
        "calculate_costs_and_shiping": True,
        "state": args.state,
        "city": args.city,
        "name": args.name,
        "surname": args.surname,
        "dir": args.address,
        "phone": args.phone,
        "client_email": args.email or "",
        "notes": args.notes or "",
        "payment_method_id": 1,
        "rate_type": args.rate_type,
        "type": "FINAL_ORDER",
        "total_order": args.total_order,
        "products": [line.model_dump(exclude_none=True) for line in args.products],
    }
    if args.dni:
        payload["dni"] = args.dni
    if args.distribution_company_id:
        payload["distributionCompany"] = {"id": args.distribution_company_id}
    return payload


def build_quote_payload(args: ShippingQuoteArguments) -> dict[str, Any]:
    return {
        "EnvioConCobro": args.with_collection,
        "amount": args.amount,
        "ciudad_destino": {"cod_dane": args.destination_dane_code},
        "ciudad_remitente": {"cod_dane": args.origin_dane_code},
    }


class DropiApi:
    """Cliente de los endpoints de Dropi sobre un `httpx.AsyncClient` compartido."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, Any]] | None = None,
        json: Any = None,
    ) -> Result:
        logger.debug("%s %s", method, path)
        try:
            resp = await self._client.request(method, path, params=params, json=json)
            resp.raise_for_status()
            if not resp.content:
                return Success(payload=None)
            return Success(payload=resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            failure = failure_from_error(exc)
            logger.warning("%s %s failed: %s", method, path, failure.message)
            return failure

    async def authenticate(self, payload: dict[str, Any]) -> Result:
        return await self._request("POST", "/api/login", json=payload)

    async def departments(self) -> Result:
        return await self._request("GET", "/api/department")

    async def cities(self, department_id: int, rate_type: str = "") -> Result:
        return await self._request(
            "POST",
            "/api/trajectory/bycity",
            json={"department_id": department_id, "rate_type": rate_type},
        )

    async def create_order(self, args: CreateOrderArguments) -> Result:
        return await self._request("POST", "/api/orders/myorders", json=build_order_payload(args))

    async def order(self, order_id: int) -> Result:
        return await self._request(
            "GET",
            f"/api/orders/myorders/{order_id}",
            params=[("warranty", "false")],
        )

    async def order_by_guide(self, guide_number: str) -> Result:
        return await self._request("GET", f"/api/orders/myorderbyguide/{quote(guide_number, safe='')}")

    async def orders(self, filters: OrderFilters) -> Result:
        return await self._request("GET", "/api/orders/myorders", params=filters.query_params())

    async def update_order_status(self, order_ids: int | Sequence[int], status: OrderStatus) -> Result:
        """Primitiva de cambio de estado: un ID usa PUT, una lista usa el endpoint masivo."""

        if isinstance(order_ids, int):
            return await self._request("PUT", f"/api/orders/myorders/{order_ids}", json={"status": status})
        body = [{"id": order_id, "status": status} for order_id in order_ids]
        return await self._request("POST", "/api/orders/myorder/masive", json=body)

    async def wallet_history(self, filters: WalletHistoryFilters) -> Result:
        return await self._request("GET", "/api/historywallet", params=filters.query_params())

    async def transport_companies(self) -> Result:
        return await self._request("GET", "/api/distribution_companies")

    async def shipping_quote(self, args: ShippingQuoteArguments) -> Result:
        return await self._request(
            "POST",
            "/api/orders/cotizaEnvioTransportadoraV2",
            json=build_quote_payload(args),
        )

    async def products(self, filters: ProductFilters) -> Result:
        return await self._request("GET", "/api/products/myproducts", params=filters.query_params())
