"""Operation dispatch: the single entry point used by the host boundary.

`invoke(name, arguments)` looks the operation up in the fixed catalog,
validates the argument bag against the operation's model, authenticates
lazily and routes to the matching remote call. Whatever happens, the caller
gets back exactly one envelope: the raw decoded payload on success or
`{success: false, message, debug?}` on failure. Nothing is raised past this
module.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.dropi_api import DropiApi
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain import catalog
from core.domain.arguments import STATUS_CANCELLED, STATUS_GUIDE_GENERATED
from core.domain.catalog import CATALOG, OPERATIONS, OperationDescriptor
from core.domain.failures import FailureKind
from core.domain.models import Failure, Result, Success
from core.interfaces.session import SessionProvider
from core.services.session_manager import IpResolver, SessionManager

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Result]]


class OperationDispatcher:
    """Enruta operaciones del catálogo a llamadas remotas.

    Por qué inyección de dependencias:
    - La sesión y el cliente HTTP se construyen fuera y se pasan aquí, de modo
      que los tests sustituyen la API remota con un transporte falso.
    """

    def __init__(
        self,
        sessions: SessionProvider,
        api: DropiApi,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.sessions = sessions
        self._api = api
        self._client = client
        self._handlers: dict[str, Handler] = {
            catalog.GET_DEPARTMENTS: lambda a: api.departments(),
            catalog.GET_CITIES: lambda a: api.cities(a.department_id, a.rate_type),
            catalog.CREATE_ORDER: api.create_order,
            catalog.GET_ORDER: lambda a: api.order(a.order_id),
            catalog.GET_ORDER_BY_GUIDE: lambda a: api.order_by_guide(a.guide_number),
            catalog.GET_ORDERS: api.orders,
            catalog.UPDATE_ORDER_STATUS: lambda a: api.update_order_status(a.order_id, a.status),
            catalog.GENERATE_GUIDE: lambda a: api.update_order_status(a.order_id, STATUS_GUIDE_GENERATED),
            catalog.GENERATE_GUIDES_MASSIVE: lambda a: api.update_order_status(a.order_ids, STATUS_GUIDE_GENERATED),
            catalog.CANCEL_ORDER: lambda a: api.update_order_status(a.order_id, STATUS_CANCELLED),
            catalog.GET_WALLET_BALANCE: self._wallet_balance,
            catalog.GET_WALLET_HISTORY: api.wallet_history,
            catalog.GET_TRANSPORT_COMPANIES: lambda a: api.transport_companies(),
            catalog.GET_SHIPPING_QUOTE: api.shipping_quote,
            catalog.GET_PRODUCTS: api.products,
        }

    def list_operations(self) -> list[OperationDescriptor]:
        return list(CATALOG)

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Ejecuta `name` y devuelve siempre el envelope uniforme."""

        result = await self.dispatch(name, arguments)
        return result.envelope()

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> Result:
        descriptor = OPERATIONS.get(name)
        if descriptor is None:
            logger.warning("Unknown operation requested: %s", name)
            return Failure(
                message=f"Operación desconocida: {name}",
                debug={"operation": name},
                kind=FailureKind.PROTOCOL,
            )

        arguments = arguments or {}
        keys = sorted(str(key) for key in arguments) if isinstance(arguments, dict) else []
        logger.info("%s called with: %s", name, ", ".join(keys) or "-")
        try:
            args = descriptor.arguments.model_validate(arguments)
        except ValidationError as exc:
            return Failure(
                message=f"Argumentos inválidos para {name}",
                debug={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
                kind=FailureKind.VALIDATION,
            )

        try:
            if name == catalog.LOGIN:
                return await self.sessions.login()

            failure = await self.sessions.ensure_authenticated()
            if failure is not None:
                return failure
            return await self._handlers[name](args)
        except Exception as exc:
            logger.exception("%s failed unexpectedly", name)
            return Failure(message=str(exc) or type(exc).__name__, kind=FailureKind.TRANSPORT)

    async def _wallet_balance(self, _args: Any) -> Result:
        balance, currency = self.sessions.wallet_balance()
        return Success(payload={"success": True, "balance": balance, "currency": currency})

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> OperationDispatcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_dispatcher(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    ip_resolver: IpResolver | None = None,
) -> OperationDispatcher:
    """Arma cliente HTTP, API, sesión y dispatcher a partir de la configuración."""

    settings = settings or AppSettings()
    client = build_async_client(settings, transport=transport)
    api = DropiApi(client)
    sessions = SessionManager(settings, client, api=api, ip_resolver=ip_resolver)
    return OperationDispatcher(sessions, api, client=client)
