"""Session lifecycle: lazy login and bearer credential caching.

The manager owns the `Session` value. It is written once, by the first
successful login, and read-only afterwards: there is no expiry tracking and
no re-login when the remote service later rejects the token. A rejected
token surfaces as an ordinary operation failure.

Two invocations that both observe "no credential" may log in concurrently.
Both logins are equivalent and the last one to finish wins; no lock is taken.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.dropi_api import DropiApi
from adapters.http_client import resolve_public_ip
from core.config import AppSettings
from core.domain.failures import FailureKind
from core.domain.models import Failure, Identity, Result, Session, Success, WalletSnapshot

logger = logging.getLogger(__name__)

EMPTY = "(vacío)"
MASKED = "***configurado***"

IpResolver = Callable[[], Awaitable[str]]


def _first_wallet(data: dict[str, Any]) -> WalletSnapshot | None:
    wallets = data.get("wallets")
    raw = wallets[0] if isinstance(wallets, list) and wallets else data.get("wallet")
    if not isinstance(raw, dict):
        return None
    try:
        return WalletSnapshot.model_validate(raw)
    except ValidationError:
        logger.warning("Ignoring unparseable wallet in login response: %r", raw)
        return None


def _user_name(data: dict[str, Any]) -> str | None:
    for key in ("user", "objects"):
        value = data.get(key)
        if isinstance(value, dict) and value.get("name"):
            return value["name"]
    return None


class SessionManager:
    """Autenticación perezosa contra `/api/login`.

    Por qué una clase y no estado de módulo:
    - El dispatcher recibe la sesión por inyección; los tests pueden usar un
      transporte falso y observar exactamente cuántos logins ocurren.
    """

    def __init__(
        self,
        settings: AppSettings,
        client: httpx.AsyncClient,
        *,
        api: DropiApi | None = None,
        ip_resolver: IpResolver | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._api = api or DropiApi(client)
        self._ip_resolver = ip_resolver or (lambda: resolve_public_ip(settings))
        self.session = Session(
            endpoint=settings.base_url,
            identity=Identity(principal=settings.email, secret=settings.password),
        )

    @property
    def authenticated(self) -> bool:
        return self.session.authenticated

    async def ensure_authenticated(self) -> Failure | None:
        """Hace login si no hay credencial; devuelve el fallo del login, si lo hubo."""

        if self.session.authenticated:
            return None
        result = await self.login()
        if isinstance(result, Failure):
            return result
        return None

    def _debug(self, **extra: Any) -> dict[str, Any]:
        identity = self.session.identity
        debug: dict[str, Any] = {
            "email_received": identity.principal or EMPTY,
            "password_received": MASKED if identity.secret.get_secret_value() else EMPTY,
            "white_brand_id": self._settings.white_brand_id,
            "base_url": self.session.endpoint,
        }
        debug.update(extra)
        return debug

    async def login(self) -> Result:
        """Autentica y guarda token + billetera.

        Devuelve el resumen del login (`success: true`) o un `Failure`. El
        secreto nunca aparece en el resultado: solo un indicador de presencia.
        """

        identity = self.session.identity
        if not identity.complete:
            logger.warning("Login skipped: DROPI_EMAIL/DROPI_PASSWORD not configured")
            return Failure(
                message="Credenciales no configuradas",
                debug=self._debug(
                    hint="Verifica que DROPI_EMAIL y DROPI_PASSWORD estén en las variables de entorno del MCP",
                ),
                kind=FailureKind.CONFIGURATION,
            )

        ip_address = await self._ip_resolver()
        payload = {
            "email": identity.principal,
            "password": identity.secret.get_secret_value(),
            "white_brand_id": self._settings.brand_discriminator,
            "brand": "",
            "otp": None,
            "with_cdc": False,
            "ipAddress": ip_address,
        }
        logger.info("Logging in as %s against %s", identity.principal, self.session.endpoint)
        result = await self._api.authenticate(payload)

        if isinstance(result, Failure):
            status = (result.debug or {}).get("status_code")
            return Failure(
                message=result.message,
                debug=self._debug(
                    error_detail=status or "network error",
                    error_data=(result.debug or {}).get("error_data"),
                ),
                kind=result.kind,
            )

        data = result.payload if isinstance(result.payload, dict) else {}
        if not data.get("isSuccess") or not data.get("token"):
            logger.warning("Login rejected for %s", identity.principal)
            debug = self._debug(ip_used=ip_address)
            debug.pop("password_received")
            return Failure(
                message=data.get("message") or "Error en login",
                debug=debug,
                kind=FailureKind.REMOTE,
            )

        wallet = _first_wallet(data)
        self.session = self.session.model_copy(update={"credential": data["token"], "wallet": wallet})
        self._client.headers["Authorization"] = f"Bearer {data['token']}"
        logger.info("Login OK for %s", identity.principal)

        balance, currency = self.wallet_balance()
        return Success(
            payload={
                "success": True,
                "message": "Login exitoso",
                "wallet_balance": balance,
                "currency": currency,
                "user": _user_name(data),
            }
        )

    def wallet_balance(self) -> tuple[Decimal, str]:
        """Saldo cacheado del login; 0 y la moneda regional si no hubo billetera."""

        wallet = self.session.wallet
        amount = wallet.amount if wallet else Decimal("0")
        currency = (wallet.currency if wallet else None) or self._settings.default_currency
        return amount, currency
