"""Contrato del proveedor de sesión.

Por qué Protocol:
- El dispatcher solo necesita "asegurar autenticación", "login" y el saldo
  cacheado; no le importa cómo se obtiene el token.
- Permite sustituir el gestor real por uno falso en tests sin herencia.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from core.domain.models import Failure, Result


@runtime_checkable
class SessionProvider(Protocol):
    """Contrato mínimo de autenticación.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque típicamente harán I/O (HTTP).
    - Nunca lanzan: los fallos vuelven como `Failure`.
    """

    async def ensure_authenticated(self) -> Failure | None:
        """Autentica si hace falta; devuelve el fallo del login o None."""

        ...

    async def login(self) -> Result:
        """Autentica incondicionalmente y devuelve el resumen o el fallo."""

        ...

    def wallet_balance(self) -> tuple[Decimal, str]:
        """Saldo y moneda cacheados del último login exitoso."""

        ...
