"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Facilita normalizar respuestas heterogéneas de la API de Dropi.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal, Union

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict

from core.domain.failures import FailureKind


class Identity(BaseModel):
    """Credenciales configuradas para el login."""

    model_config = ConfigDict(frozen=True)

    principal: str = Field(
        default="",
        description="Email de la cuenta.",
    )
    secret: SecretStr = Field(
        default=SecretStr(""),
        description="Contraseña; `SecretStr` evita que aparezca en repr/dumps.",
    )

    @property
    def complete(self) -> bool:
        return bool(self.principal) and bool(self.secret.get_secret_value())


class WalletSnapshot(BaseModel):
    """Saldo de la billetera tal como lo devuelve el login."""

    model_config = ConfigDict(extra="ignore")

    amount: Decimal = Field(
        default=Decimal("0"),
        description="Saldo disponible.",
    )
    currency: str | None = Field(
        default=None,
        description="Código de moneda (COP, GTQ, MXN...).",
    )


class Session(BaseModel):
    """Estado de autenticación de un proceso.

    Por qué un modelo explícito:
    - El gestor de sesión lo posee y el dispatcher lo consulta; no hay estado
      global de módulo.
    - Se escribe una sola vez (login exitoso) y es de solo lectura después.
    """

    endpoint: str = Field(
        ...,
        min_length=8,
        description="Base URL de la API regional.",
    )
    identity: Identity = Field(
        default_factory=Identity,
        description="Principal/secreto usados para autenticarse.",
    )
    credential: str | None = Field(
        default=None,
        description="Bearer token emitido por el login.",
    )
    wallet: WalletSnapshot | None = Field(
        default=None,
        description="Primera billetera disponible al momento del login.",
    )

    @property
    def authenticated(self) -> bool:
        return bool(self.credential)


class Success(BaseModel):
    """Respuesta decodificada de la API, sin transformar."""

    payload: Any = None

    def envelope(self) -> Any:
        return self.payload


class Failure(BaseModel):
    """Forma uniforme de error.

    `kind` es interno: clasifica el origen del fallo pero no se serializa.
    """

    success: Literal[False] = False
    message: str
    debug: dict[str, Any] | None = None
    kind: FailureKind = Field(default=FailureKind.REMOTE, exclude=True)

    def envelope(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": False, "message": self.message}
        if self.debug is not None:
            out["debug"] = self.debug
        return out


Result = Union[Success, Failure]
