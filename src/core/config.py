"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/MCP) y el gestor de sesión lean config de
  forma consistente.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_URLS: dict[str, str] = {
    "co": "https://api.dropi.co",
    "gt": "https://api.dropi.gt",
    "mx": "https://api.dropi.mx",
}

DEFAULT_CURRENCIES: dict[str, str] = {
    "co": "COP",
    "gt": "GTQ",
    "mx": "MXN",
}

DEFAULT_COUNTRY = "co"

_DIGITS = re.compile(r"[0-9]+")


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dropi-mcp"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dropi-mcp"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dropi-mcp"
    return Path.home() / ".config" / "dropi-mcp"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# dropi-mcp user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def parse_white_brand_id(value: str) -> int | str:
    """El discriminador de marca viaja como número si son solo dígitos, si no como hash."""

    value = value.strip()
    if _DIGITS.fullmatch(value):
        return int(value)
    return value


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DROPI_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    email: str = Field(
        default="",
        description="Email de la cuenta Dropi.",
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Contraseña de la cuenta Dropi (nunca se registra ni se devuelve).",
    )
    country: str = Field(
        default=DEFAULT_COUNTRY,
        description="Despliegue regional: co, gt o mx.",
    )
    api_url: str | None = Field(
        default=None,
        description="Base URL explícita; tiene prioridad sobre `country`.",
    )
    white_brand_id: str = Field(
        default="1",
        min_length=1,
        description="Discriminador de marca: '1' para Colombia, hash para otros despliegues.",
    )
    browser_headers: bool = Field(
        default=True,
        description="Emular el set completo de headers de un navegador.",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request a la API (segundos). None = sin límite.",
    )
    ip_lookup_url: str = Field(
        default="https://api.ipify.org?format=json",
        min_length=8,
        description="Servicio para resolver la IP pública enviada en el login.",
    )
    ip_lookup_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout de la consulta de IP pública (segundos).",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (se escribe siempre a stderr).",
    )

    @property
    def base_url(self) -> str:
        if self.api_url:
            return self.api_url.rstrip("/")
        return BASE_URLS.get(self.country.lower(), BASE_URLS[DEFAULT_COUNTRY])

    @property
    def default_currency(self) -> str:
        return DEFAULT_CURRENCIES.get(self.country.lower(), DEFAULT_CURRENCIES[DEFAULT_COUNTRY])

    @property
    def brand_discriminator(self) -> int | str:
        return parse_white_brand_id(self.white_brand_id)

    @property
    def has_identity(self) -> bool:
        return bool(self.email) and bool(self.password.get_secret_value())
