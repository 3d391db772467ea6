"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers (mínimos o emulación de navegador).
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings

logger = logging.getLogger(__name__)

LOOPBACK_ADDRESS = "127.0.0.1"

_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def app_origin(base_url: str) -> str:
    """Origen del frontend web correspondiente a una API (`api.` -> `app.`)."""

    return base_url.rstrip("/").replace("api.", "app.", 1)


def build_headers(settings: AppSettings) -> dict[str, str]:
    headers: dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json, text/plain, */*",
    }
    if not settings.browser_headers:
        return headers

    origin = app_origin(settings.base_url)
    headers.update(
        {
            "Accept-Language": "es-ES,es;q=0.9,en;q=0.8",
            "Accept-Encoding": "gzip, deflate, br",
            "Origin": origin,
            "Referer": origin + "/",
            "User-Agent": _BROWSER_USER_AGENT,
            "sec-ch-ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
            "sec-ch-ua-mobile": "?0",
            "sec-ch-ua-platform": '"Windows"',
            "Sec-Fetch-Dest": "empty",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Site": "same-site",
        }
    )
    return headers


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea el `httpx.AsyncClient` compartido por sesión y operaciones.

    Por qué un builder:
    - Centraliza base URL/headers para que todas las operaciones se comporten igual.
    - El header `Authorization` se agrega después, al autenticarse.
    """

    settings = settings or AppSettings()
    headers = build_headers(settings)
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )


async def resolve_public_ip(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """IP pública para el payload de login; cualquier fallo devuelve loopback."""

    settings = settings or AppSettings()
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.ip_lookup_timeout_seconds),
            transport=transport,
        ) as client:
            resp = await client.get(settings.ip_lookup_url)
        resp.raise_for_status()
        ip = resp.json().get("ip")
        if isinstance(ip, str) and ip:
            return ip
    except Exception as exc:
        logger.debug("IP lookup failed, using %s: %s", LOOPBACK_ADDRESS, exc)
        return LOOPBACK_ADDRESS
    logger.debug("IP lookup returned no address, using %s", LOOPBACK_ADDRESS)
    return LOOPBACK_ADDRESS
