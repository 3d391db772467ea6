"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import LOOPBACK_ADDRESS, build_async_client, resolve_public_ip
from core.config import BASE_URLS, AppSettings, write_user_env_vars
from core.services.dispatcher import create_dispatcher

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


async def _check_login(settings: AppSettings) -> tuple[bool, str]:
    async with create_dispatcher(settings) as dispatcher:
        result = await dispatcher.sessions.login()
    envelope = result.envelope()
    return bool(envelope.get("success")), str(envelope.get("message"))


@app.command()
def run(
    login: bool = typer.Option(False, "--login", help="Also attempt a real login."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="dropi-mcp Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Email", "OK" if settings.email else "MISSING", settings.email or "DROPI_EMAIL not set")
    has_password = bool(settings.password.get_secret_value())
    table.add_row("Password", "OK" if has_password else "MISSING", "configured" if has_password else "DROPI_PASSWORD not set")
    table.add_row("Base URL", "OK", settings.base_url)
    discriminator = settings.brand_discriminator
    table.add_row(
        "White brand id",
        "OK",
        f"{settings.white_brand_id} ({'numeric' if isinstance(discriminator, int) else 'hash'})",
    )
    table.add_row("Browser headers", "OK", "full emulation" if settings.browser_headers else "minimal")

    # Connectivity (best-effort)
    ip = asyncio.run(resolve_public_ip(settings))
    table.add_row("Public IP", "OK" if ip != LOOPBACK_ADDRESS else "FALLBACK", ip)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)

    if login:
        ok_login, detail_login = asyncio.run(_check_login(settings))
        table.add_row("Login", "OK" if ok_login else "FAIL", detail_login)

    _console.print(table)

    if not settings.has_identity:
        _console.print("\n[yellow]Note:[/yellow] run `dropi-mcp doctor setup` to store credentials.")


@app.command()
def setup() -> None:
    """Interactive credentials setup (stores config in the user config .env)."""

    email = typer.prompt("Dropi email").strip()
    password = typer.prompt("Dropi password", hide_input=True, confirmation_prompt=False).strip()
    country = typer.prompt("Country (co/gt/mx)", default="co", show_default=True).strip().lower()
    white_brand_id = typer.prompt("White brand id", default="1", show_default=True).strip()

    if not email or not password:
        raise typer.BadParameter("email and password are required")
    if country not in BASE_URLS:
        raise typer.BadParameter(f"country must be one of: {', '.join(sorted(BASE_URLS))}")

    env_path = write_user_env_vars(
        {
            "DROPI_EMAIL": email,
            "DROPI_PASSWORD": password,
            "DROPI_COUNTRY": country,
            "DROPI_WHITE_BRAND_ID": white_brand_id,
        }
    )

    _console.print(f"[green]Saved Dropi config to:[/green] {env_path}")
