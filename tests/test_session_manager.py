"""Tests for the login state machine."""

from __future__ import annotations

import httpx
import pytest

from adapters.http_client import build_async_client
from conftest import PUBLIC_IP, TOKEN, CountingResolver, FakeDropi, make_settings
from core.domain.failures import FailureKind
from core.domain.models import Failure, Success
from core.services.session_manager import SessionManager


def _manager(settings, fake: FakeDropi, resolver: CountingResolver | None = None) -> SessionManager:
    client = build_async_client(settings, transport=fake.transport)
    return SessionManager(settings, client, ip_resolver=resolver or CountingResolver())


@pytest.mark.asyncio
async def test_login_stores_credential_wallet_and_bearer_header(settings, fake) -> None:
    manager = _manager(settings, fake)

    result = await manager.login()

    assert isinstance(result, Success)
    assert result.payload["message"] == "Login exitoso"
    assert result.payload["currency"] == "COP"
    assert result.payload["user"] == "Ops"
    assert manager.session.credential == TOKEN
    assert manager.session.wallet is not None
    assert manager._client.headers["Authorization"] == f"Bearer {TOKEN}"


@pytest.mark.asyncio
async def test_login_payload(settings, fake) -> None:
    manager = _manager(settings, fake)

    await manager.login()

    assert FakeDropi.body(fake.logins[0]) == {
        "email": "ops@example.com",
        "password": "s3cret-pass",
        "white_brand_id": 1,
        "brand": "",
        "otp": None,
        "with_cdc": False,
        "ipAddress": PUBLIC_IP,
    }


@pytest.mark.asyncio
async def test_login_sends_hash_discriminator_as_string(fake) -> None:
    manager = _manager(make_settings(white_brand_id="df3e6b0bb66ceaadca4f84cbc371fd66e04d20fe51fc414da8d1b84d31d178de"), fake)

    await manager.login()

    assert FakeDropi.body(fake.logins[0])["white_brand_id"] == (
        "df3e6b0bb66ceaadca4f84cbc371fd66e04d20fe51fc414da8d1b84d31d178de"
    )


@pytest.mark.asyncio
async def test_wallet_falls_back_to_single_wallet_field(settings, fake) -> None:
    fake.on("POST", "/api/login", json={
        "isSuccess": True,
        "token": TOKEN,
        "wallet": {"amount": "1200.75", "currency": "GTQ"},
        "objects": {"name": "Tienda"},
    })
    manager = _manager(settings, fake)

    result = await manager.login()

    assert str(result.payload["wallet_balance"]) == "1200.75"
    assert result.payload["currency"] == "GTQ"
    assert result.payload["user"] == "Tienda"


@pytest.mark.asyncio
async def test_remote_rejection_does_not_touch_session(settings, fake) -> None:
    fake.on("POST", "/api/login", json={"isSuccess": False, "message": "invalid credentials"})
    manager = _manager(settings, fake)

    result = await manager.login()

    assert isinstance(result, Failure)
    envelope = result.envelope()
    assert envelope["success"] is False
    assert envelope["message"] == "invalid credentials"
    assert envelope["debug"]["ip_used"] == PUBLIC_IP
    assert manager.session.credential is None
    assert manager.session.wallet is None
    assert "Authorization" not in manager._client.headers


@pytest.mark.asyncio
async def test_rejection_without_message_uses_generic_text(settings, fake) -> None:
    fake.on("POST", "/api/login", json={"isSuccess": False})
    manager = _manager(settings, fake)

    result = await manager.login()

    assert result.envelope()["message"] == "Error en login"


@pytest.mark.asyncio
async def test_http_error_on_login_never_leaks_secret(settings, fake) -> None:
    fake.on("POST", "/api/login", status=401, json={"message": "Usuario bloqueado"})
    manager = _manager(settings, fake)

    result = await manager.login()

    envelope = result.envelope()
    assert envelope["message"] == "Usuario bloqueado"
    assert envelope["debug"]["error_detail"] == 401
    assert envelope["debug"]["password_received"] == "***configurado***"
    assert "s3cret-pass" not in repr(envelope)
    assert not manager.authenticated


@pytest.mark.asyncio
async def test_network_error_on_login(settings, fake) -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    fake.on_call("POST", "/api/login", boom)
    manager = _manager(settings, fake)

    result = await manager.login()

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.TRANSPORT
    assert result.message == "name resolution failed"
    assert result.debug["error_detail"] == "network error"
    assert "s3cret-pass" not in repr(result.envelope())


@pytest.mark.asyncio
async def test_missing_identity_makes_no_request(fake) -> None:
    resolver = CountingResolver()
    manager = _manager(make_settings(password=""), fake, resolver)

    result = await manager.ensure_authenticated()

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.CONFIGURATION
    assert result.debug["email_received"] == "ops@example.com"
    assert result.debug["password_received"] == "(vacío)"
    assert fake.requests == []
    assert resolver.calls == 0


@pytest.mark.asyncio
async def test_failed_login_is_attempted_again_on_next_call(settings, fake) -> None:
    fake.on("POST", "/api/login", json={"isSuccess": False, "message": "invalid credentials"})
    manager = _manager(settings, fake)

    assert await manager.ensure_authenticated() is not None
    assert await manager.ensure_authenticated() is not None

    assert len(fake.logins) == 2


@pytest.mark.asyncio
async def test_ensure_authenticated_is_noop_once_logged_in(settings, fake) -> None:
    manager = _manager(settings, fake)

    assert await manager.ensure_authenticated() is None
    assert await manager.ensure_authenticated() is None

    assert len(fake.logins) == 1


def test_session_repr_hides_secret(settings, fake) -> None:
    manager = _manager(settings, fake)
    assert "s3cret-pass" not in repr(manager.session)
    assert "s3cret-pass" not in manager.session.model_dump_json()
