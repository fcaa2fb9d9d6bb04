"""pytest fixtures."""

from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from httpx import ASGITransport, AsyncClient
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request as StarletteRequest

from simple_csrf import (
    CookiePolicy,
    CSRFConfig,
    CSRFCookieMiddleware,
    CSRFGuard,
    CSRFMiddleware,
    CSRFProtect,
    TokenCodec,
    get_csrf_token,
    register_exception_handlers,
)

SESSION_SECRET_KEY = "test-session-signing-key"
WEBHOOK_PATH = "/webhooks/payments"


# ===== Core fixtures =====


@pytest.fixture
def cookie_policy() -> CookiePolicy:
    """Cookie policy used by the original example app (15 minutes)."""
    return CookiePolicy(path="/", max_age=60 * 15)


@pytest.fixture
def csrf_config(cookie_policy: CookiePolicy) -> CSRFConfig:
    """Default CSRF configuration with one exempt path."""
    return CSRFConfig(cookie=cookie_policy, ignore_paths={WEBHOOK_PATH})


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec()


@pytest.fixture
def diagnostics_sink() -> MagicMock:
    return MagicMock()


@pytest.fixture
def guard(csrf_config: CSRFConfig, codec: TokenCodec, diagnostics_sink: MagicMock) -> CSRFGuard:
    return CSRFGuard(csrf_config, codec=codec, diagnostics=diagnostics_sink)


@pytest.fixture
def make_request() -> Callable[..., StarletteRequest]:
    """Build a real Starlette Request from an ASGI scope.

    ``session=None`` leaves the scope without a session, as if no session
    middleware ran.
    """

    def _make(
        method: str = "POST",
        path: str = "/",
        cookies: dict[str, str] | None = None,
        headers: list[tuple[str, str]] | None = None,
        session: dict[str, Any] | None = None,
    ) -> StarletteRequest:
        raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers or []]
        if cookies:
            cookie_value = "; ".join(f"{name}={value}" for name, value in cookies.items())
            raw_headers.append((b"cookie", cookie_value.encode("latin-1")))
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "root_path": "",
            "scheme": "http",
            "query_string": b"",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "state": {},
        }
        if session is not None:
            scope["session"] = session
        return StarletteRequest(scope)

    return _make


@pytest.fixture
def cookie_header() -> Callable[..., dict[str, str]]:
    """Explicit Cookie header; overrides the client's cookie jar for one request."""

    def _header(**cookies: str) -> dict[str, str]:
        return {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}

    return _header


# ===== Application fixtures =====


def _add_routes(router: APIRouter | FastAPI) -> None:
    @router.get("/")
    async def form(token: str | None = Depends(get_csrf_token)) -> dict[str, Any]:
        return {"csrf": token}

    @router.get("/form")
    async def form_page(token: str | None = Depends(get_csrf_token)) -> HTMLResponse:
        return HTMLResponse(f'<input type="hidden" name="csrf" value="{token}">')

    @router.post("/")
    async def submit(token: str | None = Depends(get_csrf_token)) -> dict[str, Any]:
        return {"ok": True, "csrf": token}

    @router.post(WEBHOOK_PATH)
    async def webhook() -> dict[str, Any]:
        return {"received": True}

    @router.get("/debug/session")
    async def session_state(request: Request) -> dict[str, Any]:
        return {"secret": request.session.get("csrf", {}).get("secret")}


@pytest.fixture
def middleware_app(csrf_config: CSRFConfig) -> FastAPI:
    """App protected by CSRFMiddleware (respond mode)."""
    app = FastAPI()
    _add_routes(app)
    app.add_middleware(CSRFMiddleware, config=csrf_config)
    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)
    return app


@pytest.fixture
def dependency_app(csrf_config: CSRFConfig) -> FastAPI:
    """App protected by the CSRFProtect dependency (forward mode)."""
    app = FastAPI()
    register_exception_handlers(app)
    router = APIRouter(dependencies=[Depends(CSRFProtect(csrf_config))])
    _add_routes(router)
    app.include_router(router)
    app.add_middleware(CSRFCookieMiddleware)
    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)
    return app


@pytest_asyncio.fixture(scope="function")
async def client(middleware_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Test HTTP client against the middleware-protected app."""
    async with AsyncClient(
        transport=ASGITransport(app=middleware_app),
        base_url="http://testserver",
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def dependency_client(dependency_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Test HTTP client against the dependency-protected app."""
    async with AsyncClient(
        transport=ASGITransport(app=dependency_app),
        base_url="http://testserver",
    ) as ac:
        yield ac
