"""CSRF 미들웨어 모듈.

Starlette/FastAPI 애플리케이션에 Double Submit Cookie 기반 CSRF 보호를 추가합니다.
세션 시크릿과 쿠키 토큰을 검증하고, 실패 시 403 JSON 응답을 직접 반환합니다.
SessionMiddleware가 이 미들웨어보다 바깥쪽에 등록되어 있어야 합니다.
"""

from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from simple_csrf.config import CSRFConfig
from simple_csrf.constants import PENDING_SET_COOKIE
from simple_csrf.diagnostics import DiagnosticsSink
from simple_csrf.engine import CSRFGuard
from simple_csrf.exceptions import CSRFConfigurationError
from simple_csrf.logging import get_logger, log_rejection
from simple_csrf.tokens import TokenCodec

logger = get_logger(__name__)


def build_guard(
    config: CSRFConfig | None,
    codec: TokenCodec | None,
    diagnostics: DiagnosticsSink | None,
    options: dict[str, Any],
) -> CSRFGuard:
    """설정 객체 또는 옵션 키워드로부터 결정 엔진을 생성합니다.

    Raises:
        CSRFConfigurationError: 설정이 유효하지 않은 경우
    """
    if config is None:
        config = CSRFConfig.from_options(**options)
    elif options:
        raise CSRFConfigurationError("Pass either a CSRFConfig or keyword options, not both")
    elif not isinstance(config, CSRFConfig):
        raise CSRFConfigurationError(
            f"config must be a CSRFConfig instance, got {type(config).__name__}"
        )
    return CSRFGuard(config, codec=codec, diagnostics=diagnostics)


class CSRFMiddleware(BaseHTTPMiddleware):
    """CSRF 보호 미들웨어.

    첫 요청에는 시크릿과 토큰을 발급하고, 이후 상태 변경 요청에서는
    세션 시크릿으로 쿠키 토큰을 검증한 뒤 토큰을 회전합니다.

    Args:
        app: ASGI 애플리케이션 인스턴스
        config: CSRF 설정 (None이면 options로 생성)
        codec: 토큰 코덱 (기본값 사용 시 None)
        diagnostics: 진단 싱크 (기본값 사용 시 None)
        **options: CSRFConfig 필드 (config 대신 사용)

    Example:
        >>> from fastapi import FastAPI
        >>> from starlette.middleware.sessions import SessionMiddleware
        >>> from simple_csrf import CookiePolicy, CSRFMiddleware
        >>>
        >>> app = FastAPI()
        >>> app.add_middleware(CSRFMiddleware, cookie=CookiePolicy(path="/", max_age=900))
        >>> app.add_middleware(SessionMiddleware, secret_key="change-me")
    """

    def __init__(
        self,
        app: Any,
        config: CSRFConfig | None = None,
        *,
        codec: TokenCodec | None = None,
        diagnostics: DiagnosticsSink | None = None,
        **options: Any,
    ) -> None:
        super().__init__(app)
        self.guard = build_guard(config, codec, diagnostics, options)
        self.config = self.guard.config

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """미들웨어 요청 처리 로직.

        Args:
            request: 요청 객체
            call_next: 다음 미들웨어/핸들러 호출 함수

        Returns:
            HTTP 응답 객체 (검증 실패 시 403)
        """
        outcome = self.guard.check(request)

        if not outcome.passed:
            log_rejection(logger, request, outcome.reason)
            return JSONResponse(
                status_code=outcome.status_code,
                content=outcome.error_body(self.config.error_payload),
            )

        response = await call_next(request)

        if outcome.issued is not None:
            self.guard.store.write_token(response, outcome.issued.token)

        return response


class CSRFCookieMiddleware:
    """CSRFProtect가 발급한 토큰 쿠키를 최종 응답에 추가하는 ASGI 미들웨어.

    라우트가 ``HTMLResponse`` 등 응답 객체를 직접 반환하면 FastAPI는 의존성에
    주입된 응답의 헤더를 복사하지 않아 새 토큰이 전달되지 않습니다.
    이 미들웨어는 응답 시작 시점에 같은 이름의 Set-Cookie가 없을 때만 추가합니다.
    CSRFProtect를 사용하는 애플리케이션에 함께 등록합니다.

    Example:
        >>> app.add_middleware(CSRFCookieMiddleware)
        >>> app.add_middleware(SessionMiddleware, secret_key="change-me")
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})

        async def send_with_cookie(message: Message) -> None:
            if message["type"] == "http.response.start":
                pending = state.get(PENDING_SET_COOKIE)
                if pending is not None:
                    headers = MutableHeaders(scope=message)
                    prefix = pending.partition("=")[0] + "="
                    if not any(v.startswith(prefix) for v in headers.getlist("set-cookie")):
                        headers.append("set-cookie", pending)
            await send(message)

        await self.app(scope, receive, send_with_cookie)
