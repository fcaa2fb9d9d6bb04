"""FastAPI 의존성 주입 헬퍼 모듈.

미들웨어 대신 라우트 단위로 CSRF 보호를 적용하는 의존성을 제공합니다.
검증 실패는 CSRFValidationError로 전달되어 애플리케이션의 예외 핸들러가 응답을 만듭니다.

Example:
    >>> from fastapi import APIRouter, Depends
    >>> from simple_csrf import CookiePolicy, CSRFCookieMiddleware, CSRFProtect, get_csrf_token
    >>>
    >>> app.add_middleware(CSRFCookieMiddleware)
    >>> csrf_protect = CSRFProtect(cookie=CookiePolicy(path="/"))
    >>> router = APIRouter(dependencies=[Depends(csrf_protect)])
    >>>
    >>> @router.get("/form")
    >>> async def form(token: str | None = Depends(get_csrf_token)):
    ...     return {"csrf": token}
"""

from typing import Any

from fastapi import Request, Response

from simple_csrf.config import CSRFConfig
from simple_csrf.constants import PENDING_SET_COOKIE
from simple_csrf.diagnostics import DiagnosticsSink
from simple_csrf.exceptions import CSRFValidationError
from simple_csrf.logging import get_logger, log_rejection
from simple_csrf.middleware import build_guard
from simple_csrf.models import CSRFOutcome
from simple_csrf.tokens import TokenCodec

logger = get_logger(__name__)


class CSRFProtect:
    """라우트 단위 CSRF 검증 의존성.

    ``Depends(csrf_protect)``로 사용하며, 통과 시 결정 결과를 반환하고
    새 토큰이 발급되면 응답 쿠키에 설정합니다.
    라우트가 응답 객체를 직접 반환해도 쿠키가 전달되도록 CSRFCookieMiddleware를 함께 등록합니다.
    같은 요청에 CSRFMiddleware와 함께 적용하면 토큰이 두 번 회전하므로 둘 중 하나만 사용합니다.

    Args:
        config: CSRF 설정 (None이면 options로 생성)
        codec: 토큰 코덱
        diagnostics: 진단 싱크
        **options: CSRFConfig 필드
    """

    def __init__(
        self,
        config: CSRFConfig | None = None,
        *,
        codec: TokenCodec | None = None,
        diagnostics: DiagnosticsSink | None = None,
        **options: Any,
    ) -> None:
        self.guard = build_guard(config, codec, diagnostics, options)
        self.config = self.guard.config

    async def __call__(self, request: Request, response: Response) -> CSRFOutcome:
        """요청을 검증합니다.

        Raises:
            CSRFValidationError: 토큰이 없거나 유효하지 않은 경우
        """
        outcome = self.guard.check(request)

        if outcome.reason is not None:
            log_rejection(logger, request, outcome.reason)
            raise CSRFValidationError(outcome.reason, payload=self.config.error_payload)

        if outcome.issued is not None:
            self.guard.store.write_token(response, outcome.issued.token)
            setattr(
                request.state,
                PENDING_SET_COOKIE,
                self.guard.store.render_cookie(outcome.issued.token),
            )

        return outcome


async def get_csrf_token(request: Request) -> str | None:
    """이번 요청 주기에서 유효한 CSRF 토큰을 반환합니다.

    새 토큰이 발급된 요청에서는 아직 요청 쿠키에 반영되지 않은 새 토큰을 반환합니다.
    CSRF 검증을 거치지 않은 요청이면 None을 반환합니다.
    """
    return getattr(request.state, "csrf_token", None)
