"""simple_csrf: Double Submit Cookie CSRF 보호 라이브러리.

세션에 저장된 서버 측 시크릿과 쿠키로 전달되는 토큰을 묶어
상태 변경 요청을 Cross-Site Request Forgery로부터 보호합니다.

주요 구성 요소:
    - CSRFMiddleware: 검증 실패 시 403 JSON을 직접 반환하는 미들웨어
    - CSRFProtect: 검증 실패를 예외 핸들러로 전달하는 FastAPI 의존성
    - CSRFCookieMiddleware: CSRFProtect가 발급한 토큰 쿠키를 최종 응답에 추가
    - CSRFConfig, CookiePolicy: 설정 관리
    - CSRFGuard: 요청별 결정 엔진
    - TokenCodec: 시크릿/토큰 생성 및 검증

Example:
    >>> from fastapi import FastAPI
    >>> from starlette.middleware.sessions import SessionMiddleware
    >>> from simple_csrf import CookiePolicy, CSRFConfig, CSRFMiddleware
    >>>
    >>> app = FastAPI()
    >>> config = CSRFConfig(cookie=CookiePolicy(path="/", max_age=60 * 15))
    >>> app.add_middleware(CSRFMiddleware, config=config)
    >>> app.add_middleware(SessionMiddleware, secret_key="secret")
"""

from simple_csrf.config import CookiePolicy, CSRFConfig
from simple_csrf.constants import X_NO_CSRF, Exemption, RejectReason, Verdict
from simple_csrf.dependencies import CSRFProtect, get_csrf_token
from simple_csrf.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from simple_csrf.engine import CSRFGuard
from simple_csrf.exceptions import (
    CSRFConfigurationError,
    CSRFError,
    CSRFValidationError,
    EntropyUnavailableError,
    SessionUnavailableError,
    register_exception_handlers,
)
from simple_csrf.middleware import CSRFCookieMiddleware, CSRFMiddleware
from simple_csrf.models import CredentialPair, CSRFOutcome, DiagnosticsEvent
from simple_csrf.tokens import TokenCodec

__all__ = [
    "CSRFMiddleware",
    "CSRFCookieMiddleware",
    "CSRFProtect",
    "CSRFConfig",
    "CookiePolicy",
    "CSRFGuard",
    "TokenCodec",
    "CredentialPair",
    "CSRFOutcome",
    "DiagnosticsEvent",
    "DiagnosticsSink",
    "LoggingDiagnosticsSink",
    "Exemption",
    "RejectReason",
    "Verdict",
    "X_NO_CSRF",
    "get_csrf_token",
    "register_exception_handlers",
    "CSRFError",
    "CSRFConfigurationError",
    "CSRFValidationError",
    "EntropyUnavailableError",
    "SessionUnavailableError",
]
