"""CSRF 결정 진단 모듈.

진단 싱크는 결정 엔진의 종료 전이마다 이벤트 하나를 받으며, 결정에는 영향을 주지 않습니다.
"""

import hashlib
from typing import Any, Protocol

from simple_csrf.logging import get_logger
from simple_csrf.models import CredentialPair, DiagnosticsEvent

EMPTY = "Empty"


class DiagnosticsSink(Protocol):
    def __call__(self, event: DiagnosticsEvent) -> None: ...


def fingerprint(value: str | None) -> str:
    """자격 증명 값의 짧은 비가역 식별자."""
    if not value:
        return EMPTY
    return hashlib.sha256(value.encode("utf-8", "surrogatepass")).hexdigest()[:12]


def describe(pair: CredentialPair) -> dict[str, str]:
    return {"secret": fingerprint(pair.secret), "token": fingerprint(pair.token)}


class LoggingDiagnosticsSink:
    """각 결정을 structlog debug 레벨로 기록하는 싱크.

    시크릿과 토큰 원문 대신 지문만 기록하므로, 두 로그를 비교해 값의 변경 여부만 알 수 있습니다.
    """

    def __init__(self, logger: Any | None = None) -> None:
        self.logger = logger or get_logger("simple_csrf.diagnostics")

    def __call__(self, event: DiagnosticsEvent) -> None:
        self.logger.debug(
            "csrf_debug",
            verdict=event.verdict.value,
            exemption=event.exemption.value,
            reason=event.reason.value if event.reason else None,
            rotated=event.rotated,
            before=describe(event.before),
            after=describe(event.after),
        )
