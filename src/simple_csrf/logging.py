"""CSRF 구조화 로깅 모듈.

structlog 로거를 제공합니다. 렌더러와 레벨 등 출력 설정은 라이브러리를
사용하는 애플리케이션의 ``structlog.configure``를 따릅니다.
시크릿과 토큰 원문은 어떤 로그 이벤트에도 포함하지 않습니다.
"""

from typing import Any

import structlog
from starlette.requests import Request

from simple_csrf.constants import RejectReason


def get_logger(name: str | None = None) -> Any:
    """structlog 로거를 반환합니다.

    Args:
        name: 로거 이름 (보통 __name__)

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("csrf_rejected", reason="token_missing", path="/orders")
    """
    return structlog.get_logger(name)


def log_rejection(logger: Any, request: Request, reason: RejectReason) -> None:
    """CSRF 거부를 보안 이벤트로 기록합니다."""
    logger.warning(
        "csrf_rejected",
        event_type="security",
        method=request.method,
        path=request.url.path,
        reason=reason.value,
    )
