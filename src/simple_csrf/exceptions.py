"""CSRF 예외 클래스 및 전역 핸들러 모듈.

CSRF 보호 설정 및 실행 중 발생하는 예외를 정의하고,
전달된 거부를 렌더링하는 FastAPI 핸들러를 등록합니다.
각 예외는 HTTP 상태 코드에 매핑됩니다.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from simple_csrf.constants import REJECT_MESSAGES, RejectReason


class CSRFError(Exception):
    """simple_csrf 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        status_code: HTTP 상태 코드
    """

    def __init__(
        self,
        message: str = "CSRF protection error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class CSRFConfigurationError(CSRFError, ValueError):
    """유효하지 않은 설정 (생성 시점에 감지)"""

    def __init__(self, message: str = "Invalid CSRF configuration") -> None:
        super().__init__(message=message)


class CSRFValidationError(CSRFError):
    """CSRF 검증 실패 (HTTP 403)

    의존성 모드에서 발생하며, 애플리케이션의 예외 핸들러가 응답을 만듭니다.

    Attributes:
        reason: 거부 사유 코드
        payload: 응답 본문에 병합할 추가 필드
    """

    def __init__(
        self,
        reason: RejectReason,
        message: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.reason = reason
        self.payload = dict(payload or {})
        super().__init__(
            message=message or REJECT_MESSAGES[reason],
            status_code=status.HTTP_403_FORBIDDEN,
        )

    def to_body(self) -> dict[str, Any]:
        return {"message": self.message, "reason": self.reason.value, **self.payload}


class EntropyUnavailableError(CSRFError):
    """OS 난수 소스를 사용할 수 없음"""

    def __init__(self, message: str = "Unable to obtain randomness for CSRF credentials") -> None:
        super().__init__(message=message)


class SessionUnavailableError(CSRFError):
    """요청 스코프에 세션이 없음 (SessionMiddleware 미등록)"""

    def __init__(
        self,
        message: str = "SessionMiddleware must be installed before CSRF protection",
    ) -> None:
        super().__init__(message=message)


async def csrf_exception_handler(request: Request, exc: CSRFValidationError) -> JSONResponse:
    """CSRFValidationError 전역 핸들러

    응답 형식:
    {
        "message": "Invalid csrf token",
        "reason": "token_missing",
        ...error_payload
    }
    """
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def register_exception_handlers(app: FastAPI) -> None:
    """FastAPI 애플리케이션에 CSRF 예외 핸들러 등록"""
    app.add_exception_handler(CSRFValidationError, csrf_exception_handler)
