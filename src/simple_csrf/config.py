"""CSRF 미들웨어 설정 모듈.

쿠키 정책과 예외 규칙 등 CSRF 보호에 필요한 설정값을 관리합니다.
환경 변수는 CSRF_ 접두사를 사용하며, 설정은 생성 시점에 한 번만 검증됩니다.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from simple_csrf.constants import (
    DEFAULT_BYPASS_HEADER,
    DEFAULT_COOKIE_NAME,
    DEFAULT_ERROR_PAYLOAD,
    DEFAULT_IGNORE_METHODS,
    DEFAULT_SESSION_KEY,
)
from simple_csrf.exceptions import CSRFConfigurationError


class CookiePolicy(BaseModel):
    """CSRF 토큰 쿠키 속성.

    Starlette ``Response.set_cookie`` 키워드 인자로 그대로 전달되며,
    결정 엔진은 내용을 해석하지 않습니다.

    Attributes:
        path: 쿠키 경로 (기본값: "/")
        max_age: 쿠키 수명 (초 단위)
        expires: 만료 시각 (초 단위 또는 datetime)
        domain: 쿠키 도메인
        secure: HTTPS 전용 여부
        httponly: JavaScript 접근 차단 여부
        samesite: SameSite 속성
    """

    model_config = ConfigDict(frozen=True)

    path: str = "/"
    max_age: int | None = None
    expires: datetime | int | None = None
    domain: str | None = None
    secure: bool = False
    httponly: bool = False
    samesite: Literal["lax", "strict", "none"] | None = "lax"

    def as_cookie_kwargs(self) -> dict[str, Any]:
        return self.model_dump()


def _require_set_like(value: Any, field_name: str) -> Any:
    if isinstance(value, str | bytes) or isinstance(value, Mapping):
        raise ValueError(f"{field_name} option must be a set-like collection of strings")
    return value


class CSRFConfig(BaseSettings):
    """CSRF 보호 설정 클래스.

    Attributes:
        cookie: 토큰 쿠키 정책 (필수)
        ignore_methods: 검증을 건너뛸 HTTP 메서드 (정확히 일치)
        ignore_paths: 검증을 건너뛸 요청 경로 (정확히 일치)
        cookie_name: 토큰 쿠키 이름 (기본값: "csrf")
        error_payload: 거부 응답 본문에 병합할 추가 필드
        debug: 진단 로그 활성화 여부
        bypass_header: 값이 있으면 검증을 건너뛰는 헤더 이름 (빈 문자열이면 비활성화)
        session_key: 세션에 시크릿을 저장할 키
        rotate_secret: 검증 성공 시 시크릿도 새로 발급할지 여부

    Example:
        >>> config = CSRFConfig(cookie=CookiePolicy(path="/", max_age=900))
        >>> config.cookie_name
        'csrf'
    """

    cookie: CookiePolicy
    ignore_methods: frozenset[str] = DEFAULT_IGNORE_METHODS
    ignore_paths: frozenset[str] = frozenset()
    cookie_name: str = Field(default=DEFAULT_COOKIE_NAME, min_length=1)
    error_payload: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_ERROR_PAYLOAD))
    debug: bool = False
    bypass_header: str = DEFAULT_BYPASS_HEADER
    session_key: str = Field(default=DEFAULT_SESSION_KEY, min_length=1)
    rotate_secret: bool = False

    model_config = SettingsConfigDict(
        env_prefix="CSRF_",
        env_nested_delimiter="__",
        extra="forbid",
        frozen=True,
    )

    @field_validator("ignore_methods", "ignore_paths", mode="before")
    @classmethod
    def _validate_set_like(cls, value: Any, info: ValidationInfo) -> Any:
        return _require_set_like(value, info.field_name)

    @field_validator("bypass_header")
    @classmethod
    def _normalize_bypass_header(cls, value: str) -> str:
        # 헤더 이름은 대소문자를 구분하지 않음
        return value.strip().lower()

    @classmethod
    def from_options(cls, **options: Any) -> "CSRFConfig":
        """옵션 키워드로 설정을 생성합니다.

        Raises:
            CSRFConfigurationError: 옵션이 유효하지 않은 경우
        """
        try:
            return cls(**options)
        except ValidationError as e:
            raise CSRFConfigurationError(f"Invalid CSRF configuration: {e}") from e
