"""CSRF 상수 및 기본값 모듈.

미들웨어, 의존성, 예외 핸들러가 같은 응답을 만들도록 기본 옵션 값, 사유 코드,
거부 메시지를 한곳에 정의합니다.
"""

from enum import StrEnum

# ===== Defaults =====

DEFAULT_COOKIE_NAME = "csrf"
"""CSRF 토큰을 담는 쿠키 이름"""

DEFAULT_SESSION_KEY = "csrf"
"""``{"secret": <str>}``를 저장하는 세션 키"""

X_NO_CSRF = "X-No-Csrf"
"""값이 있으면 검증을 건너뛰는 관례적 헤더"""

DEFAULT_BYPASS_HEADER = X_NO_CSRF.lower()

DEFAULT_IGNORE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
"""상태를 변경하지 않아 검증을 건너뛰는 메서드"""

DEFAULT_ERROR_PAYLOAD: dict[str, bool] = {"success": False}

FORBIDDEN = 403

PENDING_SET_COOKIE = "csrf_set_cookie"
"""``request.state``에 보관되는, 아직 전송되지 않은 토큰 Set-Cookie 헤더 값"""


# ===== Decision vocabulary =====


class Verdict(StrEnum):
    """CSRF 결정의 최종 결과"""

    PASS = "pass"
    REJECT = "reject"


class Exemption(StrEnum):
    """토큰 검증을 건너뛰는지 여부와 그 이유"""

    EXEMPT_BY_HEADER = "exempt_by_header"
    EXEMPT_BY_METHOD = "exempt_by_method"
    EXEMPT_BY_PATH = "exempt_by_path"
    NOT_EXEMPT = "not_exempt"


class RejectReason(StrEnum):
    """거부 사유 코드"""

    TOKEN_MISSING = "token_missing"
    SECRET_MISSING = "secret_missing"
    TOKEN_INVALID = "token_invalid"


REJECT_MESSAGES: dict[RejectReason, str] = {
    RejectReason.TOKEN_MISSING: "Invalid csrf token",
    RejectReason.SECRET_MISSING: "Invalid csrf secret",
    RejectReason.TOKEN_INVALID: "Invalid csrf",
}
