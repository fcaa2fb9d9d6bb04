"""CSRF 자격 증명 저장소 모듈.

서버 측 시크릿은 세션에, 클라이언트 측 토큰은 쿠키에 읽고 씁니다.
여기서는 값을 검증하지 않습니다.
"""

from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from simple_csrf.config import CookiePolicy, CSRFConfig
from simple_csrf.exceptions import SessionUnavailableError

SECRET_FIELD = "secret"


class CredentialStore:
    """세션/쿠키 기반 CSRF 자격 증명 접근자.

    Args:
        session_key: ``{"secret": <str>}``를 저장하는 세션 키
        cookie_name: 토큰 쿠키 이름
        cookie: 토큰 쿠키 작성 시 적용할 속성
    """

    def __init__(self, session_key: str, cookie_name: str, cookie: CookiePolicy) -> None:
        self.session_key = session_key
        self.cookie_name = cookie_name
        self.cookie = cookie

    @classmethod
    def from_config(cls, config: CSRFConfig) -> "CredentialStore":
        return cls(
            session_key=config.session_key,
            cookie_name=config.cookie_name,
            cookie=config.cookie,
        )

    def _session(self, request: Request) -> dict[str, Any]:
        if "session" not in request.scope:
            raise SessionUnavailableError()
        return request.session

    def read_secret(self, request: Request) -> str | None:
        entry = self._session(request).get(self.session_key)
        if not isinstance(entry, dict):
            return None
        secret = entry.get(SECRET_FIELD)
        return secret if isinstance(secret, str) and secret else None

    def write_secret(self, request: Request, secret: str) -> None:
        self._session(request)[self.session_key] = {SECRET_FIELD: secret}

    def read_token(self, request: Request) -> str | None:
        return request.cookies.get(self.cookie_name) or None

    def write_token(self, response: Response, token: str) -> None:
        response.set_cookie(self.cookie_name, token, **self.cookie.as_cookie_kwargs())

    def render_cookie(self, token: str) -> str:
        """``write_token``과 동일한 Set-Cookie 헤더 값을 반환합니다.

        응답 객체가 아직 없는 ASGI 계층에서 쿠키를 추가할 때 사용합니다.
        """
        scratch = Response()
        self.write_token(scratch, token)
        return scratch.headers["set-cookie"]

    @staticmethod
    def read_header(request: Request, name: str) -> str | None:
        """헤더 값을 반환합니다. 여러 값은 ``,``로 합치며 없으면 None."""
        if not name:
            return None
        values = request.headers.getlist(name)
        return ",".join(values) or None
