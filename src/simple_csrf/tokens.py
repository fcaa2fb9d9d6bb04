"""CSRF 시크릿/토큰 코덱 모듈.

토큰 형식은 ``<salt>-<proof>``이며, ``proof``는 세션 시크릿을 키로 한 salt의
HMAC-SHA256 값을 패딩 없는 base64url로 인코딩한 것입니다.
토큰은 자신을 만든 시크릿으로만 검증되며, salt가 매번 새로 생성되므로 파생 결과도 매번 다릅니다.
"""

import base64
import hashlib
import hmac
import secrets
import string
from dataclasses import dataclass

from simple_csrf.exceptions import EntropyUnavailableError

SALT_ALPHABET = string.ascii_letters + string.digits
TOKEN_SEPARATOR = "-"


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


@dataclass(frozen=True)
class TokenCodec:
    """시크릿 생성, 토큰 파생 및 검증.

    상태가 없는 불변 객체이므로 하나의 인스턴스를 모든 요청에서 공유할 수 있습니다.

    Args:
        secret_length: 시크릿의 난수 바이트 수 (기본값: 18)
        salt_length: 토큰 salt 문자 수 (기본값: 8)

    Example:
        >>> codec = TokenCodec()
        >>> secret = codec.generate_secret()
        >>> codec.verify(secret, codec.derive_token(secret))
        True
    """

    secret_length: int = 18
    salt_length: int = 8

    def __post_init__(self) -> None:
        if self.secret_length < 16:  # noqa: PLR2004
            raise ValueError("secret_length must be at least 16 bytes")
        if self.salt_length < 1:
            raise ValueError("salt_length must be positive")

    def generate_secret(self) -> str:
        """예측 불가능한 새 시크릿을 반환합니다.

        Raises:
            EntropyUnavailableError: OS 난수 소스를 사용할 수 없는 경우
        """
        try:
            return _b64url(secrets.token_bytes(self.secret_length))
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailableError() from e

    def derive_token(self, secret: str) -> str:
        """새 salt로 시크릿에서 토큰을 파생합니다.

        Raises:
            EntropyUnavailableError: OS 난수 소스를 사용할 수 없는 경우
        """
        try:
            salt = "".join(secrets.choice(SALT_ALPHABET) for _ in range(self.salt_length))
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailableError() from e
        return f"{salt}{TOKEN_SEPARATOR}{self._proof(secret, salt)}"

    def verify(self, secret: str | None, token: str | None) -> bool:
        """토큰이 시크릿에서 파생되었는지 확인합니다.

        형식이 잘못되었거나 빈 입력은 예외 없이 False를 반환합니다.
        """
        if not isinstance(secret, str) or not isinstance(token, str):
            return False
        if not secret or not token:
            return False

        salt, separator, proof = token.partition(TOKEN_SEPARATOR)
        if not separator or len(salt) != self.salt_length or not proof:
            return False
        if any(char not in SALT_ALPHABET for char in salt):
            return False

        expected = self._proof(secret, salt)
        return hmac.compare_digest(proof.encode("utf-8", "replace"), expected.encode("ascii"))

    @staticmethod
    def _proof(secret: str, salt: str) -> str:
        key = secret.encode("utf-8", "surrogatepass")
        return _b64url(hmac.new(key, salt.encode("ascii"), hashlib.sha256).digest())
