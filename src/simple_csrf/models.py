"""CSRF 데이터 모델 모듈.

시크릿/토큰 쌍, 결정 결과, 진단 이벤트 등의 Pydantic 모델을 정의합니다.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from simple_csrf.constants import (
    FORBIDDEN,
    REJECT_MESSAGES,
    Exemption,
    RejectReason,
    Verdict,
)


class CredentialPair(BaseModel):
    """한 요청 처리 주기의 (시크릿, 토큰) 쌍.

    값이 없으면 None으로 표현하며, 빈 문자열은 사용하지 않습니다.

    Attributes:
        secret: 세션에 저장된 서버 측 시크릿
        token: 쿠키로 전달되는 토큰
    """

    model_config = ConfigDict(frozen=True)

    secret: str | None = None
    token: str | None = None


class CSRFOutcome(BaseModel):
    """결정 엔진의 요청별 최종 결과.

    Attributes:
        verdict: PASS 또는 REJECT
        exemption: 예외 분류 결과 (첫 요청은 NOT_EXEMPT)
        reason: 거부 사유 (PASS이면 None)
        before: 요청 진입 시점의 자격 증명
        issued: 새로 발급된 자격 증명 (회전하지 않았으면 None)
    """

    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    exemption: Exemption = Exemption.NOT_EXEMPT
    reason: RejectReason | None = None
    before: CredentialPair = CredentialPair()
    issued: CredentialPair | None = None

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    @property
    def rotated(self) -> bool:
        return self.issued is not None

    @property
    def after(self) -> CredentialPair:
        return self.issued if self.issued is not None else self.before

    @property
    def effective_token(self) -> str | None:
        """이번 요청 주기에서 유효한 토큰.

        새로 발급된 토큰은 아직 요청 쿠키에 반영되지 않으므로 여기서 제공합니다.
        """
        return self.after.token

    @property
    def status_code(self) -> int | None:
        return FORBIDDEN if self.reason is not None else None

    @property
    def message(self) -> str | None:
        return REJECT_MESSAGES[self.reason] if self.reason is not None else None

    def error_body(self, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """거부 응답 JSON 본문을 생성합니다.

        Args:
            payload: 본문에 병합할 추가 필드 (기본 메시지를 덮어쓸 수 있음)

        Returns:
            ``{"message": ..., "reason": ..., **payload}`` 형식의 딕셔너리
        """
        if self.reason is None:
            raise ValueError("error_body() is only defined for rejected outcomes")
        return {"message": self.message, "reason": self.reason.value, **(payload or {})}


class DiagnosticsEvent(BaseModel):
    """진단 싱크에 전달되는 종료 전이 이벤트."""

    model_config = ConfigDict(frozen=True)

    before: CredentialPair
    after: CredentialPair
    rotated: bool
    verdict: Verdict
    exemption: Exemption
    reason: RejectReason | None = None
