"""CSRF 결정 엔진 모듈.

세션의 서버 측 시크릿과 쿠키의 클라이언트 측 토큰을 묶어 요청마다 통과, 회전, 거부를 결정합니다.

* **시크릿 없음** (첫 요청): 시크릿과 토큰을 발급하고 항상 통과.
* **시크릿 있음, 예외 요청** (우회 헤더, 제외 메서드 또는 경로): 자격 증명을 건드리지 않고 통과.
* **시크릿 있음, 검증 대상**: 토큰이 없거나 검증에 실패하면 거부, 성공하면 통과 후 토큰 회전.

엔진은 요청별 상태나 잠금을 갖지 않습니다. 같은 클라이언트의 첫 요청 두 개가
동시에 처리되면 둘 다 통과하며, 마지막 세션 기록이 남습니다.
"""

from collections.abc import Sequence

from starlette.requests import Request

from simple_csrf.config import CSRFConfig
from simple_csrf.constants import Exemption, RejectReason, Verdict
from simple_csrf.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from simple_csrf.exemptions import ExemptionClassifier
from simple_csrf.models import CredentialPair, CSRFOutcome, DiagnosticsEvent
from simple_csrf.store import CredentialStore
from simple_csrf.tokens import TokenCodec


class CSRFGuard:
    """요청별 CSRF 결정 엔진.

    Args:
        config: 검증된 CSRF 설정
        codec: 토큰 코덱 (생략 시 기본 ``TokenCodec``)
        diagnostics: 진단 싱크 (생략 시 ``config.debug``이면 ``LoggingDiagnosticsSink``, 아니면 비활성)

    Example:
        >>> guard = CSRFGuard(CSRFConfig(cookie=CookiePolicy()))
        >>> outcome = guard.evaluate("POST", "/orders", None, secret=None, token=None)
        >>> outcome.passed, outcome.rotated
        (True, True)
    """

    def __init__(
        self,
        config: CSRFConfig,
        codec: TokenCodec | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self.config = config
        self.codec = codec or TokenCodec()
        self.classifier = ExemptionClassifier.from_config(config)
        self.store = CredentialStore.from_config(config)
        if diagnostics is None and config.debug:
            diagnostics = LoggingDiagnosticsSink()
        self.diagnostics = diagnostics

    def _mint(self, secret: str | None = None) -> CredentialPair:
        secret = secret or self.codec.generate_secret()
        return CredentialPair(secret=secret, token=self.codec.derive_token(secret))

    def _finish(self, outcome: CSRFOutcome) -> CSRFOutcome:
        if self.diagnostics is not None:
            self.diagnostics(
                DiagnosticsEvent(
                    before=outcome.before,
                    after=outcome.after,
                    rotated=outcome.rotated,
                    verdict=outcome.verdict,
                    exemption=outcome.exemption,
                    reason=outcome.reason,
                )
            )
        return outcome

    def _reject(
        self, before: CredentialPair, exemption: Exemption, reason: RejectReason
    ) -> CSRFOutcome:
        return self._finish(
            CSRFOutcome(verdict=Verdict.REJECT, exemption=exemption, reason=reason, before=before)
        )

    def evaluate(
        self,
        method: str,
        path: str,
        bypass_value: str | Sequence[str] | None,
        secret: str | None,
        token: str | None,
    ) -> CSRFOutcome:
        """이미 추출된 요청 데이터로 상태 기계를 실행합니다."""
        before = CredentialPair(secret=secret, token=token)

        if secret is None:
            return self._finish(
                CSRFOutcome(verdict=Verdict.PASS, before=before, issued=self._mint())
            )

        exemption = self.classifier.classify(method, path, bypass_value)
        if exemption is not Exemption.NOT_EXEMPT:
            return self._finish(
                CSRFOutcome(verdict=Verdict.PASS, exemption=exemption, before=before)
            )

        if not token:
            return self._reject(before, exemption, RejectReason.TOKEN_MISSING)
        if not secret:
            return self._reject(before, exemption, RejectReason.SECRET_MISSING)
        if not self.codec.verify(secret, token):
            return self._reject(before, exemption, RejectReason.TOKEN_INVALID)

        issued = self._mint() if self.config.rotate_secret else self._mint(secret)
        return self._finish(CSRFOutcome(verdict=Verdict.PASS, before=before, issued=issued))

    def check(self, request: Request) -> CSRFOutcome:
        """요청을 결정하고 새로 발급된 시크릿을 세션에 저장합니다.

        시크릿은 라우트 핸들러 실행 전에 세션에 기록됩니다. 토큰 쿠키는 응답이 생긴 뒤
        호출자가 기록하며, 그 전까지 핸들러는 ``request.state.csrf_token``으로 읽습니다.
        """
        outcome = self.evaluate(
            method=request.method,
            path=request.url.path,
            bypass_value=self.store.read_header(request, self.config.bypass_header),
            secret=self.store.read_secret(request),
            token=self.store.read_token(request),
        )

        if outcome.issued is not None and outcome.issued.secret != outcome.before.secret:
            self.store.write_secret(request, outcome.issued.secret)

        request.state.csrf_outcome = outcome
        request.state.csrf_token = outcome.effective_token
        return outcome
