"""CSRF 검증 예외 규칙 모듈."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from simple_csrf.config import CSRFConfig
from simple_csrf.constants import Exemption


@dataclass(frozen=True)
class ExemptionClassifier:
    """요청이 검증 예외인지(그리고 그 이유) 분류합니다.

    메서드와 경로는 정확히 일치해야 하며, 우회 헤더는 ``bypass_header``가
    비어 있지 않을 때만 확인합니다.
    """

    ignore_methods: frozenset[str]
    ignore_paths: frozenset[str]
    bypass_header: str = ""

    @classmethod
    def from_config(cls, config: CSRFConfig) -> "ExemptionClassifier":
        return cls(
            ignore_methods=frozenset(config.ignore_methods),
            ignore_paths=frozenset(config.ignore_paths),
            bypass_header=config.bypass_header,
        )

    def classify(
        self,
        method: str,
        path: str,
        bypass_value: str | Sequence[str] | None = None,
    ) -> Exemption:
        if self.bypass_header and _is_truthy(bypass_value):
            return Exemption.EXEMPT_BY_HEADER
        if method in self.ignore_methods:
            return Exemption.EXEMPT_BY_METHOD
        if path in self.ignore_paths:
            return Exemption.EXEMPT_BY_PATH
        return Exemption.NOT_EXEMPT


def _is_truthy(value: str | Iterable[str] | None) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value)
    # 여러 헤더 값
    return bool(",".join(value))
