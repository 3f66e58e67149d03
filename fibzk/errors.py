"""
오류 분류 체계
==============

치명적 오류는 원인별로 구분되어 호출자에게 전파된다.
운영자가 "잘못된 SRS", "잘못된 witness", "너무 작은 회로"를 구별할 수 있어야 한다.

  - 설정 오류 (ConfigurationError): SRS 파일 누락/파손, SRS 모양 불일치,
    다른 백엔드의 키 사용. 같은 입력으로 재시도해도 성공할 수 없다.
  - 회로 오류 (CircuitSizeError): 암호 연산 전에 컴파일 단계에서 발생.
  - witness 오류 (WitnessError): 커밋 전에 Prover가 잡아낸다.
  - 검증 실패는 오류가 아니다. verify()는 False를 반환한다.
    ProofFormatError와 SumcheckError는 검증기 내부에서 False로 바뀐다.
"""


class FibonacciError(Exception):
    """fibzk의 모든 오류의 기반 클래스."""


class ConfigurationError(FibonacciError):
    """잘못된 설정 (SRS, 백엔드 선택, 설정 파일)."""


class SrsFormatError(ConfigurationError):
    """SRS 파일을 찾을 수 없거나 해석할 수 없다."""


class AdapterMismatchError(ConfigurationError):
    """SRS의 종류/백엔드 태그/모양이 컴파일된 회로의 요구와 맞지 않는다."""


class SrsTooSmallError(AdapterMismatchError):
    """SRS의 크기(도메인 지수/변수 개수/차수 상한)가 부족하다."""

    def __init__(self, backend, required, available):
        self.backend = backend
        self.required = required
        self.available = available
        super().__init__(
            f"{backend.value} SRS가 너무 작습니다: 필요 {required}, 제공 {available}"
        )


class BackendMismatchError(ConfigurationError):
    """한 백엔드의 키를 다른 백엔드의 Prover/Verifier에 넘겼다."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"백엔드 불일치: {expected.value} 가 필요하지만 {actual.value} 키가 주어졌습니다"
        )


class CircuitSizeError(FibonacciError):
    """행 개수가 목표 항에 도달하기에 부족하다."""


class WitnessError(FibonacciError):
    """witness 관련 오류의 기반 클래스."""


class WitnessOverflowError(WitnessError):
    """값을 표준 필드 원소로 표현할 수 없다."""


class WitnessConstraintViolationError(WitnessError):
    """witness가 회로의 게이트 제약을 만족하지 않는다."""

    def __init__(self, gate, row, message=None):
        self.gate = gate
        self.row = row
        super().__init__(message or f"게이트 '{gate}' 제약이 {row}행에서 만족되지 않습니다")


class PublicInputError(FibonacciError):
    """공개 입력의 개수나 형식이 잘못되었다."""


class ProofFormatError(FibonacciError):
    """증명 바이트열/구조를 해석할 수 없다."""


class SumcheckError(FibonacciError):
    """합검사 라운드 메시지가 주장된 합과 맞지 않는다."""
