"""
Witness 생성기
==============

회로의 모든 배선 값(행 × 배선)을 시드 (a0, a1) 에서 결정론적으로 계산한다.

  f(0) = a0, f(1) = a1, f(i+2) = f(i) + f(i+1)   (FR 위에서)
  i번째 행 = (f(i), f(i+1))

시드 (1, 1)로 만든 witness만 init_a / init_b 게이트를 만족한다.
다른 시드의 witness는 "회로를 만족하지 않는 witness"의 예로 쓰인다.

사용 예시:
    >>> spec = build(10)
    >>> w = generate(spec, (1, 1))
    >>> w.public_output(spec)   # FR(55)
"""

from fibzk.errors import WitnessOverflowError
from fibzk.field import FR, CURVE_ORDER


class Witness:
    """평탄화된 배선 값: [a₀, b₀, a₁, b₁, ...]. 생성 후 변경되지 않는다."""

    def __init__(self, values, wires_per_row=2):
        self._values = tuple(values)
        self._wires_per_row = wires_per_row

    @property
    def values(self):
        return self._values

    @property
    def num_rows(self):
        return len(self._values) // self._wires_per_row

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        return isinstance(other, Witness) and self._values == other._values

    def row(self, i):
        """i번째 행의 배선 값 튜플."""
        start = i * self._wires_per_row
        return self._values[start:start + self._wires_per_row]

    def column(self, wire):
        """한 배선의 모든 행 값 리스트."""
        return list(self._values[wire::self._wires_per_row])

    def public_output(self, spec):
        row, wire = spec.output
        return self.row(row)[wire]

    def to_bytes(self):
        """32바이트 빅엔디안 값의 연결 (결정론 확인용 표준 인코딩)."""
        return b"".join(int(v).to_bytes(32, "big") for v in self._values)

    def __repr__(self):
        return f"Witness(rows={self.num_rows})"


def _to_field(value):
    if isinstance(value, FR):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise WitnessOverflowError(f"시드 값은 정수여야 합니다: {value!r}")
    if not 0 <= value < CURVE_ORDER:
        raise WitnessOverflowError(f"시드 값이 필드 범위를 벗어났습니다: {value}")
    return FR(value)


def generate(spec, seed=(1, 1)):
    """피보나치 witness를 계산한다.

    Args:
        spec: CircuitSpec
        seed: (f(0), f(1))

    Returns:
        Witness: 길이 num_rows × wires_per_row

    Raises:
        WitnessOverflowError: 시드를 표준 필드 원소로 표현할 수 없을 때
    """
    a0, a1 = seed
    sequence = [_to_field(a0), _to_field(a1)]
    while len(sequence) < spec.num_rows + 1:
        sequence.append(sequence[-2] + sequence[-1])

    values = []
    for i in range(spec.num_rows):
        values.extend((sequence[i], sequence[i + 1]))
    return Witness(values, spec.wires_per_row)
