"""
피보나치 제약 회로 (Constraint Circuit)
========================================

세 백엔드가 공유하는 단 하나의 회로 선언. 백엔드 어댑터는 이 선언을
그대로 컴파일할 뿐, 회로 논리를 복제하지 않는다.

**행(row) 배치**:
  각 행은 두 개의 배선 a(0번), b(1번)를 가진다.
  i번째 행 = (f(i), f(i+1))
  따라서 수열 관계 f(i+2) = f(i) + f(i+1) 은 "현재 행"과 "다음 행"만으로 표현된다.

**게이트** (Σ coeff·wire[row + rotation] + constant = 0):

  | 게이트     | 활성 행     | 관계                      | 의미                 |
  |------------|-------------|---------------------------|----------------------|
  | fib_shift  | 0 .. n-2    | b - a[next] = 0           | f(i+1) 이어받기      |
  | fib_sum    | 0 .. n-2    | a + b - b[next] = 0       | f(i+2) = f(i)+f(i+1) |
  | init_a     | 0           | a - 1 = 0                 | f(0) = 1             |
  | init_b     | 0           | b - 1 = 0                 | f(1) = 1             |
  | output     | 9           | a - public = 0            | 공개 출력 f(9)       |

  공개 게이트의 상수항은 공개 입력에서 온다 (constant = -public).
  10번째 항 f(9) = 55 를 공개하므로 n ≥ 10 이어야 한다.

사용 예시:
    >>> spec = build(10)
    >>> spec.num_rows, spec.wires_per_row   # (10, 2)
    >>> spec.output                         # (9, 0)
"""

from fibzk.errors import CircuitSizeError, PublicInputError, WitnessConstraintViolationError
from fibzk.field import FR, CURVE_ORDER


# 공개 출력으로 내보내는 항의 인덱스 (0부터 시작하므로 10번째 항)
OUTPUT_INDEX = 9

# 배선 이름 (인덱스 순서)
WIRES = ("a", "b")

WIRE_A = 0
WIRE_B = 1


class Term:
    """게이트 관계의 한 항: coeff · wire[row + rotation]."""

    __slots__ = ("coeff", "wire", "rotation")

    def __init__(self, coeff, wire, rotation=0):
        if rotation not in (0, 1):
            raise ValueError(f"rotation은 0 또는 1이어야 합니다: {rotation}")
        self.coeff = coeff if isinstance(coeff, FR) else FR(coeff)
        self.wire = wire
        self.rotation = rotation

    def __repr__(self):
        suffix = "[next]" if self.rotation else ""
        return f"{int(self.coeff)}*{WIRES[self.wire]}{suffix}"


class Gate:
    """행 집합 위에서 성립해야 하는 선형 관계.

    속성:
        name: 게이트 이름 (오류 메시지와 셀렉터 식별용)
        terms: Term 튜플
        rows: 게이트가 활성화되는 행 번호 튜플
        constant: 상수항 (public 게이트는 공개 입력에서 결정)
        public: 공개 입력 게이트 여부
    """

    def __init__(self, name, terms, rows, constant=0, public=False):
        if not terms:
            raise ValueError("게이트에는 적어도 하나의 항이 필요합니다")
        self.name = name
        self.terms = tuple(terms)
        self.rows = tuple(rows)
        self.constant = constant if isinstance(constant, FR) else FR(constant)
        self.public = public

    @property
    def uses_next_row(self):
        return any(term.rotation for term in self.terms)

    def evaluate(self, current, following, constant):
        """관계식의 값 Σ coeff·operand + constant 를 계산한다.

        operand는 FR 원소일 수도, 다항식일 수도 있다 (Plonk 어댑터는 배선
        다항식을 그대로 넣어 제약 다항식을 만든다). 따라서 피연산자를 항상
        왼쪽에 두고 곱한다.

        Args:
            current: 현재 행의 배선 값 (a, b)
            following: 다음 행의 배선 값 (a[next], b[next])
            constant: 이 게이트의 상수항 (gate_constants 참고)
        """
        rows = (current, following)
        total = None
        for term in self.terms:
            part = rows[term.rotation][term.wire] * term.coeff
            total = part if total is None else total + part
        return total + constant

    def __repr__(self):
        return f"Gate({self.name}: {' + '.join(map(repr, self.terms))} @ {len(self.rows)} rows)"


class CircuitSpec:
    """컴파일 전의 회로 선언. 생성 후 변경되지 않는다.

    속성:
        num_rows: 행 개수 n
        wires_per_row: 행당 배선 수 (2)
        gates: Gate 튜플
        output: 공개 출력 셀 (row, wire)
    """

    wires_per_row = len(WIRES)

    def __init__(self, num_rows, gates, output):
        self._num_rows = num_rows
        self._gates = tuple(gates)
        self._output = tuple(output)

    @property
    def num_rows(self):
        return self._num_rows

    @property
    def gates(self):
        return self._gates

    @property
    def output(self):
        return self._output

    @property
    def num_public_inputs(self):
        return sum(1 for gate in self._gates if gate.public)

    def normalize_public_input(self, public_input):
        """공개 입력을 FR 튜플로 정규화한다.

        정수/FR 하나 또는 그 시퀀스를 받는다.

        Raises:
            PublicInputError: 개수가 공개 게이트 수와 다르거나 값이 정수가 아닐 때
        """
        if isinstance(public_input, (int, FR)):
            public_input = [public_input]
        try:
            items = list(public_input)
        except TypeError as exc:
            raise PublicInputError(f"공개 입력을 해석할 수 없습니다: {public_input!r}") from exc
        values = []
        for value in items:
            if isinstance(value, FR):
                values.append(value)
            elif isinstance(value, int) and not isinstance(value, bool):
                values.append(FR(value))
            else:
                raise PublicInputError(f"공개 입력은 정수 또는 FR이어야 합니다: {value!r}")
        if len(values) != self.num_public_inputs:
            raise PublicInputError(
                f"공개 입력 개수 {len(values)} != 회로의 공개 게이트 수 {self.num_public_inputs}"
            )
        return tuple(values)

    def gate_constants(self, public_input):
        """게이트별 상수항 리스트. 공개 게이트는 -public 이다.

        Args:
            public_input: normalize_public_input 으로 정규화된 FR 튜플
        """
        public = iter(public_input)
        constants = []
        for gate in self._gates:
            if gate.public:
                constants.append(FR(0) - next(public))
            else:
                constants.append(gate.constant)
        return constants

    def check(self, witness, public_input):
        """witness가 모든 게이트를 만족하는지 확인한다.

        Raises:
            WitnessConstraintViolationError: 처음 발견된 위반 (게이트 이름, 행)
        """
        expected = self._num_rows * self.wires_per_row
        if len(witness) != expected:
            raise WitnessConstraintViolationError(
                "shape", None,
                f"witness 길이 {len(witness)} != {expected} (행 {self._num_rows} × 배선 {self.wires_per_row})",
            )
        constants = self.gate_constants(self.normalize_public_input(public_input))
        for gate, constant in zip(self._gates, constants):
            for row in gate.rows:
                following = witness.row(row + 1) if gate.uses_next_row else None
                if gate.evaluate(witness.row(row), following, constant) != FR(0):
                    raise WitnessConstraintViolationError(gate.name, row)

    def __repr__(self):
        return f"CircuitSpec(num_rows={self._num_rows}, gates={len(self._gates)})"


def build(num_rows):
    """피보나치 회로를 선언한다.

    Args:
        num_rows: 행 개수 n (≥ 10)

    Returns:
        CircuitSpec

    Raises:
        CircuitSizeError: n이 10번째 항에 도달하기에 부족할 때
    """
    if not isinstance(num_rows, int) or num_rows < OUTPUT_INDEX + 1:
        raise CircuitSizeError(
            f"행 개수는 {OUTPUT_INDEX + 1} 이상이어야 합니다: {num_rows}"
        )

    internal = range(num_rows - 1)
    minus_one = FR(CURVE_ORDER - 1)
    gates = [
        Gate("fib_shift", [Term(1, WIRE_B), Term(minus_one, WIRE_A, 1)], internal),
        Gate("fib_sum", [Term(1, WIRE_A), Term(1, WIRE_B), Term(minus_one, WIRE_B, 1)], internal),
        Gate("init_a", [Term(1, WIRE_A)], [0], constant=minus_one),
        Gate("init_b", [Term(1, WIRE_B)], [0], constant=minus_one),
        Gate("output", [Term(1, WIRE_A)], [OUTPUT_INDEX], public=True),
    ]
    return CircuitSpec(num_rows, gates, (OUTPUT_INDEX, WIRE_A))
