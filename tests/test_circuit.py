"""
Circuit & Witness Tests
=======================

피보나치 회로 선언(build)과 witness 생성(generate), 제약 확인(check)을 테스트한다.

테스트 범위:
  - 회로 모양: 행 수, 배선 수, 게이트 구성, 공개 출력 위치
  - CircuitSizeError: n < 10
  - witness: f(0) = f(1) = 1 에서 공개 출력 55, 행 배치 (f(i), f(i+1))
  - WitnessOverflowError: 음수, 필드 범위 초과, 정수가 아닌 시드
  - check: 만족하지 않는 witness 는 (게이트, 행)과 함께 거부
"""

import pytest

from fibzk.circuit import OUTPUT_INDEX, WIRE_A, Gate, Term, build
from fibzk.errors import (
    CircuitSizeError, PublicInputError, WitnessConstraintViolationError, WitnessOverflowError,
)
from fibzk.field import FR, CURVE_ORDER
from fibzk.polynomial import Polynomial
from fibzk.witness import Witness, generate


FIBONACCI = [1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144]


# ─────────────────────────────────────────────────────────────────────
# 회로 선언
# ─────────────────────────────────────────────────────────────────────

class TestBuild:

    def test_shape(self, spec):
        assert spec.num_rows == 10
        assert spec.wires_per_row == 2
        assert spec.output == (OUTPUT_INDEX, WIRE_A)
        assert spec.num_public_inputs == 1

    def test_gate_names(self, spec):
        assert [g.name for g in spec.gates] == ["fib_shift", "fib_sum", "init_a", "init_b", "output"]

    def test_gate_rows(self, spec):
        gates = {g.name: g for g in spec.gates}
        assert gates["fib_sum"].rows == tuple(range(9))
        assert gates["init_a"].rows == (0,)
        assert gates["output"].rows == (OUTPUT_INDEX,)
        assert gates["output"].public
        assert gates["fib_sum"].uses_next_row
        assert not gates["init_b"].uses_next_row

    def test_larger_circuit(self):
        spec = build(16)
        gates = {g.name: g for g in spec.gates}
        assert gates["fib_shift"].rows == tuple(range(15))
        assert gates["output"].rows == (OUTPUT_INDEX,)

    @pytest.mark.parametrize("n", [0, 1, 9])
    def test_too_small(self, n):
        with pytest.raises(CircuitSizeError):
            build(n)

    def test_non_integer_rows(self):
        with pytest.raises(CircuitSizeError):
            build("10")


class TestGate:

    def test_evaluate_scalars(self):
        gate = Gate("sum", [Term(1, 0), Term(1, 1), Term(-1, 1, 1)], range(1))
        assert gate.evaluate((FR(2), FR(3)), (FR(3), FR(5)), FR(0)) == FR(0)
        assert gate.evaluate((FR(2), FR(3)), (FR(3), FR(6)), FR(0)) == FR(-1)

    def test_evaluate_polynomials(self):
        gate = Gate("lin", [Term(2, 0), Term(1, 1)], [0])
        a = Polynomial([FR(1), FR(1)])
        b = Polynomial([FR(0), FR(0), FR(1)])
        result = gate.evaluate((a, b), None, FR(3))
        assert result == Polynomial([FR(5), FR(2), FR(1)])

    def test_invalid_rotation(self):
        with pytest.raises(ValueError):
            Term(1, 0, 2)

    def test_empty_terms(self):
        with pytest.raises(ValueError):
            Gate("empty", [], [0])


# ─────────────────────────────────────────────────────────────────────
# 공개 입력
# ─────────────────────────────────────────────────────────────────────

class TestPublicInput:

    def test_normalize_scalar(self, spec):
        assert spec.normalize_public_input(55) == (FR(55),)
        assert spec.normalize_public_input([FR(55)]) == (FR(55),)

    def test_wrong_count(self, spec):
        with pytest.raises(PublicInputError):
            spec.normalize_public_input([55, 56])
        with pytest.raises(PublicInputError):
            spec.normalize_public_input([])

    def test_wrong_type(self, spec):
        with pytest.raises(PublicInputError):
            spec.normalize_public_input(["55"])
        with pytest.raises(PublicInputError):
            spec.normalize_public_input([True])

    def test_not_iterable(self, spec):
        with pytest.raises(PublicInputError):
            spec.normalize_public_input(None)
        with pytest.raises(PublicInputError):
            spec.normalize_public_input(5.5)

    def test_gate_constants(self, spec):
        constants = spec.gate_constants((FR(55),))
        assert constants[-1] == FR(-55)
        assert constants[2] == FR(-1)
        assert constants[0] == FR(0)


# ─────────────────────────────────────────────────────────────────────
# Witness
# ─────────────────────────────────────────────────────────────────────

class TestWitness:

    def test_public_output(self, spec, witness):
        assert witness.public_output(spec) == FR(55)

    def test_layout(self, spec, witness):
        assert len(witness) == 20
        assert witness.num_rows == 10
        for i in range(spec.num_rows):
            assert witness.row(i) == (FR(FIBONACCI[i]), FR(FIBONACCI[i + 1]))

    def test_columns(self, witness):
        assert witness.column(0) == [FR(v) for v in FIBONACCI[:10]]
        assert witness.column(1) == [FR(v) for v in FIBONACCI[1:11]]

    def test_deterministic(self, spec, witness):
        again = generate(spec, (1, 1))
        assert again == witness
        assert again.to_bytes() == witness.to_bytes()
        assert len(witness.to_bytes()) == 20 * 32

    def test_other_seed(self, spec):
        w = generate(spec, (2, 3))
        assert w.public_output(spec) == FR(144)

    def test_wraps_modulo_field(self, spec):
        w = generate(spec, (CURVE_ORDER - 1, 1))
        assert w.row(0) == (FR(-1), FR(1))
        assert w.row(1) == (FR(1), FR(0))

    @pytest.mark.parametrize("seed", [(-1, 1), (CURVE_ORDER, 1), (1.5, 1), ("1", 1), (True, 1)])
    def test_overflow(self, spec, seed):
        with pytest.raises(WitnessOverflowError):
            generate(spec, seed)


class TestCheck:

    def test_valid(self, spec, witness):
        spec.check(witness, 55)

    def test_wrong_public(self, spec, witness):
        with pytest.raises(WitnessConstraintViolationError) as excinfo:
            spec.check(witness, 56)
        assert excinfo.value.gate == "output"
        assert excinfo.value.row == OUTPUT_INDEX

    def test_wrong_seed(self, spec):
        with pytest.raises(WitnessConstraintViolationError) as excinfo:
            spec.check(generate(spec, (2, 3)), 144)
        assert excinfo.value.gate == "init_a"
        assert excinfo.value.row == 0

    def test_broken_recurrence(self, spec, witness):
        values = list(witness.values)
        values[9] = values[9] + FR(1)    # 4행의 b
        with pytest.raises(WitnessConstraintViolationError) as excinfo:
            spec.check(Witness(values), 55)
        assert excinfo.value.row in (3, 4)

    def test_wrong_length(self, spec, witness):
        with pytest.raises(WitnessConstraintViolationError) as excinfo:
            spec.check(Witness(list(witness.values)[:-2]), 55)
        assert excinfo.value.gate == "shape"
