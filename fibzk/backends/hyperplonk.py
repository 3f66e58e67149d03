"""
HyperPlonk 백엔드 (불리언 하이퍼큐브 + 다중선형 KZG)
=====================================================

**배치**:
  μ = ⌈log2 n⌉ 개의 변수. 각 열은 {0,1}^μ 위의 평가 테이블(길이 2^μ)이고
  그 다중선형 확장(MLE)으로 다룬다. 사용하지 않는 행은 0으로 채운다.
  FFT 도메인이 없으므로 "다음 행"은 회전 테이블 a'(x) = a(x + 1) 로 표현한다.

**IOP**:
  1) 제로체크: 무작위 τ에 대해
         Σ_x eq(τ, x) · Σ_g α^g · q_g(x) · (lin_g(a, b, a', b')(x) + c_g) = 0
     을 차수 3 합검사로 증명한다. 끝나면 점 r에서의
     a(r), b(r), a'(r), b'(r), q_g(r) 이 필요하다.
  2) 시프트 검사: a', b' 는 커밋하지 않는다. 대신
         a'(r) + β·b'(r) = Σ_y (a(y) + β·b(y)) · next(r, y)
     를 차수 2 합검사로 증명하여 점 r' 에서의 a(r'), b(r') 로 환원한다.
  3) 열기: 점 r 에서 [q_g..., a, b], 점 r' 에서 [a, b] 를 γ로 묶어
     다중선형 PCS로 연다.

같은 IOP를 Gemini 백엔드가 다른 PCS로 재사용한다 (gemini 모듈 참고).
"""

from fibzk import sumcheck
from fibzk.backends.base import (
    BackendAdapter, BackendCircuit, EncodedWitness, selector_columns, witness_columns,
)
from fibzk.errors import ProofFormatError
from fibzk.field import FR, ec_lincomb
from fibzk.multilinear import eq_eval, eq_table, next_eval, next_table, shift_table
from fibzk.pcs.multilinear_kzg import MultilinearKzg
from fibzk.proof import Proof, register_proof
from fibzk.srs import MultilinearSRS
from fibzk.utils import log2_ceil, powers
from fibzk.variant import BackendVariant


# 제로체크 결합 함수의 차수: eq · q · lin
ZEROCHECK_DEGREE = 3

# 시프트 검사 결합 함수의 차수: (a + β·b) · next
SHIFT_DEGREE = 2


@register_proof
class HyperPlonkProof(Proof):
    backend = BackendVariant.HYPERPLONK
    FIELDS = (
        ("a_comm", "point"),
        ("b_comm", "point"),
        ("zerocheck_rounds", "rounds"),
        ("a_eval", "scalar"),
        ("b_eval", "scalar"),
        ("a_next_eval", "scalar"),
        ("b_next_eval", "scalar"),
        ("selector_evals", "scalars"),
        ("shift_rounds", "rounds"),
        ("a_shift_eval", "scalar"),
        ("b_shift_eval", "scalar"),
        ("opening_r", "opening"),
        ("opening_shift", "opening"),
    )


class MultilinearCircuit(BackendCircuit):
    """하이퍼큐브 위로 컴파일된 회로."""

    def __init__(self, backend, spec, num_vars, selectors):
        super().__init__(backend, spec, 1 << num_vars, selectors)
        self.num_vars = num_vars


def _combine_tables(tables, gamma):
    """Σ γⁱ · tableᵢ (같은 점에서 여는 다항식 묶기)."""
    weights = powers(gamma, len(tables))
    combined = [FR(0)] * len(tables[0])
    for weight, table in zip(weights, tables):
        for j, value in enumerate(table):
            combined[j] = combined[j] + weight * value
    return combined


def _combine_values(values, gamma):
    total = FR(0)
    for weight, value in zip(powers(gamma, len(values)), values):
        total = total + weight * value
    return total


def _gate_sum(spec, weights, constants, selector_values, current, following):
    """Σ_g α^g · q_g · (lin_g + c_g)."""
    total = FR(0)
    for weight, gate, q, constant in zip(weights, spec.gates, selector_values, constants):
        if q == FR(0):
            continue
        total = total + weight * q * gate.evaluate(current, following, constant)
    return total


class HyperPlonkAdapter(BackendAdapter):

    backend = BackendVariant.HYPERPLONK
    srs_type = MultilinearSRS
    pcs = MultilinearKzg()
    proof_class = HyperPlonkProof

    def compile(self, spec):
        num_vars = max(1, log2_ceil(spec.num_rows))
        return MultilinearCircuit(
            self.backend, spec, num_vars, selector_columns(spec, 1 << num_vars)
        )

    def encode(self, circuit, witness):
        self.ensure_backend(circuit)
        columns = witness_columns(circuit.spec, witness, circuit.size, lambda: FR(0))
        return EncodedWitness(self.backend, columns)

    def required_shape(self, circuit):
        return circuit.num_vars

    def trim_srs(self, circuit, srs):
        self.check_srs(circuit, srs)
        return srs.trim(circuit.num_vars)

    def fixed_polynomials(self, circuit):
        return [list(column) for column in circuit.selectors]

    def commit_fixed(self, params, circuit):
        return [self.pcs.commit(params, table) for table in self.fixed_polynomials(circuit)]

    # ─────────────────────────────────────────────────────────────────
    # Prover
    # ─────────────────────────────────────────────────────────────────

    def prove(self, pk, encoded, public_input, transcript):
        self.ensure_backend(pk)
        circuit = pk.circuit
        spec = circuit.spec
        params = pk.params
        num_gates = len(spec.gates)
        constants = spec.gate_constants(public_input)
        selectors = self.fixed_polynomials(circuit)
        a, b = [list(column) for column in encoded.columns]

        a_comm = self.pcs.commit(params, a)
        b_comm = self.pcs.commit(params, b)
        transcript.append_point(b"a_comm", a_comm)
        transcript.append_point(b"b_comm", b_comm)

        # 제로체크
        alpha = transcript.challenge_scalar(b"alpha")
        tau = transcript.challenge_scalars(b"tau", circuit.num_vars)
        weights = powers(alpha, num_gates)

        def zerocheck(values):
            eq = values[0]
            q_values = values[1:1 + num_gates]
            a_v, b_v, a_n, b_n = values[1 + num_gates:]
            return eq * _gate_sum(spec, weights, constants, q_values, (a_v, b_v), (a_n, b_n))

        tables = [eq_table(tau)] + selectors + [a, b, shift_table(a), shift_table(b)]
        zerocheck_rounds, r, finals = sumcheck.prove(
            tables, zerocheck, ZEROCHECK_DEGREE, transcript, b"zerocheck"
        )
        selector_evals = finals[1:1 + num_gates]
        a_eval, b_eval, a_next_eval, b_next_eval = finals[1 + num_gates:]
        transcript.append_scalars(
            b"evals_r", [a_eval, b_eval, a_next_eval, b_next_eval] + selector_evals
        )

        # 시프트 검사
        beta = transcript.challenge_scalar(b"beta")
        shift_rounds, r_shift, finals = sumcheck.prove(
            [a, b, next_table(r)],
            lambda values: (values[0] + beta * values[1]) * values[2],
            SHIFT_DEGREE,
            transcript,
            b"shift",
        )
        a_shift_eval, b_shift_eval = finals[0], finals[1]
        transcript.append_scalars(b"evals_r_shift", [a_shift_eval, b_shift_eval])

        # 열기
        gamma = transcript.challenge_scalar(b"gamma")
        opening_r = self.pcs.open(params, _combine_tables(selectors + [a, b], gamma), r, transcript)
        opening_shift = self.pcs.open(params, _combine_tables([a, b], gamma), r_shift, transcript)

        return self.proof_class(
            a_comm=a_comm,
            b_comm=b_comm,
            zerocheck_rounds=zerocheck_rounds,
            a_eval=a_eval,
            b_eval=b_eval,
            a_next_eval=a_next_eval,
            b_next_eval=b_next_eval,
            selector_evals=selector_evals,
            shift_rounds=shift_rounds,
            a_shift_eval=a_shift_eval,
            b_shift_eval=b_shift_eval,
            opening_r=opening_r,
            opening_shift=opening_shift,
        )

    # ─────────────────────────────────────────────────────────────────
    # Verifier
    # ─────────────────────────────────────────────────────────────────

    def verify(self, vk, public_input, proof, transcript):
        """SumcheckError / ProofFormatError 는 호출자(verifier 모듈)가 False로 바꾼다."""
        self.ensure_backend(vk)
        circuit = vk.circuit
        spec = circuit.spec
        num_gates = len(spec.gates)
        if len(proof.selector_evals) != num_gates:
            raise ProofFormatError(
                f"셀렉터 평가 개수 {len(proof.selector_evals)} != 게이트 수 {num_gates}"
            )
        constants = spec.gate_constants(public_input)
        selector_evals = list(proof.selector_evals)

        transcript.append_point(b"a_comm", proof.a_comm)
        transcript.append_point(b"b_comm", proof.b_comm)

        # 제로체크
        alpha = transcript.challenge_scalar(b"alpha")
        tau = transcript.challenge_scalars(b"tau", circuit.num_vars)
        claim, r = sumcheck.verify(
            FR(0), proof.zerocheck_rounds, circuit.num_vars, ZEROCHECK_DEGREE,
            transcript, b"zerocheck",
        )
        expected = eq_eval(tau, r) * _gate_sum(
            spec, powers(alpha, num_gates), constants, selector_evals,
            (proof.a_eval, proof.b_eval), (proof.a_next_eval, proof.b_next_eval),
        )
        if claim != expected:
            return False
        transcript.append_scalars(
            b"evals_r",
            [proof.a_eval, proof.b_eval, proof.a_next_eval, proof.b_next_eval] + selector_evals,
        )

        # 시프트 검사
        beta = transcript.challenge_scalar(b"beta")
        claim, r_shift = sumcheck.verify(
            proof.a_next_eval + beta * proof.b_next_eval, proof.shift_rounds,
            circuit.num_vars, SHIFT_DEGREE, transcript, b"shift",
        )
        if claim != (proof.a_shift_eval + beta * proof.b_shift_eval) * next_eval(r, r_shift):
            return False
        transcript.append_scalars(b"evals_r_shift", [proof.a_shift_eval, proof.b_shift_eval])

        # 열기
        gamma = transcript.challenge_scalar(b"gamma")
        commitments_r = list(vk.fixed_commitments) + [proof.a_comm, proof.b_comm]
        claims = [
            (
                ec_lincomb(commitments_r, powers(gamma, len(commitments_r))),
                r,
                _combine_values(selector_evals + [proof.a_eval, proof.b_eval], gamma),
                proof.opening_r,
            ),
            (
                ec_lincomb([proof.a_comm, proof.b_comm], [FR(1), gamma]),
                r_shift,
                _combine_values([proof.a_shift_eval, proof.b_shift_eval], gamma),
                proof.opening_shift,
            ),
        ]
        return self.pcs.verify(vk.params, claims, transcript)
