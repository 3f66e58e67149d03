"""
Plonk 백엔드 (FFT 도메인 + 단변수 KZG)
=======================================

**배치**:
  도메인 H = {1, ω, ..., ω^(N-1)}, N = 2^k ≥ n.
  셀렉터 q_g(X)와 배선 a(X), b(X)는 H 위의 열을 IFFT로 보간한 계수 영역 다항식이다.
  다음 행 참조는 a(ωX), b(ωX)로 표현된다.
  사용하지 않는 행 n..N-1 은 무작위 값(blinding row)으로 채운다. 게이트는
  그 행들에서 비활성이므로 제약에 영향이 없다.

**제약 다항식**:
  C(X) = Σ_g α^g · q_g(X) · (lin_g(a(X), b(X), a(ωX), b(ωX)) + c_g)
  C는 H 위에서 0이므로 t(X) = C(X) / Z_H(X) 가 다항식이다.

**라운드**:
  Round 1: [a], [b] 커밋                                   → α
  Round 2: t(X) 계산 및 커밋                               → ζ
  Round 3: a, b, t, q_g 의 ζ 평가와 a, b 의 ζω 평가        → v
  Round 4: 일괄 열기 증명 W_ζ, W_ζω                         → u

**검증**:
  1) Σ_g α^g · q̄_g · (lin_g(ā, b̄, ā', b̄') + c_g) == t̄ · Z_H(ζ)
  2) kzg.batch_verify: (Σ vⁱ[pᵢ], ζ, Σ vⁱp̄ᵢ, W_ζ), ([a] + v[b], ζω, ā' + v·b̄', W_ζω)
     → 페어링 2번
"""

import secrets

from fibzk.backends.base import (
    BackendAdapter, BackendCircuit, EncodedWitness, selector_columns, witness_columns,
)
from fibzk.errors import CircuitSizeError, ProofFormatError
from fibzk.field import FR, CURVE_ORDER, ec_lincomb, get_root_of_unity
from fibzk.pcs import kzg
from fibzk.polynomial import Polynomial
from fibzk.proof import Proof, register_proof
from fibzk.srs import UnivariateSRS
from fibzk.utils import log2_ceil, powers, vanishing_poly_eval
from fibzk.variant import BackendVariant


# 도메인 크기 상한 (bn128 스칼라 필드의 2-adicity)
MAX_DOMAIN_LOG = 28


@register_proof
class PlonkProof(Proof):
    backend = BackendVariant.PLONK
    FIELDS = (
        ("a_comm", "point"),
        ("b_comm", "point"),
        ("t_comm", "point"),
        ("a_eval", "scalar"),
        ("b_eval", "scalar"),
        ("a_next_eval", "scalar"),
        ("b_next_eval", "scalar"),
        ("t_eval", "scalar"),
        ("selector_evals", "scalars"),
        ("w_zeta", "point"),
        ("w_zeta_omega", "point"),
    )


class PlonkCircuit(BackendCircuit):
    """Plonk용 컴파일 결과: 도메인과 셀렉터 다항식."""

    def __init__(self, spec, k, selectors):
        super().__init__(BackendVariant.PLONK, spec, 1 << k, selectors)
        self.k = k
        self.omega = get_root_of_unity(self.size)
        self.selector_polys = tuple(
            Polynomial.from_evaluations(list(column), self.omega)
            for column in self.selectors
        )


def _blinding_value():
    return FR(secrets.randbelow(CURVE_ORDER))


class PlonkAdapter(BackendAdapter):

    backend = BackendVariant.PLONK
    srs_type = UnivariateSRS

    def compile(self, spec):
        k = log2_ceil(spec.num_rows)
        if k > MAX_DOMAIN_LOG:
            raise CircuitSizeError(f"도메인 크기 2^{k}가 2^{MAX_DOMAIN_LOG}를 초과합니다")
        return PlonkCircuit(spec, k, selector_columns(spec, 1 << k))

    def encode(self, circuit, witness):
        self.ensure_backend(circuit)
        columns = witness_columns(circuit.spec, witness, circuit.size, _blinding_value)
        return EncodedWitness(self.backend, columns)

    def required_shape(self, circuit):
        return circuit.k

    def trim_srs(self, circuit, srs):
        self.check_srs(circuit, srs)
        return srs.trim(circuit.size - 1)

    def fixed_polynomials(self, circuit):
        return list(circuit.selector_polys)

    def commit_fixed(self, params, circuit):
        return [kzg.commit(poly, params) for poly in self.fixed_polynomials(circuit)]

    # ─────────────────────────────────────────────────────────────────
    # Prover
    # ─────────────────────────────────────────────────────────────────

    def prove(self, pk, encoded, public_input, transcript):
        self.ensure_backend(pk)
        circuit = pk.circuit
        spec = circuit.spec
        params = pk.params
        omega = circuit.omega
        constants = spec.gate_constants(public_input)

        # Round 1: 배선 다항식 커밋
        a_poly = Polynomial.from_evaluations(list(encoded.columns[0]), omega)
        b_poly = Polynomial.from_evaluations(list(encoded.columns[1]), omega)
        a_comm = kzg.commit(a_poly, params)
        b_comm = kzg.commit(b_poly, params)
        transcript.append_point(b"a_comm", a_comm)
        transcript.append_point(b"b_comm", b_comm)

        # Round 2: 몫 다항식 t(X) = C(X) / Z_H(X)
        alpha = transcript.challenge_scalar(b"alpha")
        current = (a_poly, b_poly)
        following = (a_poly.rotate(omega), b_poly.rotate(omega))
        constraint = Polynomial.zero()
        weights = powers(alpha, len(spec.gates))
        for weight, gate, selector, constant in zip(
                weights, spec.gates, circuit.selector_polys, constants):
            constraint = constraint + selector * gate.evaluate(current, following, constant) * weight
        t_poly = constraint.divide_by_vanishing(circuit.size)
        t_comm = kzg.commit(t_poly, params)
        transcript.append_point(b"t_comm", t_comm)

        # Round 3: 평가
        zeta = transcript.challenge_scalar(b"zeta")
        zeta_omega = zeta * omega
        a_eval = a_poly.evaluate(zeta)
        b_eval = b_poly.evaluate(zeta)
        t_eval = t_poly.evaluate(zeta)
        selector_evals = [poly.evaluate(zeta) for poly in circuit.selector_polys]
        a_next_eval = a_poly.evaluate(zeta_omega)
        b_next_eval = b_poly.evaluate(zeta_omega)
        transcript.append_scalars(b"evals_zeta", [t_eval, a_eval, b_eval] + selector_evals)
        transcript.append_scalars(b"evals_zeta_omega", [a_next_eval, b_next_eval])

        # Round 4: 일괄 열기
        v = transcript.challenge_scalar(b"v")
        at_zeta = [t_poly, a_poly, b_poly] + list(circuit.selector_polys)
        combined = Polynomial.zero()
        for weight, poly in zip(powers(v, len(at_zeta)), at_zeta):
            combined = combined + poly * weight
        w_zeta = kzg.create_witness(combined, zeta, params)
        w_zeta_omega = kzg.create_witness(a_poly + b_poly * v, zeta_omega, params)
        transcript.append_points(b"openings", [w_zeta, w_zeta_omega])

        return PlonkProof(
            a_comm=a_comm,
            b_comm=b_comm,
            t_comm=t_comm,
            a_eval=a_eval,
            b_eval=b_eval,
            a_next_eval=a_next_eval,
            b_next_eval=b_next_eval,
            t_eval=t_eval,
            selector_evals=selector_evals,
            w_zeta=w_zeta,
            w_zeta_omega=w_zeta_omega,
        )

    # ─────────────────────────────────────────────────────────────────
    # Verifier
    # ─────────────────────────────────────────────────────────────────

    def verify(self, vk, public_input, proof, transcript):
        self.ensure_backend(vk)
        circuit = vk.circuit
        spec = circuit.spec
        num_gates = len(spec.gates)
        if len(proof.selector_evals) != num_gates:
            raise ProofFormatError(
                f"셀렉터 평가 개수 {len(proof.selector_evals)} != 게이트 수 {num_gates}"
            )
        constants = spec.gate_constants(public_input)

        transcript.append_point(b"a_comm", proof.a_comm)
        transcript.append_point(b"b_comm", proof.b_comm)
        alpha = transcript.challenge_scalar(b"alpha")
        transcript.append_point(b"t_comm", proof.t_comm)
        zeta = transcript.challenge_scalar(b"zeta")
        selector_evals = list(proof.selector_evals)
        transcript.append_scalars(
            b"evals_zeta", [proof.t_eval, proof.a_eval, proof.b_eval] + selector_evals
        )
        transcript.append_scalars(b"evals_zeta_omega", [proof.a_next_eval, proof.b_next_eval])
        v = transcript.challenge_scalar(b"v")

        # 게이트 항등식: C(ζ) == t(ζ)·Z_H(ζ)
        current = (proof.a_eval, proof.b_eval)
        following = (proof.a_next_eval, proof.b_next_eval)
        constraint = FR(0)
        for weight, gate, q_eval, constant in zip(
                powers(alpha, num_gates), spec.gates, selector_evals, constants):
            constraint = constraint + weight * q_eval * gate.evaluate(current, following, constant)
        if constraint != proof.t_eval * vanishing_poly_eval(circuit.size, zeta):
            return False

        # 일괄 열기 검증
        commitments = [proof.t_comm, proof.a_comm, proof.b_comm] + list(vk.fixed_commitments)
        evals = [proof.t_eval, proof.a_eval, proof.b_eval] + selector_evals
        weights = powers(v, len(commitments))
        f_zeta = ec_lincomb(commitments, weights)
        e_zeta = FR(0)
        for weight, value in zip(weights, evals):
            e_zeta = e_zeta + weight * value
        f_next = ec_lincomb([proof.a_comm, proof.b_comm], [FR(1), v])
        e_next = proof.a_next_eval + v * proof.b_next_eval

        transcript.append_points(b"openings", [proof.w_zeta, proof.w_zeta_omega])
        u = transcript.challenge_scalar(b"u")
        return kzg.batch_verify(
            [
                (f_zeta, zeta, e_zeta, proof.w_zeta),
                (f_next, zeta * circuit.omega, e_next, proof.w_zeta_omega),
            ],
            u,
            vk.params,
        )
