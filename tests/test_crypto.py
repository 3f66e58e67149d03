"""
Tests for fibzk cryptographic modules: SRS, KZG, multilinear KZG (PST13), Gemini.

Covers:
- SRS 생성 (결정론, 길이, 모양 태그, trim, 검증자 파라미터)
- KZG commit / create_witness / verify_opening / batch_verify
- PST13 열기: 정상 열기 통과, 값 조작 실패, 모양 오류
- Gemini 열기: 정상 열기 통과, 값 조작 실패, 모양 오류

페어링이 느리므로 작은 SRS(변수 2개, 차수 3)를 쓴다.
"""

import pytest

from fibzk.errors import ProofFormatError
from fibzk.field import FR, G1, ec_add, ec_mul
from fibzk.multilinear import evaluate
from fibzk.pcs import OpeningProof
from fibzk.pcs import kzg
from fibzk.pcs.gemini import Gemini
from fibzk.pcs.multilinear_kzg import MultilinearKzg
from fibzk.polynomial import Polynomial
from fibzk.srs import (
    MultilinearSRS, UnivariateSRS,
    generate_gemini_srs, generate_multilinear_srs, generate_plonk_srs, generate_srs,
)
from fibzk.transcript import Transcript
from fibzk.variant import BackendVariant


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def srs_small():
    """차수 3 단변수 SRS (Gemini 태그)."""
    return generate_gemini_srs(3, seed=42)


@pytest.fixture(scope="module")
def ml_srs_small():
    """변수 2개 다중선형 SRS."""
    return generate_multilinear_srs(2, seed=42)


@pytest.fixture
def table():
    return [FR(3), FR(1), FR(4), FR(1)]


@pytest.fixture
def point():
    return [FR(5), FR(9)]


# ─────────────────────────────────────────────────────────────────────
# SRS
# ─────────────────────────────────────────────────────────────────────

class TestUnivariateSRS:

    def test_plonk_lengths(self):
        srs = generate_plonk_srs(2, seed=1)
        assert len(srs.g1_powers) == 4
        assert len(srs.g2_powers) == 2
        assert srs.max_degree == 3
        assert srs.shape == 2
        assert srs.backend is BackendVariant.PLONK

    def test_gemini_shape_is_degree(self, srs_small):
        assert srs_small.shape == 3
        assert srs_small.backend is BackendVariant.GEMINI

    def test_plonk_shape_undefined_for_non_power_of_two(self):
        srs = UnivariateSRS.generate(4, seed=1, backend=BackendVariant.PLONK)
        assert srs.shape is None

    def test_deterministic_with_same_seed(self):
        assert generate_plonk_srs(1, seed=99).g1_powers == generate_plonk_srs(1, seed=99).g1_powers

    def test_different_seeds(self):
        assert generate_plonk_srs(1, seed=1).g1_powers != generate_plonk_srs(1, seed=2).g1_powers

    def test_trim(self, srs_small):
        trimmed = srs_small.trim(1)
        assert trimmed.max_degree == 1
        assert trimmed.g1_powers == srs_small.g1_powers[:2]
        with pytest.raises(ValueError):
            srs_small.trim(4)

    def test_verifier_params(self, srs_small):
        params = srs_small.verifier_params()
        assert params.g1_powers == [G1]
        assert params.g2_powers == srs_small.g2_powers
        assert params.shape == srs_small.shape

    def test_generate_srs_dispatch(self):
        assert isinstance(generate_srs(BackendVariant.PLONK, 1, seed=3), UnivariateSRS)
        assert isinstance(generate_srs(BackendVariant.HYPERPLONK, 1, seed=3), MultilinearSRS)
        assert generate_srs(BackendVariant.GEMINI, 1, seed=3).backend is BackendVariant.GEMINI


class TestMultilinearSRS:

    def test_basis_sizes(self, ml_srs_small):
        assert ml_srs_small.shape == 2
        assert [len(b) for b in ml_srs_small.lagrange_bases] == [1, 2, 4]
        assert ml_srs_small.lagrange_bases[0] == [G1]
        assert len(ml_srs_small.tau_g2) == 2

    def test_basis_sums_to_generator(self, ml_srs_small):
        # Σ_x eq(x, τ) = 1
        total = None
        for p in ml_srs_small.lagrange_bases[2]:
            total = ec_add(total, p)
        assert total == G1

    def test_trim_keeps_last_taus(self):
        srs = generate_multilinear_srs(3, seed=7)
        trimmed = srs.trim(2)
        assert trimmed.num_vars == 2
        assert trimmed.tau_g2 == srs.tau_g2[1:]
        assert trimmed.lagrange_bases == srs.lagrange_bases[:3]
        with pytest.raises(ValueError):
            srs.trim(4)


# ─────────────────────────────────────────────────────────────────────
# KZG
# ─────────────────────────────────────────────────────────────────────

class TestKZG:

    def test_commit_constant(self, srs_small):
        assert kzg.commit(Polynomial([FR(5)]), srs_small) == ec_mul(G1, 5)

    def test_commit_linearity(self, srs_small):
        a = Polynomial([FR(1), FR(2)])
        b = Polynomial([FR(3), FR(0), FR(4)])
        assert kzg.commit(a + b, srs_small) == ec_add(
            kzg.commit(a, srs_small), kzg.commit(b, srs_small)
        )

    def test_commit_degree_overflow(self, srs_small):
        with pytest.raises(ValueError):
            kzg.commit(Polynomial([FR(1)] * 5), srs_small)

    def test_opening_valid(self, srs_small):
        poly = Polynomial([FR(1), FR(2), FR(3)])
        c = kzg.commit(poly, srs_small)
        proof = kzg.create_witness(poly, FR(7), srs_small)
        assert kzg.verify_opening(c, proof, FR(7), poly.evaluate(FR(7)), srs_small)

    def test_opening_wrong_value(self, srs_small):
        poly = Polynomial([FR(1), FR(2), FR(3)])
        c = kzg.commit(poly, srs_small)
        proof = kzg.create_witness(poly, FR(7), srs_small)
        assert not kzg.verify_opening(c, proof, FR(7), poly.evaluate(FR(7)) + FR(1), srs_small)

    def test_batch_verify(self, srs_small):
        p = Polynomial([FR(2), FR(0), FR(1)])
        q = Polynomial([FR(9), FR(4)])
        params = srs_small.verifier_params()
        openings = [
            (kzg.commit(p, srs_small), FR(3), p.evaluate(FR(3)), kzg.create_witness(p, FR(3), srs_small)),
            (kzg.commit(q, srs_small), FR(8), q.evaluate(FR(8)), kzg.create_witness(q, FR(8), srs_small)),
        ]
        assert kzg.batch_verify(openings, FR(17), params)

        bad = list(openings)
        c, z, y, w = bad[1]
        bad[1] = (c, z, y + FR(1), w)
        assert not kzg.batch_verify(bad, FR(17), params)

    def test_batch_verify_empty(self, srs_small):
        assert kzg.batch_verify([], FR(1), srs_small)


# ─────────────────────────────────────────────────────────────────────
# 다중선형 PCS
# ─────────────────────────────────────────────────────────────────────

class TestMultilinearKzg:

    def test_commit_is_mle_at_tau(self, ml_srs_small):
        pcs = MultilinearKzg()
        assert pcs.commit(ml_srs_small, [FR(6)] * 4) == ec_mul(G1, 6)

    def test_open_verify(self, ml_srs_small, table, point):
        pcs = MultilinearKzg()
        c = pcs.commit(ml_srs_small, table)
        proof = pcs.open(ml_srs_small, table, point, Transcript(b"t"))
        assert len(proof.points) == 2

        value = evaluate(table, point)
        params = ml_srs_small.verifier_params()
        assert pcs.verify(params, [(c, point, value, proof)], Transcript(b"t"))
        assert not pcs.verify(params, [(c, point, value + FR(1), proof)], Transcript(b"t"))

    def test_bad_shape(self, ml_srs_small, table, point):
        pcs = MultilinearKzg()
        c = pcs.commit(ml_srs_small, table)
        proof = OpeningProof(points=[G1])
        with pytest.raises(ProofFormatError):
            pcs.verify(ml_srs_small, [(c, point, FR(0), proof)], Transcript(b"t"))


class TestGemini:

    def test_commit_is_coefficient_kzg(self, srs_small, table):
        pcs = Gemini()
        assert pcs.commit(srs_small, table) == kzg.commit(Polynomial(table), srs_small)

    def test_open_verify(self, srs_small, table, point):
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        proof = pcs.open(srs_small, table, point, Transcript(b"t"))
        # 접기 커밋 1개 + KZG 증명 4개, 평가값 4개
        assert len(proof.points) == 5
        assert len(proof.scalars) == 4

        value = evaluate(table, point)
        params = srs_small.verifier_params()
        assert pcs.verify(params, [(c, point, value, proof)], Transcript(b"t"))

    def test_wrong_value_rejected(self, srs_small, table, point):
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        proof = pcs.open(srs_small, table, point, Transcript(b"t"))
        value = evaluate(table, point) + FR(1)
        assert not pcs.verify(srs_small.verifier_params(), [(c, point, value, proof)], Transcript(b"t"))

    def test_bad_shape(self, srs_small, table, point):
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        with pytest.raises(ProofFormatError):
            pcs.verify(srs_small, [(c, point, FR(0), OpeningProof())], Transcript(b"t"))

    def test_shifted_witnesses_for_false_value_rejected(self, srs_small, table, point):
        """마지막 접기 평가를 바꾸고 결합 계수 u를 알고 두 KZG 증명을 보정해도 거부된다.

        u가 KZG 증명을 흡수하기 전에 정해진다면 Σ uʲ(τ - zⱼ)Δπⱼ = -u³δ 를
        두 상수 보정 Δπ₀ = c, Δπ₃ = d 로 맞출 수 있다.
        """
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        proof = pcs.open(srs_small, table, point, Transcript(b"t"))
        false_value = evaluate(table, point) + FR(1)

        fold_comms = list(proof.points[:1])
        witnesses = list(proof.points[1:])
        pos = list(proof.scalars[:2])
        neg = list(proof.scalars[2:])

        replay = Transcript(b"t")
        replay.append_points(b"gemini_folds", fold_comms)
        beta = replay.challenge_scalar(b"gemini_beta")
        b_last = beta * beta
        r_last = point[-1]

        # F₁(-β²) 를 δ 만큼 바꾸면 마지막 접기 값이 정확히 1 늘어난다
        delta = FR(1) / ((FR(1) - r_last) / FR(2) - r_last / (FR(2) * b_last))
        neg[1] = neg[1] + delta
        replay.append_scalars(b"gemini_evals", pos + neg)
        u = replay.challenge_scalar(b"gemini_batch")

        # 열기 순서: (β, π₀), (-β, π₁), (β², π₂), (-β², π₃)
        d = delta / ((FR(0) - b_last) - beta)
        shift = FR(0) - u * u * u * d
        witnesses[0] = ec_add(witnesses[0], ec_mul(G1, shift))
        witnesses[3] = ec_add(witnesses[3], ec_mul(G1, d))

        forged = OpeningProof(points=fold_comms + witnesses, scalars=pos + neg)
        params = srs_small.verifier_params()
        assert not pcs.verify(params, [(c, point, false_value, forged)], Transcript(b"t"))

    def test_replaced_witness_rejected(self, srs_small, table, point):
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        proof = pcs.open(srs_small, table, point, Transcript(b"t"))
        points = list(proof.points)
        points[1] = ec_mul(G1, 7)
        forged = OpeningProof(points=points, scalars=proof.scalars)
        value = evaluate(table, point)
        assert not pcs.verify(srs_small.verifier_params(), [(c, point, value, forged)], Transcript(b"t"))

    def test_swapped_evaluations_rejected(self, srs_small, table, point):
        pcs = Gemini()
        c = pcs.commit(srs_small, table)
        proof = pcs.open(srs_small, table, point, Transcript(b"t"))
        scalars = list(proof.scalars)
        scalars[0], scalars[2] = scalars[2], scalars[0]
        forged = OpeningProof(points=proof.points, scalars=scalars)
        value = evaluate(table, point)
        assert not pcs.verify(srs_small.verifier_params(), [(c, point, value, forged)], Transcript(b"t"))
