"""
다중선형 KZG 커밋먼트 (PST13)
==============================

HyperPlonk 백엔드의 커밋 수단. 불리언 하이퍼큐브 위의 평가 테이블을
그대로 커밋하고, 임의의 점 z ∈ FR^μ 에서의 MLE 값을 연다.

**커밋**:
  C = Σ_x f(x) · eq(x, τ)·G1 = f̃(τ)·G1   (SRS의 라그랑주 기저와 MSM)

**열기**:
  f̃(X) - f̃(z) = Σᵢ (Xᵢ - zᵢ) · qᵢ(X_(i+1), ..., X_(μ-1))
  변수 X₀부터 하나씩 고정하면서 qᵢ = f(…, 1, ·) - f(…, 0, ·) 를 얻는다.
  증명 = [q₀(τ)·G1, ..., q_(μ-1)(τ)·G1]

**검증** (여러 열기를 u로 결합, 페어링 μ+1번):
  e(Σₖ uᵏ(Cₖ - yₖ·G1 + Σᵢ zₖ,ᵢ·πₖ,ᵢ), G2) == Πᵢ e(Σₖ uᵏ·πₖ,ᵢ, [τᵢ]₂)
"""

from fibzk.errors import ProofFormatError
from fibzk.field import FR, G1, ec_lincomb, ec_pairing
from fibzk.multilinear import num_vars_of
from fibzk.pcs import OpeningProof
from fibzk.utils import powers


class MultilinearKzg:
    """PST13 다중선형 KZG."""

    name = "multilinear-kzg"

    def commit(self, params, table):
        basis = params.lagrange_bases[num_vars_of(table)]
        return ec_lincomb(basis, table)

    def open(self, params, table, point, transcript):
        quotients = []
        current = list(table)
        for r in point:
            lo = current[0::2]
            hi = current[1::2]
            q = [h - l for l, h in zip(lo, hi)]
            quotients.append(ec_lincomb(params.lagrange_bases[num_vars_of(q)], q))
            current = [l + r * d for l, d in zip(lo, q)]
        transcript.append_points(b"mlkzg_quotients", quotients)
        return OpeningProof(points=quotients)

    def verify(self, params, claims, transcript):
        num_vars = len(params.tau_g2)
        for _, point, _, proof in claims:
            if len(point) != num_vars or len(proof.points) != num_vars or proof.scalars:
                raise ProofFormatError("다중선형 KZG 열기 증명의 모양이 잘못되었습니다")
            transcript.append_points(b"mlkzg_quotients", list(proof.points))

        u = transcript.challenge_scalar(b"mlkzg_batch")
        weights = powers(u, len(claims))

        lhs_points = []
        lhs_scalars = []
        combined_eval = FR(0)
        for weight, (commitment, point, value, proof) in zip(weights, claims):
            lhs_points.append(commitment)
            lhs_scalars.append(weight)
            for z, pi in zip(point, proof.points):
                lhs_points.append(pi)
                lhs_scalars.append(weight * z)
            combined_eval = combined_eval + weight * value
        lhs_points.append(G1)
        lhs_scalars.append(FR(0) - combined_eval)
        lhs = ec_pairing(params.g2_powers[0], ec_lincomb(lhs_points, lhs_scalars))

        rhs = None
        for i, tau_g2 in enumerate(params.tau_g2):
            combined = ec_lincomb([proof.points[i] for _, _, _, proof in claims], weights)
            term = ec_pairing(tau_g2, combined)
            rhs = term if rhs is None else rhs * term

        return lhs == rhs
