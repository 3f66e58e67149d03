"""
Gemini: 단변수 KZG 위의 다중선형 평가 인자
===========================================

평가 테이블 f: {0,1}^μ → FR 를 계수로 갖는 단변수 다항식
    F₀(X) = Σⱼ f(j)·Xʲ
을 KZG로 커밋한다. f̃(r) = y 는 접기(folding)로 증명한다.

**접기**:
  F(X) = E(X²) + X·O(X²) 로 짝수/홀수 계수를 나누면
  E는 x₀ = 0, O는 x₀ = 1 인 절반 테이블이다. 첫 변수를 r₀로 고정하면
      F₁(Y) = (1 - r₀)·E(Y) + r₀·O(Y)
  이를 μ번 반복하면 상수 F_μ = f̃(r) 이 된다.

**검증**:
  챌린지 β에 대해 bᵢ = β^(2^i) 이면
      E(bᵢ²) = (Fᵢ(bᵢ) + Fᵢ(-bᵢ)) / 2
      O(bᵢ²) = (Fᵢ(bᵢ) - Fᵢ(-bᵢ)) / (2bᵢ)
  이므로 Fᵢ(±bᵢ) 로부터 F_(i+1)(b_(i+1)) 을 계산하여 다음 단계의 값과 비교하고,
  마지막 단계는 주장된 y와 비교한다. 모든 Fᵢ(±bᵢ) 는 KZG로 열며,
  여러 열기를 kzg.batch_verify 로 묶어 페어링 2번에 검증한다.
  결합 계수는 KZG 증명을 모두 흡수한 뒤에 뽑는다.
"""

from fibzk.errors import ProofFormatError
from fibzk.field import FR
from fibzk.multilinear import fold
from fibzk.pcs import OpeningProof
from fibzk.pcs import kzg
from fibzk.polynomial import Polynomial


def _fold_value(pos, neg, b, r):
    """F(±b) 로부터 접힌 다항식의 b² 에서의 값을 계산한다."""
    two = FR(2)
    even = (pos + neg) / two
    odd = (pos - neg) / (two * b)
    return (FR(1) - r) * even + r * odd


def _squares(beta, count):
    result = []
    current = beta
    for _ in range(count):
        result.append(current)
        current = current * current
    return result


class Gemini:
    """Gemini 다중선형 커밋먼트 (단변수 KZG 기반)."""

    name = "gemini"

    def commit(self, params, table):
        return kzg.commit(Polynomial(table), params)

    def open(self, params, table, point, transcript):
        folds = [list(table)]
        for r in point[:-1]:
            folds.append(fold(folds[-1], r))
        polys = [Polynomial(f) for f in folds]

        fold_comms = [kzg.commit(p, params) for p in polys[1:]]
        transcript.append_points(b"gemini_folds", fold_comms)
        beta = transcript.challenge_scalar(b"gemini_beta")
        squares = _squares(beta, len(polys))

        pos = [p.evaluate(b) for p, b in zip(polys, squares)]
        neg = [p.evaluate(FR(0) - b) for p, b in zip(polys, squares)]
        transcript.append_scalars(b"gemini_evals", pos + neg)

        witnesses = []
        for p, b in zip(polys, squares):
            witnesses.append(kzg.create_witness(p, b, params))
            witnesses.append(kzg.create_witness(p, FR(0) - b, params))
        transcript.append_points(b"gemini_witnesses", witnesses)

        return OpeningProof(points=fold_comms + witnesses, scalars=pos + neg)

    def _reduce(self, commitment, point, value, proof, transcript):
        """하나의 주장을 KZG 열기 리스트로 바꾼다. 접기 관계가 깨지면 None."""
        mu = len(point)
        if len(proof.points) != 3 * mu - 1 or len(proof.scalars) != 2 * mu:
            raise ProofFormatError("Gemini 열기 증명의 모양이 잘못되었습니다")

        fold_comms = list(proof.points[:mu - 1])
        witnesses = proof.points[mu - 1:]
        pos = list(proof.scalars[:mu])
        neg = list(proof.scalars[mu:])

        transcript.append_points(b"gemini_folds", fold_comms)
        beta = transcript.challenge_scalar(b"gemini_beta")
        transcript.append_scalars(b"gemini_evals", pos + neg)
        transcript.append_points(b"gemini_witnesses", list(witnesses))
        squares = _squares(beta, mu)

        if beta == FR(0):
            return None
        for i in range(mu):
            folded = _fold_value(pos[i], neg[i], squares[i], point[i])
            expected = pos[i + 1] if i + 1 < mu else value
            if folded != expected:
                return None

        commitments = [commitment] + fold_comms
        openings = []
        for i in range(mu):
            b = squares[i]
            openings.append((commitments[i], b, pos[i], witnesses[2 * i]))
            openings.append((commitments[i], FR(0) - b, neg[i], witnesses[2 * i + 1]))
        return openings

    def verify(self, params, claims, transcript):
        openings = []
        for commitment, point, value, proof in claims:
            reduced = self._reduce(commitment, point, value, proof, transcript)
            if reduced is None:
                return False
            openings.extend(reduced)

        u = transcript.challenge_scalar(b"gemini_batch")
        return kzg.batch_verify(openings, u, params)
