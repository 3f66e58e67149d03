"""
단변수 KZG 커밋먼트
===================

Plonk 백엔드가 배선/셀렉터/몫 다항식을 커밋하고, Gemini 백엔드가 접힌
다항식들을 커밋하는 데 쓴다.

  커밋:   C = p(τ)·G1 = Σ cᵢ·[τⁱ]₁
  열기:   π = q(τ)·G1,  q(x) = (p(x) - p(z)) / (x - z)
  검증:   e(π, [τ]₂) == e(C - y·G1 + z·π, G2)

검증식은 e(π, [τ - z]₂) = e(C - y·G1, G2) 의 z 항을 G1 쪽으로 옮긴 것이다.
G2 쪽에는 SRS의 두 원소만 남으므로 여러 열기를 무작위 결합으로 합칠 수 있다
(batch_verify).
"""

from fibzk.field import FR, G1, ec_pairing, ec_lincomb
from fibzk.utils import powers


def commit(poly, srs):
    """C = Σ cᵢ·[τⁱ]₁

    Raises:
        ValueError: 다항식 차수가 SRS 최대 차수를 넘을 때
    """
    if poly.degree > srs.max_degree:
        raise ValueError(
            f"다항식 차수 {poly.degree}가 SRS 최대 차수 {srs.max_degree}를 초과합니다"
        )
    return ec_lincomb(srs.g1_powers[:len(poly.coeffs)], poly.coeffs)


def create_witness(poly, point, srs):
    """점 point 에서의 열기 증명 π 를 만든다.

    (x - z) 로 나눈 몫은 p(x) - p(z) 를 나눈 몫과 같으므로 나머지는 버린다.
    """
    quotient, _ = poly.divide_by_linear(point)
    return commit(quotient, srs)


def _opening_terms(commitment, point, evaluation, proof):
    # C - y·G1 + z·π 를 이루는 (점, 계수) 쌍
    return [commitment, G1, proof], [FR(1), -FR(evaluation), FR(point)]


def verify_opening(commitment, proof, point, evaluation, srs):
    """단일 열기 p(point) = evaluation 을 검증한다."""
    points, scalars = _opening_terms(commitment, point, evaluation, proof)
    rhs = ec_lincomb(points, scalars)
    return ec_pairing(srs.g2_powers[1], proof) == ec_pairing(srs.g2_powers[0], rhs)


def batch_verify(openings, challenge, srs):
    """여러 열기를 challenge 의 거듭제곱으로 결합해 페어링 2번으로 검증한다.

        e(Σ uʲ·πⱼ, [τ]₂) == e(Σ uʲ·(Cⱼ - yⱼ·G1 + zⱼ·πⱼ), G2)

    Args:
        openings: (commitment, point, evaluation, proof) 튜플 리스트
        challenge: 결합 계수 u (트랜스크립트에서 유도)
        srs: [G2, τ·G2] 를 가진 파라미터

    Returns:
        bool
    """
    if not openings:
        return True

    weights = powers(challenge, len(openings))
    lhs = ec_lincomb([opening[3] for opening in openings], weights)

    points, scalars = [], []
    for weight, opening in zip(weights, openings):
        terms, coeffs = _opening_terms(*opening)
        points.extend(terms)
        scalars.extend(weight * c for c in coeffs)
    rhs = ec_lincomb(points, scalars)

    return ec_pairing(srs.g2_powers[1], lhs) == ec_pairing(srs.g2_powers[0], rhs)
