"""
다항식 커밋먼트 스킴 (Polynomial Commitment Schemes)
=====================================================

  kzg              단변수 KZG (Plonk, Gemini의 기반)
  multilinear_kzg  PST13 다중선형 KZG (HyperPlonk)
  gemini           단변수 KZG 위의 Gemini 다중선형 평가 인자 (Gemini)

다중선형 스킴 두 개는 같은 인터페이스를 가진다:

    commit(params, table)                         -> G1 점
    open(params, table, point, transcript)        -> OpeningProof
    verify(params, claims, transcript)            -> bool
        claims = [(commitment, point, value, OpeningProof), ...]

open과 verify는 같은 순서로 트랜스크립트에 메시지를 추가해야 한다.
"""


class OpeningProof:
    """다중선형 열기 증명: G1 점 리스트와 스칼라 리스트.

    PST13: points = 몫 커밋 μ개, scalars = []
    Gemini: points = 접기 커밋 (μ-1)개 + KZG 증명 2μ개, scalars = F_i(±β^(2^i)) 2μ개
    """

    def __init__(self, points=None, scalars=None):
        self.points = tuple(points or ())
        self.scalars = tuple(scalars or ())

    def __eq__(self, other):
        if not isinstance(other, OpeningProof):
            return False
        return self.points == other.points and self.scalars == other.scalars

    def __repr__(self):
        return f"OpeningProof(points={len(self.points)}, scalars={len(self.scalars)})"
