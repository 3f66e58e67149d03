"""
공유 유틸리티
=============

여러 모듈에서 공유되는 작은 수학적 유틸리티 함수.

**주요 기능**:
  - vanishing_poly_eval: 소거 다항식 Z_H(ζ) = ζ^n - 1 평가
  - next_power_of_2 / log2_ceil: 행 개수 → 도메인 크기 / 변수 개수
  - powers: 챌린지 거듭제곱 [1, x, x², ...] (배치 결합 계수)
"""

from fibzk.field import FR


def vanishing_poly_eval(n, zeta):
    """소거 다항식 Z_H(ζ) = ζ^n - 1 을 평가한다.

    Z_H(x) = x^n - 1 은 도메인 H = {1, ω, ..., ω^(n-1)} 위에서 0이 되는 다항식이다.

    Args:
        n: 도메인 크기
        zeta: 평가 점 (FR 원소)

    Returns:
        FR: ζ^n - 1
    """
    return zeta ** n - FR(1)


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱을 반환한다.

    예시:
        >>> next_power_of_2(10)  # 16
        >>> next_power_of_2(16)  # 16
    """
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def log2_ceil(n):
    """2^k ≥ n 을 만족하는 가장 작은 k.

    Plonk에서는 도메인 크기 지수 k, HyperPlonk에서는 변수 개수 μ가 된다.
    """
    return next_power_of_2(n).bit_length() - 1


def powers(x, count):
    """[1, x, x², ..., x^(count-1)] 을 반환한다."""
    result = []
    current = FR(1)
    for _ in range(count):
        result.append(current)
        current = current * x
    return result
