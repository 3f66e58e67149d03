"""
스칼라 필드와 bn128 군 연산
===========================

배선 값, 다항식 계수, MLE 평가값, 트랜스크립트 챌린지는 모두 FR 원소이고
커밋먼트는 모두 bn128 G1 점이다. 무한원점은 py_ecc 관례대로 None 이다.

    >>> FR(3) * FR(7)          # FR(21)
    >>> ec_mul(G1, 5)          # 5·G1
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ


CURVE_ORDER = bn128.curve_order         # 스칼라 필드 위수 r
FIELD_MODULUS = bn128.field_modulus     # 점 좌표의 기저 필드 위수 q

G1 = bn128.G1
G2 = bn128.G2


class FR(FQ):
    """Z/rZ 원소. 산술은 py_ecc FQ 를 그대로 쓴다."""
    field_modulus = CURVE_ORDER


# r - 1 = 2^28 · (홀수)
TWO_ADICITY = 28
MULTIPLICATIVE_GENERATOR = 5


# ─── 군 연산 ───

def ec_mul(point, scalar):
    """scalar · point (scalar 는 int 또는 FR)."""
    if point is None:
        return None
    return bn128.multiply(point, int(scalar) % CURVE_ORDER)


def ec_add(p1, p2):
    return bn128.add(p1, p2)


def ec_neg(point):
    return bn128.neg(point)


def ec_lincomb(points, scalars):
    """Σ scalarᵢ · pointᵢ

    0 계수는 건너뛰고 1 계수는 곱셈 없이 더한다. 0/1 셀렉터 열의 커밋은
    덧셈만으로 끝난다.

    Raises:
        ValueError: 두 리스트의 길이가 다를 때
    """
    if len(points) != len(scalars):
        raise ValueError(
            f"점 개수 {len(points)}와 스칼라 개수 {len(scalars)}가 다릅니다"
        )
    acc = None
    for point, scalar in zip(points, scalars):
        k = int(scalar) % CURVE_ORDER
        if point is None or k == 0:
            continue
        acc = bn128.add(acc, point if k == 1 else bn128.multiply(point, k))
    return acc


def ec_pairing(g2_point, g1_point):
    """e(g1_point, g2_point). 인자 순서는 py_ecc 와 같이 (G2, G1) 이다.

    한쪽이 무한원점이면 GT 항등원.
    """
    if g1_point is None or g2_point is None:
        return bn128.FQ12.one()
    return bn128.pairing(g2_point, g1_point)


def is_on_g1(point):
    return point is None or bn128.is_on_curve(point, bn128.b)


def is_on_g2(point):
    return point is None or bn128.is_on_curve(point, bn128.b2)


# ─── 단위근 ───

def get_root_of_unity(n):
    """n차 원시 단위근 ω = g^((r-1)/n).

    Raises:
        ValueError: n 이 2의 거듭제곱이 아니거나 2^28 보다 클 때
    """
    if n < 1 or n & (n - 1):
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n.bit_length() - 1 > TWO_ADICITY:
        raise ValueError(f"n은 2^{TWO_ADICITY} 이하여야 합니다: {n}")
    return FR(MULTIPLICATIVE_GENERATOR) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """[1, ω, ..., ω^(n-1)]"""
    omega = get_root_of_unity(n)
    roots = [FR(1)]
    while len(roots) < n:
        roots.append(roots[-1] * omega)
    return roots
