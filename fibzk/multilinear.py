"""
다중선형 확장(Multilinear Extension) 도구
==========================================

HyperPlonk와 Gemini 백엔드는 회로의 각 열(column)을 불리언 하이퍼큐브
{0,1}^μ 위의 함수로 보고, 그 다중선형 확장(MLE)으로 다룬다.

**인덱스 규약**:
  길이 2^μ의 평가 테이블 evals에서 인덱스 j의 비트 표현이
  j = x₀ + 2·x₁ + ... + 2^(μ-1)·x_(μ-1) 일 때
  evals[j] = f(x₀, x₁, ..., x_(μ-1)) 이다.
  즉 첫 번째 변수 x₀가 최하위 비트이며, 합검사(sumcheck)와 열기(opening)도
  x₀부터 순서대로 변수를 고정(fold)한다.

**MLE 평가**:
  f̃(r) = Σ_x f(x) · eq(x, r),  eq(x, r) = Π (xᵢrᵢ + (1-xᵢ)(1-rᵢ))

**다음 행(next-row) 커널**:
  Plonk의 회전 ω·X에 대응하는 연산. 하이퍼큐브 위에서
  next(x, y) = 1  ⟺  y = x + 1 (mod 2^μ)
  를 만족하는 다중선형 다항식이며 O(μ²)에 평가할 수 있다.

사용 예시:
    >>> table = [FR(3), FR(5)]          # f(0) = 3, f(1) = 5
    >>> evaluate(table, [FR(2)])        # 3 + 2·(5-3) = FR(7)
"""

from fibzk.field import FR


def num_vars_of(table):
    """평가 테이블의 변수 개수 μ (길이는 2^μ 이어야 한다)."""
    size = len(table)
    if size < 1 or size & (size - 1):
        raise ValueError(f"평가 테이블 길이는 2의 거듭제곱이어야 합니다: {size}")
    return size.bit_length() - 1


def fold(table, r):
    """첫 번째 변수를 r로 고정한다: f(r, x₁, ...) 의 테이블 (길이 절반).

    f(r, x') = f(0, x') + r · (f(1, x') - f(0, x'))
    """
    return [
        table[i] + r * (table[i + 1] - table[i])
        for i in range(0, len(table), 2)
    ]


def evaluate(table, point):
    """MLE를 점 point ∈ FR^μ 에서 평가한다 (변수를 차례로 fold)."""
    if len(point) != num_vars_of(table):
        raise ValueError(
            f"점의 차원 {len(point)}이 변수 개수 {num_vars_of(table)}와 다릅니다"
        )
    current = list(table)
    for r in point:
        current = fold(current, r)
    return current[0]


def eq_table(point):
    """eq(x, point) 를 모든 x ∈ {0,1}^μ 에 대해 계산한 테이블.

    변수를 하나씩 추가할 때마다 새 변수가 최상위 비트가 되도록
    테이블을 [t·(1-r)] ‖ [t·r] 로 두 배 늘린다.
    """
    table = [FR(1)]
    for r in point:
        one_minus_r = FR(1) - r
        table = [t * one_minus_r for t in table] + [t * r for t in table]
    return table


def eq_eval(x, y):
    """eq(x, y) = Π (xᵢyᵢ + (1-xᵢ)(1-yᵢ))."""
    result = FR(1)
    for xi, yi in zip(x, y):
        result = result * (xi * yi + (FR(1) - xi) * (FR(1) - yi))
    return result


def next_eval(x, y):
    """다음 행 커널 next(x, y) 의 다중선형 확장을 평가한다.

    하이퍼큐브 위에서 y = x + 1 (mod 2^μ) 일 때만 1이다.

    y = x + 1 (자리올림 없이)이면, x의 가장 낮은 0 비트 위치 k에 대해
    x₀..x_(k-1) = 1, y₀..y_(k-1) = 0, x_k = 0, y_k = 1 이고
    그보다 높은 비트는 같다. 모든 비트가 1인 x는 0으로 돌아간다(wrap).

        next(x, y) = Σ_k [Π_(i<k) xᵢ(1-yᵢ)] · (1-x_k) y_k · [Π_(i>k) eq(xᵢ, yᵢ)]
                     + Π_i xᵢ(1-yᵢ)
    """
    mu = len(x)
    if len(y) != mu:
        raise ValueError("두 점의 차원이 다릅니다")

    carry = [x[i] * (FR(1) - y[i]) for i in range(mu)]
    same = [x[i] * y[i] + (FR(1) - x[i]) * (FR(1) - y[i]) for i in range(mu)]

    # suffix[k] = Π_(i≥k) eq(xᵢ, yᵢ)
    suffix = [FR(1)] * (mu + 1)
    for i in range(mu - 1, -1, -1):
        suffix[i] = suffix[i + 1] * same[i]

    result = FR(0)
    prefix = FR(1)
    for k in range(mu):
        result = result + prefix * (FR(1) - x[k]) * y[k] * suffix[k + 1]
        prefix = prefix * carry[k]

    # wrap: 1...1 → 0...0
    return result + prefix


def shift_table(table):
    """회전 테이블: shifted[j] = table[(j + 1) mod 2^μ]."""
    return list(table[1:]) + [table[0]]


def next_table(point):
    """y ↦ next(point, y) 테이블. eq(point, y - 1) 과 같다."""
    eq = eq_table(point)
    return [eq[-1]] + eq[:-1]
