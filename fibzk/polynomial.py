"""
단변수 다항식과 NTT
===================

Plonk 백엔드(배선/셀렉터/몫 다항식)와 Gemini 백엔드(다중선형 테이블을
계수로 갖는 F(x) = Σ f(j)·x^j)가 함께 쓰는 계수 표현 다항식.

나눗셈은 이 저장소에 필요한 두 형태만 제공한다.

  - 일차식 (x - z) 로 나누기: KZG 열기 증명의 몫 (조립제법, O(n))
  - x^n - 1 로 나누기: Plonk 몫 다항식 t(x) (x^n ≡ 1 을 이용, O(n))

    >>> p = Polynomial([1, 2, 3])       # 1 + 2x + 3x²
    >>> p.evaluate(2)                   # FR(17)
"""

from itertools import zip_longest

from fibzk.field import FR

ZERO = FR(0)
ONE = FR(1)


def _to_fr(value):
    return value if isinstance(value, FR) else FR(value)


class Polynomial:
    """FR 계수 다항식. coeffs[i]가 x^i 의 계수이다.

    최고차 계수가 0이 되지 않도록 항상 정규화하며, 영 다항식은 [0] 하나로 둔다.
    """

    def __init__(self, coeffs=None):
        values = [_to_fr(c) for c in (coeffs or [])]
        while values and values[-1] == ZERO:
            values.pop()
        self.coeffs = values or [ZERO]

    @property
    def degree(self):
        return len(self.coeffs) - 1

    def is_zero(self):
        return self.coeffs == [ZERO]

    def evaluate(self, point):
        """p(point). 최고차 계수부터 누적한다."""
        point = _to_fr(point)
        acc = ZERO
        for coeff in self.coeffs[::-1]:
            acc = acc * point + coeff
        return acc

    # ─── 산술 ───

    @staticmethod
    def _lift(other):
        if isinstance(other, Polynomial):
            return other
        if isinstance(other, (int, FR)):
            return Polynomial([other])
        return None

    def __add__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return Polynomial([
            x + y for x, y in zip_longest(self.coeffs, other.coeffs, fillvalue=ZERO)
        ])

    __radd__ = __add__

    def __neg__(self):
        return Polynomial([-c for c in self.coeffs])

    def __sub__(self, other):
        other = self._lift(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        return (-self) + other

    def __mul__(self, other):
        if isinstance(other, (int, FR)):
            factor = _to_fr(other)
            return Polynomial([c * factor for c in self.coeffs])
        if not isinstance(other, Polynomial):
            return NotImplemented
        if self.is_zero() or other.is_zero():
            return Polynomial.zero()
        product = [ZERO] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, x in enumerate(self.coeffs):
            if x == ZERO:
                continue
            for j, y in enumerate(other.coeffs):
                product[i + j] += x * y
        return Polynomial(product)

    __rmul__ = __mul__

    def __eq__(self, other):
        other = self._lift(other)
        return other is not None and self.coeffs == other.coeffs

    def __len__(self):
        return len(self.coeffs)

    def __repr__(self):
        if self.is_zero():
            return "Poly(0)"
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == ZERO:
                continue
            power = "" if i == 0 else ("*x" if i == 1 else f"*x^{i}")
            terms.append(f"{int(c)}{power}")
        return f"Poly({' + '.join(terms)})"

    # ─── 변환 ───

    def rotate(self, factor):
        """p(x) → p(factor·x).

        factor = ω 이면 도메인 점 ωⁱ 에서의 값이 다음 행 ω^(i+1) 의 값이 된다.
        """
        factor = _to_fr(factor)
        scaled = []
        power = ONE
        for c in self.coeffs:
            scaled.append(c * power)
            power *= factor
        return Polynomial(scaled)

    def divide_by_linear(self, point):
        """p(x) = q(x)·(x - point) + r 로 나눈다 (조립제법).

        Returns:
            tuple: (몫 Polynomial q, 나머지 FR r = p(point))
        """
        point = _to_fr(point)
        quotient = [ZERO] * (len(self.coeffs) - 1)
        acc = ZERO
        for i in range(len(self.coeffs) - 1, 0, -1):
            acc = acc * point + self.coeffs[i]
            quotient[i - 1] = acc
        return Polynomial(quotient), acc * point + self.coeffs[0]

    def divide_by_vanishing(self, n):
        """Z_H(x) = x^n - 1 로 나눈다.

        위에서부터 x^i = x^(i-n)·(x^n - 1) + x^(i-n) 을 적용해 차수를 낮춘다.

        Raises:
            ValueError: 나머지가 0이 아닐 때 (도메인 위에서 0이 아닌 값이 있음)
        """
        rest = list(self.coeffs)
        quotient = [ZERO] * max(len(rest) - n, 0)
        for i in range(len(rest) - 1, n - 1, -1):
            top = rest[i]
            quotient[i - n] = top
            rest[i - n] += top
        if any(c != ZERO for c in rest[:n]):
            raise ValueError("소거 다항식으로 나누어 떨어지지 않습니다 (제약 불만족)")
        return Polynomial(quotient)

    # ─── 생성 ───

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def vanishing(cls, n):
        """x^n - 1"""
        return cls([-ONE] + [ZERO] * (n - 1) + [ONE])

    @classmethod
    def from_evaluations(cls, evals, omega):
        """{1, ω, ..., ω^(n-1)} 위의 값으로부터 보간한다."""
        return cls(ifft(evals, omega))


# ─────────────────────────────────────────────────────────────────────
# NTT
# ─────────────────────────────────────────────────────────────────────

def _bit_reverse(values):
    n = len(values)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j |= bit
        if i < j:
            values[i], values[j] = values[j], values[i]


def fft(coeffs, omega):
    """계수 → [p(1), p(ω), ..., p(ω^(n-1))].

    비트 역순으로 재배치한 뒤 길이 2, 4, ..., n 의 버터플라이를 차례로 적용한다.

    Args:
        coeffs: 길이가 2의 거듭제곱인 리스트
        omega: n차 원시 단위근

    Raises:
        ValueError: 길이가 2의 거듭제곱이 아닐 때
    """
    n = len(coeffs)
    if n == 0 or n & (n - 1):
        raise ValueError(f"NTT 길이는 2의 거듭제곱이어야 합니다: {n}")
    values = [_to_fr(c) for c in coeffs]
    _bit_reverse(values)

    span = 1
    while span < n:
        step = _to_fr(omega) ** (n // (2 * span))
        for start in range(0, n, 2 * span):
            twiddle = ONE
            for k in range(start, start + span):
                odd = values[k + span] * twiddle
                values[k], values[k + span] = values[k] + odd, values[k] - odd
                twiddle *= step
        span *= 2
    return values


def ifft(evals, omega):
    """평가값 → 계수. ω⁻¹ 로 변환한 뒤 n 으로 나눈다."""
    n_inv = ONE / FR(len(evals))
    return [v * n_inv for v in fft(evals, ONE / _to_fr(omega))]
