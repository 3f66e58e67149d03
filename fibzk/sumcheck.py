"""
합검사 (Sumcheck) 프로토콜
==========================

다중선형 테이블 f₁, ..., f_t 와 결합 함수 g 에 대해
    Σ_(x ∈ {0,1}^μ) g(f₁(x), ..., f_t(x)) = claim
을 증명한다. HyperPlonk와 Gemini 백엔드가 제로체크와 시프트 검사에 사용한다.

**라운드 i**:
  Prover는 일변수 다항식
      sᵢ(t) = Σ_(x_(i+1..)) g(f(r₀, ..., r_(i-1), t, x_(i+1), ...))
  을 t = 0, 1, ..., d 에서의 값으로 보낸다 (d = g의 차수).
  Verifier는 sᵢ(0) + sᵢ(1) == claim 을 확인하고, 챌린지 rᵢ 를 뽑아
  claim ← sᵢ(rᵢ) (라그랑주 보간) 로 갱신한다.

**마지막 단계**:
  μ 라운드 후 claim 은 g(f₁(r), ..., f_t(r)) 와 같아야 한다.
  이 값의 확인(오라클 질의)은 호출자가 커밋먼트 열기로 처리한다.

변수는 multilinear 모듈의 규약대로 x₀(최하위 비트)부터 고정한다.
"""

from fibzk.errors import SumcheckError
from fibzk.field import FR
from fibzk.multilinear import fold, num_vars_of


def _interpolate(evals, r):
    """점 0, 1, ..., d 에서의 값 evals 로 정해지는 다항식을 r에서 평가한다."""
    d = len(evals) - 1
    result = FR(0)
    for i, y in enumerate(evals):
        numerator = FR(1)
        denominator = FR(1)
        for j in range(d + 1):
            if j == i:
                continue
            numerator = numerator * (r - FR(j))
            denominator = denominator * FR(i - j)
        result = result + y * numerator / denominator
    return result


def prove(tables, combine, degree, transcript, label):
    """합검사 Prover.

    Args:
        tables: 같은 길이(2^μ)의 평가 테이블 리스트
        combine: 각 테이블의 값 리스트를 받아 FR을 반환하는 함수 g
        degree: g의 차수 d (라운드 메시지는 d+1개의 값)
        transcript: Fiat-Shamir 트랜스크립트
        label: 라운드 메시지/챌린지의 레이블 접두어

    Returns:
        tuple: (라운드 메시지 리스트, 챌린지 점 r, 마지막 테이블 값들 f(r))
    """
    num_vars = num_vars_of(tables[0])
    tables = [list(t) for t in tables]
    rounds = []
    point = []

    for _ in range(num_vars):
        half = len(tables[0]) // 2
        evals = []
        for t in range(degree + 1):
            x = FR(t)
            total = FR(0)
            for j in range(half):
                values = [
                    table[2 * j] + x * (table[2 * j + 1] - table[2 * j])
                    for table in tables
                ]
                total = total + combine(values)
            evals.append(total)

        transcript.append_scalars(label + b"_round", evals)
        r = transcript.challenge_scalar(label + b"_challenge")
        tables = [fold(table, r) for table in tables]
        rounds.append(evals)
        point.append(r)

    return rounds, point, [table[0] for table in tables]


def verify(claim, rounds, num_vars, degree, transcript, label):
    """합검사 Verifier.

    Returns:
        tuple: (마지막 claim, 챌린지 점 r)

    Raises:
        SumcheckError: 라운드 개수/크기가 맞지 않거나 sᵢ(0) + sᵢ(1) != claim
    """
    if len(rounds) != num_vars:
        raise SumcheckError(f"라운드 개수 {len(rounds)} != 변수 개수 {num_vars}")

    point = []
    for i, evals in enumerate(rounds):
        if len(evals) != degree + 1:
            raise SumcheckError(f"{i}번째 라운드 메시지 크기가 {degree + 1}이 아닙니다")
        if evals[0] + evals[1] != claim:
            raise SumcheckError(f"{i}번째 라운드에서 합이 일치하지 않습니다")

        transcript.append_scalars(label + b"_round", evals)
        r = transcript.challenge_scalar(label + b"_challenge")
        claim = _interpolate(evals, r)
        point.append(r)

    return claim, point
