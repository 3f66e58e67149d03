"""
Structured Reference String (SRS)
=================================

백엔드별 신뢰 설정(trusted setup) 파라미터를 생성하고 다듬는다.

**SRS란?**
  비밀 값 τ ("toxic waste")에서 유도된 공개 군(group) 원소 집합이다.
  생성 후 τ는 반드시 폐기되어야 한다. τ를 아는 사람은 거짓 증명을 만들 수 있다.
  여기서는 교육용으로 seed에서 결정론적으로 생성할 수 있다.

**백엔드별 모양(shape)**:

  UnivariateSRS (Plonk, Gemini)
      G1 powers: [G1, τ·G1, τ²·G1, ..., τ^d·G1]
      G2 powers: [G2, τ·G2]
      - Plonk : 모양 태그 k, 도메인 크기 2^k (d = 2^k - 1)
      - Gemini: 모양 태그 d, 단변수 차수 상한

  MultilinearSRS (HyperPlonk, PST13 다중선형 KZG)
      τ = (τ₀, ..., τ_(m-1)),  모양 태그 m (변수 개수)
      lagrange_bases[k] = [eq(x, (τ_(m-k), ..., τ_(m-1)))·G1  for x ∈ {0,1}^k]
      G2: [G2],  tau_g2 = [τ₀·G2, ..., τ_(m-1)·G2]

**다듬기(trim)**:
  회로가 요구하는 것보다 큰 SRS는 받아들이고 필요한 부분만 잘라 쓴다.
  작은 SRS는 키 생성 단계에서 SrsTooSmallError로 거부된다.

사용 예시:
    >>> srs = generate_plonk_srs(k=4, seed=42)
    >>> len(srs.g1_powers)  # 16
"""

import hashlib
import secrets

from fibzk.field import FR, G1, G2, ec_mul, CURVE_ORDER
from fibzk.multilinear import eq_table
from fibzk.variant import BackendVariant


def _derive_secret(seed, index=None):
    """seed에서 0이 아닌 비밀 스칼라를 유도한다. seed가 None이면 난수."""
    if seed is None:
        return FR(secrets.randbelow(CURVE_ORDER - 1) + 1)
    material = str(seed) if index is None else f"{seed}:{index}"
    h = hashlib.sha256(material.encode()).digest()
    value = int.from_bytes(h, "big") % CURVE_ORDER
    return FR(value or 1)


# ─────────────────────────────────────────────────────────────────────
# 단변수 SRS (Plonk, Gemini)
# ─────────────────────────────────────────────────────────────────────

class UnivariateSRS:
    """단변수 KZG 커밋먼트용 공개 파라미터.

    속성:
        g1_powers: [G1, τ·G1, ..., τ^d·G1]  (검증자용 파라미터에서는 [G1]만)
        g2_powers: [G2, τ·G2]
        max_degree: 지원하는 최대 다항식 차수 d
        backend: BackendVariant.PLONK 또는 BackendVariant.GEMINI
    """

    def __init__(self, g1_powers, g2_powers, max_degree, backend=BackendVariant.PLONK):
        self.g1_powers = list(g1_powers)
        self.g2_powers = list(g2_powers)
        self.max_degree = max_degree
        self.backend = backend

    @property
    def domain_size(self):
        return self.max_degree + 1

    @property
    def shape(self):
        """모양 태그. Plonk는 log2(도메인 크기), Gemini는 차수 상한.

        Plonk SRS의 도메인 크기가 2의 거듭제곱이 아니면 None.
        """
        if self.backend is BackendVariant.PLONK:
            size = self.domain_size
            if size & (size - 1):
                return None
            return size.bit_length() - 1
        return self.max_degree

    @classmethod
    def generate(cls, max_degree, seed=None, backend=BackendVariant.PLONK):
        """SRS를 생성한다.

        Args:
            max_degree: 지원할 최대 다항식 차수
            seed: 결정론적 생성을 위한 시드 (None이면 난수 τ)
            backend: SRS에 기록될 백엔드 태그
        """
        tau = _derive_secret(seed)

        g1_powers = []
        tau_power = FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(ec_mul(G1, tau_power))
            tau_power = tau_power * tau

        g2_powers = [G2, ec_mul(G2, tau)]
        return cls(g1_powers, g2_powers, max_degree, backend)

    def trim(self, max_degree):
        """차수 max_degree까지만 남긴 SRS."""
        if max_degree > self.max_degree:
            raise ValueError(
                f"SRS 최대 차수 {self.max_degree}보다 크게 다듬을 수 없습니다: {max_degree}"
            )
        return UnivariateSRS(
            self.g1_powers[:max_degree + 1], self.g2_powers, max_degree, self.backend
        )

    def verifier_params(self):
        """검증에 필요한 원소만 남긴 파라미터: [G1], [G2, τ·G2]."""
        return UnivariateSRS(self.g1_powers[:1], self.g2_powers, self.max_degree, self.backend)


# ─────────────────────────────────────────────────────────────────────
# 다중선형 SRS (HyperPlonk)
# ─────────────────────────────────────────────────────────────────────

class MultilinearSRS:
    """다중선형 KZG (PST13) 커밋먼트용 공개 파라미터.

    lagrange_bases[k]는 마지막 k개 변수 위의 라그랑주 기저 커밋이다.
    μ변수 MLE의 커밋은 lagrange_bases[μ]와의 MSM이고,
    열기 증명의 i번째 몫 다항식(변수 i+1..μ-1)은 lagrange_bases[μ-i-1]로 커밋한다.
    """

    backend = BackendVariant.HYPERPLONK

    def __init__(self, num_vars, lagrange_bases, g2_powers, tau_g2):
        self.num_vars = num_vars
        self.lagrange_bases = [list(basis) for basis in lagrange_bases]
        self.g2_powers = list(g2_powers)
        self.tau_g2 = list(tau_g2)

    @property
    def shape(self):
        return self.num_vars

    @classmethod
    def generate(cls, num_vars, seed=None):
        taus = [_derive_secret(seed, i) for i in range(num_vars)]
        bases = []
        for k in range(num_vars + 1):
            table = eq_table(taus[num_vars - k:])
            bases.append([ec_mul(G1, value) for value in table])
        tau_g2 = [ec_mul(G2, tau) for tau in taus]
        return cls(num_vars, bases, [G2], tau_g2)

    def trim(self, num_vars):
        """변수 num_vars개 SRS: 마지막 num_vars개의 τ만 남긴다."""
        if num_vars > self.num_vars:
            raise ValueError(
                f"SRS 변수 개수 {self.num_vars}보다 크게 다듬을 수 없습니다: {num_vars}"
            )
        return MultilinearSRS(
            num_vars,
            self.lagrange_bases[:num_vars + 1],
            self.g2_powers,
            self.tau_g2[self.num_vars - num_vars:],
        )

    def verifier_params(self):
        """lagrange_bases[0] = [G1] 과 G2 원소만 남긴 파라미터."""
        return MultilinearSRS(
            self.num_vars, self.lagrange_bases[:1], self.g2_powers, self.tau_g2
        )


# ─────────────────────────────────────────────────────────────────────
# 생성 도우미
# ─────────────────────────────────────────────────────────────────────

def generate_plonk_srs(k, seed=None):
    """도메인 크기 2^k 의 Plonk SRS."""
    return UnivariateSRS.generate((1 << k) - 1, seed, BackendVariant.PLONK)


def generate_gemini_srs(max_degree, seed=None):
    """차수 상한 max_degree 의 Gemini SRS."""
    return UnivariateSRS.generate(max_degree, seed, BackendVariant.GEMINI)


def generate_multilinear_srs(num_vars, seed=None):
    """변수 num_vars개의 HyperPlonk SRS."""
    return MultilinearSRS.generate(num_vars, seed)


def generate_srs(backend, size, seed=None):
    """백엔드에 맞는 SRS를 생성한다. size는 해당 백엔드의 모양 태그이다."""
    if backend is BackendVariant.PLONK:
        return generate_plonk_srs(size, seed)
    if backend is BackendVariant.HYPERPLONK:
        return generate_multilinear_srs(size, seed)
    if backend is BackendVariant.GEMINI:
        return generate_gemini_srs(size, seed)
    raise ValueError(f"알 수 없는 백엔드: {backend}")
