"""
공용 fixture
============

bn128 위의 키 생성/증명/검증은 순수 파이썬이라 느리다.
SRS, 키, 증명은 세션마다 한 번만 만든다.

  n = 10 행 회로:
    Plonk      : k = 4 (도메인 16)
    HyperPlonk : μ = 4
    Gemini     : 차수 상한 15
"""

import pytest

from fibzk.backends import compile_circuit
from fibzk.circuit import build
from fibzk.keygen import setup
from fibzk.prover import prove
from fibzk.srs import generate_gemini_srs, generate_multilinear_srs, generate_plonk_srs
from fibzk.variant import BackendVariant
from fibzk.witness import generate


SRS_SEED = 12345

# 10번째 피보나치 항 (f(0) = f(1) = 1)
PUBLIC_OUTPUT = 55


@pytest.fixture(scope="session")
def spec():
    return build(10)


@pytest.fixture(scope="session")
def witness(spec):
    return generate(spec, (1, 1))


@pytest.fixture(scope="session")
def plonk_srs():
    return generate_plonk_srs(4, seed=SRS_SEED)


@pytest.fixture(scope="session")
def multilinear_srs():
    return generate_multilinear_srs(4, seed=SRS_SEED)


@pytest.fixture(scope="session")
def gemini_srs():
    return generate_gemini_srs(15, seed=SRS_SEED)


@pytest.fixture(scope="session")
def srs_by_backend(plonk_srs, multilinear_srs, gemini_srs):
    return {
        BackendVariant.PLONK: plonk_srs,
        BackendVariant.HYPERPLONK: multilinear_srs,
        BackendVariant.GEMINI: gemini_srs,
    }


@pytest.fixture(scope="session")
def keys(spec, srs_by_backend):
    """백엔드 → (ProvingKey, VerifyingKey)"""
    result = {}
    for backend, srs in srs_by_backend.items():
        result[backend] = setup(compile_circuit(spec, backend), srs)
    return result


@pytest.fixture(scope="session")
def proofs(keys, witness):
    """백엔드 → 정상 증명"""
    return {
        backend: prove(pk, witness, PUBLIC_OUTPUT, backend=backend)
        for backend, (pk, _) in keys.items()
    }
