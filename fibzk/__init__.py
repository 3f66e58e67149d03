"""
fibzk: 피보나치 회로 영지식 증명
==================================

f(0) = f(1) = 1 에서 시작하는 피보나치 수열의 10번째 항이 공개 값과 같다는
것을 세 가지 증명 백엔드로 증명한다.

  - Plonk      : 단변수 KZG, 2^k 도메인
  - HyperPlonk : 불리언 하이퍼큐브 위의 합검사 + 다중선형 KZG (PST13)
  - Gemini     : 같은 합검사, 다중선형 값을 단변수 KZG로 여는 Gemini 접기

사용 예시:
    >>> spec = build(10)
    >>> witness = generate(spec, (1, 1))
    >>> circuit = compile_circuit(spec, BackendVariant.PLONK)
    >>> pk, vk = setup(circuit, generate_plonk_srs(4))
    >>> proof = prove(pk, witness, 55)
    >>> verify(vk, 55, proof.to_bytes())
    True
"""

from fibzk.backends import compile_circuit, get_adapter
from fibzk.circuit import CircuitSpec, build
from fibzk.errors import (
    AdapterMismatchError,
    BackendMismatchError,
    CircuitSizeError,
    ConfigurationError,
    FibonacciError,
    ProofFormatError,
    PublicInputError,
    SrsFormatError,
    SrsTooSmallError,
    SumcheckError,
    WitnessConstraintViolationError,
    WitnessError,
    WitnessOverflowError,
)
from fibzk.keygen import setup
from fibzk.keys import ProvingKey, VerifyingKey
from fibzk.proof import Proof, decode_proof
from fibzk.prover import prove
from fibzk.srs import (
    MultilinearSRS,
    UnivariateSRS,
    generate_gemini_srs,
    generate_multilinear_srs,
    generate_plonk_srs,
    generate_srs,
)
from fibzk.variant import BackendVariant
from fibzk.verifier import verify
from fibzk.witness import Witness, generate
