"""
Prover 오케스트레이션
=====================

    prove(pk, witness, public_input, backend=None) -> Proof

1. 백엔드 확인: backend 를 지정했는데 pk 의 백엔드와 다르면 BackendMismatchError
2. 공개 입력 정규화 (PublicInputError)
3. witness 가 회로를 만족하는지 커밋 전에 확인 (WitnessConstraintViolationError).
   검증기에서 False 가 나올 증명을 만들지 않는다.
4. 어댑터로 witness 인코딩 → 키로 초기화한 트랜스크립트 → 백엔드 프로토콜 실행
"""

import logging

from fibzk.backends import get_adapter
from fibzk.errors import BackendMismatchError

logger = logging.getLogger(__name__)


def prove(pk, witness, public_input, backend=None):
    """증명을 생성한다.

    Args:
        pk: ProvingKey
        witness: Witness
        public_input: 공개 출력 값 (정수, FR, 또는 그 시퀀스)
        backend: 기대하는 BackendVariant (지정하면 pk 와 일치해야 함)

    Returns:
        Proof: 백엔드별 증명 객체 (to_bytes() 로 직렬화)
    """
    if backend is not None and pk.backend is not backend:
        raise BackendMismatchError(backend, pk.backend)

    spec = pk.circuit.spec
    public = spec.normalize_public_input(public_input)
    spec.check(witness, public)

    adapter = get_adapter(pk.backend)
    encoded = adapter.encode(pk.circuit, witness)
    transcript = adapter.new_transcript(pk, public)
    proof = adapter.prove(pk, encoded, public, transcript)
    logger.info("proof generated: backend=%s rows=%d", pk.backend.value, spec.num_rows)
    return proof
