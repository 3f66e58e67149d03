"""
Verifier 오케스트레이션
=======================

    verify(vk, public_input, proof, backend=None) -> bool

검증은 전체 함수(total function)이다. 신뢰할 수 없는 입력(증명, 공개 입력)에
관한 모든 실패는 False 로 끝난다:
  - 해석할 수 없는 증명 바이트열 (ProofFormatError)
  - 다른 백엔드 태그의 증명
  - 공개 입력 개수/형식 오류 (PublicInputError)
  - 합검사 라운드 불일치 (SumcheckError)
  - 게이트 항등식 또는 페어링 검사 실패

반면 backend 를 지정했는데 vk 가 다른 백엔드의 키이면 호출자의 설정 오류이므로
BackendMismatchError 를 던진다.
"""

import logging

from fibzk.backends import get_adapter
from fibzk.errors import BackendMismatchError, ProofFormatError, PublicInputError, SumcheckError
from fibzk.proof import Proof, decode_proof

logger = logging.getLogger(__name__)


def verify(vk, public_input, proof, backend=None):
    """증명을 검증한다.

    Args:
        vk: VerifyingKey
        public_input: 공개 출력 값 (정수, FR, 또는 그 시퀀스)
        proof: Proof 객체 또는 그 바이트열
        backend: 기대하는 BackendVariant (지정하면 vk 와 일치해야 함)

    Returns:
        bool: 증명이 유효하면 True
    """
    if backend is not None and vk.backend is not backend:
        raise BackendMismatchError(backend, vk.backend)

    try:
        if isinstance(proof, (bytes, bytearray)):
            proof = decode_proof(proof)
        if not isinstance(proof, Proof):
            logger.debug("proof rejected: unsupported type %s", type(proof).__name__)
            return False
        if proof.backend is not vk.backend:
            logger.debug(
                "proof rejected: backend tag %s != %s", proof.backend.value, vk.backend.value
            )
            return False

        public = vk.circuit.spec.normalize_public_input(public_input)
        adapter = get_adapter(vk.backend)
        transcript = adapter.new_transcript(vk, public)
        accepted = adapter.verify(vk, public, proof, transcript)
    except (ProofFormatError, PublicInputError, SumcheckError) as exc:
        logger.debug("proof rejected: %s", exc)
        return False

    logger.info("verification %s: backend=%s", "passed" if accepted else "failed", vk.backend.value)
    return accepted
