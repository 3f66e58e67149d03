"""
키 생성 파이프라인
==================

    setup(circuit, srs) -> (ProvingKey, VerifyingKey)

백엔드와 무관한 세 단계:
  1. SRS 모양 검사 (어댑터의 check_srs 에 위임) 후 필요한 크기로 다듬기
  2. 회로에서 나온 모든 셀렉터 다항식을 백엔드의 커밋 수단으로 커밋
  3. ProvingKey(커밋먼트 + 열기에 필요한 SRS 원소)와
     VerifyingKey(커밋먼트 + 검증에 필요한 최소 SRS 원소) 조립

(회로, SRS) 한 쌍마다 한 번 실행한다. 실패는 모두 치명적이며 부분 결과는 없다.
"""

import logging

from fibzk.backends import get_adapter
from fibzk.keys import ProvingKey, VerifyingKey

logger = logging.getLogger(__name__)


def setup(circuit, srs):
    """컴파일된 회로와 SRS로 증명 키와 검증 키를 만든다.

    Args:
        circuit: 어댑터의 compile() 결과 (BackendCircuit)
        srs: 백엔드 태그가 붙은 SRS

    Returns:
        tuple: (ProvingKey, VerifyingKey)

    Raises:
        AdapterMismatchError: SRS 종류/태그/모양이 맞지 않을 때
        SrsTooSmallError: SRS가 회로에 비해 작을 때
    """
    adapter = get_adapter(circuit.backend)
    params = adapter.trim_srs(circuit, srs)
    commitments = adapter.commit_fixed(params, circuit)

    pk = ProvingKey(circuit.backend, circuit, params, commitments)
    vk = VerifyingKey(circuit.backend, circuit, params.verifier_params(), commitments)
    logger.info(
        "setup complete: backend=%s rows=%d size=%d srs_shape=%s fixed=%d",
        circuit.backend.value, circuit.spec.num_rows, circuit.size, srs.shape, len(commitments),
    )
    return pk, vk
