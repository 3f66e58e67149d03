"""
Gemini 백엔드 (HyperPlonk IOP + Gemini/단변수 KZG)
====================================================

HyperPlonk와 같은 하이퍼큐브 배치와 제로체크/시프트 합검사를 쓰지만,
다중선형 평가 주장을 단변수 KZG 위의 Gemini 접기 인자로 증명한다.

  - 열 f 의 커밋 = 계수가 f(0), f(1), ..., f(2^μ - 1) 인 단변수 다항식의 KZG 커밋
  - SRS = 단변수 KZG SRS (모양 태그: 차수 상한 ≥ 2^μ - 1)
  - 검증 페어링 2번 (모든 KZG 열기를 한 번에 묶음)
"""

from fibzk.backends.hyperplonk import HyperPlonkAdapter, HyperPlonkProof
from fibzk.pcs.gemini import Gemini
from fibzk.proof import register_proof
from fibzk.srs import UnivariateSRS
from fibzk.variant import BackendVariant


@register_proof
class GeminiProof(HyperPlonkProof):
    backend = BackendVariant.GEMINI


class GeminiAdapter(HyperPlonkAdapter):

    backend = BackendVariant.GEMINI
    srs_type = UnivariateSRS
    pcs = Gemini()
    proof_class = GeminiProof

    def required_shape(self, circuit):
        return circuit.size - 1

    def trim_srs(self, circuit, srs):
        self.check_srs(circuit, srs)
        return srs.trim(circuit.size - 1)
