"""
백엔드 어댑터 레지스트리
========================

BackendVariant → 어댑터 인스턴스. 어댑터는 상태가 없으므로 하나씩만 둔다.

    >>> adapter = get_adapter(BackendVariant.PLONK)
    >>> circuit = adapter.compile(build(10))
"""

from fibzk.backends.gemini import GeminiAdapter
from fibzk.backends.hyperplonk import HyperPlonkAdapter
from fibzk.backends.plonk import PlonkAdapter
from fibzk.variant import BackendVariant


_ADAPTERS = {
    BackendVariant.PLONK: PlonkAdapter(),
    BackendVariant.HYPERPLONK: HyperPlonkAdapter(),
    BackendVariant.GEMINI: GeminiAdapter(),
}


def get_adapter(backend):
    """백엔드(BackendVariant 또는 그 값 문자열)에 해당하는 어댑터."""
    if not isinstance(backend, BackendVariant):
        backend = BackendVariant(backend)
    return _ADAPTERS[backend]


def compile_circuit(spec, backend):
    """spec을 지정한 백엔드로 컴파일한다."""
    return get_adapter(backend).compile(spec)
