"""
증명 키 / 검증 키
=================

(회로, SRS) 한 쌍마다 한 번 만들어지고 이후 변경되지 않는 백엔드별 산출물.

  ProvingKey   = 백엔드 태그 + 컴파일된 회로 + 다듬어진 SRS (열기에 필요한 전체 원소)
                 + 셀렉터 커밋먼트
  VerifyingKey = 백엔드 태그 + 컴파일된 회로 + 검증용 SRS 원소 (G1 생성자, G2 원소)
                 + 셀렉터 커밋먼트
"""


class _Key:

    def __init__(self, backend, circuit, params, fixed_commitments):
        self._backend = backend
        self._circuit = circuit
        self._params = params
        self._fixed_commitments = tuple(fixed_commitments)

    @property
    def backend(self):
        return self._backend

    @property
    def circuit(self):
        return self._circuit

    @property
    def params(self):
        return self._params

    @property
    def fixed_commitments(self):
        return self._fixed_commitments

    def __repr__(self):
        return (
            f"{type(self).__name__}(backend={self._backend.value}, "
            f"rows={self._circuit.spec.num_rows}, size={self._circuit.size})"
        )


class ProvingKey(_Key):
    """Prover가 사용하는 키."""


class VerifyingKey(_Key):
    """Verifier가 사용하는 키 (ProvingKey의 부분집합)."""
