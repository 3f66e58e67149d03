"""
백엔드 어댑터 공통 계약
=======================

하나의 CircuitSpec을 각 커밋먼트 스킴이 요구하는 다항식 표현으로 옮긴다.

  compile(spec)                   -> BackendCircuit   (셀렉터 열 배치)
  encode(circuit, witness)        -> EncodedWitness   (배선 열 배치, 패딩)
  check_srs(circuit, srs)         SRS 종류/태그/모양 검사 (가장 중요한 안전 검사)
  trim_srs(circuit, srs)          -> 증명자 파라미터
  commit_fixed(params, circuit)   -> 셀렉터 커밋먼트 리스트
  prove(pk, encoded, public, transcript)   -> Proof
  verify(vk, public, proof, transcript)    -> bool

회로 논리는 circuit 모듈에만 있다. 어댑터는 게이트를 해석하지 않고
Gate.evaluate 로 위임한다.
"""

from fibzk.errors import AdapterMismatchError, BackendMismatchError, SrsTooSmallError
from fibzk.field import FR
from fibzk.transcript import Transcript


class BackendCircuit:
    """컴파일된 회로의 공통 속성.

    속성:
        backend: BackendVariant
        spec: 컴파일 전 CircuitSpec
        size: 패딩 후 행 개수 (2의 거듭제곱)
        selectors: 게이트별 셀렉터 열 (길이 size, 활성 행 1, 나머지 0)
    """

    def __init__(self, backend, spec, size, selectors):
        self.backend = backend
        self.spec = spec
        self.size = size
        self.selectors = tuple(tuple(column) for column in selectors)


class EncodedWitness:
    """백엔드 표현의 witness: 배선별 길이 size 열."""

    def __init__(self, backend, columns):
        self.backend = backend
        self.columns = tuple(tuple(column) for column in columns)


def selector_columns(spec, size):
    columns = []
    for gate in spec.gates:
        column = [FR(0)] * size
        for row in gate.rows:
            column[row] = FR(1)
        columns.append(column)
    return columns


def witness_columns(spec, witness, size, padding):
    """witness를 배선별 열로 나누고 n..size-1 행을 padding()으로 채운다."""
    columns = []
    for wire in range(spec.wires_per_row):
        column = witness.column(wire)
        column.extend(padding() for _ in range(size - len(column)))
        columns.append(column)
    return columns


class BackendAdapter:
    """어댑터 기반 클래스. 하위 클래스가 backend, srs_type 과 추상 메서드를 채운다."""

    backend = None
    srs_type = None

    def compile(self, spec):
        raise NotImplementedError

    def encode(self, circuit, witness):
        raise NotImplementedError

    def required_shape(self, circuit):
        """회로가 요구하는 SRS 모양 태그 (SRS.shape 와 비교)."""
        raise NotImplementedError

    def trim_srs(self, circuit, srs):
        raise NotImplementedError

    def fixed_polynomials(self, circuit):
        raise NotImplementedError

    def commit_fixed(self, params, circuit):
        raise NotImplementedError

    def prove(self, pk, encoded, public_input, transcript):
        raise NotImplementedError

    def verify(self, vk, public_input, proof, transcript):
        raise NotImplementedError

    def ensure_backend(self, obj):
        """키/회로가 이 어댑터의 백엔드로 만들어졌는지 확인한다."""
        if obj.backend is not self.backend:
            raise BackendMismatchError(self.backend, obj.backend)

    def check_srs(self, circuit, srs):
        """SRS가 회로에 맞는지 검사한다.

        Raises:
            BackendMismatchError: 다른 백엔드로 컴파일된 회로
            AdapterMismatchError: SRS 종류/백엔드 태그가 다르거나 모양이 정의되지 않음
            SrsTooSmallError: SRS 모양이 요구보다 작음
        """
        self.ensure_backend(circuit)
        if not isinstance(srs, self.srs_type) or srs.backend is not self.backend:
            raise AdapterMismatchError(
                f"{self.backend.value} 백엔드에는 {self.backend.value} 태그의 "
                f"{self.srs_type.__name__}가 필요합니다: {type(srs).__name__}"
                f"({getattr(srs, 'backend', None)})"
            )
        shape = srs.shape
        if shape is None:
            raise AdapterMismatchError(
                f"{self.backend.value} SRS의 모양을 해석할 수 없습니다"
            )
        required = self.required_shape(circuit)
        if shape < required:
            raise SrsTooSmallError(self.backend, required, shape)

    def new_transcript(self, key, public_input):
        """키와 공개 입력으로 초기화된 트랜스크립트. Prover와 Verifier가 같이 쓴다."""
        transcript = Transcript(b"fibzk-" + self.backend.value.encode())
        transcript.append_scalar(b"num_rows", key.circuit.spec.num_rows)
        transcript.append_points(b"fixed_comm", list(key.fixed_commitments))
        transcript.append_scalars(b"public_input", list(public_input))
        return transcript
