"""
데이터 직렬화/역직렬화 헬퍼
===========================

SRS와 키를 TinyDB(JSON)에 저장 가능한 형태로 변환한다.
정수는 모두 문자열(str(int))로 저장한다.

키 문서에는 회로 자체를 넣지 않는다. 행 개수만 기록하고, 불러올 때
circuit.build 와 어댑터의 compile 로 같은 회로를 다시 만든다.

공개 입력은 값마다 32바이트 빅엔디안으로 이어 붙인 바이트열로 주고받는다.
"""

from py_ecc import bn128

from fibzk.backends import get_adapter
from fibzk.circuit import build
from fibzk.errors import PublicInputError, SrsFormatError
from fibzk.field import FR, CURVE_ORDER, FIELD_MODULUS, is_on_g1, is_on_g2
from fibzk.keys import ProvingKey, VerifyingKey
from fibzk.srs import MultilinearSRS, UnivariateSRS
from fibzk.variant import BackendVariant


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR (표준 범위가 아니면 ValueError)"""
    value = int(s)
    if not 0 <= value < CURVE_ORDER:
        raise ValueError(f"스칼라가 범위를 벗어났습니다: {s}")
    return FR(value)


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point (곡선 위의 점인지 확인)"""
    if data is None:
        return None
    x, y = (int(v) for v in data)
    if not (0 <= x < FIELD_MODULUS and 0 <= y < FIELD_MODULUS):
        raise ValueError("G1 좌표가 범위를 벗어났습니다")
    point = (bn128.FQ(x), bn128.FQ(y))
    if not is_on_g1(point):
        raise ValueError("G1 곡선 위의 점이 아닙니다")
    return point


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))],
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point (트위스트 곡선 위의 점인지 확인)"""
    if data is None:
        return None
    point = (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])]),
    )
    if not is_on_g2(point):
        raise ValueError("G2 곡선 위의 점이 아닙니다")
    return point


# ─── SRS ───

def serialize_srs(srs):
    """SRS → dict (종류, 백엔드 태그, 모양, 군 원소)"""
    if isinstance(srs, MultilinearSRS):
        return {
            "kind": "multilinear",
            "backend": srs.backend.value,
            "num_vars": srs.num_vars,
            "lagrange_bases": [[serialize_g1(p) for p in basis] for basis in srs.lagrange_bases],
            "g2_powers": [serialize_g2(p) for p in srs.g2_powers],
            "tau_g2": [serialize_g2(p) for p in srs.tau_g2],
        }
    return {
        "kind": "univariate",
        "backend": srs.backend.value,
        "max_degree": srs.max_degree,
        "g1_powers": [serialize_g1(p) for p in srs.g1_powers],
        "g2_powers": [serialize_g2(p) for p in srs.g2_powers],
    }


def _deserialize_srs(data, full):
    backend = BackendVariant(data["backend"])
    g2_powers = [deserialize_g2(p) for p in data["g2_powers"]]

    if data["kind"] == "multilinear":
        num_vars = int(data["num_vars"])
        bases = [[deserialize_g1(p) for p in basis] for basis in data["lagrange_bases"]]
        tau_g2 = [deserialize_g2(p) for p in data["tau_g2"]]
        if backend is not BackendVariant.HYPERPLONK or len(tau_g2) != num_vars:
            raise ValueError("다중선형 SRS의 태그 또는 τ 개수가 맞지 않습니다")
        expected = num_vars + 1 if full else 1
        if len(bases) != expected or any(len(b) != 1 << k for k, b in enumerate(bases)):
            raise ValueError("다중선형 SRS의 라그랑주 기저 크기가 맞지 않습니다")
        return MultilinearSRS(num_vars, bases, g2_powers, tau_g2)

    if data["kind"] == "univariate":
        max_degree = int(data["max_degree"])
        g1_powers = [deserialize_g1(p) for p in data["g1_powers"]]
        if backend is BackendVariant.HYPERPLONK:
            raise ValueError("단변수 SRS에 hyperplonk 태그가 붙어 있습니다")
        expected = max_degree + 1 if full else 1
        if len(g1_powers) != expected or len(g2_powers) != 2:
            raise ValueError("단변수 SRS의 원소 개수가 차수와 맞지 않습니다")
        return UnivariateSRS(g1_powers, g2_powers, max_degree, backend)

    raise ValueError(f"알 수 없는 SRS 종류: {data['kind']}")


def deserialize_srs(data, full=True):
    """dict → SRS.

    Args:
        data: serialize_srs 의 결과
        full: True면 모든 G1 원소가 있어야 한다 (검증자 파라미터는 False)

    Raises:
        SrsFormatError: 문서를 해석할 수 없거나 원소가 곡선 위에 있지 않을 때
    """
    try:
        return _deserialize_srs(data, full)
    except (KeyError, TypeError, ValueError) as exc:
        raise SrsFormatError(f"SRS를 해석할 수 없습니다: {exc}") from exc


# ─── ProvingKey / VerifyingKey ───

def _serialize_key(key):
    return {
        "backend": key.backend.value,
        "num_rows": key.circuit.spec.num_rows,
        "params": serialize_srs(key.params),
        "fixed_commitments": [serialize_g1(p) for p in key.fixed_commitments],
    }


def _deserialize_key(cls, data, full):
    try:
        backend = BackendVariant(data["backend"])
        num_rows = int(data["num_rows"])
        commitments = [deserialize_g1(p) for p in data["fixed_commitments"]]
        params_data = data["params"]
    except (KeyError, TypeError, ValueError) as exc:
        raise SrsFormatError(f"키를 해석할 수 없습니다: {exc}") from exc

    params = deserialize_srs(params_data, full=full)
    adapter = get_adapter(backend)
    circuit = adapter.compile(build(num_rows))
    adapter.check_srs(circuit, params)
    if len(commitments) != len(circuit.spec.gates):
        raise SrsFormatError(
            f"셀렉터 커밋 개수 {len(commitments)} != 게이트 수 {len(circuit.spec.gates)}"
        )
    return cls(backend, circuit, params, commitments)


def serialize_proving_key(pk):
    return _serialize_key(pk)


def deserialize_proving_key(data):
    return _deserialize_key(ProvingKey, data, full=True)


def serialize_verifying_key(vk):
    return _serialize_key(vk)


def deserialize_verifying_key(data):
    return _deserialize_key(VerifyingKey, data, full=False)


# ─── 공개 입력 ───

def serialize_public_inputs(values):
    """FR 리스트 → 32바이트 빅엔디안의 연결."""
    return b"".join(int(v).to_bytes(32, "big") for v in values)


def deserialize_public_inputs(data):
    """바이트열 → FR 튜플.

    Raises:
        PublicInputError: 길이가 32의 배수가 아니거나 값이 범위를 벗어날 때
    """
    if len(data) % 32:
        raise PublicInputError(f"공개 입력 길이 {len(data)}가 32의 배수가 아닙니다")
    values = []
    for i in range(0, len(data), 32):
        value = int.from_bytes(data[i:i + 32], "big")
        if value >= CURVE_ORDER:
            raise PublicInputError("공개 입력 값이 필드 범위를 벗어났습니다")
        values.append(FR(value))
    return tuple(values)


def deserialize_circuit_inputs(inputs):
    """{"out": ["55"]} 형태의 입력 → {"out": [FR(55)]}.

    값은 부호 없는 10진 정수 문자열이어야 한다.

    Raises:
        PublicInputError: 정수로 해석할 수 없거나 범위를 벗어난 값
    """
    if not isinstance(inputs, dict):
        raise PublicInputError(f"입력은 이름 → 값 목록의 객체여야 합니다: {type(inputs).__name__}")
    parsed = {}
    for name, values in inputs.items():
        if isinstance(values, (str, int)):
            values = [values]
        parsed[name] = []
        for value in values:
            text = str(value).strip()
            if not text.isdigit():
                raise PublicInputError(f"입력 '{name}'을 부호 없는 정수로 해석할 수 없습니다: {value!r}")
            number = int(text)
            if number >= CURVE_ORDER:
                raise PublicInputError(f"입력 '{name}'이 필드 범위를 벗어났습니다")
            parsed[name].append(FR(number))
    return parsed
