"""
증명(Proof) 값 타입과 바이너리 코덱
====================================

증명은 백엔드 태그가 붙은 "이름 → 값" 매핑이다. 각 백엔드는 FIELDS에
(이름, 종류) 목록을 선언하고, 이 모듈이 그 순서대로 직렬화한다.

**바이트 배치**:

  | 오프셋 | 크기 | 내용                                   |
  |--------|------|----------------------------------------|
  | 0      | 5    | 매직 b"FIBZK"                          |
  | 5      | 1    | 형식 버전 (1)                          |
  | 6      | 1    | 백엔드 태그 (BackendVariant.tag)       |
  | 7      | ...  | FIELDS 순서의 값                       |

  scalar  : 32바이트 빅엔디안, 반드시 < 곡선 위수
  point   : x‖y 각 32바이트 (트랜스크립트와 같은 인코딩), 무한원점은 64바이트 0
  points / scalars : 2바이트 개수 + 원소
  rounds  : 2바이트 라운드 수 + 라운드마다 scalars
  opening : points + scalars (OpeningProof)

디코딩은 엄격하다. 곡선 위에 있지 않은 점, 범위를 벗어난 스칼라,
남거나 모자라는 바이트는 모두 ProofFormatError이다.
"""

from py_ecc import bn128

from fibzk.errors import ProofFormatError
from fibzk.field import FR, CURVE_ORDER, FIELD_MODULUS, is_on_g1
from fibzk.pcs import OpeningProof
from fibzk.variant import BackendVariant


MAGIC = b"FIBZK"
VERSION = 1

_REGISTRY = {}


def register_proof(cls):
    """백엔드 태그 → 증명 클래스 등록 (decode_proof 디스패치용)."""
    _REGISTRY[cls.backend] = cls
    return cls


def _freeze(kind, value):
    if kind in ("points", "scalars"):
        return tuple(value)
    if kind == "rounds":
        return tuple(tuple(r) for r in value)
    return value


class Proof:
    """백엔드 증명의 기반 클래스. 생성 후 변경하지 않는다."""

    backend = None
    FIELDS = ()

    def __init__(self, **fields):
        names = [name for name, _ in self.FIELDS]
        unknown = set(fields) - set(names)
        missing = set(names) - set(fields)
        if unknown or missing:
            raise TypeError(
                f"{type(self).__name__}: 누락 {sorted(missing)}, 알 수 없음 {sorted(unknown)}"
            )
        for name, kind in self.FIELDS:
            setattr(self, name, _freeze(kind, fields[name]))

    def items(self):
        """(이름, 값) 리스트 (FIELDS 순서)."""
        return [(name, getattr(self, name)) for name, _ in self.FIELDS]

    def __eq__(self, other):
        return type(self) is type(other) and self.items() == other.items()

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(name for name, _ in self.FIELDS)})"

    def to_bytes(self):
        writer = _Writer()
        writer.raw(MAGIC)
        writer.raw(bytes([VERSION, self.backend.tag]))
        for name, kind in self.FIELDS:
            writer.write(kind, getattr(self, name))
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data):
        proof = decode_proof(data)
        if cls is not Proof and type(proof) is not cls:
            raise ProofFormatError(
                f"{cls.__name__}가 아니라 {type(proof).__name__} 증명입니다"
            )
        return proof


def decode_proof(data):
    """바이트열에서 증명을 복원한다. 헤더의 백엔드 태그로 클래스를 고른다.

    Raises:
        ProofFormatError: 형식이 잘못되었을 때
    """
    reader = _Reader(bytes(data))
    if reader.raw(len(MAGIC)) != MAGIC:
        raise ProofFormatError("매직 바이트가 올바르지 않습니다")
    version, tag = reader.raw(2)
    if version != VERSION:
        raise ProofFormatError(f"지원하지 않는 증명 형식 버전: {version}")
    try:
        backend = BackendVariant.from_tag(tag)
    except ValueError as exc:
        raise ProofFormatError(str(exc)) from exc
    cls = _REGISTRY.get(backend)
    if cls is None:
        raise ProofFormatError(f"등록되지 않은 백엔드: {backend.value}")

    fields = {name: reader.read(kind) for name, kind in cls.FIELDS}
    reader.finish()
    return cls(**fields)


# ─────────────────────────────────────────────────────────────────────
# 인코더 / 디코더
# ─────────────────────────────────────────────────────────────────────

class _Writer:

    def __init__(self):
        self._buf = bytearray()

    def getvalue(self):
        return bytes(self._buf)

    def raw(self, data):
        self._buf.extend(data)

    def count(self, n):
        if n > 0xFFFF:
            raise ValueError(f"리스트가 너무 깁니다: {n}")
        self._buf.extend(n.to_bytes(2, "big"))

    def scalar(self, value):
        self._buf.extend((int(value) % CURVE_ORDER).to_bytes(32, "big"))

    def point(self, point):
        if point is None:
            self._buf.extend(b"\x00" * 64)
        else:
            x, y = point
            self._buf.extend(int(x).to_bytes(32, "big"))
            self._buf.extend(int(y).to_bytes(32, "big"))

    def write(self, kind, value):
        if kind == "scalar":
            self.scalar(value)
        elif kind == "point":
            self.point(value)
        elif kind == "scalars":
            self.count(len(value))
            for v in value:
                self.scalar(v)
        elif kind == "points":
            self.count(len(value))
            for p in value:
                self.point(p)
        elif kind == "rounds":
            self.count(len(value))
            for r in value:
                self.write("scalars", r)
        elif kind == "opening":
            self.write("points", value.points)
            self.write("scalars", value.scalars)
        else:
            raise ValueError(f"알 수 없는 필드 종류: {kind}")


class _Reader:

    def __init__(self, data):
        self._data = data
        self._pos = 0

    def raw(self, n):
        end = self._pos + n
        if end > len(self._data):
            raise ProofFormatError("증명 바이트열이 너무 짧습니다")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def finish(self):
        if self._pos != len(self._data):
            raise ProofFormatError(f"증명 뒤에 {len(self._data) - self._pos}바이트가 남았습니다")

    def count(self):
        return int.from_bytes(self.raw(2), "big")

    def scalar(self):
        value = int.from_bytes(self.raw(32), "big")
        if value >= CURVE_ORDER:
            raise ProofFormatError("스칼라가 곡선 위수 이상입니다")
        return FR(value)

    def point(self):
        x = int.from_bytes(self.raw(32), "big")
        y = int.from_bytes(self.raw(32), "big")
        if x == 0 and y == 0:
            return None
        if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
            raise ProofFormatError("점 좌표가 기저 필드 범위를 벗어났습니다")
        point = (bn128.FQ(x), bn128.FQ(y))
        if not is_on_g1(point):
            raise ProofFormatError("점이 G1 곡선 위에 있지 않습니다")
        return point

    def read(self, kind):
        if kind == "scalar":
            return self.scalar()
        if kind == "point":
            return self.point()
        if kind == "scalars":
            return [self.scalar() for _ in range(self.count())]
        if kind == "points":
            return [self.point() for _ in range(self.count())]
        if kind == "rounds":
            return [self.read("scalars") for _ in range(self.count())]
        if kind == "opening":
            points = self.read("points")
            return OpeningProof(points, self.read("scalars"))
        raise ValueError(f"알 수 없는 필드 종류: {kind}")
