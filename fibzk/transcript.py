"""
Fiat-Shamir 트랜스크립트
========================

세 백엔드의 대화식 프로토콜을 비대화식으로 바꾼다. 증명자와 검증자는 같은
순서로 메시지를 흡수하고, 챌린지는 누적된 상태의 SHA-256 으로만 얻는다.

흡수되는 각 항목은 `레이블 길이(1) | 레이블 | 본문 길이(4) | 본문` 으로
구분되므로 레이블과 본문의 경계가 모호해지지 않는다.

초기 레이블에 백엔드 이름이 들어가므로 (b"fibzk-plonk" 등) 한 백엔드의
챌린지 열은 다른 백엔드에서 재현되지 않는다.

    >>> t = Transcript(b"fibzk-plonk")
    >>> t.append_point(b"a_comm", commitment)
    >>> alpha = t.challenge_scalar(b"alpha")
"""

import hashlib

from fibzk.field import FR, CURVE_ORDER

POINT_AT_INFINITY = bytes(64)


def _scalar_bytes(value):
    return (int(value) % CURVE_ORDER).to_bytes(32, "big")


def _point_bytes(point):
    if point is None:
        return POINT_AT_INFINITY
    return int(point[0]).to_bytes(32, "big") + int(point[1]).to_bytes(32, "big")


class Transcript:
    """SHA-256 트랜스크립트.

    속성:
        state: 흡수된 바이트열 전체
    """

    def __init__(self, label=b"fibzk"):
        self.state = bytearray(label)

    def _absorb(self, label, body):
        self.state += bytes([len(label)]) + label
        self.state += len(body).to_bytes(4, "big") + body

    def append_scalar(self, label, scalar):
        self._absorb(label, _scalar_bytes(scalar))

    def append_scalars(self, label, scalars):
        self._absorb(label, b"".join(_scalar_bytes(s) for s in scalars))

    def append_point(self, label, point):
        """G1 점 (x, y) 를 64바이트로 흡수한다. 무한원점은 0 64바이트."""
        self._absorb(label, _point_bytes(point))

    def append_points(self, label, points):
        self._absorb(label, b"".join(_point_bytes(p) for p in points))

    def challenge_scalar(self, label):
        """레이블을 흡수한 뒤 상태의 해시를 FR 로 줄인다.

        다이제스트는 상태에 다시 붙으므로 연속 호출은 서로 다른 값을 낸다.
        """
        self._absorb(label, b"")
        digest = hashlib.sha256(self.state).digest()
        self.state += digest
        return FR(int.from_bytes(digest, "big") % CURVE_ORDER)

    def challenge_scalars(self, label, count):
        return [self.challenge_scalar(label) for _ in range(count)]
