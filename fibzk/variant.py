"""증명 백엔드 선택자 (닫힌 열거형)."""

from enum import Enum


class BackendVariant(Enum):
    """세 가지 증명 백엔드.

    키 생성 시점에 고정되며, 증명과 검증 시점에도 같은 값이어야 한다.
    tag는 증명 바이트열의 헤더와 SRS/키 문서에 기록되는 1바이트 식별자이다.
    """

    PLONK = "plonk"
    HYPERPLONK = "hyperplonk"
    GEMINI = "gemini"

    @property
    def tag(self):
        return _TAGS[self]

    @classmethod
    def from_tag(cls, tag):
        for variant, value in _TAGS.items():
            if value == tag:
                return variant
        raise ValueError(f"알 수 없는 백엔드 태그: {tag}")


_TAGS = {
    BackendVariant.PLONK: 1,
    BackendVariant.HYPERPLONK: 2,
    BackendVariant.GEMINI: 3,
}
