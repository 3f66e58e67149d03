"""
산출물 저장소 (TinyDB)
======================

SRS와 키는 각각 하나의 TinyDB JSON 파일에 저장된다. 파일 안에는
{"type": 종류, "data": 직렬화된 값} 문서 하나가 들어 있다.

    out/plonk_fibonacci_pk.json
    out/plonk_fibonacci_vk.json

증명과 공개 입력은 바이트열이며, prove_from_files / verify_from_files 는
키 파일만 읽고 바이트열을 주고받는다.
"""

import logging
from pathlib import Path

from tinydb import TinyDB, Query

from fibzk.circuit import build
from fibzk.errors import ConfigurationError, PublicInputError, SrsFormatError
from fibzk.prover import prove
from fibzk.serialization import (
    deserialize_circuit_inputs,
    deserialize_proving_key,
    deserialize_public_inputs,
    deserialize_srs,
    deserialize_verifying_key,
    serialize_proving_key,
    serialize_public_inputs,
    serialize_srs,
    serialize_verifying_key,
)
from fibzk.verifier import verify
from fibzk.witness import generate

logger = logging.getLogger(__name__)

DATA = Query()

SRS_KIND = "srs"
PROVING_KEY_KIND = "proving_key"
VERIFYING_KEY_KIND = "verifying_key"


# ─── TinyDB 헬퍼 ───

def save_artifact(path, kind, data):
    """path의 TinyDB 파일에 kind 문서를 저장한다 (같은 종류는 덮어씀)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with TinyDB(str(path)) as db:
        db.upsert({"type": kind, "data": data}, DATA.type == kind)
    logger.debug("saved %s to %s", kind, path)
    return path


def load_artifact(path, kind, error=ConfigurationError):
    """path의 TinyDB 파일에서 kind 문서를 읽는다.

    파일이 없으면 만들지 않고 error 를 던진다.
    """
    path = Path(path)
    if not path.is_file():
        raise error(f"파일을 찾을 수 없습니다: {path}")
    try:
        with TinyDB(str(path), access_mode="r") as db:
            result = db.search(DATA.type == kind)
    except (ValueError, TypeError, AttributeError) as exc:
        raise error(f"{path}를 읽을 수 없습니다: {exc}") from exc
    if not result:
        raise error(f"{path}에 '{kind}' 문서가 없습니다")
    return result[0]["data"]


# ─── SRS ───

def save_srs(path, srs):
    return save_artifact(path, SRS_KIND, serialize_srs(srs))


def load_srs(path):
    """SRS 파일을 읽는다.

    Raises:
        SrsFormatError: 파일이 없거나 해석할 수 없을 때
    """
    return deserialize_srs(load_artifact(path, SRS_KIND, SrsFormatError))


# ─── 키 ───

def key_paths(out_dir, backend):
    """백엔드별 (pk 경로, vk 경로)."""
    out_dir = Path(out_dir)
    return (
        out_dir / f"{backend.value}_fibonacci_pk.json",
        out_dir / f"{backend.value}_fibonacci_vk.json",
    )


def save_keys(out_dir, pk, vk):
    pk_path, vk_path = key_paths(out_dir, pk.backend)
    save_artifact(pk_path, PROVING_KEY_KIND, serialize_proving_key(pk))
    save_artifact(vk_path, VERIFYING_KEY_KIND, serialize_verifying_key(vk))
    logger.info("keys written: %s, %s", pk_path, vk_path)
    return pk_path, vk_path


def load_proving_key(path):
    return deserialize_proving_key(load_artifact(path, PROVING_KEY_KIND))


def load_verifying_key(path):
    return deserialize_verifying_key(load_artifact(path, VERIFYING_KEY_KIND))


# ─── 파일 기반 증명/검증 ───

def prove_from_files(pk_path, inputs, seed=(1, 1)):
    """증명 키 파일과 {"out": ["55"]} 형태의 입력으로 증명한다.

    witness는 키의 행 개수와 seed로 계산한다.

    Returns:
        tuple: (증명 바이트열, 공개 입력 바이트열)

    Raises:
        PublicInputError: 입력에 "out"이 없거나 정수가 아닐 때
        WitnessConstraintViolationError: seed로 만든 witness의 출력이 입력과 다를 때
    """
    pk = load_proving_key(pk_path)
    parsed = deserialize_circuit_inputs(inputs)
    if "out" not in parsed:
        raise PublicInputError("입력에 'out' 값이 없습니다")
    public = parsed["out"]

    witness = generate(build(pk.circuit.spec.num_rows), seed)
    proof = prove(pk, witness, public)
    return proof.to_bytes(), serialize_public_inputs(public)


def verify_from_files(vk_path, proof_bytes, public_bytes):
    """검증 키 파일로 바이트열 증명을 검증한다. 키 파일 오류 외에는 bool 을 반환한다."""
    vk = load_verifying_key(vk_path)
    try:
        public = deserialize_public_inputs(public_bytes)
    except PublicInputError as exc:
        logger.debug("proof rejected: %s", exc)
        return False
    return verify(vk, public, proof_bytes)
