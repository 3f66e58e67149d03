"""
Serialization, Persistence & CLI Tests
======================================

테스트 범위:
  - JSON 직렬화: FR, G1, G2, SRS, 키 (곡선 검사, 형식 오류 → SrsFormatError)
  - 공개 입력 바이트열 / {"out": ["55"]} 입력 해석
  - TinyDB 산출물 파일: 저장/읽기, 누락/파손 파일
  - 설정 파일 로더
  - 파일 기반 증명/검증, 명령행 (gen-srs → gen-keys → prove → verify)

검증이 필요한 테스트는 페어링이 가장 적은 Gemini 백엔드를 쓴다.
"""

import json

import pytest

from fibzk import cli
from fibzk.config import DEFAULT_CONFIG, load_config
from fibzk.errors import ConfigurationError, PublicInputError, SrsFormatError
from fibzk.field import FR, G1, G2, CURVE_ORDER, ec_mul
from fibzk.io import (
    key_paths,
    load_artifact,
    load_proving_key,
    load_srs,
    load_verifying_key,
    prove_from_files,
    save_artifact,
    save_keys,
    save_srs,
    verify_from_files,
)
from fibzk.serialization import (
    deserialize_circuit_inputs,
    deserialize_fr,
    deserialize_g1,
    deserialize_g2,
    deserialize_public_inputs,
    deserialize_srs,
    deserialize_verifying_key,
    serialize_fr,
    serialize_g1,
    serialize_g2,
    serialize_public_inputs,
    serialize_srs,
    serialize_verifying_key,
)
from fibzk.variant import BackendVariant
from fibzk.verifier import verify


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def gemini_key_files(tmp_path_factory, keys):
    out_dir = tmp_path_factory.mktemp("keys")
    pk, vk = keys[BackendVariant.GEMINI]
    return save_keys(out_dir, pk, vk)


# ─────────────────────────────────────────────────────────────────────
# 원소 직렬화
# ─────────────────────────────────────────────────────────────────────

class TestElements:

    def test_fr(self):
        assert serialize_fr(FR(55)) == "55"
        assert deserialize_fr("55") == FR(55)
        with pytest.raises(ValueError):
            deserialize_fr(str(CURVE_ORDER))

    def test_g1(self):
        p = ec_mul(G1, 5)
        data = serialize_g1(p)
        assert all(isinstance(v, str) for v in data)
        assert deserialize_g1(data) == p
        assert serialize_g1(None) is None
        assert deserialize_g1(None) is None

    def test_g1_off_curve(self):
        with pytest.raises(ValueError):
            deserialize_g1(["1", "3"])

    def test_g2(self):
        p = ec_mul(G2, 3)
        assert deserialize_g2(serialize_g2(p)) == p
        assert deserialize_g2(None) is None

    def test_g2_off_curve(self):
        data = serialize_g2(G2)
        data[0][0] = str(int(data[0][0]) + 1)
        with pytest.raises(ValueError):
            deserialize_g2(data)


class TestSrsSerialization:

    def test_univariate_roundtrip(self, gemini_srs):
        restored = deserialize_srs(serialize_srs(gemini_srs))
        assert restored.backend is BackendVariant.GEMINI
        assert restored.max_degree == gemini_srs.max_degree
        assert restored.g1_powers == gemini_srs.g1_powers
        assert restored.g2_powers == gemini_srs.g2_powers

    def test_multilinear_roundtrip(self, multilinear_srs):
        data = json.loads(json.dumps(serialize_srs(multilinear_srs)))
        restored = deserialize_srs(data)
        assert restored.shape == multilinear_srs.shape
        assert restored.lagrange_bases == multilinear_srs.lagrange_bases
        assert restored.tau_g2 == multilinear_srs.tau_g2

    def test_verifier_params_need_partial(self, plonk_srs):
        data = serialize_srs(plonk_srs.verifier_params())
        assert deserialize_srs(data, full=False).g1_powers == [G1]
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)

    def test_missing_field(self, plonk_srs):
        data = serialize_srs(plonk_srs)
        del data["g2_powers"]
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)

    def test_length_mismatch(self, plonk_srs):
        data = serialize_srs(plonk_srs)
        data["max_degree"] = 31
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)

    def test_unknown_kind(self, plonk_srs):
        data = serialize_srs(plonk_srs)
        data["kind"] = "bivariate"
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)

    def test_point_off_curve(self, plonk_srs):
        data = serialize_srs(plonk_srs)
        data["g1_powers"][1] = ["1", "3"]
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)

    def test_multilinear_wrong_tag(self, multilinear_srs):
        data = serialize_srs(multilinear_srs)
        data["backend"] = "plonk"
        with pytest.raises(SrsFormatError):
            deserialize_srs(data)


class TestKeySerialization:

    def test_verifying_key_roundtrip(self, keys, proofs):
        _, vk = keys[BackendVariant.GEMINI]
        data = json.loads(json.dumps(serialize_verifying_key(vk)))
        restored = deserialize_verifying_key(data)
        assert restored.backend is BackendVariant.GEMINI
        assert restored.fixed_commitments == vk.fixed_commitments
        assert restored.circuit.size == vk.circuit.size
        assert verify(restored, 55, proofs[BackendVariant.GEMINI].to_bytes())

    def test_commitment_count_checked(self, keys):
        _, vk = keys[BackendVariant.PLONK]
        data = serialize_verifying_key(vk)
        data["fixed_commitments"] = data["fixed_commitments"][:-1]
        with pytest.raises(SrsFormatError):
            deserialize_verifying_key(data)

    def test_unknown_backend(self, keys):
        _, vk = keys[BackendVariant.PLONK]
        data = serialize_verifying_key(vk)
        data["backend"] = "groth16"
        with pytest.raises(SrsFormatError):
            deserialize_verifying_key(data)


# ─────────────────────────────────────────────────────────────────────
# 공개 입력
# ─────────────────────────────────────────────────────────────────────

class TestPublicInputs:

    def test_roundtrip(self):
        data = serialize_public_inputs([FR(55)])
        assert len(data) == 32
        assert data[-1] == 55
        assert deserialize_public_inputs(data) == (FR(55),)

    def test_bad_length(self):
        with pytest.raises(PublicInputError):
            deserialize_public_inputs(b"\x00" * 31)

    def test_out_of_range(self):
        with pytest.raises(PublicInputError):
            deserialize_public_inputs(b"\xff" * 32)

    def test_circuit_inputs(self):
        assert deserialize_circuit_inputs({"out": ["55"]}) == {"out": [FR(55)]}
        assert deserialize_circuit_inputs({"out": " 55 "}) == {"out": [FR(55)]}

    @pytest.mark.parametrize("value", ["abc", "-5", "5.5", ""])
    def test_circuit_inputs_not_numeric(self, value):
        with pytest.raises(PublicInputError):
            deserialize_circuit_inputs({"out": [value]})

    def test_circuit_inputs_not_mapping(self):
        with pytest.raises(PublicInputError):
            deserialize_circuit_inputs(["55"])


# ─────────────────────────────────────────────────────────────────────
# TinyDB 산출물
# ─────────────────────────────────────────────────────────────────────

class TestArtifacts:

    def test_save_load(self, tmp_path):
        path = tmp_path / "nested" / "doc.json"
        save_artifact(path, "thing", {"x": ["1", "2"]})
        assert load_artifact(path, "thing") == {"x": ["1", "2"]}

    def test_overwrite(self, tmp_path):
        path = tmp_path / "doc.json"
        save_artifact(path, "thing", 1)
        save_artifact(path, "thing", 2)
        assert load_artifact(path, "thing") == 2

    def test_missing_file_not_created(self, tmp_path):
        path = tmp_path / "missing.json"
        with pytest.raises(SrsFormatError):
            load_srs(path)
        assert not path.exists()

    def test_wrong_kind(self, tmp_path):
        path = tmp_path / "doc.json"
        save_artifact(path, "thing", 1)
        with pytest.raises(ConfigurationError):
            load_artifact(path, "other")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "srs.json"
        path.write_text("this is not json")
        with pytest.raises(SrsFormatError):
            load_srs(path)

    def test_srs_roundtrip(self, tmp_path, plonk_srs):
        path = save_srs(tmp_path / "srs.json", plonk_srs)
        restored = load_srs(path)
        assert restored.shape == 4
        assert restored.g1_powers == plonk_srs.g1_powers

    def test_key_paths(self, tmp_path):
        pk_path, vk_path = key_paths(tmp_path, BackendVariant.HYPERPLONK)
        assert pk_path.name == "hyperplonk_fibonacci_pk.json"
        assert vk_path.name == "hyperplonk_fibonacci_vk.json"

    def test_keys_roundtrip(self, gemini_key_files, keys):
        pk_path, vk_path = gemini_key_files
        pk = load_proving_key(pk_path)
        vk = load_verifying_key(vk_path)
        expected_pk, expected_vk = keys[BackendVariant.GEMINI]
        assert pk.params.g1_powers == expected_pk.params.g1_powers
        assert vk.fixed_commitments == expected_vk.fixed_commitments

    def test_key_kind_checked(self, gemini_key_files):
        pk_path, _ = gemini_key_files
        with pytest.raises(ConfigurationError):
            load_verifying_key(pk_path)


class TestFileFlow:

    def test_prove_verify_from_files(self, gemini_key_files):
        pk_path, vk_path = gemini_key_files
        proof_bytes, public_bytes = prove_from_files(pk_path, {"out": ["55"]})
        assert public_bytes == serialize_public_inputs([FR(55)])
        assert verify_from_files(vk_path, proof_bytes, public_bytes)
        assert not verify_from_files(vk_path, proof_bytes, serialize_public_inputs([FR(56)]))
        assert not verify_from_files(vk_path, proof_bytes, b"\x01")

    def test_missing_out(self, gemini_key_files):
        pk_path, _ = gemini_key_files
        with pytest.raises(PublicInputError):
            prove_from_files(pk_path, {"result": ["55"]})


# ─────────────────────────────────────────────────────────────────────
# 설정
# ─────────────────────────────────────────────────────────────────────

class TestConfig:

    def test_defaults(self):
        cfg = load_config()
        assert cfg == DEFAULT_CONFIG
        assert cfg is not DEFAULT_CONFIG

    def test_merge(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"num_rows": 16, "log_level": "DEBUG"}))
        cfg = load_config(str(path))
        assert cfg["num_rows"] == 16
        assert cfg["seed"] == [1, 1]

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"rows": 16}))
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_not_object(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            load_config(str(path))


# ─────────────────────────────────────────────────────────────────────
# 명령행
# ─────────────────────────────────────────────────────────────────────

class TestCli:

    def test_full_flow(self, tmp_path, capsys):
        srs_path = tmp_path / "gemini_srs.json"
        assert cli.main(["gen-srs", "--backend", "gemini", "--seed", "7", "--out", str(srs_path)]) == 0
        assert load_srs(srs_path).shape == 15

        out_dir = tmp_path / "out"
        assert cli.main(["gen-keys", "--backend", "gemini", str(srs_path), "--out-dir", str(out_dir)]) == 0
        captured = capsys.readouterr()
        assert "Preparation finished successfully." in captured.out
        pk_path, vk_path = key_paths(out_dir, BackendVariant.GEMINI)
        assert pk_path.exists() and vk_path.exists()

        inputs = tmp_path / "inputs.json"
        inputs.write_text(json.dumps({"out": ["55"]}))
        proof_path = tmp_path / "proof.bin"
        public_path = tmp_path / "public.bin"
        assert cli.main([
            "prove", "--pk", str(pk_path), "--inputs", str(inputs),
            "--proof-out", str(proof_path), "--public-out", str(public_path),
        ]) == 0
        assert proof_path.read_bytes()[:5] == b"FIBZK"

        assert cli.main([
            "verify", "--vk", str(vk_path), "--proof", str(proof_path), "--public", str(public_path),
        ]) == 0
        assert "Proof is valid." in capsys.readouterr().out

        proof_path.write_bytes(proof_path.read_bytes()[:-1])
        assert cli.main([
            "--quiet", "verify", "--vk", str(vk_path), "--proof", str(proof_path), "--public", str(public_path),
        ]) == 1

    def test_gen_keys_too_small_srs(self, tmp_path, capsys):
        srs_path = tmp_path / "small.json"
        assert cli.main(["--quiet", "gen-srs", "--backend", "plonk", "--size", "3", "--seed", "1",
                         "--out", str(srs_path)]) == 0
        assert cli.main(["gen-keys", "--backend", "plonk", str(srs_path),
                         "--out-dir", str(tmp_path / "out")]) == 1
        captured = capsys.readouterr()
        assert "ERROR" in captured.err
        assert "Preparation finished successfully." not in captured.out

    def test_gen_keys_missing_srs(self, tmp_path, capsys):
        assert cli.main(["gen-keys", "--backend", "hyperplonk", str(tmp_path / "none.json")]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_gen_keys_wrong_srs_tag(self, tmp_path, plonk_srs, capsys):
        srs_path = save_srs(tmp_path / "plonk_srs.json", plonk_srs)
        assert cli.main(["gen-keys", "--backend", "gemini", str(srs_path),
                         "--out-dir", str(tmp_path / "out")]) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_single_argument_alias(self, tmp_path, multilinear_srs, capsys):
        srs_path = save_srs(tmp_path / "ml_srs.json", multilinear_srs)
        cfg_path = tmp_path / "cfg.json"
        cfg_path.write_text(json.dumps({"out_dir": str(tmp_path / "keys")}))
        assert cli.gen_hyperplonk_keys([str(srs_path), "--config", str(cfg_path)]) == 0
        assert "Preparation finished successfully." in capsys.readouterr().out
        pk_path, vk_path = key_paths(tmp_path / "keys", BackendVariant.HYPERPLONK)
        assert pk_path.exists() and vk_path.exists()

    def test_alias_missing_srs(self, tmp_path):
        assert cli.gen_plonk_keys([str(tmp_path / "none.json")]) == 1

    def test_alias_unwritable_out_dir(self, tmp_path, multilinear_srs, capsys):
        srs_path = save_srs(tmp_path / "ml_srs.json", multilinear_srs)
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        cfg_path = tmp_path / "cfg.json"
        cfg_path.write_text(json.dumps({"out_dir": str(blocker / "keys")}))
        assert cli.gen_hyperplonk_keys([str(srs_path), "--config", str(cfg_path)]) == 1
        captured = capsys.readouterr()
        assert "ERROR" in captured.err
        assert "Preparation finished successfully." not in captured.out
