#!/usr/bin/env python3
"""
cli.py
fibzk 명령행 진입점.

    fibzk gen-srs  --backend plonk --seed 42
    fibzk gen-keys --backend plonk out/plonk_srs.json
    fibzk prove    --pk out/plonk_fibonacci_pk.json --inputs inputs.json
    fibzk verify   --vk out/plonk_fibonacci_vk.json --proof out/proof.bin --public out/public.bin

gen-plonk-keys / gen-hyperplonk-keys / gen-gemini-keys 는 SRS 경로 하나만 받는
gen-keys 의 단축 명령이다.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from fibzk.backends import get_adapter
from fibzk.circuit import build
from fibzk.config import DEFAULT_CONFIG, load_config
from fibzk.errors import ConfigurationError, FibonacciError
from fibzk.io import (
    load_srs,
    prove_from_files,
    save_keys,
    save_srs,
    verify_from_files,
)
from fibzk.keygen import setup
from fibzk.srs import generate_srs
from fibzk.variant import BackendVariant

logger = logging.getLogger(__name__)

BACKENDS = [b.value for b in BackendVariant]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fibzk",
        description="Fibonacci circuit prover over Plonk, HyperPlonk and Gemini backends.",
    )
    p.add_argument(
        "--config",
        "-c",
        default=None,
        help="Optional JSON config file to override defaults.",
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Minimize console output.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    srs = sub.add_parser("gen-srs", help="Generate a backend-tagged SRS file.")
    srs.add_argument("--backend", "-b", choices=BACKENDS, required=True)
    srs.add_argument(
        "--size",
        type=int,
        default=None,
        help="Shape tag (plonk: k, hyperplonk: num vars, gemini: max degree). "
             "Default: the smallest shape that fits the configured circuit.",
    )
    srs.add_argument("--seed", default=None, help="Deterministic seed (testing only).")
    srs.add_argument("--out", "-o", default=None, help="Output path. Default: <out_dir>/<backend>_srs.json")

    keys = sub.add_parser("gen-keys", help="Run key generation from an SRS file.")
    keys.add_argument("--backend", "-b", choices=BACKENDS, required=True)
    keys.add_argument("srs_path", help="Path to the SRS file.")
    keys.add_argument("--out-dir", "-o", default=None, help="Directory to write keys. Default: config out_dir")

    prove = sub.add_parser("prove", help="Prove the Fibonacci statement from a proving key file.")
    prove.add_argument("--pk", required=True, help="Proving key path.")
    prove.add_argument("--inputs", required=True, help='JSON file such as {"out": ["55"]}.')
    prove.add_argument("--proof-out", default=None, help="Default: <out_dir>/proof.bin")
    prove.add_argument("--public-out", default=None, help="Default: <out_dir>/public.bin")

    verify = sub.add_parser("verify", help="Verify a proof against a verifying key file.")
    verify.add_argument("--vk", required=True, help="Verifying key path.")
    verify.add_argument("--proof", required=True, help="Proof bytes path.")
    verify.add_argument("--public", required=True, help="Public input bytes path.")
    return p


def _setup_logging(cfg, quiet):
    level = logging.WARNING if quiet else getattr(logging, str(cfg["log_level"]).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _gen_srs(args, cfg):
    backend = BackendVariant(args.backend)
    size = args.size
    if size is None:
        adapter = get_adapter(backend)
        size = adapter.required_shape(adapter.compile(build(cfg["num_rows"])))
    out = Path(args.out) if args.out else Path(cfg["out_dir"]) / f"{backend.value}_srs.json"

    srs = generate_srs(backend, size, args.seed)
    save_srs(out, srs)
    if not args.quiet:
        print(f"SRS written: {out} (backend={backend.value}, shape={srs.shape})")
    return 0


def gen_keys(backend, srs_path, cfg, quiet=False, out_dir=None):
    """SRS 파일로 키를 만들어 out_dir 에 쓴다. (pk 경로, vk 경로)를 반환한다."""
    srs = load_srs(srs_path)
    adapter = get_adapter(backend)
    circuit = adapter.compile(build(cfg["num_rows"]))
    pk, vk = setup(circuit, srs)
    paths = save_keys(out_dir or cfg["out_dir"], pk, vk)
    if not quiet:
        print("Preparation finished successfully.")
        print(f"  proving key   : {paths[0]}")
        print(f"  verifying key : {paths[1]}")
    return paths


def _prove(args, cfg):
    try:
        with open(args.inputs, "r", encoding="utf-8") as fh:
            inputs = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Inputs file is not valid JSON: {args.inputs}: {exc}") from exc
    proof_bytes, public_bytes = prove_from_files(args.pk, inputs, tuple(cfg["seed"]))

    out_dir = Path(cfg["out_dir"])
    proof_out = Path(args.proof_out) if args.proof_out else out_dir / "proof.bin"
    public_out = Path(args.public_out) if args.public_out else out_dir / "public.bin"
    for path, data in ((proof_out, proof_bytes), (public_out, public_bytes)):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    if not args.quiet:
        print(f"Proof written: {proof_out} ({len(proof_bytes)} bytes)")
    return 0


def _verify(args, cfg):
    proof_bytes = Path(args.proof).read_bytes()
    public_bytes = Path(args.public).read_bytes()
    accepted = verify_from_files(args.vk, proof_bytes, public_bytes)
    if not args.quiet:
        print("Proof is valid." if accepted else "Proof is INVALID.")
    return 0 if accepted else 1


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config, base=DEFAULT_CONFIG)
        _setup_logging(cfg, args.quiet)

        if args.command == "gen-srs":
            return _gen_srs(args, cfg)
        if args.command == "gen-keys":
            gen_keys(BackendVariant(args.backend), args.srs_path, cfg, args.quiet, args.out_dir)
            return 0
        if args.command == "prove":
            return _prove(args, cfg)
        return _verify(args, cfg)
    except (FibonacciError, OSError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


# ─── 단일 인자 키 생성 명령 ───

def _gen_keys_entry(backend, argv):
    argv = argv if argv is not None else sys.argv[1:]
    p = argparse.ArgumentParser(
        prog=f"gen-{backend.value}-keys",
        description=f"Generate {backend.value} keys for the Fibonacci circuit.",
    )
    p.add_argument("srs_path", help="Path to the SRS file.")
    p.add_argument("--config", "-c", default=None)
    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config, base=DEFAULT_CONFIG)
        _setup_logging(cfg, False)
        gen_keys(backend, args.srs_path, cfg)
    except (FibonacciError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


def gen_plonk_keys(argv=None):
    return _gen_keys_entry(BackendVariant.PLONK, argv)


def gen_hyperplonk_keys(argv=None):
    return _gen_keys_entry(BackendVariant.HYPERPLONK, argv)


def gen_gemini_keys(argv=None):
    return _gen_keys_entry(BackendVariant.GEMINI, argv)


if __name__ == "__main__":
    sys.exit(main())
