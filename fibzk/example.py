"""
피보나치 E2E 데모: f(0) = f(1) = 1 일 때 f(9) = 55
===================================================

세 백엔드(Plonk, HyperPlonk, Gemini)로 같은 회로를 증명하고 검증한다.

실행:
    python -m fibzk.example

흐름 (백엔드마다):
    1. SRS 생성 (trusted setup, 고정 seed)
    2. 회로 컴파일 + 키 생성
    3. 증명 생성
    4. 증명 검증 (바이트열로 직렬화한 뒤)
    5. 조작된 증명 / 잘못된 공개 입력 검증
"""

from fibzk.backends import get_adapter
from fibzk.circuit import build
from fibzk.keygen import setup
from fibzk.prover import prove
from fibzk.srs import generate_srs
from fibzk.variant import BackendVariant
from fibzk.verifier import verify
from fibzk.witness import generate


def run_backend(backend, spec, witness, public):
    """한 백엔드의 전체 흐름. 정상 증명이 통과하고 변조가 거부되면 True."""
    print(f"\n── {backend.value} ──")
    adapter = get_adapter(backend)
    circuit = adapter.compile(spec)
    shape = adapter.required_shape(circuit)

    srs = generate_srs(backend, shape, seed=12345)
    print(f"    SRS 모양: {srs.shape}")

    pk, vk = setup(circuit, srs)
    print(f"    셀렉터 커밋 수: {len(vk.fixed_commitments)}")

    proof = prove(pk, witness, public, backend=backend)
    data = proof.to_bytes()
    print(f"    증명 크기: {len(data)} bytes")

    result = verify(vk, public, data, backend=backend)
    print(f"    검증 결과: {'성공 ✓' if result else '실패 ✗'}")

    # 마지막 바이트의 최하위 비트를 뒤집는다
    tampered = data[:-1] + bytes([data[-1] ^ 1])
    wrong_proof = verify(vk, public, tampered)
    print(f"    조작된 증명: {'성공 ✓' if wrong_proof else '실패 ✗ (예상대로 실패)'}")

    wrong_public = verify(vk, int(public) + 1, data)
    print(f"    공개 입력 {int(public) + 1}: {'성공 ✓' if wrong_public else '실패 ✗ (예상대로 실패)'}")

    return result and not wrong_proof and not wrong_public


def main():
    print("=" * 60)
    print("  Fibonacci Zero-Knowledge Proof Demo")
    print("  회로: f(0) = f(1) = 1, f(i+2) = f(i) + f(i+1), f(9) = 55")
    print("=" * 60)

    spec = build(10)
    witness = generate(spec, (1, 1))
    public = witness.public_output(spec)
    print(f"\n    행 수: {spec.num_rows}, 게이트 종류: {len(spec.gates)}")
    print(f"    공개 출력: {int(public)}")

    results = [run_backend(backend, spec, witness, public) for backend in BackendVariant]

    print("\n" + "=" * 60)
    if all(results):
        print("  데모 완료: 모든 테스트 통과!")
    else:
        print("  데모 완료: 일부 테스트 실패")
    print("=" * 60)

    return all(results)


if __name__ == "__main__":
    main()
