"""
config.py
기본 설정과 JSON 설정 파일 로더.
"""

import json
from pathlib import Path
from typing import Any, Dict

from fibzk.errors import ConfigurationError

DEFAULT_CONFIG: Dict[str, Any] = {
    "num_rows": 10,        # 회로 행 개수 (10 이상)
    "seed": [1, 1],        # witness 시드 (f(0), f(1))
    "out_dir": "out",      # 키 파일을 쓸 디렉터리
    "log_level": "INFO",
}


def load_config(path: str = None, base: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    JSON 설정 파일을 base 위에 덮어쓴다 (shallow merge).

    :param path: JSON 설정 파일 경로 (None이면 base만 반환)
    :param base: 기준 설정 (None이면 DEFAULT_CONFIG)
    :return: 병합된 설정
    :raises ConfigurationError: 파일이 없거나, JSON 객체가 아니거나, 모르는 키가 있을 때
    """
    base = base.copy() if base is not None else DEFAULT_CONFIG.copy()
    if path is None:
        return base

    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file is not valid JSON: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must hold a JSON object: {path}")

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
    for k, v in data.items():
        base[k] = v
    return base
