from __future__ import annotations

import re
from typing import Any, Dict, List, TypeVar

from .coerce import NumericLiteral
from .path import Path
from .patcher import Patcher

T = TypeVar("T")

_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _parse_value(raw: str) -> Any:
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered in ("null", "none"):
        return None
    if _NUMBER.fullmatch(raw.strip()):
        return NumericLiteral(raw.strip())
    return raw


def parse_overrides(overrides: List[str]) -> Dict[Path, Any]:
    patch: Dict[Path, Any] = {}
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Invalid override (expected KEY=VALUE): {item}")
        key, value = item.split("=", 1)
        if not key.strip():
            raise ValueError(f"Invalid override key: {item}")
        patch[Path(key.strip())] = _parse_value(value)
    return patch


def apply_overrides(target: T, overrides: List[str], *, strict_paths: bool = False) -> T:
    Patcher(strict_paths=strict_paths).patch_it(target, parse_overrides(overrides))
    return target
