from __future__ import annotations

import json
import pathlib
from typing import Any, Dict

import yaml

from .coerce import NumericLiteral
from .path import Path


def _as_patch(data: Any) -> Dict[Path, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"patch document must be an object, got {type(data).__name__}")
    return {Path(key): value for key, value in data.items()}


class _PatchLoader(yaml.SafeLoader):
    """SafeLoader that keeps YAML numbers as the text they were written as."""


_YAML_SPECIAL_FLOATS = {".inf": "inf", "+.inf": "+inf", "-.inf": "-inf", ".nan": "nan"}


def _construct_number(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> NumericLiteral:
    text = loader.construct_scalar(node)
    return NumericLiteral(_YAML_SPECIAL_FLOATS.get(text.lower(), text))


_PatchLoader.add_constructor("tag:yaml.org,2002:int", _construct_number)
_PatchLoader.add_constructor("tag:yaml.org,2002:float", _construct_number)


def _plain(data: Any) -> Any:
    if isinstance(data, NumericLiteral):
        try:
            return int(data.text)
        except ValueError:
            return float(data.text)
    if isinstance(data, dict):
        return {str(key): _plain(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_plain(value) for value in data]
    return data


def loads_patch(text: str) -> Dict[Path, Any]:
    # Numbers stay as text until the target field decides their type.
    data = json.loads(
        text,
        parse_int=NumericLiteral,
        parse_float=NumericLiteral,
        parse_constant=NumericLiteral,
    )
    return _as_patch(data)


def load_patch(path: str | pathlib.Path) -> Dict[Path, Any]:
    path = pathlib.Path(path)
    suffix = path.suffix.lower()
    with path.open(encoding="utf-8") as file:
        if suffix == ".json":
            return loads_patch(file.read())
        if suffix in (".yaml", ".yml"):
            return _as_patch(yaml.load(file, Loader=_PatchLoader) or {})
    raise ValueError(f"Unsupported patch file type: {path.suffix}")


def dump_patch(path: str | pathlib.Path, patch: Dict[str, Any]) -> None:
    path = pathlib.Path(path)
    data = _plain(dict(patch))
    suffix = path.suffix.lower()
    if suffix not in (".json", ".yaml", ".yml"):
        raise ValueError(f"Unsupported patch file type: {path.suffix}")
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open(mode="w", encoding="utf-8") as file:
        if suffix == ".json":
            json.dump(data, file, ensure_ascii=False, indent=2, sort_keys=True)
            file.write("\n")
        else:
            yaml.safe_dump(data, file, default_flow_style=False, allow_unicode=True, sort_keys=False)
