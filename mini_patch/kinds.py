from __future__ import annotations

import collections.abc
import dataclasses
import functools
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import numpy as np

from .path import upper_first


# Structural shapes of a declared field type.
OPTIONAL = "optional"
DYNAMIC = "dynamic"
RECORD = "record"
SEQUENCE = "sequence"
LEAF = "leaf"

# Leaf kinds that accept numeric literals.
SIGNED = "signed"
UNSIGNED = "unsigned"
FLOAT = "float"
OTHER = "other"

_TEXT_TYPES = (str, bytes, bytearray)


@dataclass(frozen=True)
class RecordField:
    attr: str
    exported: str
    annotation: Any


def _field_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        pass
    # Some annotation names a class the module cannot see, such as one local
    # to a function. Resolve field by field; unresolved fields are dynamic.
    namespace = vars(sys.modules[cls.__module__]) if cls.__module__ in sys.modules else {}
    hints: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not isinstance(f.type, str):
            hints[f.name] = f.type
            continue
        try:
            hints[f.name] = eval(f.type, dict(namespace), dict(vars(cls)))
        except (NameError, AttributeError):
            hints[f.name] = Any
    return hints


@functools.lru_cache(maxsize=256)
def record_fields(cls: type) -> Tuple[RecordField, ...]:
    """Field accessor table of a dataclass, in declaration order."""
    hints = _field_hints(cls)
    return tuple(
        RecordField(attr=f.name, exported=upper_first(f.name), annotation=hints.get(f.name, Any))
        for f in dataclasses.fields(cls)
    )


def is_record(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def describe(annotation: Any) -> Tuple[str, Any]:
    """Classify a declared type as (shape, inner type)."""
    if annotation is Any or annotation is object:
        return DYNAMIC, None
    origin = typing.get_origin(annotation)
    if _is_union(origin):
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return OPTIONAL, members[0]
        return DYNAMIC, None
    base = origin if isinstance(origin, type) else annotation
    if isinstance(base, type):
        if dataclasses.is_dataclass(base):
            return RECORD, base
        if issubclass(base, np.ndarray):
            return SEQUENCE, base
        if issubclass(base, collections.abc.Sequence) and not issubclass(base, _TEXT_TYPES):
            return SEQUENCE, base
    return LEAF, runtime_type(annotation)


def runtime_type(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    return origin if isinstance(origin, type) else annotation


def numeric_kind(declared: Any) -> Tuple[str, int]:
    """Return the numeric kind and bit width of a leaf type.

    ``int`` and ``float`` are 64 bits wide; numpy scalar types carry their own
    width. ``bool`` and everything else is ``OTHER``.
    """
    if declared is bool or not isinstance(declared, type):
        return OTHER, 0
    if declared is int:
        return SIGNED, 64
    if declared is float:
        return FLOAT, 64
    if issubclass(declared, np.signedinteger):
        return SIGNED, int(np.iinfo(declared).bits)
    if issubclass(declared, np.unsignedinteger):
        return UNSIGNED, int(np.iinfo(declared).bits)
    if issubclass(declared, np.floating):
        return FLOAT, int(np.finfo(declared).bits)
    return OTHER, 0


def integer_bounds(declared: Any) -> Tuple[int, int]:
    info = np.iinfo(np.int64 if declared is int else declared)
    return int(info.min), int(info.max)


def type_name(declared: Any) -> str:
    return getattr(declared, "__name__", str(declared))
