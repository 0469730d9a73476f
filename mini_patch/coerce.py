from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .errors import NumericConversionFailure, TypeMismatch, UnsupportedFieldKind
from .kinds import FLOAT, SIGNED, UNSIGNED, integer_bounds, numeric_kind, type_name
from .locator import FieldHandle


@dataclass(frozen=True)
class NumericLiteral:
    """A number that arrived as text.

    Its width and signedness are decided by the field it is written into.
    """

    text: str

    def __str__(self) -> str:
        return self.text


_SIGNED_TEXT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_TEXT = re.compile(r"[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INT64_MIN, _INT64_MAX = integer_bounds(np.int64)
_UINT64_MAX = int(np.iinfo(np.uint64).max)


def parse_signed(text: str) -> int:
    if not _SIGNED_TEXT.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    n = int(text)
    if not _INT64_MIN <= n <= _INT64_MAX:
        raise ValueError(f"parsing {text!r}: value out of range")
    return n


def parse_unsigned(text: str) -> int:
    if not _UNSIGNED_TEXT.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    n = int(text)
    if n > _UINT64_MAX:
        raise ValueError(f"parsing {text!r}: value out of range")
    return n


def parse_float(text: str) -> float:
    if not _FLOAT_TEXT.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    f = float(text)
    # float() saturates to inf instead of failing on out-of-range literals.
    if math.isinf(f) and "inf" not in text.lower():
        raise ValueError(f"parsing {text!r}: value out of range")
    return f


def _convert_literal(handle: FieldHandle, literal: NumericLiteral) -> Any:
    declared = handle.declared
    kind, _ = numeric_kind(declared)
    text = literal.text
    if kind == SIGNED:
        n = parse_signed(text)
        lo, hi = integer_bounds(declared)
        if not lo <= n <= hi:
            raise ValueError(f"{n} overflows {type_name(declared)}")
        return declared(n)
    if kind == UNSIGNED:
        n = parse_unsigned(text)
        _, hi = integer_bounds(declared)
        if n > hi:
            raise ValueError(f"{n} overflows {type_name(declared)}")
        return declared(n)
    if kind == FLOAT:
        f = parse_float(text)
        with np.errstate(over="ignore"):
            stored = declared(f)
        if math.isinf(stored) and not math.isinf(f):
            raise ValueError(f"{text} overflows {type_name(declared)}")
        return stored
    raise UnsupportedFieldKind(
        handle.path,
        f"field {handle.name} of type {type_name(declared)} cannot be patched with number {text}",
    )


def coerce(handle: FieldHandle, value: Any, path: Optional[str] = None) -> Any:
    """Convert ``value`` into the exact declared type of ``handle``.

    Numeric literals are parsed and range checked for the field's width;
    any other value must already have the field's type.
    """
    path = handle.path if path is None else path
    if isinstance(value, NumericLiteral):
        try:
            return _convert_literal(handle, value)
        except UnsupportedFieldKind as exc:
            raise UnsupportedFieldKind(path, exc.cause) from None
        except ValueError as exc:
            raise NumericConversionFailure(
                path,
                f"field {handle.name} number {value} as {type_name(handle.declared)} patch failure: {exc}",
            ) from exc
    if type(value) is not handle.declared:
        raise TypeMismatch(
            path,
            f"field {handle.name} cannot be patched with {type_name(type(value))} "
            f"value, expected {type_name(handle.declared)}",
        )
    return value


def assign(handle: FieldHandle, value: Any, path: Optional[str] = None) -> None:
    handle.set(coerce(handle, value, path))
