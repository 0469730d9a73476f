from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .kinds import DYNAMIC, OPTIONAL, RECORD, SEQUENCE, describe, is_record, record_fields


def _locked(owner: Any, attr: str) -> bool:
    if attr.startswith("_"):
        return True
    params = getattr(type(owner), "__dataclass_params__", None)
    return params is not None and params.frozen


@dataclass
class FieldHandle:
    """Settable slot inside a record, valid for one patch entry.

    ``readonly`` is set when any record on the way to the slot was reached
    through a private attribute or belongs to a frozen dataclass.
    """

    owner: Any
    attr: str
    name: str
    declared: Any
    path: str
    excess: List[str] = field(default_factory=list)
    readonly: bool = False

    @property
    def writable(self) -> bool:
        return not (self.readonly or _locked(self.owner, self.attr))

    def get(self) -> Any:
        return getattr(self.owner, self.attr)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attr, value)


def locate(target: Any, tokens: List[str]) -> Optional[FieldHandle]:
    """Walk ``target`` along ``tokens`` and return the terminal field.

    Optional and dynamically-typed slots are unwrapped without consuming a
    token, records consume one token per level, sequences never resolve. The
    first leaf reached is the terminal field even if tokens remain; those are
    reported in ``FieldHandle.excess``. Returns ``None`` when the path does not
    resolve.
    """
    if not is_record(target):
        return None
    return _walk(target, type(target), None, "", "", tokens, [], False)


def _walk(
    value: Any,
    annotation: Any,
    owner: Any,
    attr: str,
    name: str,
    tokens: List[str],
    trail: List[str],
    readonly: bool,
) -> Optional[FieldHandle]:
    shape, inner = describe(annotation)
    if shape == OPTIONAL:
        if value is None:
            return None
        return _walk(value, inner, owner, attr, name, tokens, trail, readonly)
    if shape == DYNAMIC:
        if value is None:
            return None
        return _walk(value, type(value), owner, attr, name, tokens, trail, readonly)
    if shape == RECORD:
        if not tokens:
            # A whole sub-record addressed by the path.
            return _handle(owner, attr, name, inner, trail, tokens, readonly)
        if not is_record(value):
            return None
        current = tokens[0]
        for rf in record_fields(type(value)):
            if rf.exported == current:
                return _walk(
                    getattr(value, rf.attr),
                    rf.annotation,
                    value,
                    rf.attr,
                    rf.exported,
                    tokens[1:],
                    trail + [current],
                    readonly or _locked(value, rf.attr),
                )
        return None
    if shape == SEQUENCE:
        return None
    return _handle(owner, attr, name, inner, trail, tokens, readonly)


def _handle(
    owner: Any,
    attr: str,
    name: str,
    declared: Any,
    trail: List[str],
    tokens: List[str],
    readonly: bool,
) -> Optional[FieldHandle]:
    if owner is None:
        return None
    return FieldHandle(
        owner=owner,
        attr=attr,
        name=name,
        declared=declared,
        path=".".join(trail),
        excess=list(tokens),
        readonly=readonly,
    )
