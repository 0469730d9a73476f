from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np
import pytest

from mini_patch.coerce import NumericLiteral
from mini_patch.errors import (
    FieldNotWritable,
    NumericConversionFailure,
    PatchError,
    PathNotResolved,
    TypeMismatch,
)
from mini_patch.patcher import Patcher, patch_it


@dataclass
class Address:
    city: str = ""
    zip_code: np.uint32 = np.uint32(0)


@dataclass
class Person:
    name: str = ""
    age: np.int32 = np.int32(0)
    address: Address = field(default_factory=Address)
    manager: Optional[Person] = None
    nicknames: List[str] = field(default_factory=list)
    profile: Any = None
    _token: str = ""


@dataclass
class Odd:
    nAme: str = ""


@dataclass(frozen=True)
class Sealed:
    address: Address = field(default_factory=Address)


@dataclass
class Vault:
    _inner: Address = field(default_factory=Address)
    sealed: Sealed = field(default_factory=Sealed)


def test_end_to_end_patch() -> None:
    person = Person()
    patch_it(
        person,
        {"name": "Alice", "age": NumericLiteral("30"), "address.city": "Boston"},
    )
    assert person.name == "Alice"
    assert person.age == 30
    assert type(person.age) is np.int32
    assert person.address.city == "Boston"


def test_overflow_leaves_other_fields_untouched() -> None:
    person = Person(name="Bob", address=Address(city="Paris"))
    with pytest.raises(NumericConversionFailure) as excinfo:
        patch_it(person, {"age": NumericLiteral("99999999999999")})
    assert excinfo.value.path == "age"
    assert person.age == 0
    assert person.name == "Bob"
    assert person.address.city == "Paris"


def test_unknown_path() -> None:
    with pytest.raises(PathNotResolved) as excinfo:
        patch_it(Person(), {"unknown.field": 1})
    assert excinfo.value.path == "unknown.field"
    assert isinstance(excinfo.value, PatchError)
    assert isinstance(excinfo.value, ValueError)


def test_empty_path_never_resolves() -> None:
    with pytest.raises(PathNotResolved):
        patch_it(Person(), {"": "x"})


def test_first_letter_normalization() -> None:
    for path in ("name", "Name"):
        person = Person()
        patch_it(person, {path: "Carol"})
        assert person.name == "Carol"
    with pytest.raises(PathNotResolved):
        patch_it(Person(), {"nAme": "Carol"})
    odd = Odd()
    patch_it(odd, {"nAme": "Dave"})
    assert odd.nAme == "Dave"


def test_boundary_values() -> None:
    person = Person()
    patch_it(person, {"age": NumericLiteral("2147483647")})
    assert person.age == 2147483647
    with pytest.raises(NumericConversionFailure):
        patch_it(person, {"age": NumericLiteral("2147483648")})
    assert person.age == 2147483647
    with pytest.raises(PathNotResolved):
        patch_it(person, {"address.zipCode": NumericLiteral("1")})
    patch_it(person, {"address.zip_code": NumericLiteral("4294967295")})
    assert person.address.zip_code == 4294967295
    with pytest.raises(NumericConversionFailure):
        patch_it(person, {"address.zip_code": NumericLiteral("4294967296")})


def test_numeric_literal_is_idempotent() -> None:
    person = Person()
    patch_it(person, {"age": NumericLiteral("41")})
    first = person.age
    patch_it(person, {"age": NumericLiteral("41")})
    assert person.age == first == 41


def test_sequence_fields_never_resolve() -> None:
    person = Person(nicknames=["al"])
    for path in ("nicknames", "nicknames.0", "nicknames.0.anything"):
        with pytest.raises(PathNotResolved):
            patch_it(person, {path: "x"})
    assert person.nicknames == ["al"]


def test_private_field_is_not_writable() -> None:
    person = Person()
    with pytest.raises(FieldNotWritable):
        patch_it(person, {"_token": "abc"})
    assert person._token == ""


def test_type_mismatch() -> None:
    with pytest.raises(TypeMismatch):
        patch_it(Person(), {"name": 5})
    with pytest.raises(TypeMismatch):
        patch_it(Person(), {"age": 30})


def test_optional_and_dynamic_walk() -> None:
    person = Person(manager=Person(), profile=Address())
    patch_it(person, {"manager.name": "Erin", "profile.city": "Oslo"})
    assert person.manager.name == "Erin"
    assert person.profile.city == "Oslo"
    with pytest.raises(PathNotResolved):
        patch_it(Person(), {"manager.name": "Erin"})


def test_excess_segments_are_ignored_by_default() -> None:
    person = Person()
    patch_it(person, {"name.first": "Frank"})
    assert person.name == "Frank"


def test_strict_paths_reject_excess_segments() -> None:
    person = Person()
    with pytest.raises(PathNotResolved):
        Patcher(strict_paths=True).patch_it(person, {"name.first": "Frank"})
    assert person.name == ""


def test_replace_whole_sub_record() -> None:
    person = Person()
    replacement = Address(city="Rome")
    patch_it(person, {"address": replacement})
    assert person.address is replacement


def test_failure_keeps_earlier_entries() -> None:
    person = Person()
    with pytest.raises(PathNotResolved):
        patch_it(person, {"name": "Gina", "missing": "x", "address.city": "Lima"})
    assert person.name == "Gina"
    assert person.address.city == ""


def test_patched_copy_leaves_original() -> None:
    person = Person(name="Hank")
    patcher = Patcher()
    clone = patcher.patched_copy(person, {"name": "Ivy", "address.city": "Kyiv"})
    assert clone.name == "Ivy"
    assert clone.address.city == "Kyiv"
    assert person.name == "Hank"
    assert person.address.city == ""
    with pytest.raises(PathNotResolved):
        patcher.patched_copy(person, {"name": "Jo", "missing": 1})
    assert person.name == "Hank"


def test_debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("mini_patch.test")
    with caplog.at_level(logging.DEBUG, logger="mini_patch.test"):
        Patcher(logger=logger).patch_it(Person(), {"name.first": "Kim"})
    messages = [record.getMessage() for record in caplog.records]
    assert any("ignored segments First" in message for message in messages)
    assert any('apply "Kim"' in message for message in messages)


def test_fields_below_private_or_frozen_records_are_not_writable() -> None:
    vault = Vault()
    with pytest.raises(FieldNotWritable):
        patch_it(vault, {"_inner.city": "Oslo"})
    assert vault._inner.city == ""
    with pytest.raises(FieldNotWritable):
        patch_it(vault, {"sealed.address.city": "Oslo"})
    assert vault.sealed.address.city == ""


def test_function_local_records() -> None:
    @dataclass
    class Leaf:
        city: str = ""

    @dataclass
    class Root:
        name: str = ""
        leaf: Leaf = field(default_factory=Leaf)

    root = Root()
    with pytest.raises(PatchError):
        patch_it(root, {"name": 5})
    patch_it(root, {"name": "Lena", "leaf.city": "Oslo"})
    assert root.name == "Lena"
    assert root.leaf.city == "Oslo"
