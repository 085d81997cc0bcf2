from __future__ import annotations

from abc import ABC
from typing import Annotated, Any, Optional, Protocol, Union, runtime_checkable

import pytest

from dtowire._internal.type_checks import (
    complex_type_of,
    is_protocol_class,
    is_runtime_class,
    supports_instance_checks,
    unwrap_optional,
)
from tests.helpers import Address, City


class Greeter(Protocol):
    def greet(self) -> str: ...


@runtime_checkable
class CheckedGreeter(Protocol):
    def greet(self) -> str: ...


class Base(ABC):
    pass


def test_is_runtime_class() -> None:
    assert is_runtime_class(City)
    assert not is_runtime_class(list[int])
    assert not is_runtime_class("City")
    assert not is_runtime_class(City())


def test_is_protocol_class() -> None:
    assert is_protocol_class(Greeter)
    assert not is_protocol_class(Base)
    assert not is_protocol_class(City)


def test_supports_instance_checks() -> None:
    assert supports_instance_checks(City)
    assert supports_instance_checks(Base)
    assert supports_instance_checks(CheckedGreeter)
    assert not supports_instance_checks(Greeter)


@pytest.mark.parametrize(
    ("annotation", "expected"),
    [
        (Optional[City], City),
        (City | None, City),
        (Annotated[City | None, "meta"], City),
        (Union[City, Address], Union[City, Address]),
        (City, City),
    ],
)
def test_unwrap_optional(annotation: Any, expected: Any) -> None:
    assert unwrap_optional(annotation) == expected


@pytest.mark.parametrize(
    ("annotation", "expected"),
    [
        (City, City),
        (City | None, City),
        (Greeter, Greeter),
        (int, None),
        (str | None, None),
        (dict[str, Any], None),
        (Any, None),
        (City | Address, None),
        ("City", None),
    ],
)
def test_complex_type_of(annotation: Any, expected: type[Any] | None) -> None:
    assert complex_type_of(annotation) is expected
