from __future__ import annotations

import logging
from typing import Annotated, Any, Optional, TypeVar, Union

import pytest

from dtowire import DataTransferObject
from dtowire._internal.fields import FieldDirectory, is_classvar_annotation
from tests.helpers import Address, City, DummyDto

T = TypeVar("T")


class PlainRecord:
    """Plain class exposing fields through hand-written accessors."""

    x: int
    city: City
    hidden: str

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get_x(self) -> Any:
        return self._values.get("x")

    def set_x(self, value: int) -> None:
        self._values["x"] = value

    def get_city(self) -> Any:
        return self._values.get("city")

    def set_city(self, value: City) -> None:
        self._values["city"] = value

    def get_hidden(self) -> Any:
        return self._values.get("hidden")


class Annotations(DataTransferObject):
    plain: str
    optional_city: Optional[City]
    union_city: City | None
    annotated_city: Annotated[City, "meta"]
    wide_union: Union[City, Address]
    generic: list[City]
    anything: Any
    variable: T  # type: ignore[valid-type]
    untyped_writer: City

    def set_untyped_writer(self, value):  # type: ignore[no-untyped-def]
        self._write_field("untyped_writer", value)


@pytest.fixture()
def directory() -> FieldDirectory:
    return FieldDirectory()


def test_accessor_names(directory: FieldDirectory) -> None:
    assert directory.reader_name("zip_code") == "get_zip_code"
    assert directory.writer_name("zip_code") == "set_zip_code"


def test_populatable_fields_of_dto(directory: FieldDirectory) -> None:
    assert directory.populatable_fields(DummyDto) == ("name", "age")


def test_plain_class_fields_need_reader_and_writer(directory: FieldDirectory) -> None:
    assert directory.populatable_fields(PlainRecord) == ("x", "city")
    assert list(directory.declared_fields(PlainRecord)) == ["x", "city", "hidden"]


def test_writer_annotation_of_plain_class(directory: FieldDirectory) -> None:
    x_descriptor = directory.descriptor_for(PlainRecord, "x")
    city_descriptor = directory.descriptor_for(PlainRecord, "city")

    assert x_descriptor is not None
    assert x_descriptor.expected_type is None
    assert city_descriptor is not None
    assert city_descriptor.expected_type is City
    assert city_descriptor.reader_name == "get_city"
    assert city_descriptor.writer_name == "set_city"


def test_descriptor_for_unknown_field_is_none(directory: FieldDirectory) -> None:
    assert directory.descriptor_for(DummyDto, "nickname") is None
    assert directory.descriptor_for(PlainRecord, "hidden") is None


@pytest.mark.parametrize(
    ("field_name", "expected_type"),
    [
        ("plain", None),
        ("optional_city", City),
        ("union_city", City),
        ("annotated_city", City),
        ("wide_union", None),
        ("generic", None),
        ("anything", None),
        ("variable", None),
        ("untyped_writer", None),
    ],
)
def test_expected_type_normalization(
    directory: FieldDirectory,
    field_name: str,
    expected_type: type[Any] | None,
) -> None:
    descriptor = directory.descriptor_for(Annotations, field_name)

    assert descriptor is not None
    assert descriptor.expected_type is expected_type


def test_unresolvable_annotation_is_untyped_and_logged(
    directory: FieldDirectory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    class Broken(DataTransferObject):
        ref: DoesNotExist  # type: ignore[name-defined]  # noqa: F821

    with caplog.at_level(logging.WARNING, logger="dtowire._internal.fields"):
        descriptor = directory.descriptor_for(Broken, "ref")

    assert descriptor is not None
    assert descriptor.expected_type is None
    assert "DoesNotExist" in caplog.text


def test_unresolvable_annotation_leaves_sibling_fields_typed(directory: FieldDirectory) -> None:
    class Partly(DataTransferObject):
        ref: DoesNotExist  # type: ignore[name-defined]  # noqa: F821
        city: City | None = None

    descriptor = directory.descriptor_for(Partly, "city")

    assert descriptor is not None
    assert descriptor.expected_type is City


def test_unresolvable_writer_annotation_is_untyped_and_logged(
    directory: FieldDirectory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    class Loose(DataTransferObject):
        ref: Any

        def set_ref(self, value: Missing) -> None:  # type: ignore[name-defined]  # noqa: F821
            self._write_field("ref", value)

    with caplog.at_level(logging.WARNING, logger="dtowire._internal.fields"):
        descriptor = directory.descriptor_for(Loose, "ref")

    assert descriptor is not None
    assert descriptor.expected_type is None
    assert "Missing" in caplog.text


def test_unresolvable_annotation_still_accepts_values() -> None:
    class Broken(DataTransferObject):
        ref: DoesNotExist  # type: ignore[name-defined]  # noqa: F821

    assert Broken({"ref": {"any": "value"}}).ref == {"any": "value"}


def test_schema_is_cached_per_class(directory: FieldDirectory) -> None:
    first = directory.descriptor_for(Address, "city")
    second = directory.descriptor_for(Address, "city")

    assert first is second


@pytest.mark.parametrize(
    ("annotation", "expected"),
    [
        ("ClassVar[int]", True),
        ("typing.ClassVar[int]", True),
        ("int", False),
        (int, False),
    ],
)
def test_is_classvar_annotation(annotation: Any, expected: bool) -> None:
    assert is_classvar_annotation(annotation) is expected
