from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import pytest

from dtowire import DTOWireInvalidRegistrationError, Seed
from dtowire._internal.providers import (
    Lifetime,
    ProviderDependenciesExtractor,
    ProviderReturnTypeExtractor,
    ProviderSpec,
    ProvidersRegistrations,
)
from tests.helpers import City, Notes, NotesContract


class Engine:
    pass


class Car:
    def __init__(self, engine: Engine, *args: Any, nickname: str = "car", **kwargs: Any) -> None:
        self.engine = engine
        self.nickname = nickname


def build_city(data: Seed[Mapping[str, Any]], engine: Optional[Engine] = None) -> City:
    return City(data)


def test_extracts_constructor_dependencies() -> None:
    dependencies = ProviderDependenciesExtractor().extract_from_concrete_type(Car)

    assert [dependency.parameter.name for dependency in dependencies] == ["engine", "nickname"]
    assert dependencies[0].provides is Engine
    assert dependencies[0].is_required
    assert dependencies[1].provides is str
    assert not dependencies[1].is_required


def test_extracts_seed_and_optional_factory_dependencies() -> None:
    seed, engine = ProviderDependenciesExtractor().extract_from_factory(build_city)

    assert seed.is_seed
    assert seed.provides is None
    assert not engine.is_seed
    assert engine.provides is Engine
    assert not engine.is_required


def test_dto_constructor_exposes_resolver_dependency() -> None:
    dependencies = ProviderDependenciesExtractor().extract_from_concrete_type(City)

    assert [dependency.parameter.name for dependency in dependencies] == ["data", "resolver"]
    assert not any(dependency.is_required for dependency in dependencies)


def test_missing_annotation_on_required_parameter_is_rejected() -> None:
    def build(value) -> City:  # type: ignore[no-untyped-def]
        return City(value)

    with pytest.raises(DTOWireInvalidRegistrationError, match="required parameter 'value'"):
        ProviderDependenciesExtractor().extract_from_factory(build)


def test_return_type_is_read_from_annotation() -> None:
    assert ProviderReturnTypeExtractor().extract_from_factory(build_city) is City


def test_unresolvable_return_annotation_is_rejected() -> None:
    def build() -> Missing:  # type: ignore[name-defined]  # noqa: F821
        return None

    with pytest.raises(DTOWireInvalidRegistrationError, match="Pass 'provides' explicitly"):
        ProviderReturnTypeExtractor().extract_from_factory(build)


def test_registrations_are_keyed_by_provided_type() -> None:
    registrations = ProvidersRegistrations()
    first = ProviderSpec(provides=NotesContract, concrete_type=Notes)
    second = ProviderSpec(provides=NotesContract, instance=Notes())

    registrations.add(first)
    registrations.add(second)

    assert registrations.find_by_type(NotesContract) is second
    assert registrations.find_by_type(City) is None
    assert registrations.find_by_type([City]) is None
    assert registrations.values() == [second]
    assert len(registrations) == 1


def test_provider_spec_defaults() -> None:
    spec = ProviderSpec(provides=NotesContract, concrete_type=Notes)

    assert spec.lifetime is Lifetime.TRANSIENT
    assert spec.explicit
    assert spec.dependencies == []
    assert spec.provider_name == "Notes"
    assert ProviderSpec(provides=NotesContract, instance=Notes()).provider_name == (
        "instance of Notes"
    )
