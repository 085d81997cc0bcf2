"""DTO and collaborator classes shared by the test suite."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol

from dtowire import DataTransferObject, Seed


class DummyDto(DataTransferObject):
    name: str
    age: int


class City(DataTransferObject):
    name: str
    zip_code: str


class Address(DataTransferObject):
    street: str
    city: City | None = None


class Person(DataTransferObject):
    name: str
    address: Address | None = None


class Node(DataTransferObject):
    label: str
    child: Node | None = None


class NotesContract(ABC):
    @abstractmethod
    def lines(self) -> list[str]: ...


class Notes(NotesContract):
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._lines = list((data or {}).get("notes", ()))

    def lines(self) -> list[str]:
        return self._lines

    def to_dict(self) -> dict[str, Any]:
        return {"notes": self._lines}


class Journal(DataTransferObject):
    title: str
    notes: NotesContract | None = None


class NotesLike(Protocol):
    """Structural notes type without ``@runtime_checkable``."""

    def lines(self) -> list[str]: ...


class Logbook(DataTransferObject):
    title: str
    notes: NotesLike | None = None


class Coordinates:
    """Plain class without a populate capability."""

    def __init__(self) -> None:
        self.lat = 0.0
        self.lon = 0.0


class Place(DataTransferObject):
    label: str
    coordinates: Coordinates | None = None


def build_notes(data: Seed[Mapping[str, Any]]) -> NotesContract:
    return Notes(data)


def build_notes_like(data: Seed[Mapping[str, Any]]) -> NotesLike:
    return Notes(data)


class RecordingResolver:
    """Resolver that builds types with no arguments and records every call."""

    def __init__(self, *, bound: tuple[type[Any], ...] = ()) -> None:
        self.bound = bound
        self.calls: list[tuple[Any, Any]] = []

    def make(self, dependency: Any, seed: Any = None) -> Any:
        self.calls.append((dependency, seed))
        return dependency()

    def is_bound(self, dependency: Any) -> bool:
        return dependency in self.bound
