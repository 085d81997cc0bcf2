"""Bindings and seed data: let a factory build abstract field types.

An abstract field type cannot be built generically. Bind it with a factory
whose ``Seed[...]`` parameter receives the raw field value; the DTO trusts
whatever an explicit binding returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from dtowire import Container, DataTransferObject, Seed


class NotesContract(ABC):
    @abstractmethod
    def lines(self) -> list[str]: ...


class Notes(NotesContract):
    def __init__(self, lines: list[str]) -> None:
        self._lines = lines

    def lines(self) -> list[str]:
        return self._lines


class Journal(DataTransferObject):
    title: str
    notes: NotesContract | None = None


def build_notes(data: Seed[Mapping[str, Any]]) -> NotesContract:
    return Notes(list(data["notes"]))


def main() -> None:
    container = Container()
    container.add_factory(build_notes)

    journal = Journal(
        {"title": "Week 1", "notes": {"notes": ["plan", "ship"]}},
        resolver=container,
    )

    assert journal.notes is not None
    print(f"notes_type={type(journal.notes).__name__}")  # => notes_type=Notes
    print(f"lines={','.join(journal.notes.lines())}")  # => lines=plan,ship
    print(f"bound={container.is_bound(NotesContract)}")  # => bound=True


if __name__ == "__main__":
    main()
