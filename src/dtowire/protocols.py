from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, overload, runtime_checkable

T = TypeVar("T")


class DependencyResolver(Protocol):
    """Protocol for services that build instances of requested types.

    DTOs depend on this narrow contract only. ``Container`` implements it;
    any other object with the same two methods can be passed as
    ``resolver=``.
    """

    @overload
    def make(self, dependency: type[T], seed: Any = None) -> T: ...

    @overload
    def make(self, dependency: Any, seed: Any = None) -> Any: ...

    def make(self, dependency: Any, seed: Any = None) -> Any:
        """Build an instance of ``dependency``, optionally using ``seed`` data.

        Args:
            dependency: Dependency key to build.
            seed: Raw construction data. Explicit bindings may consume it;
                generic construction may ignore it.

        Raises:
            DTOWireUnresolvableTypeError: If no instance can be produced.

        """

    def is_bound(self, dependency: Any) -> bool:
        """Return whether an explicit construction rule exists for ``dependency``.

        Args:
            dependency: Dependency key to look up.

        """


@runtime_checkable
class Populatable(Protocol):
    """Objects that can absorb a keyed mapping of field values."""

    def populate(self, data: Mapping[str, Any]) -> None:
        """Populate the object from ``data``."""


@runtime_checkable
class Exportable(Protocol):
    """Objects that project themselves to a JSON-compatible mapping."""

    def to_dict(self) -> dict[str, Any]:
        """Return the exportable mapping of the object."""


__all__ = ["DependencyResolver", "Exportable", "Populatable"]
