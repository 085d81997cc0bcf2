from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from dtowire._internal import resolution_stack
from dtowire.exceptions import DTOWireCircularPopulationError


class PopulationEngine:
    """Assign every entry of a keyed mapping onto an object.

    Entries are written in the mapping's iteration order through the
    object's indexed assignment, which applies coercion and resolution per
    field. Population is not transactional: when a field fails, fields
    written before it keep their new values.
    """

    def populate(self, instance: MutableMapping[str, Any], data: Mapping[str, Any]) -> None:
        """Populate ``instance`` from ``data``.

        Args:
            instance: Object supporting ``instance[name] = value``.
            data: Field names mapped to raw values.

        Raises:
            TypeError: If ``data`` is not a mapping.
            DTOWireCircularPopulationError: If ``data`` is already being
                populated further up the current call chain.

        """
        if not isinstance(data, Mapping):
            msg = f"Population data must be a mapping, got {type(data).__qualname__}."
            raise TypeError(msg)
        if not data:
            return

        key = ("dtowire.populate", id(data))
        if resolution_stack.is_active(key):
            msg = (
                f"Circular population detected while populating {type(instance).__qualname__}: "
                "the data mapping contains itself."
            )
            raise DTOWireCircularPopulationError(msg)

        with resolution_stack.tracking(key):
            for name, value in data.items():
                instance[name] = value


__all__ = ["PopulationEngine"]
