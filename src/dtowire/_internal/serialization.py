from __future__ import annotations

import json
from typing import Any

from dtowire._internal.fields import FieldDirectory
from dtowire.protocols import Exportable


def to_exportable(instance: Any, field_directory: FieldDirectory) -> dict[str, Any]:
    """Return the populatable fields of ``instance`` that are set.

    Keys follow declaration order and values are returned as stored, nested
    objects included. Use ``to_json`` for a fully projected document.

    Args:
        instance: Object whose fields are exported.
        field_directory: Directory used to enumerate fields.

    """
    exported: dict[str, Any] = {}
    for name in field_directory.populatable_fields(type(instance)):
        value = getattr(instance, field_directory.reader_name(name))()
        if value is not None:
            exported[name] = value
    return exported


def json_default(value: Any) -> Any:
    """Project nested exportable objects for ``json.dumps``."""
    if isinstance(value, Exportable):
        return value.to_dict()
    msg = f"Object of type {type(value).__qualname__} is not JSON serializable"
    raise TypeError(msg)


def to_json(instance: Exportable, **json_kwargs: Any) -> str:
    json_kwargs.setdefault("default", json_default)
    return json.dumps(instance.to_dict(), **json_kwargs)


__all__ = ["json_default", "to_exportable", "to_json"]
