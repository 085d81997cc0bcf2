from __future__ import annotations

import datetime
import decimal
import enum
import inspect
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any

from dtowire._internal.providers import Lifetime
from dtowire._internal.type_checks import is_protocol_class, is_runtime_class
from dtowire.protocols import Populatable


@dataclass(frozen=True, slots=True)
class ConcreteTypeAutoregistrationPolicy:
    """Decide which unregistered classes a container may build on its own.

    Autoregistration is generic construction: the container calls the
    constructor with its annotated dependencies and knows nothing about the
    seed data. Populatable results (DTOs) are filled with that data by the
    nested resolution policy afterwards, so every autoregistered populatable
    type is transient. A shared instance would be re-populated in place by
    each parent that resolves it.

    Value types such as ``datetime`` or ``Decimal`` are never autoregistered:
    they cannot be built without arguments and carry no populatable fields.
    """

    value_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
        enum.Enum,
    )

    def rejection_reason(self, candidate: object) -> str | None:
        """Explain why ``candidate`` cannot be autoregistered, or return ``None``.

        Args:
            candidate: Dependency key requested from the container.

        """
        if not is_runtime_class(candidate):
            return "it is not a class"
        if candidate.__module__ == "builtins":
            return "builtin types have no constructor dependencies"
        if is_protocol_class(candidate):
            return "protocols need a binding"
        if inspect.isabstract(candidate):
            return "abstract classes need a binding"
        if issubclass(candidate, type):
            return "metaclasses are not dependencies"
        if issubclass(candidate, self.value_types):
            return "value types need a factory"
        return None

    def lifetime_for(self, candidate: type[Any], default_lifetime: Lifetime) -> Lifetime:
        """Return the lifetime of an autoregistered ``candidate``.

        Args:
            candidate: Eligible concrete class.
            default_lifetime: Container default used for other classes.

        """
        if issubclass(candidate, Populatable):
            return Lifetime.TRANSIENT
        return default_lifetime


__all__ = ["ConcreteTypeAutoregistrationPolicy"]
