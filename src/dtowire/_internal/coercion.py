from __future__ import annotations

from typing import Any

from dtowire._internal.fields import FieldDirectory
from dtowire._internal.resolution import NestedInstanceResolutionPolicy
from dtowire.protocols import DependencyResolver


class ValueCoercer:
    """Decide, per field assignment, whether a raw value needs resolution."""

    def __init__(
        self,
        *,
        field_directory: FieldDirectory,
        resolution_policy: NestedInstanceResolutionPolicy,
    ) -> None:
        self._field_directory = field_directory
        self._resolution_policy = resolution_policy

    def coerce(
        self,
        instance: Any,
        field_name: str,
        value: Any,
        *,
        resolver: DependencyResolver | None,
    ) -> Any:
        """Return the value that should be handed to the field's writer.

        Values for fields without a writer, for primitive or untyped fields,
        and ``None`` (which clears a field) pass through unchanged. Values for
        fields whose writer expects a class go through the resolution policy.

        Args:
            instance: Object owning the field.
            field_name: Field being assigned.
            value: Raw value supplied by the caller.
            resolver: Resolver used when construction is needed.

        """
        descriptor = self._field_directory.descriptor_for(type(instance), field_name)
        if descriptor is None or descriptor.expected_type is None or value is None:
            return value

        return self._resolution_policy.resolve(
            field_name=field_name,
            expected_type=descriptor.expected_type,
            value=value,
            resolver=resolver,
        )


__all__ = ["ValueCoercer"]
