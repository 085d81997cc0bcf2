from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from dtowire._internal.type_checks import supports_instance_checks
from dtowire.exceptions import (
    DTOWireNoResolverAvailableError,
    DTOWireUnpopulatableTargetError,
    DTOWireUnresolvableTypeError,
)
from dtowire.protocols import DependencyResolver, Populatable

logger = logging.getLogger(__name__)


class NestedInstanceResolutionPolicy:
    """Turn a raw field value into an instance of the field's expected class.

    The checks run cheapest first:

    1. a value that already is an instance of the expected class is used as is;
    2. without a resolver nothing can be constructed, so resolution fails;
    3. the resolver builds an instance, receiving the raw value as seed;
    4. the instance is reconciled with the raw value. Explicit bindings are
       trusted to have consumed the seed. Generic construction may have
       ignored it, so the instance is populated with the raw mapping, or
       resolution fails when it cannot be.

    Protocols that are not runtime checkable cannot take part in instance
    checks. For them only mappings are resolved. Any other value is taken as
    a ready instance, and whatever the resolver builds is trusted to satisfy
    the protocol.
    """

    def resolve(
        self,
        *,
        field_name: str,
        expected_type: type[Any],
        value: Any,
        resolver: DependencyResolver | None,
    ) -> Any:
        """Return an instance of ``expected_type`` that reflects ``value``.

        Args:
            field_name: Name of the field being assigned, for diagnostics.
            expected_type: Class the field's writer expects.
            value: Raw value supplied for the field.
            resolver: Resolver of the DTO being populated, if any.

        Raises:
            DTOWireNoResolverAvailableError: If construction is needed and
                ``resolver`` is ``None``.
            DTOWireUnresolvableTypeError: If the resolver cannot build the type
                or builds a value of another type.
            DTOWireUnpopulatableTargetError: If a generically built instance
                cannot absorb ``value``.

        """
        checkable = supports_instance_checks(expected_type)
        if checkable and isinstance(value, expected_type):
            logger.debug("Field '%s' received a ready %s", field_name, expected_type.__qualname__)
            return value
        if not checkable and not isinstance(value, Mapping):
            logger.debug(
                "Field '%s' received an unchecked value for protocol %s",
                field_name,
                expected_type.__qualname__,
            )
            return value

        if resolver is None:
            msg = (
                f"No resolver is available, cannot resolve field '{field_name}' of type "
                f"'{expected_type.__qualname__}'; do not know how to populate it with {value!r}."
            )
            raise DTOWireNoResolverAvailableError(msg)

        instance = resolver.make(expected_type, value)
        if checkable and not isinstance(instance, expected_type):
            msg = (
                f"Resolver built {type(instance).__qualname__!r} for field '{field_name}', "
                f"expected an instance of '{expected_type.__qualname__}'."
            )
            raise DTOWireUnresolvableTypeError(msg)

        if resolver.is_bound(expected_type):
            logger.debug(
                "Field '%s' resolved through the binding for %s",
                field_name,
                expected_type.__qualname__,
            )
            return instance

        if isinstance(value, Mapping) and isinstance(instance, Populatable):
            logger.debug(
                "Field '%s' populating generically built %s",
                field_name,
                expected_type.__qualname__,
            )
            _share_resolver(instance, resolver)
            instance.populate(value)
            return instance

        raise DTOWireUnpopulatableTargetError(field_name, expected_type, value)


def _share_resolver(instance: Any, resolver: DependencyResolver) -> None:
    # Nested DTOs built without a resolver inherit the parent's one.
    adopt = getattr(instance, "_adopt_resolver", None)
    if callable(adopt):
        adopt(resolver)


__all__ = ["NestedInstanceResolutionPolicy"]
