from __future__ import annotations

from typing import Any


class DTOWireError(Exception):
    """Represent a base class for all dtowire-specific failures.

    Catch this type when you want to handle any dtowire error path without
    matching each concrete exception class individually.
    """


class DTOWireUndefinedFieldError(DTOWireError, AttributeError):
    """Signal access to a field that is unknown or not populatable.

    Raised by indexed access (``dto[name]``, ``dto[name] = value``,
    ``del dto[name]``) when ``name`` is not among
    ``populatable_fields()``, and by attribute writes to unknown public
    names. It also subclasses ``AttributeError`` so ``hasattr`` and
    ``getattr(dto, name, default)`` keep working.

    Typical fixes include declaring the field as a class annotation or
    checking the spelling of the field name.
    """


class DTOWireNoResolverAvailableError(DTOWireError):
    """Signal that a complex field needs resolution but no resolver is set.

    Raised while populating a field whose writer expects a class instance and
    the supplied value is not already an instance of that class.

    Typical fix is passing ``resolver=Container()`` (or any
    ``DependencyResolver``) when constructing the root DTO, or supplying an
    already constructed instance instead of raw data.
    """


class DTOWireUnresolvableTypeError(DTOWireError):
    """Signal that the resolver cannot produce an instance of a type.

    Raised by ``Container.make`` when the type is not registered and cannot
    be autoregistered (abstract classes, protocols, builtins, strict mode),
    and by the resolution policy when a binding returns a value of the wrong
    type.

    Typical fixes include binding the abstraction with ``add_concrete`` or
    ``add_factory``, or enabling concrete type autoregistration.
    """


class DTOWireUnpopulatableTargetError(DTOWireError):
    """Signal that a resolved instance cannot absorb the supplied data.

    Raised when the resolver built an instance for an unbound type, but the
    instance has no ``populate`` capability or the supplied value is not a
    mapping.

    Typical fixes include making the target type a ``DataTransferObject``,
    implementing ``populate(data)`` on it, binding it with a factory that
    consumes the ``Seed``, or passing a ready instance.
    """

    def __init__(self, field_name: str, expected_type: type[Any], value: Any) -> None:
        self.field_name = field_name
        self.expected_type = expected_type
        self.value = value
        msg = (
            f"Unable to resolve field '{field_name}' of type "
            f"'{expected_type.__qualname__}'; do not know how to populate it with {value!r}."
        )
        super().__init__(msg)


class DTOWireCircularPopulationError(DTOWireError):
    """Signal populating from a mapping that contains itself.

    Raised when a nested mapping is reached again while it is still being
    populated higher up in the same call chain.

    Typical fix is breaking the reference cycle in the input data before
    population.
    """


class DTOWireCircularDependencyError(DTOWireError):
    """Signal a constructor dependency cycle inside the container.

    Raised by ``Container.make`` when building a type requires, directly or
    transitively, an instance of the same type.

    Typical fixes include moving one side of the cycle to a factory or
    registering an instance for one of the participants.
    """


class DTOWireInvalidRegistrationError(DTOWireError):
    """Signal invalid registration configuration.

    Raised by ``Container.add_instance``, ``Container.add_concrete`` and
    ``Container.add_factory`` when arguments are invalid, for example an
    abstract concrete type, a non-callable factory or a factory without a
    return annotation and without ``provides``.
    """


class DTOWireInvalidFieldError(DTOWireError):
    """Signal an invalid field declaration on a DTO class.

    Raised at class creation time, for example when a field declares a
    mutable default such as a ``list`` or ``dict``.

    Typical fix is dropping the default and populating the field explicitly.
    """
