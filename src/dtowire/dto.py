from __future__ import annotations

import inspect
import json
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from typing_extensions import Self

from dtowire._internal import serialization
from dtowire._internal.coercion import ValueCoercer
from dtowire._internal.fields import (
    GENERATED_ACCESSOR_ATTR,
    READER_PREFIX,
    WRITER_PREFIX,
    FieldDirectory,
    is_classvar_annotation,
)
from dtowire._internal.population import PopulationEngine
from dtowire._internal.resolution import NestedInstanceResolutionPolicy
from dtowire.exceptions import DTOWireInvalidFieldError, DTOWireUndefinedFieldError
from dtowire.protocols import DependencyResolver

_MUTABLE_DEFAULT_TYPES = (list, dict, set)

_field_directory = FieldDirectory()
_value_coercer = ValueCoercer(
    field_directory=_field_directory,
    resolution_policy=NestedInstanceResolutionPolicy(),
)
_population_engine = PopulationEngine()


class FieldAttribute:
    """Route attribute access of one DTO field through its reader and writer."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: DataTransferObject | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        return getattr(instance, f"{READER_PREFIX}{self.name}")()

    def __set__(self, instance: DataTransferObject, value: Any) -> None:
        instance._assign(self.name, value)  # noqa: SLF001

    def __delete__(self, instance: DataTransferObject) -> None:
        instance._assign(self.name, None)  # noqa: SLF001

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class DataTransferObject:
    """Base class for reflectively populated data transfer objects.

    Fields are declared as class annotations. Every field gets a reader
    ``get_<name>`` and a writer ``set_<name>`` unless the class defines its
    own; assigning ``set_<name> = None`` in the class body makes the field
    read-only. A field is *set* when its stored value is not ``None``.

    When a writer expects a class and receives something else, the value is
    resolved through the DTO's ``resolver``: a ready instance is used as is,
    explicit bindings of the resolver are trusted, and generically built
    instances are populated with the supplied mapping.

    Examples:
        .. code-block:: python

            class City(DataTransferObject):
                name: str


            class Address(DataTransferObject):
                street: str
                city: City | None = None


            address = Address(
                {"street": "Main St", "city": {"name": "Springfield"}},
                resolver=Container(),
            )
            address.city.name  # "Springfield"

    """

    _field_defaults: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        defaults = dict(cls._field_defaults)
        for name, annotation in inspect.get_annotations(cls).items():
            if name.startswith("_") or is_classvar_annotation(annotation):
                continue

            if name in cls.__dict__:
                default = cls.__dict__[name]
                if isinstance(default, _MUTABLE_DEFAULT_TYPES):
                    msg = (
                        f"Mutable default {type(default).__qualname__} is not allowed for field "
                        f"'{cls.__qualname__}.{name}'. Populate the field explicitly instead."
                    )
                    raise DTOWireInvalidFieldError(msg)
                defaults[name] = default
            else:
                defaults.pop(name, None)

            cls._install_accessors(name)
            setattr(cls, name, FieldAttribute(name))

        cls._field_defaults = defaults

    @classmethod
    def _install_accessors(cls, name: str) -> None:
        reader_name = f"{READER_PREFIX}{name}"
        writer_name = f"{WRITER_PREFIX}{name}"
        if not hasattr(cls, reader_name):
            setattr(cls, reader_name, _generated_reader(cls, name, reader_name))
        if not hasattr(cls, writer_name):
            setattr(cls, writer_name, _generated_writer(cls, name, writer_name))

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        resolver: DependencyResolver | None = None,
    ) -> None:
        """Create a DTO and optionally populate it.

        Args:
            data: Field values to populate the DTO with.
            resolver: Resolver used to build nested objects. Nested DTOs
                built during population share it.

        """
        self._values: dict[str, Any] = dict(self._field_defaults)
        self._resolver = resolver
        if data is not None:
            self.populate(data)

    @property
    def resolver(self) -> DependencyResolver | None:
        return self._resolver

    def _adopt_resolver(self, resolver: DependencyResolver) -> None:
        if self._resolver is None:
            self._resolver = resolver

    def _read_field(self, name: str) -> Any:
        return self._values.get(name)

    def _write_field(self, name: str, value: Any) -> None:
        self._values[name] = value

    def _assign(self, name: str, value: Any) -> None:
        descriptor = _field_directory.descriptor_for(type(self), name)
        if descriptor is None:
            msg = f"'{name}' is not a populatable field of {type(self).__qualname__}."
            raise DTOWireUndefinedFieldError(msg)
        value = _value_coercer.coerce(self, name, value, resolver=self._resolver)
        getattr(self, descriptor.writer_name)(value)

    def _reader_for(self, name: Any) -> Callable[[], Any]:
        descriptor = _field_directory.descriptor_for(type(self), name)
        if descriptor is None:
            msg = f"'{name}' is not a populatable field of {type(self).__qualname__}."
            raise DTOWireUndefinedFieldError(msg)
        return getattr(self, descriptor.reader_name)

    def populate(self, data: Mapping[str, Any]) -> None:
        """Assign every entry of ``data`` through the field writers.

        Population is not transactional; fields written before a failing
        one keep their new values.

        Raises:
            DTOWireUndefinedFieldError: If ``data`` names an unknown field.
            DTOWireNoResolverAvailableError: If a nested value needs a
                resolver and none is set.
            DTOWireUnpopulatableTargetError: If a nested value cannot be
                applied to the built instance.

        """
        _population_engine.populate(self, data)

    @classmethod
    def populatable_fields(cls) -> tuple[str, ...]:
        """Return populatable field names in declaration order."""
        return _field_directory.populatable_fields(cls)

    def to_dict(self) -> dict[str, Any]:
        """Return set populatable fields with their stored values."""
        return serialization.to_exportable(self, _field_directory)

    def to_json(self, **json_kwargs: Any) -> str:
        """Return the JSON document of the DTO; nested objects are projected recursively.

        Args:
            **json_kwargs: Keyword arguments forwarded to ``json.dumps``.

        """
        return serialization.to_json(self, **json_kwargs)

    @classmethod
    def from_json(cls, payload: str | bytes, *, resolver: DependencyResolver | None = None) -> Self:
        """Build a DTO from a JSON object document.

        Args:
            payload: JSON text whose top-level value is an object.
            resolver: Resolver passed to the new DTO.

        Raises:
            TypeError: If the document is not a JSON object.

        """
        data = json.loads(payload)
        if not isinstance(data, dict):
            msg = f"Expected a JSON object for {cls.__qualname__}, got {type(data).__qualname__}."
            raise TypeError(msg)
        return cls(data, resolver=resolver)

    def __getitem__(self, name: str) -> Any:
        return self._reader_for(name)()

    def __setitem__(self, name: str, value: Any) -> None:
        self._assign(name, value)

    def __delitem__(self, name: str) -> None:
        self._reader_for(name)
        self._assign(name, None)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str) or _field_directory.descriptor_for(type(self), name) is None:
            return False
        return self._reader_for(name)() is not None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        msg = f"{type(self).__qualname__} has no field '{name}'."
        raise DTOWireUndefinedFieldError(msg)

    def __getattr__(self, name: str) -> Any:
        msg = f"{type(self).__qualname__} has no field '{name}'."
        raise DTOWireUndefinedFieldError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataTransferObject):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"


def _generated_reader(owner: type[Any], name: str, reader_name: str) -> Callable[..., Any]:
    def reader(self: DataTransferObject) -> Any:
        return self._read_field(name)  # noqa: SLF001

    reader.__name__ = reader_name
    reader.__qualname__ = f"{owner.__qualname__}.{reader_name}"
    setattr(reader, GENERATED_ACCESSOR_ATTR, name)
    return reader


def _generated_writer(owner: type[Any], name: str, writer_name: str) -> Callable[..., None]:
    def writer(self: DataTransferObject, value: Any) -> None:
        self._write_field(name, value)  # noqa: SLF001

    writer.__name__ = writer_name
    writer.__qualname__ = f"{owner.__qualname__}.{writer_name}"
    setattr(writer, GENERATED_ACCESSOR_ATTR, name)
    return writer


__all__ = ["DataTransferObject", "FieldAttribute"]
