from __future__ import annotations

import inspect
import logging
import threading
import weakref
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin, get_type_hints

from dtowire._internal.type_checks import complex_type_of

logger = logging.getLogger(__name__)

READER_PREFIX = "get_"
WRITER_PREFIX = "set_"
GENERATED_ACCESSOR_ATTR = "__dtowire_field__"

_UNRESOLVED: Any = object()
_CLASSVAR_PREFIXES = ("ClassVar", "typing.ClassVar", "t.ClassVar")


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Describe one populatable field of a class.

    Built once per class by ``FieldDirectory`` and reused for every
    assignment. ``expected_type`` is ``None`` when the writer accepts any
    primitive or untyped value.
    """

    name: str
    reader_name: str
    writer_name: str
    expected_type: type[Any] | None


class FieldDirectory:
    """Enumerate declared and populatable fields of classes.

    A field is declared by a class annotation (``ClassVar`` and names with a
    leading underscore excluded) and is populatable when the class exposes a
    callable reader ``get_<name>`` and writer ``set_<name>``. Declaration
    order follows the MRO from the base class down, as in ``dataclasses``.

    Schemas are computed on first use and cached per class.
    """

    def __init__(self) -> None:
        self._schemas: weakref.WeakKeyDictionary[type[Any], dict[str, FieldDescriptor]] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def reader_name(self, field_name: str) -> str:
        return f"{READER_PREFIX}{field_name}"

    def writer_name(self, field_name: str) -> str:
        return f"{WRITER_PREFIX}{field_name}"

    def declared_fields(self, owner: type[Any]) -> dict[str, tuple[type[Any], Any]]:
        """Return declared field names in order, with declaring class and raw annotation.

        A field redeclared in a subclass keeps its original position but takes
        the subclass annotation.

        Args:
            owner: Class whose annotations are collected across its MRO.

        """
        fields: dict[str, tuple[type[Any], Any]] = {}
        for klass in reversed(owner.__mro__):
            if klass is object:
                continue
            for name, annotation in inspect.get_annotations(klass).items():
                if name.startswith("_") or is_classvar_annotation(annotation):
                    continue
                fields[name] = (klass, annotation)
        return fields

    def populatable_fields(self, owner: type[Any]) -> tuple[str, ...]:
        """Return the names of populatable fields in declaration order.

        Args:
            owner: Class to inspect.

        """
        return tuple(self._schema(owner))

    def descriptor_for(self, owner: type[Any], field_name: str) -> FieldDescriptor | None:
        """Return the descriptor of a populatable field, or ``None``.

        Args:
            owner: Class to inspect.
            field_name: Field name to look up.

        """
        return self._schema(owner).get(field_name)

    def _schema(self, owner: type[Any]) -> dict[str, FieldDescriptor]:
        schema = self._schemas.get(owner)
        if schema is not None:
            return schema

        with self._lock:
            schema = self._schemas.get(owner)
            if schema is None:
                schema = self._build_schema(owner)
                self._schemas[owner] = schema
        return schema

    def _build_schema(self, owner: type[Any]) -> dict[str, FieldDescriptor]:
        schema: dict[str, FieldDescriptor] = {}
        for name, (declaring_class, annotation) in self.declared_fields(owner).items():
            reader_name = self.reader_name(name)
            writer_name = self.writer_name(name)
            reader = getattr(owner, reader_name, None)
            writer = getattr(owner, writer_name, None)
            if not callable(reader) or not callable(writer):
                continue

            if getattr(writer, GENERATED_ACCESSOR_ATTR, None) == name:
                expected = _field_type_hint(declaring_class, name, annotation)
            else:
                expected = self._writer_parameter_annotation(writer)

            schema[name] = FieldDescriptor(
                name=name,
                reader_name=reader_name,
                writer_name=writer_name,
                expected_type=None if expected is _UNRESOLVED else complex_type_of(expected),
            )
        logger.debug("Built field schema for %s: %s", owner.__qualname__, list(schema))
        return schema

    def _writer_parameter_annotation(self, writer: Callable[..., Any]) -> Any:
        try:
            parameters = list(inspect.signature(writer).parameters.values())
        except (TypeError, ValueError):
            return _UNRESOLVED
        if parameters and parameters[0].name in ("self", "cls"):
            parameters = parameters[1:]
        if not parameters:
            return _UNRESOLVED

        annotations = inspect.get_annotations(writer)
        annotation = annotations.get(parameters[0].name, _UNRESOLVED)
        if annotation is _UNRESOLVED:
            return _UNRESOLVED
        return _type_hint(writer, parameters[0].name, annotation)


def is_classvar_annotation(annotation: Any) -> bool:
    """Return True for ``ClassVar`` annotations, evaluated or still a string."""
    if isinstance(annotation, str):
        return annotation.startswith(_CLASSVAR_PREFIXES)
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _field_type_hint(declaring_class: type[Any], name: str, annotation: Any) -> Any:
    if not isinstance(annotation, str):
        return annotation
    # Holds this field only: a broken sibling annotation must not untype it.
    holder = type(
        declaring_class.__name__,
        (),
        {"__module__": declaring_class.__module__, "__annotations__": {name: annotation}},
    )
    return _type_hint(holder, name, annotation, localns=dict(vars(declaring_class)))


def _type_hint(
    owner: Any,
    name: str,
    annotation: Any,
    *,
    localns: Mapping[str, Any] | None = None,
) -> Any:
    if not isinstance(annotation, str):
        return annotation
    try:
        return get_type_hints(owner, localns=localns, include_extras=True)[name]
    except (AttributeError, NameError, SyntaxError, TypeError) as error:
        logger.warning(
            "Unable to evaluate field annotation %r (%s); the field is treated as untyped.",
            annotation,
            error,
        )
        return _UNRESOLVED


__all__ = [
    "GENERATED_ACCESSOR_ATTR",
    "READER_PREFIX",
    "WRITER_PREFIX",
    "FieldDescriptor",
    "FieldDirectory",
    "is_classvar_annotation",
]
