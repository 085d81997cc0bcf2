from __future__ import annotations

import types
from typing import Annotated, Any, TypeGuard, Union, get_args, get_origin

_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: type[Any]) -> bool:
    """Return true when candidate is a ``typing.Protocol`` subclass declaring a protocol."""
    return bool(getattr(candidate, "_is_protocol", False))


def supports_instance_checks(candidate: type[Any]) -> bool:
    """Return false for protocols that ``isinstance`` refuses to check.

    Protocols not decorated with ``@runtime_checkable`` raise ``TypeError`` on
    instance checks, so values typed with them cannot be verified.
    """
    if not is_protocol_class(candidate):
        return True
    return bool(getattr(candidate, "_is_runtime_protocol", False))


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``Annotated`` metadata and a single ``None`` member of a union.

    ``Optional[City]`` and ``City | None`` become ``City``. Unions with more
    than one non-``None`` member are returned unchanged.
    """
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    if get_origin(annotation) in _UNION_ORIGINS:
        members = [member for member in get_args(annotation) if member is not type(None)]
        if len(members) == 1:
            return unwrap_optional(members[0])
    return annotation


def complex_type_of(annotation: Any) -> type[Any] | None:
    """Return the class a writer parameter constrains values to, if any.

    ``None`` means the parameter is primitive or untyped: builtins, unions,
    parameterized generics, ``Any`` and unresolved forward references are
    all treated as "no object type constraint".

    Args:
        annotation: Parameter annotation as returned by ``get_type_hints``.

    """
    annotation = unwrap_optional(annotation)
    # typing.Any is a class on Python 3.11+.
    if annotation is Any or not is_runtime_class(annotation):
        return None
    if annotation.__module__ == "builtins":
        return None
    return annotation


__all__ = [
    "complex_type_of",
    "is_protocol_class",
    "is_runtime_class",
    "supports_instance_checks",
    "unwrap_optional",
]
