from __future__ import annotations

import inspect
from typing import Any

from dtowire._internal.type_checks import is_protocol_class
from dtowire.exceptions import DTOWireInvalidRegistrationError


class DependencyRegistrationValidator:
    """Validates provider registrations before creating provider specs."""

    def validate_concrete_type(self, concrete_type: object) -> None:
        """Validate that a concrete provider is instantiable."""
        if not inspect.isclass(concrete_type):
            msg = f"Concrete provider must be a class, got {concrete_type!r}."
            raise DTOWireInvalidRegistrationError(msg)

        if inspect.isabstract(concrete_type) or is_protocol_class(concrete_type):
            msg = f"Concrete provider '{concrete_type.__qualname__}' cannot be an abstract class."
            raise DTOWireInvalidRegistrationError(msg)

    def validate_factory(self, factory: object) -> None:
        """Validate that a factory provider is callable and not a class."""
        if inspect.isclass(factory) or not callable(factory):
            msg = (
                f"Factory provider must be a callable that is not a class, got {factory!r}. "
                "Use add_concrete() for classes."
            )
            raise DTOWireInvalidRegistrationError(msg)

    def validate_provides(self, provides: Any, *, method_name: str) -> None:
        """Validate that a dependency key can be used for registration."""
        if provides is None:
            msg = f"{method_name}() parameter 'provides' must not be None; use 'infer'."
            raise DTOWireInvalidRegistrationError(msg)
        try:
            hash(provides)
        except TypeError as error:
            msg = f"{method_name}() parameter 'provides' must be hashable, got {provides!r}."
            raise DTOWireInvalidRegistrationError(msg) from error
