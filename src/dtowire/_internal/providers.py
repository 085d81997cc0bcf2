from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from inspect import Parameter
from typing import Any, TypeAlias, TypeVar, get_type_hints

from dtowire._internal.type_checks import unwrap_optional
from dtowire.exceptions import DTOWireInvalidRegistrationError
from dtowire.markers import is_seed_annotation

T = TypeVar("T")

UserDependency: TypeAlias = Any
"""A dependency that been registered or trying to be resolved from the user's code."""

ConcreteTypeProvider: TypeAlias = type[T]
"""A concrete type that can be instantiated to produce a dependency."""

FactoryProvider: TypeAlias = Callable[..., T]
"""A factory function that produces a dependency."""

_MISSING_ANNOTATION: Any = object()


class Lifetime(Enum):
    """Define cache behavior for provider results."""

    TRANSIENT = auto()
    """Disable caching and build a new value for every ``make`` call."""

    SINGLETON = auto()
    """Cache the first built value for the container lifetime.

    The seed passed to the first ``make`` call is the only one a singleton
    provider ever sees.
    """


@dataclass(slots=True)
class ProviderDependency:
    """Represent a dependency key bound to a provider parameter."""

    provides: UserDependency
    parameter: Parameter
    is_seed: bool = False

    @property
    def is_required(self) -> bool:
        return _is_required_parameter(self.parameter)


@dataclass(kw_only=True)
class ProviderSpec:
    """Describe how a single dependency key is produced and cached.

    Exactly one provider source is set: ``instance``, ``concrete_type`` or
    ``factory``. ``explicit`` separates user registrations (bindings) from
    registrations the container created on its own during autoregistration.
    """

    provides: UserDependency
    """The dependency type that this provider supplies."""

    instance: Any | None = None
    """An optional pre-built value of the provided dependency."""
    concrete_type: ConcreteTypeProvider[Any] | None = None
    """An optional concrete type to instantiate."""
    factory: FactoryProvider[Any] | None = None
    """An optional factory function to call."""
    dependencies: list[ProviderDependency] = field(default_factory=list)
    """Dependencies injected into the provider call, in signature order."""
    lifetime: Lifetime = Lifetime.TRANSIENT
    """Cache behavior of the produced value. Ignored for instance providers."""
    explicit: bool = True
    """True for user registrations, False for autoregistered providers."""

    @property
    def provider_name(self) -> str:
        source = self.concrete_type or self.factory
        if source is None:
            return f"instance of {type(self.instance).__qualname__}"
        return getattr(source, "__qualname__", repr(source))


class ProvidersRegistrations:
    """Store provider specs indexed by dependency key.

    Registration keys are unique: adding a spec for an existing dependency key
    replaces the previous spec.
    """

    def __init__(self) -> None:
        self._registrations_by_type: dict[UserDependency, ProviderSpec] = {}

    def add(self, spec: ProviderSpec) -> None:
        """Add a new provider specification to the registrations.

        Args:
            spec: Provider specification to register.

        """
        self._registrations_by_type[spec.provides] = spec

    def find_by_type(self, dep_type: UserDependency) -> ProviderSpec | None:
        """Get a provider specification by dependency type, if it exists.

        Args:
            dep_type: Dependency type key to look up.

        """
        try:
            return self._registrations_by_type.get(dep_type)
        except TypeError:
            # Unhashable keys can never be registered.
            return None

    def values(self) -> list[ProviderSpec]:
        """Get all provider specifications."""
        return list(self._registrations_by_type.values())

    def __len__(self) -> int:
        return len(self._registrations_by_type)


@dataclass(slots=True)
class ProviderDependenciesExtractor:
    """Extracts dependencies from user-defined provider objects."""

    def extract_from_concrete_type(
        self,
        concrete_type: ConcreteTypeProvider[Any],
    ) -> list[ProviderDependency]:
        """Extract dependencies from a concrete type-based provider.

        Args:
            concrete_type: Concrete class provider to inspect.

        """
        return self._extract_dependencies(
            provider=concrete_type,
            provider_name=concrete_type.__qualname__,
        )

    def extract_from_factory(
        self,
        factory: FactoryProvider[Any],
    ) -> list[ProviderDependency]:
        """Extract dependencies from a factory-based provider.

        Args:
            factory: Factory provider callable to inspect.

        """
        return self._extract_dependencies(
            provider=factory,
            provider_name=_provider_name(factory),
        )

    def _extract_dependencies(
        self,
        *,
        provider: Callable[..., Any],
        provider_name: str,
    ) -> list[ProviderDependency]:
        try:
            parameters = tuple(inspect.signature(provider).parameters.values())
        except (TypeError, ValueError) as error:
            msg = f"Unable to inspect the signature of provider '{provider_name}': {error}"
            raise DTOWireInvalidRegistrationError(msg) from error
        annotations, annotation_error = self._resolved_type_hints(provider)
        dependencies: list[ProviderDependency] = []

        for parameter in parameters:
            if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                continue
            annotation = self._resolve_parameter_annotation(
                parameter=parameter,
                annotations=annotations,
                annotation_error=annotation_error,
                provider_name=provider_name,
            )
            if annotation is _MISSING_ANNOTATION:
                continue

            if is_seed_annotation(annotation):
                dependencies.append(
                    ProviderDependency(provides=None, parameter=parameter, is_seed=True),
                )
                continue

            dependencies.append(
                ProviderDependency(
                    provides=unwrap_optional(annotation),
                    parameter=parameter,
                ),
            )

        return dependencies

    def _resolve_parameter_annotation(
        self,
        *,
        parameter: Parameter,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
        provider_name: str,
    ) -> Any:
        annotation = annotations.get(parameter.name, _MISSING_ANNOTATION)
        if annotation is not _MISSING_ANNOTATION:
            return annotation

        raw_annotation = parameter.annotation
        if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
            return raw_annotation

        if not _is_required_parameter(parameter):
            return _MISSING_ANNOTATION

        error_message = (
            f"Unable to infer dependency for required parameter '{parameter.name}' "
            f"in provider '{provider_name}'. Add a type annotation or a default value."
        )
        if annotation_error is None:
            raise DTOWireInvalidRegistrationError(error_message)
        msg = f"{error_message} Original annotation error: {annotation_error}"
        raise DTOWireInvalidRegistrationError(msg) from annotation_error

    def _resolved_type_hints(
        self,
        provider: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        target = provider.__init__ if inspect.isclass(provider) else provider
        try:
            return get_type_hints(target, include_extras=True), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error


@dataclass(slots=True)
class ProviderReturnTypeExtractor:
    """Infer the dependency key a factory provides from its return annotation."""

    def extract_from_factory(self, factory: FactoryProvider[Any]) -> Any:
        """Return the factory's return annotation.

        Args:
            factory: Factory provider callable to inspect.

        Raises:
            DTOWireInvalidRegistrationError: If the factory has no usable
                return annotation.

        """
        try:
            hints = get_type_hints(factory, include_extras=True)
        except (AttributeError, NameError, TypeError) as error:
            msg = (
                f"Unable to read the return annotation of factory '{_provider_name(factory)}'. "
                "Pass 'provides' explicitly."
            )
            raise DTOWireInvalidRegistrationError(msg) from error

        return_annotation = hints.get("return")
        if return_annotation is None or return_annotation is type(None):
            msg = (
                f"Factory '{_provider_name(factory)}' has no return annotation. "
                "Annotate the return type or pass 'provides' explicitly."
            )
            raise DTOWireInvalidRegistrationError(msg)
        return return_annotation


def _is_required_parameter(parameter: Parameter) -> bool:
    return (
        parameter.default is Parameter.empty
        and parameter.kind is not Parameter.VAR_POSITIONAL
        and parameter.kind is not Parameter.VAR_KEYWORD
    )


def _provider_name(provider: Callable[..., Any]) -> str:
    return getattr(provider, "__qualname__", repr(provider))


__all__ = [
    "Lifetime",
    "ProviderDependenciesExtractor",
    "ProviderDependency",
    "ProviderReturnTypeExtractor",
    "ProviderSpec",
    "ProvidersRegistrations",
]
