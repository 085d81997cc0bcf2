from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Any, Generic, Literal, TypeVar, cast, overload

from dtowire._internal import resolution_stack
from dtowire._internal.autoregistration import ConcreteTypeAutoregistrationPolicy
from dtowire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from dtowire._internal.providers import (
    Lifetime,
    ProviderDependenciesExtractor,
    ProviderReturnTypeExtractor,
    ProviderSpec,
    ProvidersRegistrations,
)
from dtowire._internal.validators import DependencyRegistrationValidator
from dtowire.exceptions import (
    DTOWireCircularDependencyError,
    DTOWireInvalidRegistrationError,
    DTOWireUnresolvableTypeError,
)
from dtowire.protocols import DependencyResolver

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type[Any])

logger = logging.getLogger(__name__)


class Container:
    """Build instances of requested types for nested DTO resolution.

    Dependency keys are usually concrete types, abstract base classes or
    protocols. Registrations made through ``add_instance``, ``add_concrete``
    and ``add_factory`` are *explicit bindings*: ``is_bound`` reports them and
    DTOs trust whatever they build from the seed data.

    With autoregistration enabled (the default), eligible concrete classes
    are registered on first use and built from their constructor
    annotations. Those registrations are generic construction, not bindings,
    so a DTO built that way is populated with the seed data afterwards.

    The container registers itself under ``Container`` and
    ``DependencyResolver``, so DTOs it builds receive it as their resolver.

    Registration and singleton creation are guarded by a reentrant lock, so
    one container can serve DTO population from several threads.
    """

    def __init__(
        self,
        *,
        default_lifetime: Lifetime = Lifetime.TRANSIENT,
        autoregister_concrete_types: bool = True,
    ) -> None:
        """Initialize a container and configure default registration behavior.

        Args:
            default_lifetime: Lifetime used by registrations that omit
                ``lifetime`` and by autoregistered concrete types. Autoregistered
                DTOs are always transient.
            autoregister_concrete_types: Enable on-demand concrete type
                autoregistration in ``make``. Disable for strict mode where
                every type must be registered explicitly.

        Examples:
            .. code-block:: python

                container = Container()

                strict_container = Container(autoregister_concrete_types=False)

        """
        self._default_lifetime = default_lifetime
        self._autoregister_concrete_types = autoregister_concrete_types

        self._concrete_autoregistration_policy = ConcreteTypeAutoregistrationPolicy()
        self._provider_dependencies_extractor = ProviderDependenciesExtractor()
        self._provider_return_type_extractor = ProviderReturnTypeExtractor()
        self._dependency_registration_validator = DependencyRegistrationValidator()
        self._providers_registrations = ProvidersRegistrations()

        self._lock = threading.RLock()
        self._singletons: dict[Any, Any] = {}

        self.add_instance(self, provides=Container)
        self.add_instance(self, provides=DependencyResolver)

    # region Registration Methods
    def add_instance(
        self,
        instance: Any,
        *,
        provides: Any | Literal["infer"] = "infer",
    ) -> None:
        """Register a pre-built instance as a provider.

        Re-registering the same dependency key overrides the previous spec.

        Args:
            instance: Instance value returned by every ``make`` call.
            provides: Dependency key to bind. Use ``"infer"`` to bind by
                ``type(instance)``.

        Raises:
            DTOWireInvalidRegistrationError: If ``provides`` is ``None`` or
                unhashable.

        Examples:
            .. code-block:: python

                container.add_instance(Settings(currency="EUR"))

        """
        resolved_provides = type(instance) if provides == "infer" else provides
        self._dependency_registration_validator.validate_provides(
            resolved_provides,
            method_name="add_instance",
        )
        self._register(ProviderSpec(provides=resolved_provides, instance=instance))

    @overload
    def add_concrete(
        self,
        concrete_type: type[Any],
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> None: ...

    @overload
    def add_concrete(
        self,
        concrete_type: Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> ConcreteTypeRegistrationDecorator[Any]: ...

    def add_concrete(
        self,
        concrete_type: type[Any] | Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> None | ConcreteTypeRegistrationDecorator[Any]:
        """Register a concrete type provider.

        Supports direct calls and decorator form. ``provides`` may be an
        abstract base class, a protocol or a concrete type. Constructor
        dependencies are inferred from annotations; a parameter annotated
        with ``Seed[...]`` receives the seed data.

        Args:
            concrete_type: Concrete class to instantiate, or ``"from_decorator"``
                to return a decorator.
            provides: Dependency key produced by this provider. ``"infer"`` uses
                ``concrete_type`` directly.
            lifetime: Provider lifetime, or ``"from_container"`` to inherit
                the container default.

        Returns:
            ``None`` in direct mode or a decorator in decorator mode.

        Raises:
            DTOWireInvalidRegistrationError: If ``concrete_type`` is not an
                instantiable class or a required constructor parameter has no
                annotation.

        Examples:
            .. code-block:: python

                container.add_concrete(Notes, provides=NotesContract)


                @container.add_concrete(provides=NotesContract)
                class TaggedNotes(Notes): ...

        """
        if concrete_type == "from_decorator":
            return ConcreteTypeRegistrationDecorator(
                container=self,
                provides=provides,
                lifetime=lifetime,
            )

        self._dependency_registration_validator.validate_concrete_type(concrete_type)
        resolved_provides = concrete_type if provides == "infer" else provides
        self._dependency_registration_validator.validate_provides(
            resolved_provides,
            method_name="add_concrete",
        )
        dependencies = self._provider_dependencies_extractor.extract_from_concrete_type(
            concrete_type,
        )
        self._register(
            ProviderSpec(
                provides=resolved_provides,
                concrete_type=concrete_type,
                dependencies=dependencies,
                lifetime=self._resolve_registration_lifetime(lifetime),
            ),
        )
        return None

    @overload
    def add_factory(
        self,
        factory: Callable[..., Any],
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> None: ...

    @overload
    def add_factory(
        self,
        factory: Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> FactoryRegistrationDecorator[Any]: ...

    def add_factory(
        self,
        factory: Callable[..., Any] | Literal["from_decorator"] = "from_decorator",
        *,
        provides: Any | Literal["infer"] = "infer",
        lifetime: Lifetime | Literal["from_container"] = "from_container",
    ) -> None | FactoryRegistrationDecorator[Any]:
        """Register a factory function provider.

        The factory is called with its annotated parameters resolved from the
        container. Parameters annotated with ``Seed[...]`` receive the seed
        data passed to ``make``, which for DTO fields is the raw field value.

        Args:
            factory: Factory callable, or ``"from_decorator"`` to return a
                decorator.
            provides: Dependency key produced by this provider. ``"infer"``
                uses the factory return annotation.
            lifetime: Provider lifetime, or ``"from_container"`` to inherit
                the container default.

        Returns:
            ``None`` in direct mode or a decorator in decorator mode.

        Raises:
            DTOWireInvalidRegistrationError: If ``factory`` is not a function,
                has no return annotation while ``provides="infer"``, or a
                required parameter has no annotation.

        Examples:
            .. code-block:: python

                def build_notes(data: Seed[Mapping[str, Any]]) -> NotesContract:
                    return Notes(data)


                container.add_factory(build_notes)

        """
        if factory == "from_decorator":
            return FactoryRegistrationDecorator(
                container=self,
                provides=provides,
                lifetime=lifetime,
            )

        self._dependency_registration_validator.validate_factory(factory)
        if provides == "infer":
            resolved_provides = self._provider_return_type_extractor.extract_from_factory(factory)
        else:
            resolved_provides = provides
        self._dependency_registration_validator.validate_provides(
            resolved_provides,
            method_name="add_factory",
        )
        dependencies = self._provider_dependencies_extractor.extract_from_factory(factory)
        self._register(
            ProviderSpec(
                provides=resolved_provides,
                factory=factory,
                dependencies=dependencies,
                lifetime=self._resolve_registration_lifetime(lifetime),
            ),
        )
        return None

    def _resolve_registration_lifetime(
        self,
        lifetime: Lifetime | Literal["from_container"],
    ) -> Lifetime:
        if lifetime == "from_container":
            return self._default_lifetime
        if not isinstance(lifetime, Lifetime):
            msg = f"Lifetime must be a Lifetime member or 'from_container', got {lifetime!r}."
            raise DTOWireInvalidRegistrationError(msg)
        return lifetime

    def _register(self, spec: ProviderSpec) -> None:
        with self._lock:
            self._providers_registrations.add(spec)
            self._singletons.pop(spec.provides, None)
        logger.debug(
            "Registered %s for %r (lifetime=%s, explicit=%s)",
            spec.provider_name,
            spec.provides,
            spec.lifetime.name,
            spec.explicit,
        )

    def _autoregister(self, dependency: Any) -> ProviderSpec:
        policy = self._concrete_autoregistration_policy
        if is_pydantic_settings_subclass(dependency):
            # Settings are environment-backed and shared for the container lifetime.
            spec = ProviderSpec(
                provides=dependency,
                factory=lambda dependency_type=dependency: dependency_type(),
                lifetime=Lifetime.SINGLETON,
                explicit=False,
            )
        elif (reason := policy.rejection_reason(dependency)) is None:
            try:
                dependencies = self._provider_dependencies_extractor.extract_from_concrete_type(
                    dependency,
                )
            except DTOWireInvalidRegistrationError as error:
                msg = f"Unable to autoregister '{dependency.__qualname__}': {error}"
                raise DTOWireUnresolvableTypeError(msg) from error
            spec = ProviderSpec(
                provides=dependency,
                concrete_type=dependency,
                dependencies=dependencies,
                lifetime=policy.lifetime_for(dependency, self._default_lifetime),
                explicit=False,
            )
        else:
            msg = (
                f"Dependency {_dependency_name(dependency)} is not registered and cannot be "
                f"autoregistered: {reason}. Register it with add_concrete() or add_factory()."
            )
            raise DTOWireUnresolvableTypeError(msg)

        self._register(spec)
        return spec

    # endregion Registration Methods

    # region Resolution
    def is_bound(self, dependency: Any) -> bool:
        """Return whether ``dependency`` has an explicit registration.

        Autoregistered types are not explicit bindings.

        Args:
            dependency: Dependency key to look up.

        """
        spec = self._providers_registrations.find_by_type(dependency)
        return spec is not None and spec.explicit

    @overload
    def make(self, dependency: type[T], seed: Any = None) -> T: ...

    @overload
    def make(self, dependency: Any, seed: Any = None) -> Any: ...

    def make(self, dependency: Any, seed: Any = None) -> Any:
        """Build an instance of ``dependency``.

        Args:
            dependency: Dependency key to build.
            seed: Raw construction data handed to ``Seed[...]`` provider
                parameters. Providers without such a parameter ignore it.

        Returns:
            The built (or cached, or registered) value.

        Raises:
            DTOWireUnresolvableTypeError: If the dependency is not registered
                and cannot be autoregistered.
            DTOWireCircularDependencyError: If building the dependency
                requires itself.

        Examples:
            .. code-block:: python

                city = container.make(City)
                notes = container.make(NotesContract, {"notes": ["a", "b"]})

        """
        spec = self._find_or_autoregister(dependency)
        if spec.concrete_type is None and spec.factory is None:
            return spec.instance
        if spec.lifetime is Lifetime.SINGLETON:
            with self._lock:
                if spec.provides not in self._singletons:
                    self._singletons[spec.provides] = self._build(spec, seed)
                return self._singletons[spec.provides]
        return self._build(spec, seed)

    def resolve(self, dependency: type[T]) -> T:
        """Build an instance of ``dependency`` without seed data.

        Args:
            dependency: Dependency key to build.

        """
        return cast("T", self.make(dependency))

    def _find_or_autoregister(self, dependency: Any) -> ProviderSpec:
        spec = self._providers_registrations.find_by_type(dependency)
        if spec is not None:
            return spec
        if not self._autoregister_concrete_types:
            msg = (
                f"Dependency {_dependency_name(dependency)} is not registered and "
                "autoregistration is disabled."
            )
            raise DTOWireUnresolvableTypeError(msg)
        with self._lock:
            spec = self._providers_registrations.find_by_type(dependency)
            if spec is None:
                logger.debug("Autoregistering %r", dependency)
                spec = self._autoregister(dependency)
        return spec

    def _build(self, spec: ProviderSpec, seed: Any) -> Any:
        # Seeded builds may recurse into the same type for nested data.
        key = (id(self), spec.provides, None if seed is None else id(seed))
        if resolution_stack.is_active(key):
            msg = (
                f"Circular dependency detected while building "
                f"{_dependency_name(spec.provides)}."
            )
            raise DTOWireCircularDependencyError(msg)

        with resolution_stack.tracking(key):
            args: list[Any] = []
            kwargs: dict[str, Any] = {}
            for dependency in spec.dependencies:
                if dependency.is_seed:
                    value = seed
                elif dependency.is_required:
                    value = self.make(dependency.provides)
                elif self._providers_registrations.find_by_type(dependency.provides) is not None:
                    value = self.make(dependency.provides)
                else:
                    continue

                if dependency.parameter.kind is Parameter.POSITIONAL_ONLY:
                    args.append(value)
                else:
                    kwargs[dependency.parameter.name] = value

            provider = cast("Callable[..., Any]", spec.concrete_type or spec.factory)
            return provider(*args, **kwargs)

    # endregion Resolution


@dataclass(frozen=True, slots=True)
class ConcreteTypeRegistrationDecorator(Generic[C]):
    """Decorator returned by ``Container.add_concrete()`` without a class."""

    container: Container
    provides: Any
    lifetime: Lifetime | Literal["from_container"]

    def __call__(self, concrete_type: C) -> C:
        self.container.add_concrete(
            concrete_type,
            provides=self.provides,
            lifetime=self.lifetime,
        )
        return concrete_type


@dataclass(frozen=True, slots=True)
class FactoryRegistrationDecorator(Generic[F]):
    """Decorator returned by ``Container.add_factory()`` without a factory."""

    container: Container
    provides: Any
    lifetime: Lifetime | Literal["from_container"]

    def __call__(self, factory: F) -> F:
        self.container.add_factory(
            factory,
            provides=self.provides,
            lifetime=self.lifetime,
        )
        return factory


def _dependency_name(dependency: Any) -> str:
    name = getattr(dependency, "__qualname__", None)
    return f"'{name}'" if name is not None else repr(dependency)


__all__ = [
    "ConcreteTypeRegistrationDecorator",
    "Container",
    "FactoryRegistrationDecorator",
    "Lifetime",
]
