from dtowire.container import Container, Lifetime
from dtowire.dto import DataTransferObject
from dtowire.exceptions import (
    DTOWireCircularDependencyError,
    DTOWireCircularPopulationError,
    DTOWireError,
    DTOWireInvalidFieldError,
    DTOWireInvalidRegistrationError,
    DTOWireNoResolverAvailableError,
    DTOWireUndefinedFieldError,
    DTOWireUnpopulatableTargetError,
    DTOWireUnresolvableTypeError,
)
from dtowire.markers import Seed
from dtowire.protocols import DependencyResolver, Exportable, Populatable

__all__ = [
    "Container",
    "DTOWireCircularDependencyError",
    "DTOWireCircularPopulationError",
    "DTOWireError",
    "DTOWireInvalidFieldError",
    "DTOWireInvalidRegistrationError",
    "DTOWireNoResolverAvailableError",
    "DTOWireUndefinedFieldError",
    "DTOWireUnpopulatableTargetError",
    "DTOWireUnresolvableTypeError",
    "DataTransferObject",
    "DependencyResolver",
    "Exportable",
    "Lifetime",
    "Populatable",
    "Seed",
]
