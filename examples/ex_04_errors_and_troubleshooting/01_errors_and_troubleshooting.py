"""Errors and troubleshooting: what fails and why.

Every error derives from ``DTOWireError``. The messages name the field, the
expected type and the value that could not be applied.
"""

from __future__ import annotations

from dtowire import (
    Container,
    DataTransferObject,
    DTOWireError,
    DTOWireNoResolverAvailableError,
    DTOWireUndefinedFieldError,
    DTOWireUnpopulatableTargetError,
    DTOWireUnresolvableTypeError,
)


class City(DataTransferObject):
    name: str


class Address(DataTransferObject):
    street: str
    city: City | None = None


class Coordinates:
    def __init__(self) -> None:
        self.lat = 0.0


class Place(DataTransferObject):
    coordinates: Coordinates | None = None


def main() -> None:
    try:
        Address({"city": {"name": "Springfield"}})
    except DTOWireNoResolverAvailableError as error:
        print(f"no_resolver={isinstance(error, DTOWireError)}")  # => no_resolver=True

    try:
        Place({"coordinates": {"lat": 1.5}}, resolver=Container())
    except DTOWireUnpopulatableTargetError as error:
        print(f"unpopulatable_field={error.field_name}")  # => unpopulatable_field=coordinates

    try:
        Address()["country"]
    except DTOWireUndefinedFieldError as error:
        print(f"undefined={error}")  # => undefined='country' is not a populatable field of Address.

    print(f"fallback={getattr(Address(), 'country', 'n/a')}")  # => fallback=n/a

    strict_container = Container(autoregister_concrete_types=False)
    try:
        Address({"city": {"name": "Springfield"}}, resolver=strict_container)
    except DTOWireUnresolvableTypeError:
        print("strict_mode=unresolvable")  # => strict_mode=unresolvable


if __name__ == "__main__":
    main()
