"""Nested resolution: raw mappings become nested DTOs.

When a field expects another class, the DTO asks its resolver to build one
and populates it with the nested mapping. Ready instances are used as is.
"""

from __future__ import annotations

from dtowire import Container, DataTransferObject


class City(DataTransferObject):
    name: str
    zip_code: str


class Address(DataTransferObject):
    street: str
    city: City | None = None


class Person(DataTransferObject):
    name: str
    address: Address | None = None


def main() -> None:
    container = Container()
    person = Person(
        {
            "name": "Homer",
            "address": {
                "street": "742 Evergreen Terrace",
                "city": {"name": "Springfield", "zip_code": "49007"},
            },
        },
        resolver=container,
    )

    assert person.address is not None
    assert person.address.city is not None
    print(f"address_type={type(person.address).__name__}")  # => address_type=Address
    print(f"city={person.address.city.name}")  # => city=Springfield
    print(f"shared_resolver={person.address.city.resolver is container}")  # => shared_resolver=True

    shelbyville = City({"name": "Shelbyville"})
    person.address = {"street": "Main St", "city": shelbyville}
    print(f"same_city={person.address.city is shelbyville}")  # => same_city=True

    print(person.to_json())  # => {"name": "Homer", "address": {"street": "Main St", "city": {"name": "Shelbyville"}}}


if __name__ == "__main__":
    main()
