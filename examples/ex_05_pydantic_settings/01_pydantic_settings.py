"""pydantic-settings: share environment-backed settings with factories.

``BaseSettings`` subclasses are built once per container, so a factory can
combine them with the seed data of a DTO field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic_settings import BaseSettings

from dtowire import Container, DataTransferObject, Seed


class ShopSettings(BaseSettings):
    shop_currency: str = "EUR"


class Price(DataTransferObject):
    amount: int
    currency: str


class Order(DataTransferObject):
    reference: str
    price: Price | None = None


def build_price(data: Seed[Mapping[str, Any]], settings: ShopSettings) -> Price:
    return Price({"currency": settings.shop_currency, **data})


def main() -> None:
    container = Container()
    container.add_factory(build_price)

    order = Order({"reference": "A-1", "price": {"amount": 10}}, resolver=container)

    print(order.to_json())  # => {"reference": "A-1", "price": {"amount": 10, "currency": "EUR"}}
    print(f"same_settings={container.make(ShopSettings) is container.make(ShopSettings)}")  # => same_settings=True


if __name__ == "__main__":
    main()
