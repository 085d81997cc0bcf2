from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

pydantic_settings = pytest.importorskip("pydantic_settings")

from dtowire import (  # noqa: E402
    Container,
    DataTransferObject,
    DTOWireUnpopulatableTargetError,
    Seed,
)


class ShopSettings(pydantic_settings.BaseSettings):  # type: ignore[misc,name-defined]
    currency: str = "EUR"


class Price(DataTransferObject):
    amount: int
    currency: str


class Order(DataTransferObject):
    reference: str
    price: Price | None = None
    settings: ShopSettings | None = None


def build_price(data: Seed[Mapping[str, Any]], settings: ShopSettings) -> Price:
    return Price({"currency": settings.currency, **data})


def test_settings_are_autoregistered_as_singleton(container: Container) -> None:
    first = container.make(ShopSettings)
    second = container.make(ShopSettings)

    assert isinstance(first, ShopSettings)
    assert first is second
    assert not container.is_bound(ShopSettings)


def test_settings_read_environment(
    container: Container,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("CURRENCY", "USD")

    assert container.make(ShopSettings).currency == "USD"


def test_factory_combines_settings_and_seed(container: Container) -> None:
    container.add_factory(build_price)

    order = Order({"reference": "A-1", "price": {"amount": 10}}, resolver=container)

    assert order.price is not None
    assert order.price.to_dict() == {"amount": 10, "currency": "EUR"}


def test_ready_settings_instance_is_accepted(container: Container) -> None:
    settings = ShopSettings(currency="GBP")

    order = Order({"reference": "A-1", "settings": settings}, resolver=container)

    assert order.settings is settings


def test_settings_mapping_is_not_populatable(container: Container) -> None:
    with pytest.raises(DTOWireUnpopulatableTargetError):
        Order({"settings": {"currency": "GBP"}}, resolver=container)
