"""Shared pytest fixtures for dtowire tests."""

import pytest

from dtowire.container import Container, Lifetime


@pytest.fixture()
def container() -> Container:
    """Default container with concrete type autoregistration enabled."""
    return Container()


@pytest.fixture()
def container_no_autoregister() -> Container:
    """Container where every type must be registered explicitly."""
    return Container(autoregister_concrete_types=False)


@pytest.fixture()
def container_singleton() -> Container:
    """Container with lifetime singleton as default."""
    return Container(default_lifetime=Lifetime.SINGLETON)
