from __future__ import annotations

from typing import Any

import pytest

from dtowire.container import Container

_DTOWIRE_MARKER = "dtowire"


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``dtowire`` marker used to configure the container fixture."""
    config.addinivalue_line(
        "markers",
        f"{_DTOWIRE_MARKER}(**options): keyword arguments for the dtowire_container fixture.",
    )


@pytest.fixture()
def dtowire_container(request: pytest.FixtureRequest) -> Container:
    """Create a per-test container to pass as ``resolver=`` to DTOs.

    Keyword arguments of the closest ``@pytest.mark.dtowire(...)`` marker
    are forwarded to ``Container``, e.g.
    ``@pytest.mark.dtowire(autoregister_concrete_types=False)`` for strict
    mode. The fixture is function-scoped, so registrations are isolated
    between tests.

    Returns:
        A new ``Container`` instance.

    """
    options: dict[str, Any] = {}
    marker = request.node.get_closest_marker(_DTOWIRE_MARKER)
    if marker is not None:
        options.update(marker.kwargs)
    return Container(**options)
