from __future__ import annotations

import importlib
from typing import Any

from dtowire._internal.type_checks import is_runtime_class


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


SETTINGS_BASE: type[Any] | None = _load_base_settings("pydantic_settings")


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a ``pydantic_settings.BaseSettings`` model.

    If ``pydantic-settings`` is not installed, this function returns
    ``False`` for every candidate.

    The container uses this to autoregister settings classes through a
    zero-argument factory cached for the container lifetime, so a DTO field
    typed with a settings class resolves to the shared, environment-backed
    settings object.

    Args:
        candidate: Object to test.

    """
    if SETTINGS_BASE is None or not is_runtime_class(candidate):
        return False
    return issubclass(candidate, SETTINGS_BASE) and candidate is not SETTINGS_BASE


__all__ = ["SETTINGS_BASE", "is_pydantic_settings_subclass"]
