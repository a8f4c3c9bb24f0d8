"""
Client driver registry.

Each driver module calls ``register()`` at import time.  ``main.py`` then
auto-discovers all driver modules via ``pkgutil.iter_modules``, so adding a
backend means dropping a file into ``drivers/``.
"""

from __future__ import annotations

_REGISTRY: dict[str, tuple[type, type]] = {}


def register(name: str, config_cls: type, client_cls: type) -> None:
    """Register a client driver under *name*.

    Args:
        name:       Key of the driver's block in the config file (e.g. ``"rest"``).
        config_cls: Pydantic model class for per-instance config validation.
        client_cls: ``BaseClient`` subclass to instantiate.
    """
    _REGISTRY[name] = (config_cls, client_cls)


def get(name: str) -> tuple[type, type] | None:
    return _REGISTRY.get(name)


def all_drivers() -> dict[str, tuple[type, type]]:
    """Return a snapshot of ``{name: (config_cls, client_cls)}``."""
    return dict(_REGISTRY)
