"""CLI package for publishing temperature readings."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer application lives in ``cli.app``. Tests patch ``cli.app`` attributes
# such as ``build_temperature_client``, so the package root does not re-export
# the Typer instance under the same name.

__all__ = []
