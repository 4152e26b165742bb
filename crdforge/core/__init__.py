"""Core configuration and factory components."""

from crdforge.core.config import Settings, get_settings
from crdforge.core.factory import ComponentFactory, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "get_factory",
]
