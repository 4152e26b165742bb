"""Concrete template and manifest store implementations."""

from crdforge.strategies.stores.memory_store import MemoryManifestStore, MemoryTemplateStore
from crdforge.strategies.stores.sql_store import SQLManifestStore, SQLTemplateStore

__all__ = [
    "MemoryTemplateStore",
    "MemoryManifestStore",
    "SQLTemplateStore",
    "SQLManifestStore",
]
