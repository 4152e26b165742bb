"""Concrete document generator implementations."""

from crdforge.strategies.generators.yaml_generator import YAMLDocumentGenerator

__all__ = [
    "YAMLDocumentGenerator",
]
