"""Abstract base class for document generation strategies.

Generators rebuild a nested resource document from a flat field list.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from crdforge.interfaces.schema import FieldDefinition


@dataclass(frozen=True)
class GenerationResult:
    """Represents a generated resource document.

    Attributes:
        document: The nested mapping built from the fields.
        text: The document rendered in the generator's output format.
        skipped_paths: Field paths that could not be written because an
            earlier field already put a different shape at that location.
    """

    document: dict[str, Any]
    text: str
    skipped_paths: list[str] = field(default_factory=list)


class BaseDocumentGenerator(ABC):
    """Abstract base class for document generation strategies.

    Example:
        ```python
        class YAMLDocumentGenerator(BaseDocumentGenerator):
            def generate(self, api_version, kind, fields) -> GenerationResult:
                # Build and render the document
                pass
        ```
    """

    @abstractmethod
    def generate(
        self,
        api_version: str,
        kind: str,
        fields: list[FieldDefinition],
    ) -> GenerationResult:
        """Build a resource document from ordered field definitions.

        Args:
            api_version: The resource's API group/version.
            kind: The resource kind.
            fields: Ordered fields whose values are written at their paths.

        Returns:
            A GenerationResult with the document and its rendering.

        Raises:
            GenerationError: If api_version or kind is blank.
        """
        ...


class GenerationError(ValueError):
    """Exception raised when a document cannot be generated."""

    pass
