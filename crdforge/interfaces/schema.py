"""Schema extraction interfaces.

Defines the form-field models shared by every layer and the abstract base
class for turning CRD text into an editable template.
"""

from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FieldType = Literal["number", "boolean"]

_TYPE_ALIASES: dict[str, FieldType] = {
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
}


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys and accepting either form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldDefinition(CamelModel):
    """A single editable field surfaced by a template.

    The path is a dotted/indexed address (``spec.containers[0].image``).
    A missing type means the value is written as a string.
    """

    path: str = Field(description="Dotted/indexed address of the field")
    label: str | None = Field(default=None, description="Optional display label")
    value: str = Field(default="", description="Seed or default value as text")
    description: str = Field(default="", description="Human readable help text")
    type: FieldType | None = Field(default=None, description="'number', 'boolean' or absent")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> FieldType | None:
        """Map schema type names onto the two typed field kinds."""
        if v is None:
            return None
        return _TYPE_ALIASES.get(str(v).strip().lower())

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: Any) -> str:
        """Accept scalar JSON values and keep them as text."""
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class TemplateDefinition(CamelModel):
    """A named bundle of default and optional fields for one resource kind."""

    id: str
    title: str
    api_version: str
    kind: str
    note: str = ""
    default_fields: list[FieldDefinition] = Field(default_factory=list)
    optional_fields: list[FieldDefinition] = Field(default_factory=list)


class ValidationReport(CamelModel):
    """Outcome of a structural CRD check. Never raised, always returned."""

    valid: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    kind: str | None = None
    api_version: str | None = None


class BaseSchemaExtractor(ABC):
    """Abstract base class for schema extraction strategies.

    Turns raw CRD (or resource manifest) text into a TemplateDefinition.

    Example:
        ```python
        class CRDSchemaExtractor(BaseSchemaExtractor):
            def extract(self, raw: str) -> TemplateDefinition:
                # Walk openAPIV3Schema here
                pass
        ```
    """

    @abstractmethod
    def extract(self, raw: str) -> TemplateDefinition:
        """Extract an editable template from schema text.

        Args:
            raw: The YAML text of a CRD or resource manifest.

        Returns:
            A TemplateDefinition with default and optional fields.

        Raises:
            EmptyInputError: If the input is blank.
        """
        ...


class EmptyInputError(ValueError):
    """Exception raised when a schema or request payload is blank."""

    pass
