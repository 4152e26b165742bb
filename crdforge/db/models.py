"""Database models using SQLModel.

Defines the persisted data of the CRD template service:
- TemplateRow: Parsed or imported templates (built-ins stay in code)
- ManifestRow: History of generated manifests
"""

import datetime
from typing import Any

from sqlalchemy import Column, DateTime, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from crdforge.interfaces.schema import FieldDefinition, TemplateDefinition
from crdforge.interfaces.store import ManifestRecord


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# =============================================================================
# Database Models
# =============================================================================


class TemplateRow(SQLModel, table=True):
    """A stored template.

    Field lists are kept as JSON arrays of camelCase field objects so the
    row maps one-to-one onto a TemplateDefinition.
    """

    __tablename__ = "templates"

    id: str = Field(primary_key=True, max_length=255)
    title: str = Field(max_length=512)
    api_version: str = Field(max_length=255)
    kind: str = Field(max_length=255, index=True)
    note: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    default_fields: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSONB, nullable=False))
    optional_fields: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSONB, nullable=False))
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), server_default=text("NOW()")),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("NOW()"),
            onupdate=text("NOW()"),
        ),
    )

    @classmethod
    def from_template(cls, template: TemplateDefinition) -> "TemplateRow":
        return cls(
            id=template.id,
            title=template.title,
            api_version=template.api_version,
            kind=template.kind,
            note=template.note,
            default_fields=[_dump_field(item) for item in template.default_fields],
            optional_fields=[_dump_field(item) for item in template.optional_fields],
        )

    def to_template(self) -> TemplateDefinition:
        return TemplateDefinition(
            id=self.id,
            title=self.title,
            api_version=self.api_version,
            kind=self.kind,
            note=self.note,
            default_fields=[FieldDefinition.model_validate(item) for item in self.default_fields],
            optional_fields=[FieldDefinition.model_validate(item) for item in self.optional_fields],
        )


class ManifestRow(SQLModel, table=True):
    """A generated manifest saved to the history."""

    __tablename__ = "manifests"

    id: str = Field(primary_key=True, max_length=64)
    title: str = Field(max_length=512)
    resource: str = Field(default="", max_length=255)
    api_version: str = Field(default="", max_length=255)
    kind: str = Field(default="", max_length=255, index=True)
    yaml: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), server_default=text("NOW()"), index=True),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("NOW()"),
            onupdate=text("NOW()"),
        ),
    )

    @classmethod
    def from_record(cls, record: ManifestRecord) -> "ManifestRow":
        return cls(**record.model_dump())

    def to_record(self) -> ManifestRecord:
        return ManifestRecord(
            id=self.id,
            title=self.title,
            resource=self.resource,
            api_version=self.api_version,
            kind=self.kind,
            yaml=self.yaml,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def _dump_field(item: FieldDefinition) -> dict[str, Any]:
    return item.model_dump(by_alias=True, exclude_none=True)
