"""API request and response schemas.

Every endpoint answers with the same envelope:
``{"success": bool, "data": ..., "error": {"code", "message"}, "timestamp"}``.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from crdforge.interfaces.schema import CamelModel, FieldDefinition, TemplateDefinition, ValidationReport
from crdforge.interfaces.store import ManifestRecord


# =============================================================================
# Envelope
# =============================================================================


class ApiError(CamelModel):
    """Machine-readable error code plus a human message."""

    code: str
    message: str


class ApiResponse(CamelModel):
    """Uniform response envelope."""

    success: bool
    data: Any | None = None
    error: ApiError | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ApiException(HTTPException):
    """HTTPException carrying an envelope error code."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(status_code=status_code, detail=message)
        self.code = code


_DEFAULT_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
}


def error_code_for(exc: StarletteHTTPException) -> str:
    """Return the envelope code of an HTTPException."""
    return getattr(exc, "code", None) or _DEFAULT_CODES.get(exc.status_code, "HTTP_ERROR")


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Wrap data in a success envelope."""
    encoded = jsonable_encoder(data, by_alias=True, exclude_none=True)
    envelope = ApiResponse(success=True, data=encoded)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope, by_alias=True, exclude_none=True),
    )


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build an error envelope."""
    envelope = ApiResponse(success=False, error=ApiError(code=code, message=message))
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope, by_alias=True, exclude_none=True),
    )


# =============================================================================
# CRD Schemas
# =============================================================================


class RawSchemaRequest(CamelModel):
    """Request body carrying CRD or resource YAML."""

    raw: str = Field(default="", description="CRD or resource YAML text")


class SubmitRequest(RawSchemaRequest):
    """Request for the one-shot parse, generate and save flow."""

    title: str = Field(default="", description="Title for the saved manifest")


class ImportUrlRequest(CamelModel):
    """Request for importing a CRD from a remote URL."""

    url: str = Field(default="", description="http(s) URL of the CRD document")


class GenerateRequest(CamelModel):
    """Request for rendering a manifest from fields."""

    api_version: str = ""
    kind: str = ""
    fields: list[FieldDefinition] = Field(default_factory=list)


class ParseResponse(CamelModel):
    template: TemplateDefinition


class ImportUrlResponse(CamelModel):
    source_url: str
    raw: str
    validation: ValidationReport


class GenerateResponse(CamelModel):
    yaml: str
    skipped_paths: list[str] = Field(default_factory=list)


class SubmitResponse(CamelModel):
    """Outcome of a submit.

    When validation fails only ``validation`` is set.
    """

    template: TemplateDefinition | None = None
    manifest: ManifestRecord | None = None
    validation: ValidationReport


class HealthResponse(CamelModel):
    status: str = "ok"
