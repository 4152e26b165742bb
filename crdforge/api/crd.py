"""CRD API routes.

Handles template catalog access, CRD parsing and validation, remote import,
manifest generation and the one-shot submit flow.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from crdforge.api.deps import (
    get_extractor,
    get_fetcher,
    get_generator,
    get_manifest_store,
    get_template_store,
)
from crdforge.api.schemas import (
    ApiException,
    GenerateRequest,
    GenerateResponse,
    ImportUrlRequest,
    ImportUrlResponse,
    ParseResponse,
    RawSchemaRequest,
    SubmitRequest,
    SubmitResponse,
    success_response,
)
from crdforge.interfaces.fetcher import BaseSchemaFetcher, FetchError
from crdforge.interfaces.generator import BaseDocumentGenerator, GenerationError
from crdforge.interfaces.schema import BaseSchemaExtractor, EmptyInputError, TemplateDefinition
from crdforge.interfaces.store import BaseManifestStore, BaseTemplateStore, ManifestCreate
from crdforge.strategies.schema import validate_crd

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/crd", tags=["crd"])


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Unexpected error while {action}: {e}", exc_info=True)
    return ApiException(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", f"Error {action}")


def submission_title(title: str, kind: str) -> str:
    """Title for a submitted manifest: the given one, else derived from the kind."""
    if title.strip():
        return title.strip()
    if kind:
        return f"CRD: {kind}"
    return "Submitted CRD"


# =============================================================================
# Templates
# =============================================================================


@router.get("/templates")
async def list_templates(
    store: BaseTemplateStore = Depends(get_template_store),
) -> JSONResponse:
    """List built-in templates followed by stored ones."""
    try:
        templates = await store.list_templates()
        return success_response(templates)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("listing templates", e) from e


@router.get("/templates/{template_id}")
async def get_template(
    template_id: str,
    store: BaseTemplateStore = Depends(get_template_store),
) -> JSONResponse:
    """Get one template by id."""
    try:
        template = await store.get_template(template_id)
        if template is None:
            raise ApiException(
                status.HTTP_404_NOT_FOUND,
                "TEMPLATE_NOT_FOUND",
                f"Template '{template_id}' not found",
            )
        return success_response(template)
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("loading template", e) from e


# =============================================================================
# Parsing and validation
# =============================================================================


@router.post("/parse")
async def parse_crd(
    payload: RawSchemaRequest,
    extractor: BaseSchemaExtractor = Depends(get_extractor),
) -> JSONResponse:
    """Extract a form template from CRD or resource YAML."""
    try:
        template = extractor.extract(payload.raw)
        return success_response(ParseResponse(template=template))
    except EmptyInputError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "INVALID_CRD", str(e)) from e
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("parsing CRD", e) from e


@router.post("/validate")
async def validate(payload: RawSchemaRequest) -> JSONResponse:
    """Run the structural CRD checks. Problems are reported, not raised."""
    return success_response(validate_crd(payload.raw))


@router.post("/import-url")
async def import_from_url(
    payload: ImportUrlRequest,
    fetcher: BaseSchemaFetcher = Depends(get_fetcher),
) -> JSONResponse:
    """Fetch a CRD from a URL and validate it."""
    try:
        fetched = await fetcher.fetch(payload.url)
    except FetchError as e:
        logger.warning(f"CRD import from '{payload.url}' failed: {e}")
        raise ApiException(status.HTTP_400_BAD_REQUEST, "CRD_IMPORT_FAILED", str(e)) from e

    return success_response(
        ImportUrlResponse(
            source_url=fetched.source_url,
            raw=fetched.raw,
            validation=validate_crd(fetched.raw),
        )
    )


# =============================================================================
# Generation
# =============================================================================


@router.post("/generate-yaml")
async def generate_yaml(
    payload: GenerateRequest,
    generator: BaseDocumentGenerator = Depends(get_generator),
) -> JSONResponse:
    """Render a manifest from a field list."""
    try:
        result = generator.generate(payload.api_version, payload.kind, payload.fields)
        return success_response(GenerateResponse(yaml=result.text, skipped_paths=result.skipped_paths))
    except GenerationError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "GENERATION_FAILED", str(e)) from e
    except HTTPException:
        raise
    except Exception as e:
        raise _internal_error("generating YAML", e) from e


@router.post("/submit")
async def submit_crd(
    payload: SubmitRequest,
    extractor: BaseSchemaExtractor = Depends(get_extractor),
    generator: BaseDocumentGenerator = Depends(get_generator),
    templates: BaseTemplateStore = Depends(get_template_store),
    manifests: BaseManifestStore = Depends(get_manifest_store),
) -> JSONResponse:
    """Validate, parse and store a CRD, then save a sample custom resource.

    An invalid CRD is answered with 200 and the validation report only.
    """
    validation = validate_crd(payload.raw)
    if not validation.valid:
        logger.info(f"Submitted CRD rejected with {len(validation.errors)} validation errors")
        return success_response(SubmitResponse(validation=validation))

    try:
        template: TemplateDefinition = extractor.extract(payload.raw)
    except EmptyInputError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "INVALID_CRD", str(e)) from e

    try:
        await templates.upsert_template(template)
    except ValueError as e:
        logger.warning(f"Parsed template not stored: {e}")

    try:
        generated = generator.generate(template.api_version, template.kind, template.default_fields)
    except GenerationError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "GENERATION_FAILED", str(e)) from e

    try:
        record = await manifests.save_manifest(
            ManifestCreate(
                title=submission_title(payload.title, template.kind),
                resource=f"{template.kind} ({template.api_version})",
                api_version=template.api_version,
                kind=template.kind,
                yaml=generated.text,
            )
        )
    except ValueError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "MANIFEST_SAVE_FAILED", str(e)) from e

    logger.info(f"Submitted CRD stored as template {template.id} and manifest {record.id}")
    return success_response(
        SubmitResponse(template=template, manifest=record, validation=validation),
        status_code=status.HTTP_201_CREATED,
    )
