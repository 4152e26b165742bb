"""Manifest history API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from crdforge.api.deps import get_manifest_store
from crdforge.api.schemas import ApiException, success_response
from crdforge.interfaces.store import DEFAULT_MANIFEST_LIMIT, BaseManifestStore, ManifestCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/manifests", tags=["manifests"])


def _parse_limit(raw: str | None) -> int:
    try:
        return int(raw) if raw else DEFAULT_MANIFEST_LIMIT
    except ValueError:
        return DEFAULT_MANIFEST_LIMIT


@router.get("")
async def list_manifests(
    query: str = Query(default="", description="Case-insensitive search term"),
    limit: str | None = Query(default=None, description="Page size; invalid or out-of-range values use the default"),
    store: BaseManifestStore = Depends(get_manifest_store),
) -> JSONResponse:
    """List saved manifests, newest first."""
    try:
        items = await store.list_manifests(query=query, limit=_parse_limit(limit))
        return success_response(items)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing manifests: {e}", exc_info=True)
        raise ApiException(status.HTTP_500_INTERNAL_SERVER_ERROR, "MANIFEST_LIST_FAILED", str(e)) from e


@router.post("")
async def save_manifest(
    payload: ManifestCreate,
    store: BaseManifestStore = Depends(get_manifest_store),
) -> JSONResponse:
    """Save a generated manifest to the history."""
    try:
        record = await store.save_manifest(payload)
        return success_response(record, status_code=status.HTTP_201_CREATED)
    except ValueError as e:
        raise ApiException(status.HTTP_400_BAD_REQUEST, "MANIFEST_SAVE_FAILED", str(e)) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error saving manifest: {e}", exc_info=True)
        raise ApiException(status.HTTP_500_INTERNAL_SERVER_ERROR, "MANIFEST_SAVE_FAILED", str(e)) from e
