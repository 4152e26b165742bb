"""FastAPI routers and dependencies."""

from crdforge.api.crd import router as crd_router
from crdforge.api.manifests import router as manifests_router

__all__ = [
    "crd_router",
    "manifests_router",
]
