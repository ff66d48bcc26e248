"""Health check routes."""
from fastapi import APIRouter

from node_sdk import get_default_registry
from workflow_service.config import get_settings

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        Status dict
    """
    return {
        "status": "healthy",
        "service": "workflow-engine",
        "env": get_settings().env,
        "node_kinds": len(get_default_registry()),
    }
