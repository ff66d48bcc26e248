"""Node execution routes."""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from node_sdk import get_default_registry
from workflow_runtime import ExecutionContext, NodeExecutor, parse_curl_command
from workflow_service.observability import get_logger, with_run_context

logger = get_logger(__name__)
router = APIRouter()


class ExecuteNodeRequest(BaseModel):
    """Request model for executing one node."""

    node: dict[str, Any] = Field(
        ...,
        description="ExecNode ({id, kind, cfg}) or editor descriptor ({kind, data: {config}})",
    )
    ctx: dict[str, Any] | None = Field(default=None, description="Run context to execute against")
    trigger: Any = Field(default=None, description="Trigger payload, used when ctx is not given")
    run_id: str | None = Field(default=None, description="Caller-assigned run ID for log correlation")


class ExecuteNodeResponse(BaseModel):
    """Response model for node execution."""

    result: dict[str, Any] = Field(..., description="{success, data?, error?, nextNodeId?, shouldStop?}")
    ctx: dict[str, Any] = Field(..., description="Run context after execution")
    ctx_version: int = Field(..., description="Number of context writes made by the node")


class CurlImportRequest(BaseModel):
    """Request model for importing a cURL command."""

    command: str = Field(..., description="cURL command line")


@router.get("/v1/nodes")
def list_nodes() -> list[dict[str, Any]]:
    """List the registered node kinds with their palette metadata."""
    return get_default_registry().list_definitions()


@router.post("/v1/nodes/execute", response_model=ExecuteNodeResponse)
def execute_node_endpoint(request: ExecuteNodeRequest) -> ExecuteNodeResponse:
    """
    Execute a single node.

    Node failures are returned in-band with success=false.

    Args:
        request: Node descriptor and context

    Returns:
        Execution result and the updated context
    """
    if request.ctx is not None:
        ctx = ExecutionContext(request.ctx)
    else:
        ctx = ExecutionContext.from_trigger(request.trigger)

    result = NodeExecutor().execute_node(request.node, ctx)

    logger.info(
        "Node executed via API",
        extra=with_run_context(
            run_id=request.run_id,
            node_id=request.node.get("id"),
            node_kind=request.node.get("kind"),
            success=result.success,
        ),
    )

    return ExecuteNodeResponse(
        result=result.to_dict(),
        ctx=dict(ctx),
        ctx_version=ctx.version,
    )


@router.post("/v1/nodes/http/curl")
def import_curl(request: CurlImportRequest) -> dict[str, Any]:
    """Parse a cURL command into http node config."""
    return parse_curl_command(request.command).to_dict()
