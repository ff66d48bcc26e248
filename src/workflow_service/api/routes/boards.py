"""Board compilation routes."""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from workflow_runtime import Board, compile_board
from workflow_service.observability import get_logger

logger = get_logger(__name__)
router = APIRouter()


class CompileBoardRequest(BaseModel):
    """Request model for compiling a board."""

    board: Board = Field(..., description="Board JSON as saved by the editor")
    name: str = Field(default="Untitled", description="Workflow name")


@router.post("/v1/boards/compile")
def compile_board_endpoint(request: CompileBoardRequest) -> dict[str, Any]:
    """
    Compile a board into a runnable workflow.

    Args:
        request: Board and workflow name

    Returns:
        Serialized ExecWorkflow (warnings included)
    """
    workflow = compile_board(request.board, name=request.name)

    logger.info(
        "Board compiled via API",
        extra={
            "workflow_id": workflow.id,
            "node_count": len(workflow.nodes),
            "warning_count": len(workflow.warnings),
        },
    )

    return workflow.to_dict()
