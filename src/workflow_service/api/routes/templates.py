"""Template preview routes."""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from template_engine import extract_template_paths, generate_data_paths, parse_template_variables, preview_template

router = APIRouter()


class PreviewRequest(BaseModel):
    """Request model for template preview."""

    template: str = Field(..., description="Text containing {{...}} placeholders")
    data: dict[str, Any] = Field(default_factory=dict, description="Sample data to preview against")


class PreviewVariable(BaseModel):
    """One resolved placeholder."""

    variable: str
    start_index: int
    end_index: int
    value: Any = None


class PreviewResponse(BaseModel):
    """Response model for template preview."""

    rendered: str = Field(..., description="Template with markers for unresolved values")
    variables: list[PreviewVariable] = Field(default_factory=list)
    paths: list[str] = Field(default_factory=list, description="ctx paths referenced by the template")


class DataPathsRequest(BaseModel):
    """Request model for listing insertable data paths."""

    data: Any = Field(..., description="Sample data")
    prefix: str = Field(default="", description="Path prefix")
    max_depth: int = Field(default=5, ge=1, le=10)


@router.post("/v1/templates/preview", response_model=PreviewResponse)
def preview(request: PreviewRequest) -> PreviewResponse:
    """
    Render a template against sample data for the editor.

    Args:
        request: Template and sample data

    Returns:
        Rendered preview and the resolved variables
    """
    variables = [
        PreviewVariable(
            variable=variable.variable,
            start_index=variable.start_index,
            end_index=variable.end_index,
            value=variable.value,
        )
        for variable in parse_template_variables(request.template, request.data)
    ]
    return PreviewResponse(
        rendered=preview_template(request.template, request.data),
        variables=variables,
        paths=extract_template_paths(request.template),
    )


@router.post("/v1/templates/paths")
def data_paths(request: DataPathsRequest) -> list[dict[str, Any]]:
    """Flatten sample data into selectable paths."""
    return generate_data_paths(request.data, prefix=request.prefix, max_depth=request.max_depth)
