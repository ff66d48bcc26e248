"""
Template Engine - {{...}} interpolation against a workflow run context.

This package provides:
- interpolate_template / interpolate_config: runtime substitution used by
  the node executor (failures degrade to empty strings)
- preview_template / parse_template_variables: editor preview rendering
  (failures render an explicit "No data" marker)
- extract_template_paths: static collection of ctx.<path> references
- Data mapping helpers used by the editor's insert-value tooling

All functions are pure and perform no I/O.
"""

from .errors import TemplateExpressionError
from .tokenizer import Placeholder, scan_placeholders
from .paths import get_nested_value
from .helpers import HELPERS, evaluate_helper, format_date, now, parse_arguments
from .engine import (
    extract_template_paths,
    interpolate_config,
    interpolate_template,
    render_value,
    resolve_expression,
)
from .preview import TemplateVariable, parse_template_variables, preview_template
from .mapping import (
    build_execution_context,
    build_node_outputs_from_workflow,
    generate_data_paths,
    generate_sample_node_output,
)

__all__ = [
    # Errors
    "TemplateExpressionError",
    # Tokenizer
    "Placeholder",
    "scan_placeholders",
    # Paths
    "get_nested_value",
    # Helpers
    "HELPERS",
    "evaluate_helper",
    "format_date",
    "now",
    "parse_arguments",
    # Runtime interpolation
    "interpolate_template",
    "interpolate_config",
    "extract_template_paths",
    "render_value",
    "resolve_expression",
    # Preview
    "TemplateVariable",
    "parse_template_variables",
    "preview_template",
    # Data mapping
    "build_execution_context",
    "build_node_outputs_from_workflow",
    "generate_data_paths",
    "generate_sample_node_output",
]
