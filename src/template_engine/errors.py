"""Template engine errors."""

from __future__ import annotations


class TemplateExpressionError(Exception):
    """A placeholder expression could not be evaluated."""

    def __init__(self, message: str, expression: str = "") -> None:
        self.expression = expression
        super().__init__(message)
