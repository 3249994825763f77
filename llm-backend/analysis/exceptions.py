"""
Custom Exception Hierarchy for Analysis Module

Exception Hierarchy:
    AnalysisError (base)
    └── PromptError
        └── PromptTemplateError

Gateway and normalizer failures are not exceptions; they are returned as
GatewayErr / NormalizeErr values (see analysis.models.results).
"""

from typing import Optional


class AnalysisError(Exception):
    """Base exception for all analysis module errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Prompt Errors

class PromptError(AnalysisError):
    """Base exception for prompt-related errors."""
    pass


class PromptTemplateError(PromptError):
    """Raised when prompt template rendering fails."""

    def __init__(self, template_name: str, missing_vars: list[str]):
        message = f"Prompt template '{template_name}' missing variables: {', '.join(sorted(missing_vars))}"
        super().__init__(message)
        self.template_name = template_name
        self.missing_vars = missing_vars
