"""Prompt templates and the resolver that hands them to the orchestrator."""

from .resolver import ResolvedTemplate, TemplateResolver
from .templates import (
    STATIC_RULES,
    SPEC_DOCUMENTS,
    format_tech_stack,
    project_input_variables,
    spec_input_variables,
)

__all__ = [
    "ResolvedTemplate",
    "TemplateResolver",
    "STATIC_RULES",
    "SPEC_DOCUMENTS",
    "format_tech_stack",
    "project_input_variables",
    "spec_input_variables",
]
