"""Pydantic contracts for the CAPS generator.

Everything that crosses a component boundary is typed through these contracts.
"""

from .request_contracts import (
    MIN_TEXT_LENGTH,
    ProviderName,
    TechStack,
    GenerationOptions,
    GenerationRequest,
)

from .generation_contracts import (
    SpecKind,
    TaskKind,
    TaskStatus,
    FileData,
    GenerationTask,
    RulesTask,
    SpecTask,
    ChecklistTask,
    InvocationResult,
    TaskOutcome,
    GenerationResult,
)

__all__ = [
    # Request
    "MIN_TEXT_LENGTH",
    "ProviderName",
    "TechStack",
    "GenerationOptions",
    "GenerationRequest",
    # Generation
    "SpecKind",
    "TaskKind",
    "TaskStatus",
    "FileData",
    "GenerationTask",
    "RulesTask",
    "SpecTask",
    "ChecklistTask",
    "InvocationResult",
    "TaskOutcome",
    "GenerationResult",
]
