"""Contracts for one generation run: tasks, per-task outcomes and the result."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SpecKind(str, Enum):
    """Supported specification documents."""
    PRD = "prd"
    TPS = "tps"
    UI_UX = "uiUx"
    TECHNICAL = "technical"
    DATA = "data"
    INTEGRATION = "integration"


class TaskKind(str, Enum):
    RULES = "rules"
    SPEC = "spec"
    CHECKLIST = "checklist"


class TaskStatus(str, Enum):
    """Status of one requested document in the status map."""
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class FileData(BaseModel):
    """A file destined for the output archive."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


@dataclass(frozen=True)
class GenerationTask:
    """One unit of orchestrated work. Built once per request, never mutated.

    Use the concrete subclasses; ``kind`` tells them apart at dispatch sites.
    """
    kind: ClassVar[TaskKind]

    key: str
    template: str
    output_path: str
    input_variables: Dict[str, str]
    model: str
    cache_key: str


@dataclass(frozen=True)
class RulesTask(GenerationTask):
    kind: ClassVar[TaskKind] = TaskKind.RULES


@dataclass(frozen=True)
class SpecTask(GenerationTask):
    kind: ClassVar[TaskKind] = TaskKind.SPEC

    spec_kind: SpecKind = SpecKind.PRD


@dataclass(frozen=True)
class ChecklistTask(GenerationTask):
    kind: ClassVar[TaskKind] = TaskKind.CHECKLIST


@dataclass
class InvocationResult:
    """Outcome of one model call: exactly one of ``value`` or ``error`` is set."""
    value: Optional[str] = None
    error: Optional[Exception] = field(default=None)

    @classmethod
    def ok(cls, value: str) -> "InvocationResult":
        return cls(value=value)

    @classmethod
    def failed(cls, error: Exception) -> "InvocationResult":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None


class TaskOutcome(BaseModel):
    """Settled result of one GenerationTask."""

    key: str
    status: TaskStatus
    file: Optional[FileData] = None
    cached: bool = False

    @model_validator(mode="after")
    def check_file_matches_status(self) -> "TaskOutcome":
        if self.status == TaskStatus.PENDING:
            raise ValueError("a task outcome must be settled (success or error)")
        if (self.status == TaskStatus.SUCCESS) != (self.file is not None):
            raise ValueError("status 'success' requires a file and 'error' forbids one")
        return self


class GenerationResult(BaseModel):
    """Everything the orchestrator hands back for one request."""

    results: Dict[str, TaskStatus] = Field(
        default_factory=dict,
        description="Exactly one entry per requested task",
    )
    files: List[FileData] = Field(default_factory=list)
    static_file_count: int = 0

    @property
    def generated_files(self) -> List[FileData]:
        return self.files[self.static_file_count:]

    def status_strings(self) -> Dict[str, str]:
        return {key: status.value for key, status in self.results.items()}
