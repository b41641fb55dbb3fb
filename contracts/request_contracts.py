"""Request contracts: what the wizard sends to the generator.

Field names follow the wizard's camelCase wire format through aliases;
Python code uses the snake_case attribute names.
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


# Minimum length of each free-text field, measured after trimming whitespace
MIN_TEXT_LENGTH = 10


class ProviderName(str, Enum):
    """LLM vendor selected in the wizard."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class TechStack(BaseModel):
    """Technologies picked by the user, one list per category. All may be empty."""

    frontend: List[str] = Field(default_factory=list)
    backend: List[str] = Field(default_factory=list)
    database: List[str] = Field(default_factory=list)
    infrastructure: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Which documents to generate. Any subset is valid, including none."""

    rules: bool = False
    specs: Dict[str, bool] = Field(
        default_factory=dict,
        description="Spec kind wire name (prd, tps, uiUx, ...) -> selected",
    )
    checklist: bool = False

    def selected_specs(self) -> List[str]:
        """Spec kind names that are switched on, in submission order."""
        return [name for name, selected in self.specs.items() if selected]

    def requests_dynamic_content(self) -> bool:
        return self.rules or self.checklist or bool(self.selected_specs())


class GenerationRequest(BaseModel):
    """Validated project description plus generation selections."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    project_description: str = Field(alias="projectDescription", min_length=MIN_TEXT_LENGTH)
    problem_statement: str = Field(alias="problemStatement", min_length=MIN_TEXT_LENGTH)
    features: str = Field(min_length=MIN_TEXT_LENGTH)
    target_users: str = Field(alias="targetUsers", min_length=MIN_TEXT_LENGTH)
    tech_stack: TechStack = Field(default_factory=TechStack, alias="techStack")
    generation_options: GenerationOptions = Field(
        default_factory=GenerationOptions, alias="generationOptions"
    )
    selected_provider: ProviderName = Field(
        default=ProviderName.OPENAI, alias="selectedAIProvider"
    )
