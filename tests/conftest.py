"""Shared fixtures: a scripted model gateway, isolated settings, static rule files."""

import asyncio
import copy
from typing import Dict, List, Optional, Tuple

import pytest

from config import Settings
from contracts import GenerationRequest
from prompts import SPEC_DOCUMENTS, STATIC_RULES
from prompts.templates import CHECKLIST_TEMPLATE, PROJECT_RULES_TEMPLATE
from providers import ModelGateway, ModelHandle


CREDENTIAL_ENVS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "CAPS_OPENAI_API_KEY",
    "CAPS_ANTHROPIC_API_KEY",
    "CAPS_GOOGLE_API_KEY",
)

VALID_PAYLOAD = {
    "projectDescription": "A mobile app that tracks daily water intake.",
    "problemStatement": "People forget to drink enough water during the day.",
    "features": "Log intake, set daily goals, reminders, progress charts.",
    "targetUsers": "Health-conscious adults with busy schedules.",
    "techStack": {
        "frontend": ["React", "Tailwind CSS"],
        "backend": ["FastAPI"],
        "database": ["PostgreSQL"],
        "infrastructure": [],
        "other": [],
    },
    "generationOptions": {
        "rules": True,
        "specs": {
            "prd": True,
            "tps": False,
            "uiUx": False,
            "technical": False,
            "data": False,
            "integration": False,
        },
        "checklist": False,
    },
    "selectedAIProvider": "openai",
}

_FOCUS_TO_KEY = {doc.focus: kind.value for kind, doc in SPEC_DOCUMENTS.items()}


def task_key_for(template: str, variables: Dict[str, str]) -> str:
    """Work out which task a gateway call belongs to."""
    if template == PROJECT_RULES_TEMPLATE:
        return "rules"
    if template == CHECKLIST_TEMPLATE:
        return "checklist"
    return _FOCUS_TO_KEY[variables["spec_focus"]]


class FakeGateway(ModelGateway):
    """Scripted gateway that records calls and tracks how many overlap."""

    def __init__(
        self,
        settings,
        responses: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        delay: float = 0.0,
    ):
        super().__init__(settings)
        self.responses = responses or {}
        self.failures = failures or {}
        self.delay = delay
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.running = 0
        self.max_running = 0

    async def invoke(self, handle: ModelHandle, template, variables, model=None) -> str:
        self.render(template, variables)
        key = task_key_for(template, variables)
        self.calls.append((key, model))
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            await asyncio.sleep(self.delay)
            if key in self.failures:
                raise self.failures[key]
            return self.responses.get(key, f"# {key}\n\nGenerated {key} content.")
        finally:
            self.running -= 1

    @property
    def called_keys(self) -> List[str]:
        return [key for key, _ in self.calls]


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch):
    """Tests never see real API keys from the environment."""
    for name in CREDENTIAL_ENVS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def templates_dir(tmp_path):
    """A templates directory holding every static rule file."""
    rules_dir = tmp_path / "templates" / "rules"
    rules_dir.mkdir(parents=True)
    for name in STATIC_RULES:
        (rules_dir / name).write_text(f"# {name}\n\n- a rule\n", encoding="utf-8")
    return tmp_path / "templates"


@pytest.fixture
def settings(templates_dir):
    return Settings(
        _env_file=None,
        openai_api_key="sk-test-openai",
        templates_dir=str(templates_dir),
        max_concurrency=3,
    )


@pytest.fixture
def payload():
    return copy.deepcopy(VALID_PAYLOAD)


@pytest.fixture
def make_request(payload):
    """Build a GenerationRequest, optionally replacing the generation options."""

    def _make(**options) -> GenerationRequest:
        data = copy.deepcopy(payload)
        if options:
            data["generationOptions"] = {
                "rules": options.get("rules", False),
                "specs": options.get("specs", {}),
                "checklist": options.get("checklist", False),
            }
        return GenerationRequest.model_validate(data)

    return _make
