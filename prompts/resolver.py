"""Template resolver: maps a task kind to its prompt and output path, and
loads the static rule files that ship with every kit.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from contracts import FileData, SpecKind, TaskKind
from .templates import (
    CHECKLIST_PATH,
    CHECKLIST_TEMPLATE,
    PROJECT_RULES_PATH,
    PROJECT_RULES_TEMPLATE,
    RULES_OUTPUT_DIR,
    SPEC_DOCUMENTS,
    SPEC_TEMPLATE,
    STATIC_RULES,
    STATIC_RULES_SOURCE_DIR,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTemplate:
    template: str
    output_path: str


class TemplateResolver:
    """Resolves prompt templates and static rule files.

    Static rules are read from ``<templates_dir>/rules/<name>`` and land in the
    archive under ``.cursor/rules/<name>``. A missing or unreadable rule file
    is logged and skipped; the remaining files are still returned.
    """

    def __init__(self, templates_dir: Union[str, Path], static_rules: Optional[List[str]] = None):
        """Initialize the resolver.

        Args:
            templates_dir: Directory containing the ``rules/`` folder.
            static_rules: Rule filenames to ship. Defaults to STATIC_RULES.
        """
        self.templates_dir = Path(templates_dir)
        self.static_rules = list(STATIC_RULES if static_rules is None else static_rules)

    def resolve(
        self,
        task_kind: TaskKind,
        spec_kind: Optional[Union[SpecKind, str]] = None,
    ) -> Optional[ResolvedTemplate]:
        """Return the template and output path for a task.

        Args:
            task_kind: rules, spec or checklist.
            spec_kind: Required for spec tasks; a SpecKind or its wire name.

        Returns:
            The resolved template, or None when ``spec_kind`` is not a known
            spec document. Callers skip the task in that case.
        """
        if task_kind == TaskKind.RULES:
            return ResolvedTemplate(PROJECT_RULES_TEMPLATE, PROJECT_RULES_PATH)
        if task_kind == TaskKind.CHECKLIST:
            return ResolvedTemplate(CHECKLIST_TEMPLATE, CHECKLIST_PATH)
        if task_kind == TaskKind.SPEC:
            kind = self.spec_kind_for(spec_kind)
            if kind is None:
                return None
            return ResolvedTemplate(SPEC_TEMPLATE, SPEC_DOCUMENTS[kind].output_path)
        raise ValueError(f"Unknown task kind: {task_kind}")

    @staticmethod
    def spec_kind_for(value: Optional[Union[SpecKind, str]]) -> Optional[SpecKind]:
        """Coerce a wire name to SpecKind, or None if it is not recognized."""
        if value is None:
            return None
        try:
            kind = SpecKind(value)
        except ValueError:
            return None
        return kind if kind in SPEC_DOCUMENTS else None

    def read_template_file(self, relative_path: str) -> str:
        """Read a file below the templates directory.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        return (self.templates_dir / relative_path).read_text(encoding="utf-8")

    def load_static_rules(self) -> List[FileData]:
        """Load every static rule file that can be read, in configured order."""
        files: List[FileData] = []
        for name in self.static_rules:
            source = f"{STATIC_RULES_SOURCE_DIR}/{name}"
            try:
                content = self.read_template_file(source)
            except OSError as e:
                logger.warning("Could not read static rule file %s: %s", source, e)
                continue
            files.append(FileData(path=f"{RULES_OUTPUT_DIR}/{name}", content=content))
            logger.debug("Static rule added: %s", name)
        return files
