"""Prompt templates and the variables that fill them.

Templates use ``str.format`` placeholders. Literal braces must not appear in
the template text itself; values substituted into a template may contain
anything.
"""

from typing import Dict, List, Optional

from contracts import GenerationRequest, SpecKind, TechStack


# Rule files shipped with every kit, read from <templates_dir>/rules/
STATIC_RULES: List[str] = [
    "general-best-practices.mdc",
    "logging-and-debugging.mdc",
    "tdd-and-testing.mdc",
    "github-commit-discipline.mdc",
    "scalability.mdc",
    "mcp-tools.mdc",
]

STATIC_RULES_SOURCE_DIR = "rules"
RULES_OUTPUT_DIR = ".cursor/rules"
PROJECT_RULES_PATH = f"{RULES_OUTPUT_DIR}/project-specific-rules.mdc"
CHECKLIST_PATH = "checklist.md"
DOCS_DIR = "docs"


PROJECT_RULES_TEMPLATE = """
Generate a set of project-specific rules (in .mdc format suitable for Cursor) for a software project based on the following details.
These rules should guide an AI assistant (like Cursor) in implementing the project effectively.
Focus on rules directly relevant to the project description and chosen tech stack, complementing general best practices.

Project Description:
{project_description}

Problem Solved:
{problem_statement}

Target Users:
{target_users}

Key Features:
{features}

Tech Stack:
{tech_stack_info}

Example rules:
- Implement React components using functional components and hooks, avoiding class components.
- Use Prisma ORM for all database interactions, adhering to defined schema models.

Output only the list of rules in markdown bullet point format, starting immediately with the first bullet point.
"""


_BASE_SPEC_PROMPT = """
Generate a {spec_focus} in Markdown format for the software project described below.
The output should be a well-structured document suitable for developers and potentially AI assistants.

Project Description:
{project_description}

Problem Solved:
{problem_statement}

Target Users:
{target_users}

Key Features:
{features}

Tech Stack:
{tech_stack_info}

--- BEGIN {spec_focus} ---
"""

_END_SPEC_PROMPT = """
--- END {spec_focus} ---

Ensure the generated {spec_focus} is comprehensive for its type, well-organized with clear headings based on standard practices for this document type, and directly based on the provided project details.
Output only the Markdown content for the specification document, including the BEGIN/END markers.
"""

SPEC_TEMPLATE = _BASE_SPEC_PROMPT + "\n{spec_structure}\n" + _END_SPEC_PROMPT


CHECKLIST_TEMPLATE = """
You are a senior AI software engineer tasked with generating a **highly detailed and comprehensive Test-Driven Development (TDD) implementation checklist** in Markdown format with checkboxes ([ ]). The checklist must strictly follow TDD methodology.

**Your Output Must:**
- Use Markdown formatting
- Use nested headings and task groups (##, ###, ####)
- Structure the checklist into logical, testable, dependency-aware blocks

**Scope & Focus:**
- Focus exclusively on the **coding and testing phase** of the project.
- DO NOT include tasks for documentation writing, user research, CI/CD setup, deployment, infrastructure provisioning, or project planning.

---

**Project Details:**

Project Description:
{project_description}

Problem Solved:
{problem_statement}

Target Users:
{target_users}

Key Features:
{features}

Tech Stack:
{tech_stack_info}

---

--- BEGIN CHECKLIST ---

Generate a comprehensive, dependency-aware, TDD-style coding checklist based strictly on the above principles and project details. Structure by major categories (e.g., Backend, Frontend, Services) and sub-categories (e.g., Models, API Routes, Utilities, UI Components). Include detailed test -> implement -> refactor steps for each.

--- END CHECKLIST ---
"""


# Document outlines. These are substituted as values, so braces inside are literal.
PRD_STRUCTURE = """
Structure the PRD with the following sections using Markdown headings:

## 1. Title and Overview
   - **Title:** [Infer a suitable title based on the project description]
   - **Author(s):** CAPS Generator
   - **Version:** 1.0
## 2. Objective / Purpose
   - [Why the product is being built, tied to the problem statement and features.]
## 3. Background / Context
   - **Business Goals:** [1-2 measurable goals.]
## 4. User Stories
   - **User Story:** "As a {Target User}, I want to {action} so that {benefit}."
   - **Acceptance Criteria:** [Testable criteria per story.]
## 5. Functional Requirements
## 6. Non-Functional Requirements
## 7. Technical Considerations
   - **Tech Stack Summary:** [Summarize the provided tech stack or propose one.]
## 8. Out of Scope
## 9. Open Questions
"""

TECHNICAL_SPEC_STRUCTURE = """
Structure the Technical Specification with these sections:

## 1. Overview
## 2. System Architecture
   - [Components, their responsibilities and how they communicate.]
## 3. Technology Stack
   - [List the specific technologies used, based on the provided tech stack.]
## 4. API Design
   - **Endpoint:** [METHOD /path] - **Description:** [e.g., Creates a new {resource}]
## 5. Data Model
## 6. Security
## 7. Error Handling and Logging
## 8. Testing Strategy
## 9. Deployment Notes
"""

UI_UX_SPEC_STRUCTURE = """
Structure the UI/UX Specification with these sections:

## 1. Design Principles
## 2. Screens and Layouts
   - [For each screen: purpose, layout, key components, states (loading, error, empty).]
## 3. Component Library
   - **Component: {ExampleButton}** - purpose, variants, states.
## 4. User Flows
   - 1. User interacts with {Component} on Screen A. 2. User sees {Result} on Screen B.
## 5. Accessibility
## 6. Responsive Behaviour
"""

DATA_SPEC_STRUCTURE = """
Structure the Database & Storage Specification with these sections:

## 1. Storage Overview
## 2. Entities and Relationships
   - [Tables/collections, fields, types, constraints, indexes.]
## 3. Access Patterns
## 4. File / Object Storage
   - Example structure: `uploads/{user_id}/{yyyy}/{mm}/{file_uuid}.{ext}`
## 5. Migrations and Seeding
## 6. Retention, Backup and Privacy
"""

INTEGRATION_SPEC_STRUCTURE = """
Structure the Third-Party Integration Specification with these sections:

## 1. Integrations Overview
## 2. Per-Integration Details
   - [Purpose, API version, authentication method, rate limits.]
## 3. Data Flow and Field Mapping
## 4. Webhooks and Events
## 5. Failure Handling and Retries
## 6. Security Considerations
   - Never log raw API keys. Validate webhook signatures. Restrict key permissions.
"""

TPS_STRUCTURE = """
Structure the Test Plan Specification with these sections:

## 1. Scope and Objectives
## 2. Test Levels (unit, integration, end-to-end)
## 3. Test Cases per Feature
## 4. Test Data and Environments
## 5. Entry / Exit Criteria
## 6. Risks
"""

# Used when a spec kind has no outline of its own; SPEC_FOCUS_MARKER is replaced
# textually because the embedded outlines contain literal braces.
SPEC_FOCUS_MARKER = "<<spec_focus>>"

DEFAULT_SPEC_STRUCTURE = "\n".join([
    f"Structure the {SPEC_FOCUS_MARKER} with logical sections relevant to its type. Use clear Markdown headings.",
    "**Examples based on Spec Type:**",
    "*If the document is a Product Requirements Document (PRD):*", PRD_STRUCTURE,
    "*If the document is a Technical Specification:*", TECHNICAL_SPEC_STRUCTURE,
    "*If the document is a UI/UX Specification:*", UI_UX_SPEC_STRUCTURE,
    "*If the document is a Test Plan Specification (TPS):*", TPS_STRUCTURE,
    "*If the document is a Database & Storage Specification:*", DATA_SPEC_STRUCTURE,
    "*If the document is a Third-Party Integration Specification:*", INTEGRATION_SPEC_STRUCTURE,
])


class SpecDocument:
    """Static facts about one SpecKind: title, outline and output file."""

    def __init__(self, focus: str, filename: str, structure: Optional[str] = None):
        self.focus = focus
        self.filename = filename
        self.structure = structure

    @property
    def output_path(self) -> str:
        return f"{DOCS_DIR}/{self.filename}"

    def render_structure(self) -> str:
        """Outline text handed to the model as ``spec_structure``."""
        if self.structure is not None:
            return self.structure
        return DEFAULT_SPEC_STRUCTURE.replace(SPEC_FOCUS_MARKER, self.focus)


SPEC_DOCUMENTS: Dict[SpecKind, SpecDocument] = {
    SpecKind.PRD: SpecDocument("Product Requirements Document (PRD)", "prd.md", PRD_STRUCTURE),
    SpecKind.TPS: SpecDocument("Test Plan Specification (TPS)", "tps.md"),
    SpecKind.UI_UX: SpecDocument("UI/UX Specification", "ui-ux-spec.md", UI_UX_SPEC_STRUCTURE),
    SpecKind.TECHNICAL: SpecDocument("Technical Specification", "technical-spec.md", TECHNICAL_SPEC_STRUCTURE),
    SpecKind.DATA: SpecDocument("Database & Storage Specification", "data-spec.md", DATA_SPEC_STRUCTURE),
    SpecKind.INTEGRATION: SpecDocument(
        "Third-Party Integration Specification", "integration-spec.md", INTEGRATION_SPEC_STRUCTURE
    ),
}


def format_tech_stack(tech_stack: TechStack) -> str:
    """Render the tech stack as the ``tech_stack_info`` prompt variable."""
    parts = [
        ("Frontend", tech_stack.frontend),
        ("Backend", tech_stack.backend),
        ("Database", tech_stack.database),
        ("Infrastructure/Hosting", tech_stack.infrastructure),
        ("Other Tools/Libraries", tech_stack.other),
    ]
    lines = [f"{label}: {', '.join(items)}" for label, items in parts if items]
    if not lines:
        return "The user did not specify a tech stack; suggest one if appropriate based on the project."
    return "The user specified the following tech stack:\n" + "\n".join(lines)


def project_input_variables(request: GenerationRequest, tech_stack_info: str) -> Dict[str, str]:
    """Variables shared by every template."""
    return {
        "project_description": request.project_description,
        "problem_statement": request.problem_statement,
        "features": request.features,
        "target_users": request.target_users,
        "tech_stack_info": tech_stack_info,
    }


def spec_input_variables(
    spec_kind: SpecKind,
    request: GenerationRequest,
    tech_stack_info: str,
) -> Dict[str, str]:
    """Variables for the spec template: the shared ones plus focus and outline."""
    document = SPEC_DOCUMENTS[spec_kind]
    variables = project_input_variables(request, tech_stack_info)
    variables["spec_focus"] = document.focus
    variables["spec_structure"] = document.render_structure()
    return variables
