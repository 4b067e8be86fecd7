"""Pydantic models for parsed project documentation."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ── Documentation hierarchy ────────────────────────────────────────

class PhaseStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Step(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    is_completed: bool = False


class Stage(BaseModel):
    name: str
    steps: list[Step] = Field(default_factory=list)


class Phase(BaseModel):
    name: str
    order: int = 0
    status: PhaseStatus = PhaseStatus.NOT_STARTED
    stages: list[Stage] = Field(default_factory=list)
    progress: float = 0.0  # 0-100, derived from steps


class ProjectDocumentation(BaseModel):
    phases: list[Phase] = Field(default_factory=list)
    source_files: list[str] = Field(default_factory=list)  # relative paths that yielded phases
    progress_percentage: float = 0.0


class DocFileInfo(BaseModel):
    path: str           # absolute path on disk
    name: str           # file name
    relative_path: str  # display path, "../" prefixed for parent-directory docs


# ── Board export ───────────────────────────────────────────────────

class DocumentationTask(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str = "backlog"  # backlog | done
    order: int = 0
    priority: str = "medium"
    labels: list[str] = Field(default_factory=list)
    documentation_source: str = ""  # "Phase N: <phase> > <stage>"
    is_from_documentation: bool = True
    created_at: str = ""


# ── Project model ──────────────────────────────────────────────────

class Project(BaseModel):
    id: str
    name: str
    path: str
    description: str = ""
