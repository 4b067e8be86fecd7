"""Parse roadmap/planning markdown into Phase → Stage → Step records.

Only four structural signals are recognized: phase headers, stage headers and
checked/unchecked checklist items. A single-``#`` heading is remembered as a
fallback phase name. Every other line is narrative text and is ignored.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import yaml

from projectwatch.models import Phase, PhaseStatus, Stage, Step

TASKS_STAGE_NAME = "Tasks"

_MARKDOWN_EXTENSIONS = (".markdown", ".mdx", ".md")

_FRONTMATTER_PATTERN = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)
_HEADING_PATTERN = re.compile(r"^#(?!#)\s+(.+?)\s*$")
_PHASE_HEADER_PATTERN = re.compile(
    r"^#{1,2}\s+(?:milestone|phase|part|step)\s+(\d+)(?:\s*[:.\-]\s*|\s+)(.+?)\s*$",
    re.IGNORECASE,
)
_STAGE_HEADER_PATTERN = re.compile(r"^#{2,3}(?!#)\s+(.+?)\s*$")
_CHECKED_ITEM_PATTERN = re.compile(r"^\s*[-*+]\s+\[[xX]\]\s+(.+?)\s*$")
_UNCHECKED_ITEM_PATTERN = re.compile(r"^\s*[-*+]\s+\[ \]\s+(.+?)\s*$")


class LineKind(Enum):
    HEADING = "heading"
    PHASE_HEADER = "phase_header"
    STAGE_HEADER = "stage_header"
    CHECKED_ITEM = "checked_item"
    UNCHECKED_ITEM = "unchecked_item"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    text: str = ""
    order: int = 0


_PLAIN_TEXT = ClassifiedLine(LineKind.PLAIN_TEXT)


def classify_line(line: str) -> ClassifiedLine:
    """Classify one physical line.

    Precedence: phase header, top-level heading, stage header, checked item,
    unchecked item. A ``# Phase 1: X`` line is only ever a phase header, so it
    never updates the fallback heading and never opens a stage.
    """
    match = _PHASE_HEADER_PATTERN.match(line)
    if match:
        return ClassifiedLine(LineKind.PHASE_HEADER, match.group(2), int(match.group(1)))

    match = _HEADING_PATTERN.match(line)
    if match:
        return ClassifiedLine(LineKind.HEADING, match.group(1))

    match = _STAGE_HEADER_PATTERN.match(line)
    if match:
        return ClassifiedLine(LineKind.STAGE_HEADER, match.group(1))

    match = _CHECKED_ITEM_PATTERN.match(line)
    if match:
        return ClassifiedLine(LineKind.CHECKED_ITEM, match.group(1))

    match = _UNCHECKED_ITEM_PATTERN.match(line)
    if match:
        return ClassifiedLine(LineKind.UNCHECKED_ITEM, match.group(1))

    return _PLAIN_TEXT


# ── Progress helpers ────────────────────────────────────────────────

def compute_progress(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return min(100.0, max(0.0, 100.0 * completed / total))


def status_for_progress(progress: float) -> PhaseStatus:
    if progress >= 100:
        return PhaseStatus.COMPLETED
    if progress > 0:
        return PhaseStatus.IN_PROGRESS
    return PhaseStatus.NOT_STARTED


def count_steps(phase: Phase) -> tuple[int, int]:
    """Return (completed, total) step counts across all stages of a phase."""
    completed = 0
    total = 0
    for stage in phase.stages:
        for step in stage.steps:
            total += 1
            if step.is_completed:
                completed += 1
    return completed, total


def finalize_phase(phase: Phase) -> Phase:
    completed, total = count_steps(phase)
    phase.progress = compute_progress(completed, total)
    phase.status = status_for_progress(phase.progress)
    return phase


# ── Document helpers ────────────────────────────────────────────────

def strip_extension(name: str) -> str:
    """Drop a trailing markdown extension from a document name."""
    lowered = name.lower()
    for ext in _MARKDOWN_EXTENSIONS:
        if lowered.endswith(ext) and len(name) > len(ext):
            return name[: -len(ext)]
    return name


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a leading YAML frontmatter block from the markdown body.

    Only a block that loads as a YAML mapping is frontmatter. Anything else
    between two ``---`` rules is left in the body so its lines still get
    classified.
    """
    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text
    try:
        fm = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return {}, text
    if not isinstance(fm, dict):
        return {}, text
    return fm, text[match.end():]


# ── Parser state machine ────────────────────────────────────────────

@dataclass
class ParserState:
    phases: list[Phase] = field(default_factory=list)
    open_phase: Optional[Phase] = None
    open_stage: Optional[Stage] = None
    orphan_steps: list[Step] = field(default_factory=list)
    last_heading: Optional[str] = None

    def close_stage(self) -> None:
        # A stage held without a phase has nowhere to go and is discarded.
        if self.open_stage is not None and self.open_phase is not None:
            self.open_phase.stages.append(self.open_stage)
        self.open_stage = None

    def close_phase(self) -> None:
        self.close_stage()
        if self.open_phase is not None:
            self.phases.append(self.open_phase)
        self.open_phase = None

    def open_new_phase(self, name: str, order: int) -> None:
        self.close_phase()
        self.open_phase = Phase(name=name, order=order)

    def open_new_stage(self, name: str) -> None:
        self.close_stage()
        self.open_stage = Stage(name=name)

    def add_step(self, step: Step) -> None:
        if self.open_phase is None:
            self.orphan_steps.append(step)
            return
        if self.open_stage is not None:
            self.open_stage.steps.append(step)
            return
        stages = self.open_phase.stages
        if not stages or stages[-1].name != TASKS_STAGE_NAME:
            stages.append(Stage(name=TASKS_STAGE_NAME))
        stages[-1].steps.append(step)

    def feed(self, line: str) -> None:
        token = classify_line(line)
        if token.kind is LineKind.PHASE_HEADER:
            self.open_new_phase(token.text, token.order)
        elif token.kind is LineKind.HEADING:
            self.last_heading = token.text
        elif token.kind is LineKind.STAGE_HEADER:
            self.open_new_stage(token.text)
        elif token.kind is LineKind.CHECKED_ITEM:
            self.add_step(Step(content=token.text, is_completed=True))
        elif token.kind is LineKind.UNCHECKED_ITEM:
            self.add_step(Step(content=token.text, is_completed=False))

    def finish(self, fallback_name: str) -> list[Phase]:
        self.close_phase()
        # Orphans only survive when the document has no phase headers at all.
        if self.orphan_steps and not self.phases:
            self.phases.append(Phase(
                name=self.last_heading or fallback_name,
                order=0,
                stages=[Stage(name=TASKS_STAGE_NAME, steps=list(self.orphan_steps))],
            ))
        self.orphan_steps = []
        return [finalize_phase(phase) for phase in self.phases]


def parse_document(text: str, document_name: str) -> list[Phase]:
    """Parse one document's text into its ordered phases."""
    fm, body = split_frontmatter(text or "")
    title = fm.get("title")
    fallback = title.strip() if isinstance(title, str) else ""
    if not fallback:
        fallback = strip_extension(document_name)

    state = ParserState()
    for line in body.splitlines():
        state.feed(line)
    return state.finish(fallback)
