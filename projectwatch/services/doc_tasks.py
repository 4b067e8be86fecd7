"""Flatten parsed documentation into board tasks."""
from __future__ import annotations

from datetime import datetime, timezone

from projectwatch.models import DocumentationTask, Phase, ProjectDocumentation, Stage


def step_id(phase_index: int, stage_index: int, step_index: int) -> str:
    return f"step-{phase_index}-{stage_index}-{step_index}"


def documentation_source(phase: Phase, stage: Stage) -> str:
    if phase.order > 0:
        return f"Phase {phase.order}: {phase.name} > {stage.name}"
    return f"{phase.name} > {stage.name}"


def documentation_to_tasks(
    documentation: ProjectDocumentation,
    project_id: str,
    created_at: str | None = None,
) -> list[DocumentationTask]:
    """One task per step, in phase/stage/step order.

    Completed steps land in ``done``; everything else starts in ``backlog``.
    """
    timestamp = created_at or datetime.now(timezone.utc).isoformat()
    tasks: list[DocumentationTask] = []
    order = 0
    for phase_index, phase in enumerate(documentation.phases):
        for stage_index, stage in enumerate(phase.stages):
            source = documentation_source(phase, stage)
            for step_index, step in enumerate(stage.steps):
                tasks.append(DocumentationTask(
                    id=f"doc-{project_id}-{step_id(phase_index, stage_index, step_index)}",
                    title=step.content,
                    description=f"From: {source}",
                    status="done" if step.is_completed else "backlog",
                    order=order,
                    priority="medium",
                    labels=[f"phase-{phase.order}"],
                    documentation_source=source,
                    created_at=timestamp,
                ))
                order += 1
    return tasks
