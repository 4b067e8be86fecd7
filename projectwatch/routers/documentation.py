"""API router for parsed roadmap documentation."""
from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, HTTPException, Query

from projectwatch import config
from projectwatch.discovery import find_doc_files
from projectwatch.models import DocFileInfo, DocumentationTask, Project, ProjectDocumentation
from projectwatch.parsers.documentation import DocumentReadError, parse_project_docs_async
from projectwatch.project_manager import project_manager
from projectwatch.services.doc_tasks import documentation_to_tasks

documentation_router = APIRouter(prefix="/api/documentation", tags=["documentation"])


def _resolve_project(project_id: str) -> Project:
    if project_id:
        project = project_manager.get_project(project_id)
        if not project:
            raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
        return project
    project = project_manager.get_active_project()
    if not project:
        raise HTTPException(status_code=400, detail="No active project")
    return project


async def _discover(project: Project) -> list[DocFileInfo]:
    try:
        return await asyncio.to_thread(
            find_doc_files, Path(project.path), config.DOC_PARENT_LOOKUP
        )
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OSError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


async def _parse(project: Project) -> ProjectDocumentation:
    files = await _discover(project)
    try:
        return await parse_project_docs_async(files, project_id=project.id)
    except DocumentReadError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@documentation_router.get("/files", response_model=list[DocFileInfo])
async def list_documentation_files(
    project_id: str = Query("", description="Project id; defaults to the active project"),
):
    project = _resolve_project(project_id)
    return await _discover(project)


@documentation_router.get("", response_model=ProjectDocumentation)
async def get_documentation(
    project_id: str = Query("", description="Project id; defaults to the active project"),
):
    project = _resolve_project(project_id)
    return await _parse(project)


@documentation_router.get("/tasks", response_model=list[DocumentationTask])
async def get_documentation_tasks(
    project_id: str = Query("", description="Project id; defaults to the active project"),
):
    project = _resolve_project(project_id)
    documentation = await _parse(project)
    return documentation_to_tasks(documentation, project.id)
