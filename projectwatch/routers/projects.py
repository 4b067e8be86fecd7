"""API router for the watched project registry."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from projectwatch.models import Project
from projectwatch.project_manager import project_manager

projects_router = APIRouter(prefix="/api/projects", tags=["projects"])


@projects_router.get("", response_model=list[Project])
def list_projects():
    """List all registered projects."""
    return project_manager.list_projects()


@projects_router.post("", response_model=Project)
def add_project(project: Project):
    """Register a project."""
    if project_manager.get_project(project.id):
        raise HTTPException(status_code=409, detail=f"Project {project.id} already exists")
    project_manager.add_project(project)
    return project


@projects_router.get("/active", response_model=Project)
def get_active_project():
    """Get the currently active project."""
    project = project_manager.get_active_project()
    if not project:
        raise HTTPException(status_code=404, detail="No active project found")
    return project


@projects_router.post("/active/{project_id}", response_model=Project)
def set_active_project(project_id: str):
    """Switch the active project."""
    try:
        project_manager.set_active_project(project_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    project = project_manager.get_active_project()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found after switch")
    return project


@projects_router.put("/{project_id}", response_model=Project)
def update_project(project_id: str, project: Project):
    """Update an existing project."""
    try:
        project_manager.update_project(project_id, project)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    updated = project_manager.get_project(project_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Project not found after update")
    return updated


@projects_router.delete("/{project_id}")
def remove_project(project_id: str):
    """Unregister a project."""
    try:
        project_manager.remove_project(project_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return {"removed": project_id}
