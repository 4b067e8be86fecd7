"""Project registry: persisted watched projects and the active selection."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from projectwatch import config
from projectwatch.models import Project

logger = logging.getLogger("projectwatch")


class ProjectManager:
    """Manages registered projects and the active project."""

    def __init__(self, storage_path: Path):
        self.storage_path = storage_path
        self._projects: dict[str, Project] = {}
        self._active_project_id: Optional[str] = None
        self._load()

        if self._active_project_id not in self._projects:
            self._active_project_id = next(iter(self._projects), None)

    def _load(self):
        """Load projects from JSON storage."""
        if not self.storage_path.exists():
            return

        try:
            content = self.storage_path.read_text(encoding="utf-8")
            if not content.strip():
                return
            data = json.loads(content)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load projects file {self.storage_path}: {e}")
            return

        self._active_project_id = data.get("activeProjectId")
        for p_data in data.get("projects", []):
            try:
                p = Project(**p_data)
                self._projects[p.id] = p
            except Exception as e:
                logger.error(f"Failed to load project: {e}")

    def _save(self):
        """Save projects to JSON storage."""
        data = {
            "activeProjectId": self._active_project_id,
            "projects": [p.model_dump() for p in self._projects.values()],
        }
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def list_projects(self) -> list[Project]:
        return list(self._projects.values())

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def add_project(self, project: Project):
        self._projects[project.id] = project
        if self._active_project_id is None:
            self._active_project_id = project.id
        self._save()

    def update_project(self, project_id: str, project: Project):
        if project_id not in self._projects:
            raise ValueError(f"Project {project_id} not found")
        # The path id wins over whatever the body carries.
        self._projects[project_id] = project.model_copy(update={"id": project_id})
        self._save()

    def remove_project(self, project_id: str):
        if project_id not in self._projects:
            raise ValueError(f"Project {project_id} not found")
        del self._projects[project_id]
        if self._active_project_id == project_id:
            self._active_project_id = next(iter(self._projects), None)
        self._save()

    def set_active_project(self, project_id: str):
        if project_id in self._projects:
            self._active_project_id = project_id
            self._save()
            logger.info(f"Switched active project to: {self._projects[project_id].name}")
        else:
            raise ValueError(f"Project {project_id} not found")

    def get_active_project(self) -> Optional[Project]:
        if self._active_project_id:
            return self._projects.get(self._active_project_id)
        return None


project_manager = ProjectManager(config.PROJECTS_PATH)
