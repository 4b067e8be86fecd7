"""Locate planning/roadmap markdown files for a project."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from projectwatch.models import DocFileInfo

logger = logging.getLogger("projectwatch.documentation")

# Root-level files, matched case-insensitively, in output order.
ROOT_DOC_NAMES = (
    "readme.md",
    "roadmap.md",
    "changelog.md",
    "todo.md",
    "plan.md",
    "planning.md",
    "tasks.md",
    "milestones.md",
    "progress.md",
)
DOC_DIR_NAMES = ("docs", "doc", "documentation", "planning", "plans", "roadmap", ".planning")
MARKDOWN_SUFFIXES = {".md", ".markdown"}
EXCLUDED_DIR_NAMES = {"node_modules", "target", "dist", "build", ".git", ".venv", "__pycache__"}
PARENT_PREFIX = "../"


def _is_markdown(path: Path) -> bool:
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def _walk_markdown(doc_dir: Path) -> list[Path]:
    found: list[Path] = []
    for root, dirs, files in os.walk(doc_dir):
        dirs[:] = sorted(
            d for d in dirs
            if not d.startswith(".") and d not in EXCLUDED_DIR_NAMES
        )
        for name in files:
            if name.startswith("."):
                continue
            path = Path(root) / name
            if _is_markdown(path) and path.is_file():
                found.append(path)
    return sorted(found)


def _root_files(project_root: Path) -> list[Path]:
    by_name: dict[str, Path] = {}
    for entry in project_root.iterdir():
        if entry.is_file():
            by_name.setdefault(entry.name.lower(), entry)
    return [by_name[name] for name in ROOT_DOC_NAMES if name in by_name]


def _doc_dirs(base: Path) -> list[Path]:
    return [base / name for name in DOC_DIR_NAMES if (base / name).is_dir()]


def _relative(path: Path, base: Path) -> str:
    return path.relative_to(base).as_posix()


def find_doc_files(project_root: Path | str, include_parent: bool = True) -> list[DocFileInfo]:
    """Return the documentation files for a project root.

    Order is root files, then documentation directories, then (one level up,
    for monorepo packages) the parent's documentation directories with a
    ``../`` prefix on their relative paths.
    """
    root = Path(project_root).expanduser()
    if not root.is_dir():
        raise FileNotFoundError(f"Project path not found: {root}")
    root = root.resolve()

    seen: set[Path] = set()
    results: list[DocFileInfo] = []

    def _add(path: Path, relative_path: str) -> None:
        resolved = path.resolve()
        if resolved in seen:
            return
        seen.add(resolved)
        results.append(DocFileInfo(path=str(resolved), name=path.name, relative_path=relative_path))

    for path in _root_files(root):
        _add(path, path.name)

    for doc_dir in _doc_dirs(root):
        for path in _walk_markdown(doc_dir):
            _add(path, _relative(path, root))

    parent = root.parent
    if include_parent and parent != root:
        for doc_dir in _doc_dirs(parent):
            if doc_dir.resolve() == root:
                continue
            for path in _walk_markdown(doc_dir):
                _add(path, PARENT_PREFIX + _relative(path, parent))

    logger.debug("Discovered %d documentation files under %s", len(results), root)
    return results
