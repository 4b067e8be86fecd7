"""Aggregate per-document roadmap phases into one ProjectDocumentation."""
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Iterable, Sequence

from projectwatch import config
from projectwatch.models import DocFileInfo, Phase, ProjectDocumentation
from projectwatch.observability import record_ingestion, record_parser_failure, start_span
from projectwatch.parsers.roadmap import count_steps, parse_document

logger = logging.getLogger("projectwatch.documentation")


class DocumentReadError(RuntimeError):
    """Raised when a discovered document cannot be read."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Failed to read documentation file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def read_document(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(str(path), str(exc)) from exc


def overall_progress(phases: Iterable[Phase]) -> float:
    """Completed over total steps across every phase, weighted by step count."""
    completed = 0
    total = 0
    for phase in phases:
        done, count = count_steps(phase)
        completed += done
        total += count
    if total == 0:
        return 0.0
    return 100.0 * completed / total


def _merge(parsed: Iterable[tuple[str, list[Phase]]]) -> ProjectDocumentation:
    phases: list[Phase] = []
    source_files: list[str] = []
    for relative_path, doc_phases in parsed:
        if not doc_phases:
            logger.debug("No roadmap structure in %s", relative_path)
            continue
        source_files.append(relative_path)
        phases.extend(doc_phases)

    # sorted() is stable, so equal orders keep discovery order.
    phases = sorted(phases, key=lambda phase: phase.order)
    return ProjectDocumentation(
        phases=phases,
        source_files=source_files,
        progress_percentage=overall_progress(phases),
    )


def aggregate_documents(documents: Iterable[tuple[str, str, str]]) -> ProjectDocumentation:
    """Parse (text, display_name, relative_path) triples and merge the results."""
    return _merge(
        (relative_path, parse_document(text, display_name))
        for text, display_name, relative_path in documents
    )


def parse_project_docs(files: Sequence[DocFileInfo]) -> ProjectDocumentation:
    """Read every file (failing on the first unreadable one), then aggregate."""
    documents = [(read_document(info.path), info.name, info.relative_path) for info in files]
    return aggregate_documents(documents)


def _read_and_parse(info: DocFileInfo) -> tuple[str, list[Phase]]:
    return info.relative_path, parse_document(read_document(info.path), info.name)


async def parse_project_docs_async(
    files: Sequence[DocFileInfo],
    parallel: bool | None = None,
    project_id: str = "",
) -> ProjectDocumentation:
    """Async variant of parse_project_docs.

    With ``parallel`` each document is read and parsed in a worker thread.
    Results are merged in discovery order, so output does not depend on which
    task finishes first. The first read failure aborts the whole parse.
    """
    if parallel is None:
        parallel = config.DOC_PARALLEL_PARSE

    started = time.monotonic()
    with start_span("documentation.parse", {"project_id": project_id, "file_count": len(files)}):
        try:
            if parallel and len(files) > 1:
                parsed = await asyncio.gather(*(asyncio.to_thread(_read_and_parse, info) for info in files))
            else:
                parsed = [_read_and_parse(info) for info in files]
        except DocumentReadError as exc:
            logger.error("Documentation parse aborted: %s", exc)
            record_parser_failure("documentation", project_id=project_id)
            record_ingestion("documentation", "error", (time.monotonic() - started) * 1000, project_id=project_id)
            raise

        result = _merge(parsed)

    duration_ms = (time.monotonic() - started) * 1000
    record_ingestion("documentation", "success", duration_ms, project_id=project_id)
    logger.info(
        "Parsed %d documentation files (%d with roadmap structure, %d phases, %.1f%% complete) in %.0fms",
        len(files),
        len(result.source_files),
        len(result.phases),
        result.progress_percentage,
        duration_ms,
    )
    return result

