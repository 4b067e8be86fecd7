"""projectwatch backend configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default

# Repository root (one level up from projectwatch/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Project registry storage
PROJECTS_PATH = Path(os.getenv("PROJECTWATCH_PROJECTS_PATH", str(PROJECT_ROOT / "projects.json")))

# Documentation discovery / parsing
DOC_PARENT_LOOKUP = _env_bool("PROJECTWATCH_DOC_PARENT_LOOKUP", True)
DOC_PARALLEL_PARSE = _env_bool("PROJECTWATCH_DOC_PARALLEL_PARSE", True)

# Observability
OTEL_ENABLED = _env_bool("PROJECTWATCH_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("PROJECTWATCH_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("PROJECTWATCH_OTEL_SERVICE_NAME", "projectwatch-backend")
PROM_PORT = _env_int("PROJECTWATCH_PROM_PORT", 9464)

# Server settings
HOST = os.getenv("PROJECTWATCH_HOST", "127.0.0.1")
PORT = _env_int("PROJECTWATCH_PORT", 8000)

# CORS
FRONTEND_ORIGIN = os.getenv("PROJECTWATCH_FRONTEND_ORIGIN", "http://localhost:1420")
