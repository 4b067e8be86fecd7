"""projectwatch FastAPI backend — main application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projectwatch import config
from projectwatch.routers.documentation import documentation_router
from projectwatch.routers.projects import projects_router
from projectwatch.project_manager import project_manager
from projectwatch.observability import initialize as initialize_observability, shutdown as shutdown_observability

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("projectwatch")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("projectwatch backend starting up")
    initialize_observability(app)
    active = project_manager.get_active_project()
    if active:
        logger.info("Active project: %s (%s)", active.name, active.path)
    else:
        logger.info("No projects registered yet")

    yield

    logger.info("projectwatch backend shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="projectwatch API",
    description="Roadmap documentation parsing for the projectwatch dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS — allow the desktop/web frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:1420",
        "tauri://localhost",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router)
app.include_router(documentation_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "projects": len(project_manager.list_projects()),
    }


def run() -> None:
    import uvicorn

    uvicorn.run("projectwatch.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
