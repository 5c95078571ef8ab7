# api/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from .routers import skill_tree, tricks
from .database import graph_db_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # The driver is opened lazily by the first request that needs it
    graph_db_manager.close()


def create_app():
    app = FastAPI(
        title="Trickipedia Skill Tree API",
        description="Prerequisite graphs, layouts and completion tracking for trick skill trees.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Include routers with their default prefixes (used by tests)
    app.include_router(skill_tree.router)
    app.include_router(tricks.router)

    # Also expose the same routes under /api for the frontend
    api_prefix = "/api"
    app.include_router(skill_tree.router, prefix=api_prefix)
    app.include_router(tricks.router, prefix=api_prefix)

    return app

# For production, uvicorn can be told to use the factory: uvicorn api.main:create_app --factory
app = create_app()
