from contextlib import asynccontextmanager
from fastapi import FastAPI

from todo_api.core.banner import log_startup_banner
from todo_api.core.config import get_settings
from todo_api.core.error_handlers import register_exception_handlers
from todo_api.core.logging_setup import setup_logging
from todo_api.database import create_db_and_tables, engine
from todo_api.routers import tasks

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    await create_db_and_tables()
    log_startup_banner(app, settings)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Task management REST API with validation, search and statistics",
    swagger_ui_parameters={"displayRequestDuration": True},
    version=settings.app_version,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include routers
app.include_router(tasks.router)


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs": "/docs",
        "version": settings.app_version,
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
