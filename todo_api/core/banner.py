import logging

from fastapi import FastAPI
from sqlalchemy.engine import make_url

from todo_api.core.config import Settings

logger = logging.getLogger(__name__)


def build_startup_banner(app: FastAPI, settings: Settings) -> str:
    """Render access URLs, database and the registered API routes."""
    base_url = f"http://{settings.host}:{settings.port}"
    # OpenAPI paths also cover the routes of included routers
    routes = sorted(
        (path, ", ".join(sorted(method.upper() for method in operations)))
        for path, operations in app.openapi()["paths"].items()
    )
    width = max((len(methods) for _, methods in routes), default=0)

    lines = [
        "",
        "=" * 49,
        f"{settings.app_name} {settings.app_version} started",
        "=" * 49,
        "",
        f"API docs:  {base_url}{app.docs_url or ''}",
        f"Database:  {make_url(settings.database_url).render_as_string(hide_password=True)}",
        "",
        "Available endpoints:",
    ]
    lines.extend(f"  {methods:<{width}}  {path}" for path, methods in routes)
    lines.extend(["", "=" * 49])
    return "\n".join(lines)


def log_startup_banner(app: FastAPI, settings: Settings) -> None:
    logger.info(build_startup_banner(app, settings))
