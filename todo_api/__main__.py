import uvicorn

from todo_api.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
