import logging
import sys


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure root logging with a single stderr handler.

    Call this once, early in the application lifespan. Existing root
    handlers are replaced so repeated startups (tests, reloads) don't
    duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    # uvicorn installs its own handlers; let its records reach ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
        logging.getLogger(name).propagate = True

    logging.captureWarnings(True)
