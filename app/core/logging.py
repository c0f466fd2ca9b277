import logging
import sys

from app.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def setup_logging() -> None:
    """Attach a stdout handler to the root logger (once)."""
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())

    if not any(getattr(h, "_marketplace", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._marketplace = True
        root.addHandler(handler)

    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
