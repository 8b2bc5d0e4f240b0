import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(*, level: Optional[str] = None, fmt: str = DEFAULT_FORMAT) -> None:
    """Configure root logging once; later calls only adjust the level."""

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=fmt)
    root_logger.setLevel(level)

    # SQLAlchemy echoes every statement at INFO
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
