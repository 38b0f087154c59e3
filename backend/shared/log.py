"""
Logging setup for entry points.

Modules log through ``logging.getLogger(__name__)``; only entry points
(the terminal client and the API runner) install handlers.
"""

import logging
from typing import Optional

from rich.logging import RichHandler

from .config import get_settings


def configure_logging(level: Optional[str] = None) -> None:
    """Route all log records through a rich console handler."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
