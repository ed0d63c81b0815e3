"""Rich-based logging configuration for taskboard.

Provides colored console output for local development with:
- Color-coded log levels (ERROR=red, WARNING=yellow, INFO=green, DEBUG=blue)
- Auto-detection of TTY so containers get plain text
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

TASKBOARD_THEME = Theme({
    "logging.level.debug": "blue",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "red bold",
    "logging.level.critical": "red bold reverse",
})


def is_tty() -> bool:
    """Check if stdout is a TTY (interactive terminal)."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def should_use_rich() -> bool:
    """Determine if Rich logging should be used.

    Returns True if:
    - TASKBOARD_RICH_LOGS=1 is set (force enable)
    - Running in a TTY and TASKBOARD_RICH_LOGS is not explicitly disabled
    """
    env_value = os.environ.get("TASKBOARD_RICH_LOGS", "").lower()

    if env_value in ("1", "true", "yes"):
        return True
    if env_value in ("0", "false", "no"):
        return False

    return is_tty()


def configure_logging(
    level: int | str = logging.INFO,
    force_rich: bool | None = None,
) -> None:
    """Configure logging with Rich console handler.

    Args:
        level: Logging level (default: INFO). Level names such as "DEBUG" are accepted.
        force_rich: Override auto-detection. None = auto-detect.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_rich = force_rich if force_rich is not None else should_use_rich()

    root = logging.getLogger()
    root.handlers.clear()

    if use_rich:
        console = Console(theme=TASKBOARD_THEME, stderr=True)
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=True,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        # stdout is reserved for the MCP stdio transport
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root.addHandler(handler)
    root.setLevel(level)

    # Silence noisy loggers
    for noisy in ("httpx", "httpcore", "websockets", "realtime", "hpack"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
