from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def configure_logging(verbosity: int = 0, console: Console | None = None) -> None:
    """Install a rich handler on the root logger.

    ``verbosity`` counts ``-v`` flags: 0 is WARNING, 1 is INFO, 2 or more is DEBUG.
    """
    level = _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbosity >= 2,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
