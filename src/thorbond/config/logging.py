"""Logging setup for the thorbond command line."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from typing import TextIO

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# These log every request at INFO; a reconciliation batch would drown the output.
TRANSPORT_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def configure_logging(
    *, verbose: bool = False, force: bool = False, stream: TextIO | None = None
) -> None:
    """Send log records to stderr so command output on stdout stays parseable.

    ``verbose`` lowers the threshold to DEBUG, including the HTTP transport
    loggers, which otherwise only report warnings.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=stream or sys.stderr,
        force=force,
    )
    transport_level = logging.DEBUG if verbose else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
