"""
Logging helpers for site-publisher.

Progress messages double as the audit trail of a run, so INFO is shown
by default; -v adds every command line and -q keeps warnings only.
"""

from __future__ import annotations

import logging


def configure_logging(verbosity: int) -> None:
    """
    Configure the root logger based on a verbosity count.

    verbosity < 0  -> WARNING
    verbosity == 0 -> INFO
    verbosity >= 1 -> DEBUG
    """

    if verbosity < 0:
        level = logging.WARNING
    elif verbosity == 0:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
