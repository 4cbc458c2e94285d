"""
portal/cli/logging_setup.py

Configures CLI logging so:
- Sanitized JSON remains on stdout.
- Diagnostics/trace/debug go to stderr via logging.
- quiet suppresses stderr chatter (ERROR only).
- trace enables DEBUG (bound/truncation events from the traversal).
"""

from __future__ import annotations

import logging
import sys


def setup_cli_logging(*, trace: bool = False, quiet: bool = False) -> None:
    if quiet:
        level = logging.ERROR
    elif trace:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root = logging.getLogger()

    # Remove existing handlers to avoid duplicate logs in pytest runs
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))

    root.addHandler(handler)
    root.setLevel(level)
