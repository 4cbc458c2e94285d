"""
CLI entrypoint for portal-sanitize.
Reads a JSON document, applies the same response sanitization as the API for a
given role, and prints the result as JSON.

JSON output goes to stdout via oprint().
Diagnostics/trace/debug go to stderr via logging.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from portal.cli.logging_setup import setup_cli_logging
from portal.shared.security import (
    ANONYMOUS_ROLE,
    SanitizePolicy,
    Sanitizer,
    TraversalContext,
    is_admin_bypass,
)

logger = logging.getLogger("portal.cli")

EXIT_BAD_INPUT = 2


def oprint(*args, **kwargs) -> None:
    """
    User-facing output printer (stdout).
    """
    try:
        print(*args, file=sys.stdout, flush=True, **kwargs)
    except BrokenPipeError:
        raise SystemExit(0)


def build_parser() -> argparse.ArgumentParser:
    defaults = SanitizePolicy()
    p = argparse.ArgumentParser(
        prog="portal-sanitize",
        description="Remove secrets and mask PII in a JSON document for a caller role.",
    )
    p.add_argument("--role", default=None, help="Caller role (e.g. STUDENT, TEACHER, SYSTEM_ADMIN).")
    p.add_argument("--input", "-i", default="-", help="JSON file to read ('-' for stdin).")
    p.add_argument("--indent", type=int, default=None, help="Pretty-print with this indent.")
    p.add_argument("--max-depth", type=int, default=defaults.max_depth)
    p.add_argument("--max-object-keys", type=int, default=defaults.max_object_keys)
    p.add_argument("--max-array-length", type=int, default=defaults.max_array_length)

    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("--trace", action="store_true", help="Emit DEBUG logs to stderr.")
    verbosity.add_argument("--quiet", action="store_true", help="Only ERROR logs to stderr.")
    return p


def _read_document(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as fh:
        return json.load(fh)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_cli_logging(trace=args.trace, quiet=args.quiet)

    try:
        document = _read_document(args.input)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("could not read JSON input %s: %s", args.input, e)
        return EXIT_BAD_INPUT

    policy = SanitizePolicy(
        max_depth=args.max_depth,
        max_object_keys=args.max_object_keys,
        max_array_length=args.max_array_length,
    )
    role = None if is_admin_bypass(args.role) else (args.role or ANONYMOUS_ROLE)

    ctx = TraversalContext()
    result = Sanitizer(policy).sanitize(document, role, context=ctx)
    logger.debug(
        "sanitized role=%s keys=%s elements=%s truncations=%s depth_limit_hits=%s",
        args.role or "<anonymous>",
        ctx.keys_processed,
        ctx.elements_processed,
        ctx.truncations,
        ctx.depth_limit_hits,
    )

    oprint(json.dumps(result, indent=args.indent, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
