"""Preflight command that validates a connection string inside a pipeline step."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Mapping, Sequence, TextIO

from .config import SqlConnectionConfig
from .errors import ConnectionStringError
from .inputs import EnvironmentInputProvider
from .redaction import CompositeMasker, LogRedactionFilter, WorkflowCommandMasker, escape_command_data

LOG = logging.getLogger(__name__)

CONNECTION_STRING_INPUT = "connection-string"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlpreflight",
        description="Validate a SQL Server connection string and print the resolved configuration.",
    )
    parser.add_argument(
        "--connection-string",
        help=f"Connection string to validate (defaults to the '{CONNECTION_STRING_INPUT}' step input).",
    )
    parser.add_argument("--json", action="store_true", help="Print the driver configuration as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> int:
    """Run the preflight check; returns the process exit status."""

    args = build_parser().parse_args(argv)
    out = stream or sys.stdout
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    log_filter = LogRedactionFilter()
    log_filter.install()

    inputs = EnvironmentInputProvider(environ)
    raw = args.connection_string or inputs.get_input(CONNECTION_STRING_INPUT)
    if not raw:
        print(
            f"::error::No connection string supplied via --connection-string or the "
            f"'{CONNECTION_STRING_INPUT}' input.",
            file=out,
        )
        return 2

    masker = CompositeMasker(WorkflowCommandMasker(out), log_filter)
    try:
        sql_config = SqlConnectionConfig(raw, inputs=inputs, masker=masker)
    except ConnectionStringError as exc:
        LOG.debug("Connection string rejected", extra={"error": type(exc).__name__})
        print(f"::error::{escape_command_data(str(exc))}", file=out)
        return 1

    masked = sql_config.config.masked()
    if args.json:
        print(json.dumps(masked.to_driver_config(), indent=2, sort_keys=True), file=out)
        return 0
    print(f"server: {masked.server or '(default)'}", file=out)
    print(f"database: {masked.database}", file=out)
    print(f"authentication: {sql_config.auth_mode.value}", file=out)
    print(f"connection string: {sql_config.redacted_connection_string}", file=out)
    return 0


__all__ = ["build_parser", "main"]
