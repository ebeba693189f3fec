"""Tests for the preflight command."""

from __future__ import annotations

import io
import json
import logging
from typing import Iterator

import pytest

from sqlpreflight.cli import main
from sqlpreflight.redaction import LogRedactionFilter


@pytest.fixture(autouse=True)
def restore_root_filters() -> Iterator[None]:
    """Drop the redaction filters main() installs on the root logger."""

    yield
    root = logging.getLogger()
    for target in (root, *root.handlers):
        for installed in [f for f in target.filters if isinstance(f, LogRedactionFilter)]:
            target.removeFilter(installed)


def test_main_prints_summary_and_masks_password() -> None:
    out = io.StringIO()

    status = main(
        ["--connection-string", "Server=s;Database=db;User Id=u;Password='p;w'"],
        environ={},
        stream=out,
    )

    lines = out.getvalue().splitlines()
    assert status == 0
    assert lines[0] == "::add-mask::p;w"
    assert "server: s" in lines
    assert "database: db" in lines
    assert "authentication: sql-password" in lines
    assert "connection string: Server=s;Database=db;User Id=u;Password=***" in lines


def test_main_reads_connection_string_input() -> None:
    out = io.StringIO()
    environ = {
        "INPUT_CONNECTION-STRING": "Server=s;Database=db;Authentication=ActiveDirectoryPassword;User Id=u;Password=pw",
        "INPUT_TENANT-ID": "tid",
    }

    status = main(["--json"], environ=environ, stream=out)

    output = out.getvalue()
    assert status == 0
    assert "::add-mask::pw" in output
    assert "::add-mask::tid" in output
    payload = json.loads(output[output.index("{"):])
    assert payload["authentication"] == {
        "type": "azure-active-directory-password",
        "options": {"userName": "u", "password": "***", "tenantId": "***"},
    }
    assert payload["password"] == "***"


def test_main_reports_validation_errors() -> None:
    out = io.StringIO()

    status = main(["--connection-string", "Server=s;User Id=u;Password=p"], environ={}, stream=out)

    assert status == 1
    assert out.getvalue() == (
        "::error::Invalid connection string. Please ensure 'Database' or 'Initial Catalog' is provided in the "
        "connection string.\n"
    )


def test_main_keeps_error_on_one_line() -> None:
    out = io.StringIO()

    status = main(
        ["--connection-string", "Database=db;Authentication='Fake\n::warning::injected 100%'"],
        environ={},
        stream=out,
    )

    assert status == 1
    assert out.getvalue() == (
        "::error::Authentication type 'Fake%0A::warning::injected 100%25' is not supported.\n"
    )


def test_main_requires_a_connection_string() -> None:
    out = io.StringIO()

    status = main([], environ={}, stream=out)

    assert status == 2
    assert out.getvalue().startswith("::error::No connection string supplied")
