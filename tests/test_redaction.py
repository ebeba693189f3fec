"""Tests for the secret redaction sinks."""

from __future__ import annotations

import io
import logging

import pytest

from sqlpreflight.redaction import (
    CompositeMasker,
    LogRedactionFilter,
    SecretMasker,
    WorkflowCommandMasker,
    escape_command_data,
)


def test_workflow_masker_emits_add_mask_once() -> None:
    stream = io.StringIO()
    masker = WorkflowCommandMasker(stream)

    masker.mark_secret("hunter2")
    masker.mark_secret("hunter2")
    masker.mark_secret("")

    assert stream.getvalue() == "::add-mask::hunter2\n"


def test_workflow_masker_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    WorkflowCommandMasker().mark_secret("s3cret")

    assert capsys.readouterr().out == "::add-mask::s3cret\n"


def test_escape_command_data() -> None:
    assert escape_command_data("a%b\r\nc") == "a%25b%0D%0Ac"
    assert escape_command_data("plain") == "plain"


def test_workflow_masker_keeps_multiline_secret_on_one_line() -> None:
    stream = io.StringIO()
    masker = WorkflowCommandMasker(stream)

    masker.mark_secret("line1\nleaked-half")
    masker.mark_secret("ab%0Acd")

    assert stream.getvalue() == "::add-mask::line1%0Aleaked-half\n::add-mask::ab%250Acd\n"


def test_log_filter_scrubs_messages_and_args(caplog: pytest.LogCaptureFixture) -> None:
    log_filter = LogRedactionFilter()
    log_filter.mark_secret("pa;ss")
    logger = logging.getLogger("sqlpreflight.tests.redaction")
    logger.addFilter(log_filter)

    try:
        with caplog.at_level(logging.INFO, logger=logger.name):
            logger.info("connecting with %s", "pa;ss")
            logger.info("nothing to hide")
    finally:
        logger.removeFilter(log_filter)

    assert [record.getMessage() for record in caplog.records] == ["connecting with ***", "nothing to hide"]


def test_log_filter_scrubs_tracebacks_and_extra(caplog: pytest.LogCaptureFixture) -> None:
    log_filter = LogRedactionFilter()
    log_filter.mark_secret("hunter2")
    logger = logging.getLogger("sqlpreflight.tests.traceback")
    logger.addFilter(log_filter)

    try:
        with caplog.at_level(logging.INFO, logger=logger.name):
            try:
                raise ValueError("bad password hunter2")
            except ValueError:
                logger.exception("login failed", extra={"detail": "hunter2", "attempts": 3})
    finally:
        logger.removeFilter(log_filter)

    (record,) = caplog.records
    assert record.exc_info is None
    assert "bad password ***" in record.exc_text
    assert record.detail == "***"
    assert record.attempts == 3
    assert "hunter2" not in caplog.text


def test_log_filter_masks_longest_secret_first() -> None:
    log_filter = LogRedactionFilter(mask="#")
    log_filter.mark_secret("abc")
    log_filter.mark_secret("abcdef")

    assert log_filter.redact("x abcdef abc") == "x # #"
    assert log_filter.secrets == frozenset({"abc", "abcdef"})


def test_log_filter_install_attaches_to_handlers() -> None:
    logger = logging.getLogger("sqlpreflight.tests.install")
    handler = logging.NullHandler()
    logger.addHandler(handler)
    log_filter = LogRedactionFilter()

    try:
        log_filter.install(logger)
        log_filter.install(logger)

        assert logger.filters.count(log_filter) == 1
        assert handler.filters.count(log_filter) == 1
    finally:
        logger.removeHandler(handler)
        logger.removeFilter(log_filter)


def test_composite_masker_fans_out() -> None:
    stream = io.StringIO()
    log_filter = LogRedactionFilter()
    masker = CompositeMasker(WorkflowCommandMasker(stream), log_filter)

    masker.mark_secret("token")

    assert isinstance(masker, SecretMasker)
    assert stream.getvalue() == "::add-mask::token\n"
    assert log_filter.secrets == frozenset({"token"})
