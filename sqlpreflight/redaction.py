"""Secret redaction sinks used while building connection configs."""

from __future__ import annotations

import logging
import sys
from typing import Protocol, TextIO, runtime_checkable

from .models import SECRET_MASK

_FORMATTER = logging.Formatter()

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def escape_command_data(value: str) -> str:
    """Encode ``value`` for use as workflow-command data so it stays on one line."""

    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


@runtime_checkable
class SecretMasker(Protocol):
    """Sink told about every secret value so it can scrub later output."""

    def mark_secret(self, value: str) -> None:
        """Register ``value`` as secret."""


class WorkflowCommandMasker:
    """Emits ``::add-mask::`` workflow commands so the runner hides values in its logs."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._masked: set[str] = set()

    def mark_secret(self, value: str) -> None:
        if not value or value in self._masked:
            return
        self._masked.add(value)
        stream = self._stream or sys.stdout
        stream.write(f"::add-mask::{escape_command_data(value)}\n")
        stream.flush()


class LogRedactionFilter(logging.Filter):
    """Logging filter that replaces every marked secret with a mask."""

    def __init__(self, mask: str = SECRET_MASK) -> None:
        super().__init__()
        self._mask = mask
        self._secrets: set[str] = set()

    @property
    def secrets(self) -> frozenset[str]:
        return frozenset(self._secrets)

    def mark_secret(self, value: str) -> None:
        if value:
            self._secrets.add(value)

    def redact(self, text: str) -> str:
        """Mask secrets in ``text``, longest first so overlapping values stay hidden."""

        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, self._mask)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        if record.exc_info and not record.exc_text:
            record.exc_text = _FORMATTER.formatException(record.exc_info)
        if record.exc_text:
            # Formatters reuse exc_text when exc_info is gone, so the traceback stays masked.
            record.exc_text = self.redact(record.exc_text)
            record.exc_info = None
        if record.stack_info:
            record.stack_info = self.redact(record.stack_info)
        for key, value in list(vars(record).items()):
            if key not in _RECORD_ATTRS and isinstance(value, str):
                setattr(record, key, self.redact(value))
        return True

    def install(self, logger: logging.Logger | None = None) -> None:
        """Attach the filter to ``logger`` (root by default) and its handlers."""

        target = logger if logger is not None else logging.getLogger()
        if self not in target.filters:
            target.addFilter(self)
        for handler in target.handlers:
            if self not in handler.filters:
                handler.addFilter(self)


class CompositeMasker:
    """Fans a secret out to several sinks."""

    def __init__(self, *maskers: SecretMasker) -> None:
        self._maskers: tuple[SecretMasker, ...] = maskers

    def mark_secret(self, value: str) -> None:
        for masker in self._maskers:
            masker.mark_secret(value)


__all__ = [
    "CompositeMasker",
    "LogRedactionFilter",
    "SecretMasker",
    "WorkflowCommandMasker",
    "escape_command_data",
]
