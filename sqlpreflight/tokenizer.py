"""Tokenizer for semicolon-delimited keyword/value connection strings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .errors import MalformedConnectionStringError

LOG = logging.getLogger(__name__)

QUOTE_CHARS = ("'", '"')

KEY_ALIASES: dict[str, str] = {
    "user id": "user",
    "user": "user",
    "initial catalog": "database",
    "database": "database",
    "server": "server",
    "data source": "server",
    "address": "server",
    "addr": "server",
    "network address": "server",
    "password": "password",
    "pwd": "password",
    "authentication": "authentication",
}

_KEY_PATTERN = re.compile(r"^[\w\s]+$")


@dataclass(frozen=True, slots=True)
class ConnectionStringPair:
    """Single keyword/value pair as found in the raw string."""

    key: str
    raw_key: str
    value: str
    span: tuple[int, int]


def normalize_key(key: str) -> str:
    """Fold a keyword to its canonical name (case and whitespace insensitive)."""

    folded = " ".join(key.split()).lower()
    return KEY_ALIASES.get(folded, folded)


def tokenize(raw: str) -> list[ConnectionStringPair]:
    """Split ``raw`` into pairs, honouring the quoting rules for values.

    Values are either bare (no quotes, no semicolons) or fully enclosed in
    single or double quotes, with the enclosing quote doubled to escape it.
    Any violation raises :class:`MalformedConnectionStringError`.
    """

    pairs: list[ConnectionStringPair] = []
    length = len(raw)
    pos = 0
    while pos < length:
        if raw[pos] == ";" or raw[pos].isspace():
            pos += 1
            continue
        separator = raw.find("=", pos)
        if separator == -1:
            raise MalformedConnectionStringError()
        raw_key = raw[pos:separator]
        if not _KEY_PATTERN.match(raw_key):
            raise MalformedConnectionStringError()
        value, span, pos = _read_value(raw, separator + 1)
        pairs.append(
            ConnectionStringPair(
                key=normalize_key(raw_key),
                raw_key=raw_key.strip(),
                value=value,
                span=span,
            )
        )
    LOG.debug("Tokenized connection string", extra={"keys": [pair.key for pair in pairs]})
    return pairs


def parse_connection_string(raw: str) -> dict[str, str]:
    """Return the normalized key/value map; later duplicates win."""

    return {pair.key: pair.value for pair in tokenize(raw)}


def mask_connection_string(raw: str, keys: Iterable[str] = ("password",), mask: str = "***") -> str:
    """Re-render ``raw`` with the values of ``keys`` replaced by ``mask``."""

    wanted = {normalize_key(key) for key in keys}
    masked = raw
    for pair in reversed(tokenize(raw)):
        if pair.key not in wanted:
            continue
        start, end = pair.span
        masked = masked[:start] + mask + masked[end:]
    return masked


def _read_value(raw: str, start: int) -> tuple[str, tuple[int, int], int]:
    length = len(raw)
    pos = start
    while pos < length and raw[pos] != ";" and raw[pos].isspace():
        pos += 1
    if pos < length and raw[pos] in QUOTE_CHARS:
        return _read_quoted_value(raw, pos)
    end = raw.find(";", pos)
    if end == -1:
        end = length
    text = raw[pos:end]
    if any(quote in text for quote in QUOTE_CHARS):
        raise MalformedConnectionStringError()
    value = text.strip()
    return value, (pos, pos + len(text.rstrip())), end


def _read_quoted_value(raw: str, start: int) -> tuple[str, tuple[int, int], int]:
    length = len(raw)
    quote = raw[start]
    chars: list[str] = []
    pos = start + 1
    while True:
        if pos >= length:
            raise MalformedConnectionStringError()
        char = raw[pos]
        if char == quote:
            if pos + 1 < length and raw[pos + 1] == quote:
                chars.append(quote)
                pos += 2
                continue
            pos += 1
            break
        chars.append(char)
        pos += 1
    end = pos
    # Only whitespace may sit between the closing quote and the next separator.
    while pos < length and raw[pos] != ";":
        if not raw[pos].isspace():
            raise MalformedConnectionStringError()
        pos += 1
    return "".join(chars), (start, end), pos


__all__ = [
    "ConnectionStringPair",
    "KEY_ALIASES",
    "QUOTE_CHARS",
    "mask_connection_string",
    "normalize_key",
    "parse_connection_string",
    "tokenize",
]
