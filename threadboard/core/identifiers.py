"""Strict parsing of thread ids and response numbers taken from the URL path."""

from __future__ import annotations

from threadboard.core.errors import InvalidIdentifier
from threadboard.core.models import ResponseNumber, ThreadId
from threadboard.core.result import Err, Ok, Result

# Upper bound of a PostgreSQL BIGINT column.
MAX_IDENTIFIER = 2**63 - 1
MAX_IDENTIFIER_DIGITS = len(str(MAX_IDENTIFIER))


def is_ascii_digits(raw: str) -> bool:
    # str.isdigit() also accepts characters such as "²" or "٣".
    return bool(raw) and all("0" <= ch <= "9" for ch in raw)


def _parse_positive(raw: str, what: str) -> Result[int, InvalidIdentifier]:
    if not isinstance(raw, str) or not is_ascii_digits(raw):
        return Err(InvalidIdentifier(raw, what))

    significant = raw.lstrip("0")
    # int() rejects digit strings over 4300 characters
    if len(significant) > MAX_IDENTIFIER_DIGITS:
        return Err(InvalidIdentifier(raw, what))

    value = int(significant or "0")
    if value < 1 or value > MAX_IDENTIFIER:
        return Err(InvalidIdentifier(raw, what))

    return Ok(value)


def parse_thread_id(raw: str) -> Result[ThreadId, InvalidIdentifier]:
    parsed = _parse_positive(raw, "thread id")
    if parsed.is_err():
        return parsed
    return Ok(ThreadId(parsed.value))


def parse_response_number(raw: str) -> Result[ResponseNumber, InvalidIdentifier]:
    parsed = _parse_positive(raw, "response number")
    if parsed.is_err():
        return parsed
    return Ok(ResponseNumber(parsed.value))
