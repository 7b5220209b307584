"""
Resolve the free-form query segment of /threads/{id}/{query} into a
retrieval spec.

Accepted shapes, checked in this order (first match wins):

    l50     latest 50 responses
    42      response 42 only
    10-20   responses 10 through 20
    10-     response 10 to the newest
    -20     the oldest through response 20
    -       everything
    other   everything (unrecognised input is never rejected)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from threadboard.core.errors import InvalidQuery
from threadboard.core.identifiers import (
    MAX_IDENTIFIER,
    MAX_IDENTIFIER_DIGITS,
    is_ascii_digits,
    parse_response_number,
)
from threadboard.core.models import ResponseNumber
from threadboard.core.result import Err, Ok, Result

LATEST_PREFIX = "l"
RANGE_SEPARATOR = "-"


@dataclass(frozen=True)
class All:
    def describe(self) -> str:
        return "all"


@dataclass(frozen=True)
class Latest:
    count: int

    def describe(self) -> str:
        return f"latest {self.count}"


@dataclass(frozen=True)
class Single:
    number: ResponseNumber

    def describe(self) -> str:
        return f"response {self.number}"


@dataclass(frozen=True)
class Range:
    start: Optional[ResponseNumber] = None
    end: Optional[ResponseNumber] = None

    @property
    def is_inverted(self) -> bool:
        return (
            self.start is not None
            and self.end is not None
            and self.start > self.end
        )

    def describe(self) -> str:
        start = "" if self.start is None else self.start
        end = "" if self.end is None else self.end
        return f"range {start}-{end}"


RetrievalSpec = Union[All, Latest, Single, Range]

ALL = All()


def _classify_latest(segment: str) -> Optional[Result[RetrievalSpec, InvalidQuery]]:
    if not segment.startswith(LATEST_PREFIX):
        return None
    digits = segment[len(LATEST_PREFIX):]
    if not is_ascii_digits(digits):
        return None
    significant = digits.lstrip("0")
    if len(significant) > MAX_IDENTIFIER_DIGITS:
        return Ok(Latest(MAX_IDENTIFIER))
    # l0 is a valid, empty request
    return Ok(Latest(min(int(significant or "0"), MAX_IDENTIFIER)))


def _classify_single(segment: str) -> Optional[Result[RetrievalSpec, InvalidQuery]]:
    if not is_ascii_digits(segment):
        return None
    number = parse_response_number(segment)
    if number.is_err():
        return Err(InvalidQuery(segment))
    return Ok(Single(number.value))


def _classify_range(segment: str) -> Optional[Result[RetrievalSpec, InvalidQuery]]:
    if segment.count(RANGE_SEPARATOR) != 1:
        return None

    start_raw, end_raw = segment.split(RANGE_SEPARATOR)
    for side in (start_raw, end_raw):
        if side and not is_ascii_digits(side):
            return None

    if not start_raw and not end_raw:
        return Ok(ALL)

    bounds = []
    for side in (start_raw, end_raw):
        if not side:
            bounds.append(None)
            continue
        number = parse_response_number(side)
        if number.is_err():
            return Err(InvalidQuery(segment))
        bounds.append(number.value)

    return Ok(Range(start=bounds[0], end=bounds[1]))


_RULES = (_classify_latest, _classify_single, _classify_range)


def classify(segment: Optional[str]) -> Result[RetrievalSpec, InvalidQuery]:
    if not segment:
        return Ok(ALL)

    for rule in _RULES:
        matched = rule(segment)
        if matched is not None:
            return matched

    return Ok(ALL)


def is_recognised(segment: Optional[str]) -> bool:
    """False when classify() fell back to ALL for input it did not understand."""
    if not segment or segment == RANGE_SEPARATOR:
        return True
    return any(rule(segment) is not None for rule in _RULES)
