"""
Display-side derivations computed on every read: sage flag, author name
fallback and the board's timestamp format.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence

from threadboard.core.models import DisplayResponse, Response

SAGE_TOKEN = "sage"

# Timestamps are always shown in JST, whatever the server's TZ is.
JST = timezone(timedelta(hours=9), name="JST")

WEEKDAYS = {
    "ja": ("日", "月", "火", "水", "木", "金", "土"),
    "en": ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"),
}
DEFAULT_WEEKDAY_LANGUAGE = "ja"


def is_sage(mail: Optional[str]) -> bool:
    if mail is None:
        return False
    return mail.strip().lower() == SAGE_TOKEN


def display_author_name(author_name: Optional[str], default_name: str) -> str:
    if not author_name:
        return default_name
    return author_name


def _language_tags(accept_language: str) -> List[str]:
    weighted = []
    for position, part in enumerate(accept_language.split(",")):
        fields = part.strip().split(";")
        tag = fields[0].strip().lower()
        if not tag:
            continue

        quality = 1.0
        for param in fields[1:]:
            name, _, value = param.strip().partition("=")
            if name.strip() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0

        if quality > 0:
            weighted.append((-quality, position, tag))

    return [tag for _, _, tag in sorted(weighted)]


def weekday_language(accept_language: Optional[str]) -> str:
    if not accept_language:
        return DEFAULT_WEEKDAY_LANGUAGE

    for tag in _language_tags(accept_language):
        primary = tag.split("-")[0]
        if primary in WEEKDAYS:
            return primary

    return DEFAULT_WEEKDAY_LANGUAGE


def format_timestamp(instant: datetime, accept_language: Optional[str] = None) -> str:
    """
    Format as ``YYYY/MM/DD(曜) HH:MM:SS.ff`` in JST.

    Naive datetimes are taken to be UTC. Milliseconds are cut to their first
    two digits, never rounded. The language hint only picks the weekday table.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(JST)

    weekdays = WEEKDAYS[weekday_language(accept_language)]
    # isoweekday(): Monday=1 .. Sunday=7, the table starts on Sunday
    weekday = weekdays[local.isoweekday() % 7]
    centiseconds = f"{local.microsecond // 1000:03d}"[:2]

    return (
        f"{local.year:04d}/{local.month:02d}/{local.day:02d}({weekday}) "
        f"{local.hour:02d}:{local.minute:02d}:{local.second:02d}.{centiseconds}"
    )


def derive_display_response(
    response: Response,
    default_name: str,
    accept_language: Optional[str] = None,
) -> DisplayResponse:
    return DisplayResponse(
        response=response,
        is_sage=is_sage(response.mail),
        display_author_name=display_author_name(response.author_name, default_name),
        formatted_timestamp=format_timestamp(response.posted_at, accept_language),
    )


def derive_display_responses(
    responses: Iterable[Response],
    default_name: str,
    accept_language: Optional[str] = None,
) -> Sequence[DisplayResponse]:
    # Input order is kept as-is; the store already returns ascending numbers.
    return tuple(
        derive_display_response(response, default_name, accept_language)
        for response in responses
    )
