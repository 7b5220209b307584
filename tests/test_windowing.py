"""Tests for display derivations: sage, author name and timestamps."""

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from threadboard.core.models import Response
from threadboard.core.windowing import (
    derive_display_responses,
    display_author_name,
    format_timestamp,
    is_sage,
    weekday_language,
)

from conftest import BASE_TIME


class TestIsSage:
    @pytest.mark.parametrize("mail", ["sage", "SAGE", " sage ", "Sage\t"])
    def test_sage(self, mail):
        assert is_sage(mail) is True

    @pytest.mark.parametrize("mail", ["mail@example.com", "", "age", "sage sage", "sagex", None])
    def test_not_sage(self, mail):
        assert is_sage(mail) is False


class TestDisplayAuthorName:
    def test_empty_uses_default(self):
        assert display_author_name("", "名無しさん") == "名無しさん"

    def test_none_uses_default(self):
        assert display_author_name(None, "名無しさん") == "名無しさん"

    def test_provided_name_kept(self):
        assert display_author_name("poster ◆abc", "名無しさん") == "poster ◆abc"


class TestFormatTimestamp:
    def test_board_format_in_jst(self):
        assert format_timestamp(BASE_TIME) == "2025/02/23(日) 08:41:28.90"

    def test_milliseconds_truncated_not_rounded(self):
        instant = datetime(2025, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)
        assert format_timestamp(instant).endswith("09:00:00.99")

    def test_small_milliseconds_zero_padded(self):
        instant = datetime(2025, 1, 1, 0, 0, 0, 5000, tzinfo=timezone.utc)
        assert format_timestamp(instant).endswith(".00")

    def test_date_rolls_over_into_jst(self):
        # 15:30 UTC on Saturday is 00:30 on Sunday in JST
        instant = datetime(2025, 3, 1, 15, 30, 0, tzinfo=timezone.utc)
        assert format_timestamp(instant) == "2025/03/02(日) 00:30:00.00"

    def test_naive_datetime_is_utc(self):
        naive = BASE_TIME.replace(tzinfo=None)
        assert format_timestamp(naive) == format_timestamp(BASE_TIME)

    def test_same_instant_from_other_offset(self):
        other = BASE_TIME.astimezone(timezone(timedelta(hours=-5)))
        assert format_timestamp(other) == format_timestamp(BASE_TIME)

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_independent_of_process_timezone(self):
        original = os.environ.get("TZ")
        outputs = []
        try:
            for tz in ("UTC", "America/New_York", "Asia/Tokyo"):
                os.environ["TZ"] = tz
                time.tzset()
                outputs.append(format_timestamp(BASE_TIME))
        finally:
            if original is None:
                os.environ.pop("TZ", None)
            else:
                os.environ["TZ"] = original
            time.tzset()
        assert len(set(outputs)) == 1

    def test_english_weekday(self):
        assert format_timestamp(BASE_TIME, "en-US,en;q=0.9") == "2025/02/23(Su) 08:41:28.90"

    def test_weekday_table_covers_week(self):
        weekdays = [
            format_timestamp(BASE_TIME + timedelta(days=offset), "en")[11:13]
            for offset in range(7)
        ]
        assert weekdays == ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]


class TestWeekdayLanguage:
    @pytest.mark.parametrize(
        "header, expected",
        [
            (None, "ja"),
            ("", "ja"),
            ("en", "en"),
            ("en-GB", "en"),
            ("ja-JP,ja;q=0.9,en;q=0.8", "ja"),
            ("fr, en;q=0.5", "en"),
            ("ja;q=0.1, en;q=0.8", "en"),
            ("de", "ja"),
            ("en;q=0", "ja"),
            ("en;q=abc", "ja"),
        ],
    )
    def test_pick(self, header, expected):
        assert weekday_language(header) == expected


class TestDeriveDisplayResponses:
    def _response(self, number, author_name="", mail=""):
        return Response(
            thread_id=7,
            response_number=number,
            author_name=author_name,
            mail=mail,
            posted_at=BASE_TIME,
            hash_id="abcd1234",
            content=f"body {number}",
        )

    def test_preserves_order(self):
        responses = [self._response(n) for n in (3, 4, 9, 12)]
        derived = derive_display_responses(responses, "名無しさん")
        assert [d.response_number for d in derived] == [3, 4, 9, 12]

    def test_derives_fields(self):
        derived = derive_display_responses(
            [self._response(1, author_name="", mail="SAGE"), self._response(2, author_name="bob")],
            "名無しさん",
        )
        assert derived[0].is_sage is True
        assert derived[0].display_author_name == "名無しさん"
        assert derived[0].formatted_timestamp == "2025/02/23(日) 08:41:28.90"
        assert derived[1].is_sage is False
        assert derived[1].display_author_name == "bob"

    def test_empty(self):
        assert derive_display_responses([], "名無しさん") == ()
