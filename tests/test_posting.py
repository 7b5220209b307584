"""Tests for thread creation and response posting."""

from datetime import datetime, timezone

import pytest

from threadboard.core.errors import InvalidIdentifier, InvalidPost, ThreadNotFound
from threadboard.core.query import ALL
from threadboard.services.posting import (
    compute_hash_id,
    create_thread,
    make_tripcode,
    post_response,
    resolve_author_name,
)

from conftest import BASE_TIME, make_post


def post(store, logger, thread_id, **kwargs):
    fields = {"name": "", "mail": "", "content": "hi", "client_address": "10.0.0.1", "salt": "s"}
    fields.update(kwargs)
    return post_response(store, logger, thread_id_raw=str(thread_id), now=BASE_TIME, **fields)


class TestAuthorName:
    def test_plain(self):
        assert resolve_author_name("  bob ") == "bob"

    def test_empty(self):
        assert resolve_author_name("") == ""
        assert resolve_author_name(None) == ""

    def test_tripcode(self):
        assert resolve_author_name("bob#secret") == f"bob ◆{make_tripcode('secret')}"

    def test_tripcode_is_stable(self):
        assert make_tripcode("secret") == make_tripcode("secret")
        assert make_tripcode("secret") != make_tripcode("other")
        assert len(make_tripcode("secret")) == 12

    def test_typed_trip_mark_is_replaced(self):
        assert resolve_author_name("◆fake") == "◇fake"

    def test_empty_key_is_ignored(self):
        assert resolve_author_name("bob#") == "bob"


class TestHashId:
    def test_same_day_same_id(self):
        later = datetime(2025, 2, 23, 14, 0, tzinfo=timezone.utc)  # 23:00 JST
        assert compute_hash_id("10.0.0.1", 1, BASE_TIME, "s") == compute_hash_id("10.0.0.1", 1, later, "s")

    def test_changes_with_jst_day(self):
        next_day = datetime(2025, 2, 23, 15, 0, tzinfo=timezone.utc)  # 00:00 JST on the 24th
        assert compute_hash_id("10.0.0.1", 1, BASE_TIME, "s") != compute_hash_id("10.0.0.1", 1, next_day, "s")

    def test_changes_with_address_and_salt(self):
        base = compute_hash_id("10.0.0.1", 1, BASE_TIME, "s")
        assert base != compute_hash_id("10.0.0.2", 1, BASE_TIME, "s")
        assert base != compute_hash_id("10.0.0.1", 1, BASE_TIME, "t")
        assert len(base) == 8

    def test_changes_with_thread(self):
        assert compute_hash_id("10.0.0.1", 1, BASE_TIME, "s") != compute_hash_id("10.0.0.1", 2, BASE_TIME, "s")

    def test_same_poster_differs_across_threads(self, store, logger):
        first = store.create_thread("one", make_post("first"))
        second = store.create_thread("two", make_post("first"))

        a = post(store, logger, first.thread_id)
        b = post(store, logger, second.thread_id)
        again = post(store, logger, first.thread_id)

        assert a.value.hash_id != b.value.hash_id
        assert a.value.hash_id == again.value.hash_id


class TestCreateThread:
    def test_creates_with_first_response(self, store, logger):
        result = create_thread(
            store, logger,
            title=" New thread ", name="bob", mail="", content="first",
            client_address="10.0.0.1", salt="s", now=BASE_TIME,
        )
        assert result.is_ok()
        assert result.value.title == "New thread"
        _, responses = store.fetch_responses(result.value.thread_id, ALL)
        assert [r.content for r in responses] == ["first"]

    def test_first_response_hash_uses_new_thread_id(self, store, logger):
        store.create_thread("existing", make_post("first"))
        result = create_thread(
            store, logger,
            title="New thread", name="", mail="", content="first",
            client_address="10.0.0.1", salt="s", now=BASE_TIME,
        )
        thread_id = result.value.thread_id
        assert thread_id == 2
        _, responses = store.fetch_responses(thread_id, ALL)
        assert responses[0].hash_id == compute_hash_id("10.0.0.1", thread_id, BASE_TIME, "s")

    @pytest.mark.parametrize("title", ["", "   ", "x" * 101])
    def test_rejects_bad_title(self, store, logger, title):
        result = create_thread(
            store, logger,
            title=title, name="", mail="", content="first",
            client_address="10.0.0.1", salt="s",
        )
        assert isinstance(result.error, InvalidPost)


class TestPostResponse:
    def test_appends(self, store, logger, thread_of_30):
        result = post(store, logger, thread_of_30, name="bob#key", mail=" sage ")
        assert result.is_ok()
        response = result.value
        assert response.response_number == 31
        assert response.author_name.startswith("bob ◆")
        assert response.mail == "sage"
        assert response.hash_id == compute_hash_id("10.0.0.1", thread_of_30, BASE_TIME, "s")

    @pytest.mark.parametrize("content", ["", "   \n"])
    def test_rejects_blank_content(self, store, logger, thread_of_30, content):
        result = post(store, logger, thread_of_30, content=content)
        assert isinstance(result.error, InvalidPost)

    def test_rejects_long_name(self, store, logger, thread_of_30):
        result = post(store, logger, thread_of_30, name="n" * 65)
        assert isinstance(result.error, InvalidPost)

    def test_unknown_thread(self, store, logger):
        assert isinstance(post(store, logger, 55).error, ThreadNotFound)

    def test_bad_thread_id(self, store, logger):
        assert isinstance(post(store, logger, "abc").error, InvalidIdentifier)
