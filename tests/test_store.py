"""
tests/test_store.py
"""
from __future__ import annotations

import pytest

from quire.blog import PostNotFound, SlugTaken


def test_create_then_get_returns_same_fields(store):
    store.create(title="Hi", slug="hi", markdown="**bold**")
    post = store.get("hi")
    assert post is not None
    assert (post["title"], post["slug"], post["markdown"]) == ("Hi", "hi", "**bold**")


def test_unknown_slug_is_none(store):
    assert store.get("nope") is None


def test_list_all_newest_first(store):
    assert store.list_all() == []
    store.create(title="One", slug="one", markdown="1")
    store.create(title="Two", slug="two", markdown="2")
    rows = [dict(r) for r in store.list_all()]
    assert rows == [{"slug": "two", "title": "Two"}, {"slug": "one", "title": "One"}]


def test_duplicate_slug_is_rejected(store):
    store.create(title="A", slug="dup", markdown="a")
    with pytest.raises(SlugTaken):
        store.create(title="B", slug="dup", markdown="b")
    # the first record survives untouched
    assert store.get("dup")["title"] == "A"


def test_update_replaces_whole_record_and_rekeys(store):
    store.create(title="Old", slug="old", markdown="old body")
    store.update("old", title="New", new_slug="renamed", markdown="new body")

    assert store.get("old") is None
    post = store.get("renamed")
    assert (post["title"], post["markdown"]) == ("New", "new body")


def test_update_keeping_slug(store):
    store.create(title="T", slug="same", markdown="x")
    store.update("same", title="T2", new_slug="same", markdown="y")
    assert store.get("same")["markdown"] == "y"


def test_update_onto_existing_slug_conflicts(store):
    store.create(title="A", slug="a", markdown="a")
    store.create(title="B", slug="b", markdown="b")
    with pytest.raises(SlugTaken):
        store.update("a", title="A", new_slug="b", markdown="a")
    assert store.get("a")["title"] == "A"
    assert store.get("b")["title"] == "B"


def test_update_missing_slug_raises(store):
    with pytest.raises(PostNotFound):
        store.update("ghost", title="x", new_slug="ghost", markdown="x")


def test_delete_then_get_is_none(store):
    store.create(title="Bye", slug="bye", markdown="x")
    assert store.delete("bye") is True
    assert store.get("bye") is None


def test_delete_missing_is_noop(store):
    assert store.delete("never-there") is False
