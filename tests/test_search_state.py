"""Tests for SearchStateStore URL synchronisation."""

from __future__ import annotations

import pytest

from finder.domain.models import SearchCriteria
from finder.services.search_state import CriteriaChange, SearchStateStore
from finder.services.url_state import QueryStringHistory


def _store(query: str = "") -> tuple[SearchStateStore, list[CriteriaChange]]:
    store = SearchStateStore(QueryStringHistory(query))
    changes: list[CriteriaChange] = []
    store.subscribe(changes.append)
    store.init_from_url()
    return store, changes


def test_init_from_url_reads_known_params():
    store, changes = _store("service=plumber&location=Lahore&category=plumbing&sort=newest&rating=4")
    assert store.criteria == SearchCriteria(
        term="plumber", location="Lahore", category="plumbing", sort_key="newest", min_rating=4
    )
    assert changes == []


def test_structural_updates_write_url_immediately():
    store, changes = _store()
    store.update(sort_key="name")
    assert store.history.current == "sort=name"
    store.update(min_rating=3)
    assert store.history.current == "sort=name&rating=3"
    store.update(category="Plumbing")
    assert store.criteria.category == "plumbing"
    assert "category=plumbing" in store.history.current
    assert [change.changed_fields for change in changes] == [
        frozenset({"sort_key"}),
        frozenset({"min_rating"}),
        frozenset({"category"}),
    ]


def test_text_updates_defer_url_until_flush():
    store, changes = _store()
    store.update(term="plumber")
    assert store.criteria.term == "plumber"
    assert store.history.current == ""
    assert store.url_stale is True

    store.flush_url()
    assert store.history.current == "service=plumber"
    assert store.url_stale is False
    assert len(changes) == 1


def test_noop_update_does_not_notify():
    store, changes = _store("service=a")
    store.update(term="a")
    assert changes == []
    assert store.history.length == 1


def test_unknown_field_is_rejected():
    store, _ = _store()
    with pytest.raises(TypeError):
        store.update(colour="red")


def test_out_of_band_navigation_overwrites_memory():
    store, changes = _store()
    store.update(term="plumber")
    store.flush_url()
    store.update(sort_key="name")

    assert store.history.back() is True
    assert store.criteria == SearchCriteria(term="plumber")
    assert changes[-1].source == "url"
    assert changes[-1].changed_fields == frozenset({"sort_key"})

    store.history.navigate("location=Karachi&rating=2")
    assert store.criteria == SearchCriteria(location="Karachi", min_rating=2)


def test_own_url_writes_are_not_reported_as_navigation():
    store, changes = _store()
    store.update(category="cleaning")
    assert [change.source for change in changes] == ["input"]


def test_fresh_text_search_without_url_category_starts_unfiltered():
    store, _ = _store()
    # Category in memory but never written to the URL.
    store.history.replace("")
    store._criteria = store.criteria.merge(category="plumbing")

    store.update(term="electrician")
    assert store.criteria.category == "all"


def test_text_search_keeps_category_present_in_url():
    store, _ = _store("category=plumbing")
    store.update(location="Lahore")
    assert store.criteria.category == "plumbing"


def test_category_change_with_empty_text_has_no_side_effect():
    store, _ = _store()
    store.update(category="electrical")
    assert store.criteria == SearchCriteria(category="electrical")


def test_close_stops_listening():
    store, changes = _store()
    store.close()
    store.history.navigate("service=x")
    assert store.criteria.term == ""
    assert changes == []
