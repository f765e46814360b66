"""Search criteria store kept in sync with the addressable query string."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal

from finder.domain.models import ALL_CATEGORIES, SearchCriteria
from finder.logging import logger
from finder.services.categories import normalize_category
from finder.services.url_state import (
    PARAM_CATEGORY,
    QueryStringHistory,
    decode_criteria,
    encode_criteria,
    has_param,
)

TEXT_FIELDS = frozenset({"term", "location"})
STRUCTURAL_FIELDS = frozenset({"category", "sort_key", "min_rating"})
CRITERIA_FIELDS = TEXT_FIELDS | STRUCTURAL_FIELDS


@dataclass(frozen=True, slots=True)
class CriteriaChange:
    previous: SearchCriteria
    current: SearchCriteria
    source: Literal["input", "url"]

    @property
    def changed_fields(self) -> frozenset[str]:
        return frozenset(
            name
            for name in CRITERIA_FIELDS
            if getattr(self.previous, name) != getattr(self.current, name)
        )


CriteriaListener = Callable[[CriteriaChange], None]


class SearchStateStore:
    """Single owner of the current :class:`SearchCriteria`.

    Structural filters (category, sort, rating) are written to the URL as
    soon as they change. Text fields only mark the URL stale; callers write
    it with :meth:`flush_url` at the end of the debounce window. When the URL
    changes out of band, the URL wins.
    """

    def __init__(self, history: QueryStringHistory) -> None:
        self._history = history
        self._criteria = SearchCriteria()
        self._listeners: list[CriteriaListener] = []
        self._url_stale = False
        self._writing_url = False
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def criteria(self) -> SearchCriteria:
        return self._criteria

    @property
    def url_stale(self) -> bool:
        return self._url_stale

    @property
    def history(self) -> QueryStringHistory:
        return self._history

    def subscribe(self, listener: CriteriaListener) -> None:
        self._listeners.append(listener)

    def init_from_url(self) -> SearchCriteria:
        self._criteria = decode_criteria(self._history.current)
        self._url_stale = False
        if self._unsubscribe is None:
            self._unsubscribe = self._history.subscribe(self._on_url_changed)
        logger.debug("criteria_initialized", query=self._history.current)
        return self._criteria

    def update(self, **changes: Any) -> SearchCriteria:
        unknown = set(changes) - CRITERIA_FIELDS
        if unknown:
            raise TypeError(f"Unknown criteria fields: {', '.join(sorted(unknown))}")
        if "category" in changes:
            changes["category"] = normalize_category(changes["category"])

        previous = self._criteria
        current = SearchCriteria(**{**previous.model_dump(), **changes})
        if self._starts_bare_search(previous, current, changes):
            current = current.merge(category=ALL_CATEGORIES)
        if current == previous:
            return current

        self._criteria = current
        change = CriteriaChange(previous=previous, current=current, source="input")
        fields = change.changed_fields
        if fields & TEXT_FIELDS:
            self._url_stale = True
        if fields & STRUCTURAL_FIELDS:
            self._write_url()
        logger.debug("criteria_updated", fields=sorted(fields), url_stale=self._url_stale)
        self._notify(change)
        return current

    def flush_url(self) -> None:
        if self._url_stale:
            self._write_url()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def _starts_bare_search(
        self, previous: SearchCriteria, current: SearchCriteria, changes: dict[str, Any]
    ) -> bool:
        # A fresh keyword/location search with no category in the URL starts unfiltered.
        if "category" in changes or current.category == ALL_CATEGORIES:
            return False
        fresh_text = any(
            field in changes and getattr(current, field).strip()
            and getattr(current, field) != getattr(previous, field)
            for field in TEXT_FIELDS
        )
        return fresh_text and not has_param(self._history.current, PARAM_CATEGORY)

    def _write_url(self) -> None:
        self._url_stale = False
        self._writing_url = True
        try:
            self._history.push(encode_criteria(self._criteria))
        finally:
            self._writing_url = False

    def _on_url_changed(self, query: str) -> None:
        if self._writing_url:
            return
        from_url = decode_criteria(query)
        if from_url == self._criteria:
            self._url_stale = False
            return
        previous = self._criteria
        self._criteria = from_url
        self._url_stale = False
        logger.info("url_reconciled", query=query)
        self._notify(CriteriaChange(previous=previous, current=from_url, source="url"))

    def _notify(self, change: CriteriaChange) -> None:
        for listener in list(self._listeners):
            listener(change)


__all__ = ["CriteriaChange", "SearchStateStore"]
