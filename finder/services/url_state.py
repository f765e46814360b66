"""Addressable query-string state: codec and an in-memory history."""

from __future__ import annotations

from typing import Callable
from urllib.parse import parse_qsl, urlencode

from finder.domain.models import (
    ALL_CATEGORIES,
    DEFAULT_MIN_RATING,
    DEFAULT_SORT,
    MIN_RATINGS,
    SORT_KEYS,
    SearchCriteria,
)
from finder.services.categories import normalize_category

PARAM_TERM = "service"
PARAM_LOCATION = "location"
PARAM_CATEGORY = "category"
PARAM_SORT = "sort"
PARAM_RATING = "rating"

RATING_ALL = "all"

UrlListener = Callable[[str], None]


def encode_criteria(criteria: SearchCriteria) -> str:
    """Render criteria as a query string (without the leading ``?``).

    Empty text fields and the ``all`` category are omitted; sort and rating
    are written only when they differ from their defaults.
    """

    params: list[tuple[str, str]] = []
    if criteria.term:
        params.append((PARAM_TERM, criteria.term))
    if criteria.location:
        params.append((PARAM_LOCATION, criteria.location))
    if criteria.category and criteria.category != ALL_CATEGORIES:
        params.append((PARAM_CATEGORY, criteria.category))
    if criteria.sort_key != DEFAULT_SORT:
        params.append((PARAM_SORT, criteria.sort_key))
    if criteria.min_rating != DEFAULT_MIN_RATING:
        params.append((PARAM_RATING, str(criteria.min_rating)))
    return urlencode(params)


def decode_criteria(query: str) -> SearchCriteria:
    """Parse a query string; unknown or malformed values fall back to defaults."""

    params = dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))
    return SearchCriteria(
        term=params.get(PARAM_TERM, ""),
        location=params.get(PARAM_LOCATION, ""),
        category=normalize_category(params.get(PARAM_CATEGORY)),
        sort_key=_decode_sort(params.get(PARAM_SORT)),
        min_rating=parse_rating(params.get(PARAM_RATING)),
    )


def has_param(query: str, name: str) -> bool:
    return any(key == name and value for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True))


def _decode_sort(raw: str | None):
    value = (raw or "").strip().lower()
    return value if value in SORT_KEYS else DEFAULT_SORT


def parse_rating(raw: str | None):
    value = (raw or "").strip().lower()
    if value in ("", RATING_ALL):
        return DEFAULT_MIN_RATING
    # Rating options are labelled "4+" in the filter menu; accept that form too.
    value = value.rstrip("+")
    try:
        rating = int(value)
    except ValueError:
        return DEFAULT_MIN_RATING
    return rating if rating in MIN_RATINGS else DEFAULT_MIN_RATING


class QueryStringHistory:
    """Browser-like history of query strings.

    ``push`` and ``replace`` are in-page edits; ``back``, ``forward`` and
    ``navigate`` are out-of-band navigations. Every change of the current
    entry notifies listeners with the new query string.
    """

    def __init__(self, initial: str = "") -> None:
        self._entries: list[str] = [initial.lstrip("?")]
        self._index = 0
        self._listeners: list[UrlListener] = []

    @property
    def current(self) -> str:
        return self._entries[self._index]

    @property
    def length(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: UrlListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def push(self, query: str) -> None:
        query = query.lstrip("?")
        if query == self.current:
            return
        del self._entries[self._index + 1:]
        self._entries.append(query)
        self._index += 1
        self._notify()

    def replace(self, query: str) -> None:
        query = query.lstrip("?")
        if query == self.current:
            return
        self._entries[self._index] = query
        self._notify()

    def navigate(self, query: str) -> None:
        """Simulate the user editing the address bar or following a link."""

        self.push(query)

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        if self._index >= len(self._entries) - 1:
            return False
        self._index += 1
        self._notify()
        return True

    def _notify(self) -> None:
        current = self.current
        for listener in list(self._listeners):
            listener(current)


__all__ = [
    "QueryStringHistory",
    "decode_criteria",
    "encode_criteria",
    "has_param",
    "parse_rating",
]
