"""Client-side sort and rating filter over a fetched result set."""

from __future__ import annotations

import unicodedata
from typing import Callable

from finder.domain.models import BusinessRecord, ResultSet
from finder.utils.datetime import EPOCH


def _name_key(record: BusinessRecord) -> tuple[str, str]:
    # Accent- and case-insensitive first, raw text as a tie-break.
    folded = unicodedata.normalize("NFKD", record.name or "")
    folded = "".join(char for char in folded if not unicodedata.combining(char)).casefold()
    return folded, record.name or ""


def _created_key(record: BusinessRecord) -> float:
    return (record.created_at or EPOCH).timestamp()


def _rating_key(record: BusinessRecord) -> float:
    return record.rating or 0.0


# (key, descending)
_SORTS: dict[str, tuple[Callable[[BusinessRecord], object], bool]] = {
    "rating": (_rating_key, True),
    "name": (_name_key, False),
    "newest": (_created_key, True),
    "oldest": (_created_key, False),
}


def project(result_set: ResultSet, sort_key: str, min_rating: int) -> tuple[BusinessRecord, ...]:
    """Filter by ``rating >= min_rating`` then sort; ties keep fetch order.

    Unknown sort keys leave fetch order untouched.
    """

    records = [record for record in result_set.records if (record.rating or 0.0) >= min_rating]
    key, descending = _SORTS.get(sort_key, (None, False))
    if key is not None:
        # sorted() stays stable with reverse=True.
        records = sorted(records, key=key, reverse=descending)
    return tuple(records)


class ResultProjector:
    """Memoizes :func:`project` on (result set identity, sort key, min rating)."""

    def __init__(self) -> None:
        self._last_args: tuple[ResultSet, str, int] | None = None
        self._last_result: tuple[BusinessRecord, ...] = ()
        self.computations = 0

    def project(self, result_set: ResultSet, sort_key: str, min_rating: int) -> tuple[BusinessRecord, ...]:
        last = self._last_args
        if (
            last is not None
            and last[0] is result_set
            and last[1] == sort_key
            and last[2] == min_rating
        ):
            return self._last_result
        self._last_result = project(result_set, sort_key, min_rating)
        self._last_args = (result_set, sort_key, min_rating)
        self.computations += 1
        return self._last_result


__all__ = ["ResultProjector", "project"]
