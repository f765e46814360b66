"""Derived, read-only view status."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from finder.domain.models import BusinessRecord, SearchCriteria
from finder.services.query_executor import ErrorInfo, QueryPhase


class ViewStatus(str, enum.Enum):
    INITIALIZING = "initializing"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    POPULATED = "populated"


def derive_status(phase: QueryPhase, loading: bool, projected_count: int) -> ViewStatus:
    if phase is QueryPhase.IDLE:
        return ViewStatus.INITIALIZING
    if loading or phase is QueryPhase.LOADING:
        return ViewStatus.LOADING
    if phase is QueryPhase.FAILED:
        return ViewStatus.ERROR
    return ViewStatus.POPULATED if projected_count else ViewStatus.EMPTY


@dataclass(frozen=True, slots=True)
class ViewState:
    status: ViewStatus
    criteria: SearchCriteria
    records: tuple[BusinessRecord, ...] = ()
    error: ErrorInfo | None = None
    searching: bool = False
    has_searched: bool = False

    @property
    def can_retry(self) -> bool:
        return self.status is ViewStatus.ERROR


__all__ = ["ViewState", "ViewStatus", "derive_status"]
