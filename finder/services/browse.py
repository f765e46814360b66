"""Search-and-browse session wiring input, URL state, queries and projection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from finder.config import FinderSettings, get_settings
from finder.domain.models import ALL_CATEGORIES, SearchCriteria
from finder.logging import logger
from finder.services.catalog import CatalogClient
from finder.services.categories import category_display_name
from finder.services.debounce import DebouncedInputController
from finder.services.projection import ResultProjector
from finder.services.query_executor import QueryExecutor
from finder.services.search_state import CriteriaChange, SearchStateStore
from finder.services.url_state import QueryStringHistory, parse_rating
from finder.services.view_state import ViewState, derive_status

ViewListener = Callable[[ViewState], None]


@dataclass(frozen=True, slots=True)
class ResultsSummary:
    title: str
    count_line: str
    heading: str


class BrowseSession:
    """One mounted services page.

    Owns the criteria store, the input debouncer, the query executor and the
    projector for its lifetime; :meth:`close` cancels every pending timer and
    the in-flight request.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        history: QueryStringHistory | None = None,
        settings: FinderSettings | None = None,
        on_view_change: ViewListener | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self.history = history or QueryStringHistory()
        self.store = SearchStateStore(self.history)
        self.executor = QueryExecutor(client, settings=self._settings, on_change=self._on_query_changed)
        self.projector = ResultProjector()
        self.inputs = DebouncedInputController(
            self._commit_input,
            delay=self._settings.timing.debounce_seconds,
            on_activity=self._on_typing,
        )
        self._on_view_change = on_view_change
        self.searching = False
        self.has_searched = False
        self._mounted = False

    async def __aenter__(self) -> "BrowseSession":
        self.mount()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def criteria(self) -> SearchCriteria:
        return self.store.criteria

    @property
    def view(self) -> ViewState:
        criteria = self.store.criteria
        executor = self.executor
        records = self.projector.project(executor.result_set, criteria.sort_key, criteria.min_rating)
        return ViewState(
            status=derive_status(executor.phase, executor.loading, len(records)),
            criteria=criteria,
            records=records,
            error=executor.error,
            searching=self.searching,
            has_searched=self.has_searched,
        )

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        criteria = self.store.init_from_url()
        self.inputs.set_value("term", criteria.term)
        self.inputs.set_value("location", criteria.location)
        self.store.subscribe(self._on_criteria_changed)
        self.has_searched = criteria.has_constraints
        logger.info("browse_session_mounted", query=self.history.current)
        self.executor.submit(criteria)

    async def close(self) -> None:
        self.inputs.close()
        self.store.close()
        await self.executor.close()
        self._mounted = False

    async def wait_until_settled(self) -> ViewState:
        """Flush pending input and wait for the current request to finish loading."""

        self.inputs.flush()
        await self.executor.wait_idle()
        return self.view

    # user actions

    def type_term(self, value: str) -> None:
        self.inputs.on_change("term", value)

    def type_location(self, value: str) -> None:
        self.inputs.on_change("location", value)

    def submit_input(self) -> None:
        self.inputs.flush()

    def select_category(self, label: str) -> None:
        self.searching = True
        self.store.update(category=label)
        self._settle_searching()

    def set_sort(self, sort_key: str) -> None:
        self.store.update(sort_key=sort_key)

    def set_min_rating(self, value: int | str) -> None:
        rating = parse_rating(value) if isinstance(value, str) else value
        self.store.update(min_rating=rating)

    def clear_location(self) -> None:
        self.inputs.set_value("location", "")
        self.store.update(location="")
        self.store.flush_url()

    def clear_search(self) -> None:
        self.inputs.set_value("term", "")
        self.inputs.set_value("location", "")
        self.store.update(term="", location="", category=ALL_CATEGORIES)
        self.store.flush_url()

    def retry(self) -> bool:
        return self.executor.retry()

    def describe_results(self) -> ResultsSummary:
        """Summarize the results using the text currently shown in the inputs."""

        view = self.view
        criteria = view.criteria
        term = self.inputs.value("term").strip()
        location = self.inputs.value("location").strip()
        category = None
        if criteria.category != ALL_CATEGORIES:
            category = category_display_name(criteria.category)

        if term:
            title = f'Search Results for "{term}" Services'
        elif category:
            title = f"{category} Services"
        else:
            title = "All Services"

        count = len(view.records)
        count_line = f"{count} service{'' if count == 1 else 's'} found"
        if term:
            count_line += f' for "{term}"'
        if category:
            count_line += f" in {category}"
        if location:
            count_line += f" near {location}"

        parts = []
        if criteria.category != ALL_CATEGORIES:
            parts.append(criteria.category)
        if location:
            parts.append(f"in {location}")
        if term:
            parts.append(f'matching "{term}"')
        heading = " ".join(parts) if parts else "All Services"
        return ResultsSummary(title=title, count_line=count_line, heading=heading)

    # wiring

    def _on_typing(self, field: str, value: str) -> None:
        self.searching = True
        self._emit()

    def _commit_input(self, field: str, value: str) -> None:
        self.store.update(**{field: value})
        self.store.flush_url()
        self._settle_searching()

    def _on_criteria_changed(self, change: CriteriaChange) -> None:
        current = change.current
        if change.source == "url":
            self.inputs.set_value("term", current.term)
            self.inputs.set_value("location", current.location)
        if current.has_constraints:
            self.has_searched = True
        if not self.executor.submit(current):
            # Sort and rating changes only re-project.
            self._emit()

    def _on_query_changed(self) -> None:
        if not self.executor.loading:
            self.searching = False
        self._emit()

    def _settle_searching(self) -> None:
        if self.searching and not self.executor.loading:
            self.searching = False
            self._emit()

    def _emit(self) -> None:
        if self._on_view_change is not None:
            self._on_view_change(self.view)


__all__ = ["BrowseSession", "ResultsSummary"]
