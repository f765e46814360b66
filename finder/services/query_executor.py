"""Turns criteria into catalog queries; only the latest query may win."""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Callable

from finder.config import FinderSettings, get_settings
from finder.domain.models import CatalogQuery, ResultSet, SearchCriteria
from finder.logging import logger
from finder.services.cancellation import CancellationToken
from finder.services.catalog import CatalogClient
from finder.services.categories import map_category
from finder.services.exceptions import CatalogError, HttpError, QueryCancelled


class QueryPhase(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    kind: str
    message: str
    status_code: int | None = None

    @classmethod
    def from_exception(cls, exc: CatalogError) -> "ErrorInfo":
        status_code = exc.status_code if isinstance(exc, HttpError) else None
        return cls(kind=exc.kind, message=exc.user_message, status_code=status_code)


class QueryExecutor:
    """Owns the in-flight catalog request and the current :class:`ResultSet`.

    Issuing a new query cancels the previous one. A cancelled query's outcome
    is dropped at the single point where results are applied, whether or not
    the transport honoured the abort. After each outcome the loading flag
    stays raised for ``min_loading_seconds``.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        settings: FinderSettings | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._on_change = on_change
        self.min_loading_seconds = self._settings.timing.min_loading_seconds

        self.phase = QueryPhase.IDLE
        self.result_set = ResultSet()
        self.error: ErrorInfo | None = None
        self.loading = False
        self.requests_issued = 0

        self._last_query: CatalogQuery | None = None
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._loading_handle: asyncio.TimerHandle | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False

    @property
    def last_query(self) -> CatalogQuery | None:
        return self._last_query

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def build_query(self, criteria: SearchCriteria) -> CatalogQuery:
        catalog = self._settings.catalog
        return CatalogQuery(
            status=catalog.status,
            search=criteria.term.strip() or None,
            city=criteria.location.strip() or None,
            business_type=map_category(criteria.category) or None,
            limit=catalog.limit,
        )

    def submit(self, criteria: SearchCriteria) -> bool:
        """Issue a query for ``criteria`` unless it matches the last one.

        Returns ``True`` when a new request was started.
        """

        query = self.build_query(criteria)
        if self._closed or query == self._last_query:
            return False
        self._issue(query)
        return True

    def retry(self) -> bool:
        """Re-issue the last query unchanged, even if it already completed."""

        if self._closed or self._last_query is None:
            return False
        self._issue(self._last_query)
        return True

    def _cancel_current(self) -> None:
        if self._token is not None and not self._token.cancelled:
            logger.debug("catalog_query_superseded", request_id=self._token.request_id)
            self._token.cancel()
        self._clear_loading_timer()

    async def wait_idle(self) -> None:
        """Wait until the loading flag drops for the current request."""

        await self._idle.wait()

    async def close(self) -> None:
        self._closed = True
        self._cancel_current()
        task = self._task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)
        self._idle.set()

    def _issue(self, query: CatalogQuery) -> None:
        if self._closed:
            return
        self._cancel_current()

        self.requests_issued += 1
        token = CancellationToken(self.requests_issued)
        self._token = token
        self._last_query = query
        self.phase = QueryPhase.LOADING
        self.loading = True
        self.error = None
        self.result_set = ResultSet()
        self._idle.clear()

        logger.info("catalog_query_issued", request_id=token.request_id, params=query.to_params())
        task = asyncio.create_task(self._run(query, token))
        token.add_callback(task.cancel)
        self._task = task
        self._changed()

    async def _run(self, query: CatalogQuery, token: CancellationToken) -> None:
        try:
            result = await self._client.fetch(query, token=token)
        except asyncio.CancelledError:
            if token.cancelled:
                return
            raise
        except QueryCancelled:
            return
        except CatalogError as exc:
            if token.cancelled:
                return
            self._settle(token, error=exc)
            return
        except Exception as exc:
            if token.cancelled:
                return
            logger.exception("catalog_query_crashed", request_id=token.request_id)
            self._settle(token, error=CatalogError(f"Failed to load services: {exc}"))
            return
        if token.cancelled:
            logger.debug("catalog_query_discarded", request_id=token.request_id)
            return
        self._settle(token, result=result)

    def _settle(
        self,
        token: CancellationToken,
        *,
        result: ResultSet | None = None,
        error: CatalogError | None = None,
    ) -> None:
        if token is not self._token:
            return
        if error is not None:
            self.phase = QueryPhase.FAILED
            self.error = ErrorInfo.from_exception(error)
            self.result_set = ResultSet()
            logger.warning(
                "catalog_query_failed",
                request_id=token.request_id,
                kind=error.kind,
                error=str(error),
            )
        else:
            self.phase = QueryPhase.SUCCEEDED
            self.error = None
            self.result_set = result if result is not None else ResultSet()
            logger.info(
                "catalog_query_succeeded",
                request_id=token.request_id,
                records=len(self.result_set),
                total=self.result_set.total,
            )
        self._clear_loading_timer()
        loop = asyncio.get_running_loop()
        self._loading_handle = loop.call_later(self.min_loading_seconds, self._finish_loading, token)
        self._changed()

    def _finish_loading(self, token: CancellationToken) -> None:
        self._loading_handle = None
        if token is not self._token or token.cancelled:
            return
        self.loading = False
        self._idle.set()
        self._changed()

    def _clear_loading_timer(self) -> None:
        if self._loading_handle is not None:
            self._loading_handle.cancel()
            self._loading_handle = None

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


__all__ = ["ErrorInfo", "QueryExecutor", "QueryPhase"]
