"""Shared fixtures: fast timing settings, payload builders and fake catalogs."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest
import pytest_asyncio

from finder.config import CatalogSettings, FinderSettings, TimingSettings
from finder.domain.models import BusinessRecord, CatalogQuery, ResultSet
from finder.services.catalog import CatalogClient

DEBOUNCE = 0.03
MIN_LOADING = 0.03


def business_payload(
    _id: str,
    name: str,
    *,
    rating: float | None = None,
    reviews: int | None = None,
    created_at: str | None = None,
    city: str | None = "Lahore",
    business_type: str = "plumbing",
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "_id": _id,
        "businessName": name,
        "location": {"city": city, "address": f"{_id} Main Road"},
        "images": {"logo": None, "cover": f"https://img.example/{_id}.png"},
        "description": f"{name} description",
        "businessType": business_type,
        "contact": {"phone": "+92-300-0000000", "email": f"{_id}@example.com"},
    }
    if rating is not None or reviews is not None:
        payload["rating"] = {"average": rating, "totalReviews": reviews}
    if created_at is not None:
        payload["createdAt"] = created_at
    return payload


def record(_id: str, name: str = "", *, rating: float = 0.0, created_at=None) -> BusinessRecord:
    return BusinessRecord(id=_id, name=name or _id, rating=rating, created_at=created_at)


@pytest.fixture
def settings() -> FinderSettings:
    return FinderSettings(
        catalog=CatalogSettings(base_url="https://catalog.example/api"),
        timing=TimingSettings(debounce_seconds=DEBOUNCE, min_loading_seconds=MIN_LOADING),
    )


class GatedCatalog:
    """Catalog stand-in whose responses are released by the test.

    With ``ignore_abort`` the fake keeps waiting after cancellation, like a
    transport that does not honour the abort signal.
    """

    def __init__(self, *, ignore_abort: bool = False) -> None:
        self.ignore_abort = ignore_abort
        self.calls: list[CatalogQuery] = []
        self._futures: list[asyncio.Future] = []
        self.aborted: list[int] = []

    async def fetch(self, query: CatalogQuery, *, token=None) -> ResultSet:
        self.calls.append(query)
        future = asyncio.get_running_loop().create_future()
        self._futures.append(future)
        index = len(self._futures) - 1
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            self.aborted.append(index)
            if not self.ignore_abort:
                raise
            return await future

    def resolve(self, index: int, result: ResultSet) -> None:
        self._futures[index].set_result(result)

    def fail(self, index: int, exc: Exception) -> None:
        self._futures[index].set_exception(exc)


@pytest.fixture
def gated_catalog() -> GatedCatalog:
    return GatedCatalog()


@pytest_asyncio.fixture
async def mock_catalog(settings):
    """Build a CatalogClient over an httpx MockTransport driven by ``handler``."""

    clients: list[httpx.AsyncClient] = []

    def _factory(handler) -> CatalogClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        return CatalogClient(http_client, settings=settings.catalog)

    yield _factory
    for http_client in clients:
        await http_client.aclose()


async def settle(seconds: float = 0.0) -> None:
    """Let scheduled callbacks and tasks run."""

    await asyncio.sleep(seconds)
    for _ in range(5):
        await asyncio.sleep(0)
