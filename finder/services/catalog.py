"""Catalog API client: one read-only business query."""

from __future__ import annotations

import math
from typing import Any

import httpx
from pydantic import ValidationError

from finder.config import CatalogSettings
from finder.domain.models import BusinessRecord, CatalogBusiness, CatalogQuery, CatalogResponse, ResultSet
from finder.logging import logger
from finder.services.cancellation import CancellationToken
from finder.services.exceptions import HttpError, MalformedResponse, NetworkUnreachable, QueryCancelled
from finder.utils.datetime import parse_timestamp
from finder.utils.retry import retry_async

DETAIL_CHAR_LIMIT = 500


class CatalogClient:
    """Issues ``GET <base>/business`` and maps the body into a :class:`ResultSet`."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: CatalogSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or CatalogSettings()

    @property
    def settings(self) -> CatalogSettings:
        return self._settings

    async def fetch(self, query: CatalogQuery, *, token: CancellationToken | None = None) -> ResultSet:
        if token is not None and token.cancelled:
            raise QueryCancelled(f"request {token.request_id} cancelled before sending")

        params = query.to_params()

        async def _request():
            response = await self._client.get(
                self._settings.business_url(),
                params=params,
                headers={"Accept": "application/json"},
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                base_delay=self._settings.retry_base_delay,
                retry_on=(httpx.TransportError,),
                logger=logger,
                operation_name="catalog_query",
            )
        except httpx.HTTPStatusError as exc:
            raise HttpError(exc.response.status_code, _extract_detail(exc.response)) from exc
        except httpx.RequestError as exc:
            raise NetworkUnreachable(f"Catalog request failed: {exc}") from exc

        return parse_catalog_payload(response)


def parse_catalog_payload(response: httpx.Response) -> ResultSet:
    try:
        data = response.json()
    except ValueError as exc:
        raise MalformedResponse("Catalog response is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise MalformedResponse("Catalog response format is invalid.")
    try:
        payload = CatalogResponse.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponse(f"Catalog response failed validation: {exc.error_count()} error(s)") from exc

    try:
        records = tuple(to_business_record(item) for item in payload.businesses)
    except ValueError as exc:
        raise MalformedResponse(f"Catalog record could not be mapped: {exc}") from exc
    total = len(records)
    if payload.pagination is not None and payload.pagination.total_businesses is not None:
        total = max(payload.pagination.total_businesses, total)
    return ResultSet(records=records, total=total)


def to_business_record(item: CatalogBusiness) -> BusinessRecord:
    location = item.location
    images = item.images
    rating = item.rating
    contact = item.contact
    average = (rating.average if rating else None) or 0.0
    if not math.isfinite(average):
        average = 0.0
    reviews = (rating.total_reviews if rating else None) or 0
    return BusinessRecord(
        id=item.id,
        name=item.business_name or "",
        city=location.city if location else None,
        address=location.address if location else None,
        image=(images.logo or images.cover) if images else None,
        description=item.description,
        rating=min(max(float(average), 0.0), 5.0),
        total_reviews=max(int(reviews), 0),
        business_type=item.business_type,
        phone=contact.phone if contact else None,
        email=contact.email if contact else None,
        created_at=parse_timestamp(item.created_at),
    )


def _extract_detail(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:DETAIL_CHAR_LIMIT]
    return response.text[:DETAIL_CHAR_LIMIT].strip()


__all__ = ["CatalogClient", "parse_catalog_payload", "to_business_record"]
