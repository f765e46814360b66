"""Pydantic models shared across the search pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SortKey = Literal["rating", "name", "newest", "oldest"]
MinRating = Literal[0, 2, 3, 4]

ALL_CATEGORIES = "all"
SORT_KEYS: tuple[str, ...] = ("rating", "name", "newest", "oldest")
MIN_RATINGS: tuple[int, ...] = (0, 2, 3, 4)
DEFAULT_SORT: SortKey = "rating"
DEFAULT_MIN_RATING: MinRating = 0


class SearchCriteria(BaseModel):
    """Snapshot of what is fetched and how it is displayed."""

    model_config = ConfigDict(frozen=True)

    term: str = ""
    location: str = ""
    category: str = ALL_CATEGORIES
    sort_key: SortKey = DEFAULT_SORT
    min_rating: MinRating = DEFAULT_MIN_RATING

    def merge(self, **changes) -> "SearchCriteria":
        return self.model_copy(update=changes)

    @property
    def has_constraints(self) -> bool:
        return bool(self.term.strip() or self.location.strip() or self.category != ALL_CATEGORIES)


class CatalogQuery(BaseModel):
    """Request parameters sent to the catalog; only fields that change the fetch."""

    model_config = ConfigDict(frozen=True)

    status: str = "active"
    search: str | None = None
    city: str | None = None
    business_type: str | None = None
    limit: int = 50

    def to_params(self) -> dict[str, str]:
        params = {"status": self.status}
        if self.search:
            params["search"] = self.search
        if self.city:
            params["city"] = self.city
        if self.business_type:
            params["businessType"] = self.business_type
        params["limit"] = str(self.limit)
        return params


class BusinessRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    city: str | None = None
    address: str | None = None
    image: str | None = None
    description: str | None = None
    rating: float = Field(default=0.0, ge=0, le=5)
    total_reviews: int = Field(default=0, ge=0)
    business_type: str | None = None
    phone: str | None = None
    email: str | None = None
    created_at: datetime | None = None


class ResultSet(BaseModel):
    """Records from one successful catalog response, in fetch order."""

    model_config = ConfigDict(frozen=True)

    records: tuple[BusinessRecord, ...] = ()
    total: int = 0

    def __len__(self) -> int:
        return len(self.records)


# Upstream payload schema. Unknown fields are ignored.


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CatalogLocation(_Upstream):
    city: str | None = None
    address: str | None = None


class CatalogImages(_Upstream):
    logo: str | None = None
    cover: str | None = None


class CatalogRating(_Upstream):
    average: float | None = None
    total_reviews: int | None = Field(default=None, alias="totalReviews")


class CatalogContact(_Upstream):
    phone: str | None = None
    email: str | None = None


class CatalogBusiness(_Upstream):
    id: str = Field(alias="_id")
    business_name: str | None = Field(default=None, alias="businessName")
    location: CatalogLocation | None = None
    images: CatalogImages | None = None
    description: str | None = None
    rating: CatalogRating | None = None
    business_type: str | None = Field(default=None, alias="businessType")
    contact: CatalogContact | None = None
    created_at: str | int | float | None = Field(default=None, alias="createdAt")


class CatalogPagination(_Upstream):
    current_page: int | None = Field(default=None, alias="currentPage")
    total_pages: int | None = Field(default=None, alias="totalPages")
    total_businesses: int | None = Field(default=None, alias="totalBusinesses")
    has_next_page: bool | None = Field(default=None, alias="hasNextPage")
    has_prev_page: bool | None = Field(default=None, alias="hasPrevPage")
    limit: int | None = None


class CatalogResponse(_Upstream):
    businesses: list[CatalogBusiness] = Field(default_factory=list)
    pagination: CatalogPagination | None = None

    @field_validator("businesses", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return [] if value is None else value


__all__ = [
    "ALL_CATEGORIES",
    "BusinessRecord",
    "CatalogBusiness",
    "CatalogQuery",
    "CatalogResponse",
    "DEFAULT_MIN_RATING",
    "DEFAULT_SORT",
    "MIN_RATINGS",
    "MinRating",
    "ResultSet",
    "SORT_KEYS",
    "SearchCriteria",
    "SortKey",
]
