"""
YC directory service - filtered, searched and paginated company listings

Backs the /api/hiring and /api/all endpoints. Snapshots are downloaded from
the public YC dataset and cached in memory for an hour.
"""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any, Literal

import requests
from pydantic import BaseModel, Field, field_validator

import settings
from models import ScrapeFilters, YCCompany
from scrapers.company_source import parse_companies
from utils.company_filters import filter_companies, search_matches, sort_by_batch

logger = logging.getLogger(__name__)

SnapshotName = Literal["hiring", "all"]


class DirectoryQuery(BaseModel):
    """Query parameters accepted by the directory endpoints"""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1)
    q: str | None = None
    year: str | None = None
    industry: str | None = None
    region: str | None = None
    stage: str | None = None

    # Extended filters (hiring endpoint)
    team_size_min: int | None = None
    team_size_max: int | None = None
    status: list[str] = Field(default_factory=list)
    top_company: bool = False
    nonprofit: bool = False
    tags: list[str] = Field(default_factory=list)
    launched_after: int | None = None
    launched_before: int | None = None
    subindustry: str | None = None

    @field_validator("status", "tags", mode="before")
    @classmethod
    def split_csv(cls, v: Any) -> Any:
        """Comma-separated query values become lists"""
        if v is None:
            return []
        if isinstance(v, str):
            return [part for part in v.split(",") if part]
        return v

    @field_validator(
        "team_size_min", "team_size_max", "launched_after", "launched_before", mode="before"
    )
    @classmethod
    def lenient_int(cls, v: Any) -> Any:
        """Unparseable bounds are ignored rather than rejected"""
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_args(cls, args: Any) -> "DirectoryQuery":
        """Build from a request.args-style mapping with camelCase keys"""
        return cls(
            page=args.get("page") or 1,
            limit=args.get("limit") or 100,
            q=args.get("q") or None,
            year=args.get("year") or None,
            industry=args.get("industry") or None,
            region=args.get("region") or None,
            stage=args.get("stage") or None,
            team_size_min=args.get("teamSizeMin"),
            team_size_max=args.get("teamSizeMax"),
            status=args.get("status"),
            top_company=args.get("topCompany") == "true",
            nonprofit=args.get("nonprofit") == "true",
            tags=args.get("tags"),
            launched_after=args.get("launchedAfter"),
            launched_before=args.get("launchedBefore"),
            subindustry=args.get("subindustry") or None,
        )

    def base_filters(self) -> ScrapeFilters:
        return ScrapeFilters(
            year=self.year, industry=self.industry, region=self.region, stage=self.stage
        )


class DirectoryService:
    """Serves filtered pages of the YC company directory"""

    def __init__(
        self,
        hiring_url: str | None = None,
        all_url: str | None = None,
        timeout: int = settings.REQUEST_TIMEOUT,
        cache_ttl_seconds: int = 3600,
    ) -> None:
        self.urls: dict[str, str] = {
            "hiring": hiring_url or settings.YC_HIRING_SNAPSHOT_URL,
            "all": all_url or settings.YC_ALL_SNAPSHOT_URL,
        }
        self.timeout = timeout
        self.cache_ttl_seconds = cache_ttl_seconds
        self.session = requests.Session()
        self._cache: dict[str, tuple[float, list[YCCompany]]] = {}

    def list_companies(
        self, query: DirectoryQuery, snapshot: SnapshotName = "hiring"
    ) -> dict[str, Any]:
        """
        Filter, sort (newest batch first) and paginate a snapshot

        Args:
            query: Page, limit and filters
            snapshot: "hiring" (extended filters apply) or "all"

        Returns:
            {"companies": [...], "total", "page", "limit", "totalPages"}

        Raises:
            requests.RequestException, ValueError: If the snapshot can't be fetched
        """
        companies = filter_companies(self.get_snapshot(snapshot), query.base_filters())

        if snapshot == "hiring":
            companies = [c for c in companies if _extended_filters_match(c, query)]

        companies = [c for c in companies if search_matches(c, query.q)]
        companies = sort_by_batch(companies)

        start = (query.page - 1) * query.limit
        page_items = companies[start : start + query.limit]

        return {
            "companies": [c.to_dict() for c in page_items],
            "total": len(companies),
            "page": query.page,
            "limit": query.limit,
            "totalPages": math.ceil(len(companies) / query.limit),
        }

    def get_snapshot(self, snapshot: SnapshotName) -> list[YCCompany]:
        """Fetch a snapshot, served from cache while fresh"""
        cached = self._cache.get(snapshot)
        if cached and time.monotonic() - cached[0] < self.cache_ttl_seconds:
            return cached[1]

        url = self.urls[snapshot]
        logger.info("Fetching YC %s snapshot from %s", snapshot, url)
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, list):
            raise ValueError(f"Snapshot {url} did not return a JSON array")

        companies = parse_companies(body)
        self._cache[snapshot] = (time.monotonic(), companies)
        return companies


def _extended_filters_match(company: YCCompany, query: DirectoryQuery) -> bool:
    """Team size, status, flags, tags, launch year and subindustry"""
    if query.team_size_min is not None or query.team_size_max is not None:
        team_size = company.team_size or 0
        low = query.team_size_min or 0
        high = query.team_size_max if query.team_size_max else math.inf
        if not low <= team_size <= high:
            return False

    if query.status and company.status not in query.status:
        return False

    if query.top_company and not company.top_company:
        return False

    if query.nonprofit and not company.nonprofit:
        return False

    if query.tags and not any(tag in (company.tags or []) for tag in query.tags):
        return False

    if query.launched_after is not None or query.launched_before is not None:
        if not company.launched_at:
            return False
        launched_year = datetime.fromtimestamp(company.launched_at, tz=timezone.utc).year
        after = query.launched_after or 0
        before = query.launched_before if query.launched_before else math.inf
        if not after <= launched_year <= before:
            return False

    if query.subindustry and query.subindustry.lower() not in (company.subindustry or "").lower():
        return False

    return True
