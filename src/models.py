"""
Standardized data models for YC companies and scraped job listings
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class YCCompany(BaseModel):
    """
    A company record from the YC directory

    Sourced from the directory API or the static snapshot. Only the fields the
    scraper and filters use are declared; any other upstream keys are kept as
    extras so the record round-trips unchanged.
    """

    model_config = ConfigDict(extra="allow")

    # Identity
    id: int | None = Field(None, description="Directory id")
    name: str | None = Field(None, description="Company name")
    slug: str | None = Field(None, description="URL slug")
    url: str | None = Field(None, description="Canonical YC profile URL")
    website: str | None = Field(None, description="Company website")

    # Classification
    batch: str | None = Field(None, description="Cohort label, e.g. 'Summer 2024'")
    industry: str | None = None
    subindustry: str | None = None
    industries: list[str] | None = None
    regions: list[str] | None = None
    all_locations: str | None = Field(None, description="Combined locations string")
    stage: str | None = Field(None, description="Early, Growth, etc.")
    status: str | None = Field(None, description="Active, Acquired, Inactive, Public")
    tags: list[str] | None = None

    # Scale and description
    team_size: int | None = None
    one_liner: str | None = None
    launched_at: int | None = Field(None, description="Launch date as a unix timestamp")

    # Flags
    top_company: bool = False
    nonprofit: bool = False
    isHiring: bool = False

    @field_validator("top_company", "nonprofit", "isHiring", mode="before")
    @classmethod
    def null_flag_is_false(cls, v: Any) -> Any:
        """Upstream snapshots sometimes carry null flags"""
        return False if v is None else v

    @property
    def jobs_url(self) -> str:
        """URL of the company's job board page"""
        return f"{(self.url or '').rstrip('/')}/jobs"

    def to_dict(self) -> dict[str, Any]:
        """Dump only the keys the upstream record carried"""
        return self.model_dump(exclude_unset=True)


class JobListing(BaseModel):
    """One open role from a company's job board. Values are display strings."""

    title: str = ""
    location: str = ""
    salary: str = ""
    equity: str = ""
    url: str = ""


class CompanyScrapeResult(BaseModel):
    """
    Outcome of scraping one company

    Successful results carry the jobs found; failed results carry an empty
    job list and an error message, never both.
    """

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    url: str | None = None
    jobs: list[JobListing] = Field(default_factory=list)
    scraped_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    )
    error: str | None = None

    @model_validator(mode="after")
    def _error_means_no_jobs(self) -> "CompanyScrapeResult":
        if self.error is not None and self.jobs:
            raise ValueError("a failed result cannot carry jobs")
        return self

    @classmethod
    def success(cls, company: YCCompany, jobs: list[JobListing]) -> "CompanyScrapeResult":
        return cls(id=company.id, name=company.name, slug=company.slug, url=company.url, jobs=jobs)

    @classmethod
    def failure(cls, company: YCCompany, error: str) -> "CompanyScrapeResult":
        return cls(
            id=company.id, name=company.name, slug=company.slug, url=company.url, error=error
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the output file (no error key on success)"""
        data = self.model_dump(mode="json")
        if self.error is None:
            data.pop("error")
        return data


class ScrapeFilters(BaseModel):
    """Invocation parameters shared by the CLI and the HTTP bindings"""

    limit: int | Literal["all"] | None = None
    year: str | None = None
    industry: str | None = None
    region: str | None = None
    stage: str | None = None
    query: str | None = None

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, v: Any) -> Any:
        """Accept 'all', numeric strings, or blanks"""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            v = v.strip()
            if v.lower() == "all":
                return "all"
            return int(v)
        return v

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int | str | None) -> int | str | None:
        if isinstance(v, int) and v < 1:
            raise ValueError(f"limit must be a positive integer or 'all', got {v}")
        return v

    @field_validator("year", "industry", "region", "stage", "query", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty filter values as absent"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def resolved_limit(self, default: int, all_limit: int) -> int:
        """Turn the limit into a concrete company count"""
        if self.limit == "all":
            return all_limit
        return self.limit or default

    def has_filters(self) -> bool:
        return any([self.year, self.industry, self.region, self.stage, self.query])

    def query_params(self, limit: int) -> dict[str, str]:
        """Query string for the primary company source"""
        params = {"limit": str(limit)}
        if self.query:
            params["q"] = self.query
        for key in ("year", "industry", "region", "stage"):
            value = getattr(self, key)
            if value:
                params[key] = value
        return params


class ScrapeSummary(BaseModel):
    """Final outcome of a scrape run"""

    success: bool
    companies_scraped: int = 0
    jobs_found: int = 0
    output_file: str | None = None
    backup_file: str | None = None
    cancelled: bool = False
    error: str | None = None
    results: list[CompanyScrapeResult] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"results"})
        data["results"] = [result.to_dict() for result in self.results]
        return data
