"""
Filter predicates for YC company lists

Shared by the scraper's fallback company source and the directory API so
both apply the same matching rules. All comparisons are case-insensitive
substring matches.
"""

import re
from collections.abc import Iterable

from models import ScrapeFilters, YCCompany

FOUR_DIGIT_YEAR = re.compile(r"^\d{4}$")
LEADING_INT = re.compile(r"^\d+")

# Seasons in the second half of the year sort ahead of first-half ones
LATE_SEASONS = {"summer", "fall"}


def batch_matches(batch: str | None, year: str | None) -> bool:
    """
    Check a batch label against a year filter

    Batch strings mix full names ("Summer 2024"), short codes ("W24", "S24")
    and bare two-digit forms ("24"). A four-digit filter matches any of those
    spellings; any other filter is a plain substring match.

    Examples:
        batch_matches("Summer 2020", "2020") -> True
        batch_matches("W20", "2020") -> True
        batch_matches("21", "2020") -> False
        batch_matches("Summer 24", "24") -> True
    """
    if not year:
        return True

    batch_lower = (batch or "").lower()
    year_lower = year.lower()

    if FOUR_DIGIT_YEAR.match(year_lower):
        short_year = year_lower[2:]
        return (
            year_lower in batch_lower
            or f"w{short_year}" in batch_lower
            or f"s{short_year}" in batch_lower
            or batch_lower.endswith(f" {short_year}")
            or batch_lower == short_year
        )

    return year_lower in batch_lower


def industry_matches(company: YCCompany, industry: str | None) -> bool:
    if not industry:
        return True
    needle = industry.lower()
    return any(needle in (entry or "").lower() for entry in company.industries or [])


def region_matches(company: YCCompany, region: str | None) -> bool:
    if not region:
        return True
    return region.lower() in (company.all_locations or "").lower()


def stage_matches(company: YCCompany, stage: str | None) -> bool:
    if not stage:
        return True
    return stage.lower() in (company.stage or "").lower()


def name_matches(company: YCCompany, query: str | None) -> bool:
    if not query:
        return True
    return query.lower() in (company.name or "").lower()


def filter_companies(
    companies: Iterable[YCCompany],
    filters: ScrapeFilters,
    include_query: bool = True,
) -> list[YCCompany]:
    """
    Apply year, industry, region, stage and (optionally) name filters

    Relative order is preserved.
    """
    return [
        company
        for company in companies
        if batch_matches(company.batch, filters.year)
        and industry_matches(company, filters.industry)
        and region_matches(company, filters.region)
        and stage_matches(company, filters.stage)
        and (not include_query or name_matches(company, filters.query))
    ]


def search_matches(company: YCCompany, query: str | None) -> bool:
    """
    General directory search across name, industries, regions, stage,
    one-liner and batch. A four-digit query also matches its short year.
    """
    if not query:
        return True

    q = query.lower()
    batch = (company.batch or "").lower()
    haystacks = [
        company.name or "",
        company.industry or "",
        " ".join(company.industries or []),
        " ".join(company.regions or []),
        company.stage or "",
        company.one_liner or "",
        batch,
    ]
    if any(q in text.lower() for text in haystacks):
        return True

    return bool(FOUR_DIGIT_YEAR.match(q)) and q[2:] in batch


def batch_score(batch: str | None) -> int:
    """
    Recency score for a batch label, used to sort newest first

    "Summer 2024" -> 20242, "Winter 2024" -> 20241, unparseable -> 0
    """
    if not batch or batch == "Unspecified":
        return 0

    parts = batch.split(" ")
    if len(parts) < 2:
        return 0

    year_match = LEADING_INT.match(parts[1])
    if not year_match:
        return 0

    season_bonus = 2 if parts[0].lower() in LATE_SEASONS else 1
    return int(year_match.group(0)) * 10 + season_bonus


def sort_by_batch(companies: Iterable[YCCompany]) -> list[YCCompany]:
    """Newest batch first; ties keep their original order"""
    return sorted(companies, key=lambda c: batch_score(c.batch), reverse=True)
