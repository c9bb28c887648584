"""
Tests for company filter predicates
"""

import pytest

from models import ScrapeFilters
from utils.company_filters import (
    batch_matches,
    batch_score,
    filter_companies,
    search_matches,
    sort_by_batch,
)


class TestBatchMatches:
    """Year filter against the mixed batch spellings"""

    @pytest.mark.parametrize(
        "batch,year,expected",
        [
            ("Summer 2020", "2020", True),
            ("Winter 2020", "2020", True),
            ("Summer 2021", "2020", False),
            ("Winter 2021", "2020", False),
            ("W20", "2020", True),
            ("S20", "2020", True),
            ("W21", "2020", False),
            ("2020", "2020", True),
            ("20", "2020", True),
            ("21", "2020", False),
            ("IK12", "2020", False),
            ("Summer 24", "24", True),
            ("W24", "24", True),
            ("Summer 2024", "2024", True),
            ("Summer 2024", "24", True),
        ],
    )
    def test_truth_table(self, batch, year, expected):
        assert batch_matches(batch, year) is expected

    def test_case_insensitive(self):
        assert batch_matches("SUMMER 2024", "summer") is True
        assert batch_matches("w24", "2024") is True

    def test_no_filter_matches_everything(self):
        assert batch_matches("Winter 2012", None) is True
        assert batch_matches(None, "") is True

    def test_missing_batch_never_matches_a_year(self):
        assert batch_matches(None, "2024") is False


class TestFilterCompanies:
    """Test filter_companies"""

    def test_industry_matches_any_entry(self, companies):
        result = filter_companies(companies, ScrapeFilters(industry="robot"))
        assert [c.name for c in result] == ["RoboDock"]

    def test_region_matches_locations(self, companies):
        result = filter_companies(companies, ScrapeFilters(region="canada"))
        assert [c.name for c in result] == ["RoboDock"]

    def test_stage_is_case_insensitive(self, companies):
        result = filter_companies(companies, ScrapeFilters(stage="GROWTH"))
        assert [c.name for c in result] == ["Stripe", "CareLoop"]

    def test_query_matches_name(self, companies):
        result = filter_companies(companies, ScrapeFilters(query="led"))
        assert [c.name for c in result] == ["Ledgerly"]

    def test_query_can_be_skipped(self, companies):
        result = filter_companies(companies, ScrapeFilters(query="led"), include_query=False)
        assert len(result) == len(companies)

    def test_filters_combine(self, companies):
        result = filter_companies(companies, ScrapeFilters(year="2024", industry="fintech"))
        assert [c.name for c in result] == ["Ledgerly"]

    def test_year_filter_uses_short_codes(self, companies):
        result = filter_companies(companies, ScrapeFilters(year="2024"))
        assert [c.name for c in result] == ["Ledgerly", "RoboDock"]

    def test_preserves_order(self, companies):
        result = filter_companies(companies, ScrapeFilters())
        assert result == companies

    def test_missing_fields_do_not_match(self, company_factory):
        bare = company_factory("Bare", industries=None, all_locations=None, stage=None)

        assert filter_companies([bare], ScrapeFilters(industry="ai")) == []
        assert filter_companies([bare], ScrapeFilters(region="sf")) == []
        assert filter_companies([bare], ScrapeFilters(stage="early")) == []


class TestSearchMatches:
    """Directory-wide search"""

    def test_matches_one_liner(self, company_factory):
        company = company_factory("Acme", one_liner="Payroll for robots")
        assert search_matches(company, "payroll") is True

    def test_matches_regions(self, company_factory):
        company = company_factory("Acme", regions=["Latin America"])
        assert search_matches(company, "latin") is True

    def test_four_digit_query_matches_short_year(self, company_factory):
        company = company_factory("Acme", batch="W21")
        assert search_matches(company, "2021") is True

    def test_no_match(self, company_factory):
        company = company_factory("Acme")
        assert search_matches(company, "zzz") is False


class TestBatchScore:
    """Recency scoring used for directory sorting"""

    @pytest.mark.parametrize(
        "batch,expected",
        [
            ("Summer 2024", 20242),
            ("Winter 2024", 20241),
            ("Fall 2024", 20242),
            ("Spring 2025", 20251),
            ("Unspecified", 0),
            ("W24", 0),
            ("Summer abc", 0),
            (None, 0),
            ("", 0),
        ],
    )
    def test_scores(self, batch, expected):
        assert batch_score(batch) == expected

    def test_sort_newest_first_and_stable(self, company_factory):
        old = company_factory("Old", batch="Winter 2012")
        new = company_factory("New", batch="Summer 2024")
        unknown_a = company_factory("UnknownA", batch="Unspecified")
        unknown_b = company_factory("UnknownB", batch=None)
        same_as_new = company_factory("SameAsNew", batch="Summer 2024")

        result = sort_by_batch([unknown_a, old, new, unknown_b, same_as_new])

        assert [c.name for c in result] == ["New", "SameAsNew", "Old", "UnknownA", "UnknownB"]
