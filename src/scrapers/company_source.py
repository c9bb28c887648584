"""
Company source resolver

Fetches the list of YC companies to scrape. The directory API is tried
first and is trusted to apply filters server-side; if it fails, the static
hiring snapshot is downloaded and filtered locally.
"""

import logging
from collections.abc import Callable
from urllib.parse import urlencode

import requests
from pydantic import ValidationError

import settings
from models import ScrapeFilters, YCCompany
from utils.company_filters import filter_companies

logger = logging.getLogger(__name__)


class DataSourceUnavailableError(Exception):
    """Raised when neither the primary nor the fallback company source responds"""


class CompanySourceResolver:
    """Resolves a filtered company list from the primary or fallback source"""

    def __init__(
        self,
        api_url: str | None = None,
        fallback_url: str | None = None,
        default_limit: int | None = None,
        timeout: int = settings.REQUEST_TIMEOUT,
        log: Callable[[str], None] | None = None,
    ) -> None:
        """
        Args:
            api_url: Primary directory endpoint (accepts limit and filter params)
            fallback_url: Static snapshot returning a bare JSON array
            default_limit: Company count when the filters carry no limit
            timeout: HTTP timeout in seconds for each source
            log: Receives human-readable progress lines
        """
        self.api_url = api_url or settings.YC_API_URL
        self.fallback_url = fallback_url or settings.YC_HIRING_SNAPSHOT_URL
        self.default_limit = default_limit or settings.YC_DEFAULT_LIMIT
        self.timeout = timeout
        self.session = requests.Session()
        self._log = log or (lambda message: None)

    def resolve(self, filters: ScrapeFilters) -> list[YCCompany]:
        """
        Resolve the companies to scrape

        Raises:
            DataSourceUnavailableError: If both sources fail
        """
        limit = filters.resolved_limit(self.default_limit, settings.ALL_COMPANIES_LIMIT)
        params = filters.query_params(limit)

        self._log(f"Fetching {limit} companies from {self.api_url}...")
        if filters.has_filters():
            self._log(f"Filters: {urlencode(params)}")

        try:
            self._log(f"Trying local API: {self.api_url}...")
            companies = self._fetch_primary(params)
        except (requests.RequestException, ValueError) as primary_error:
            logger.warning("Primary company source failed: %s", primary_error)
            self._log("Local API failed, falling back to static YC data source...")
            try:
                snapshot = self._fetch_fallback()
            except (requests.RequestException, ValueError) as fallback_error:
                self._log(f"All data sources failed: {fallback_error}")
                raise DataSourceUnavailableError(str(fallback_error)) from fallback_error
            companies = filter_companies(snapshot, filters)[:limit]

        self._log(f"Found {len(companies)} companies. Starting scrape...")

        if filters.query and companies:
            companies = self._select_company(companies, filters.query)

        return companies

    def _fetch_primary(self, params: dict[str, str]) -> list[YCCompany]:
        response = self.session.get(self.api_url, params=params, timeout=self.timeout)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict) or not isinstance(body.get("companies"), list):
            raise ValueError("Primary source response has no 'companies' list")
        return parse_companies(body["companies"])

    def _fetch_fallback(self) -> list[YCCompany]:
        response = self.session.get(self.fallback_url, timeout=self.timeout)
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, list):
            raise ValueError("Fallback source did not return a JSON array")
        return parse_companies(body)

    def _select_company(self, companies: list[YCCompany], query: str) -> list[YCCompany]:
        """Collapse to the exact name match, else the first candidate"""
        self._log(f'Searching for company: "{query}"')
        query_lower = query.lower()

        for company in companies:
            if (company.name or "").lower() == query_lower:
                self._log(f"Found exact match: {company.name}")
                return [company]

        self._log(f"Using closest match: {companies[0].name}")
        return [companies[0]]


def parse_companies(raw: list) -> list[YCCompany]:
    """Validate raw company dicts, skipping records that don't fit the model"""
    companies = []
    for item in raw:
        try:
            companies.append(YCCompany.model_validate(item))
        except ValidationError as e:
            name = item.get("name") if isinstance(item, dict) else item
            logger.warning("Skipping malformed company record %r: %s", name, e)
    return companies
