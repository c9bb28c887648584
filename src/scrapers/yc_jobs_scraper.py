"""
YC job board scraper

Extracts job listings from a company's job page on ycombinator.com using a
Playwright page. Each job card's detail line is a loose set of text
fragments (location, salary, equity) in no guaranteed order, so fragments
are classified by content rather than position.
"""

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urljoin

import settings
from models import JobListing

logger = logging.getLogger(__name__)

# Job board template selectors
NO_JOBS_SELECTOR = "text=No jobs at"
JOB_CARD_SELECTOR = "div.flex.w-full.flex-row.items-start.justify-between.py-4"
TITLE_LINK_SELECTOR = ".ycdc-with-link-color a"
DETAILS_CONTAINER_SELECTOR = "div.justify-left.flex.flex-row.flex-wrap"
DETAIL_SELECTOR = "div.capitalize"

# Missing card elements should fail fast instead of waiting the default 30s
CARD_ELEMENT_TIMEOUT_MS = 5000

CURRENCY_SYMBOLS = ("$", "£", "€")
MAGNITUDE_PATTERN = re.compile(r"\dK")


def classify_job_details(fragments: Iterable[str]) -> dict[str, str]:
    """
    Sort detail fragments into location, salary and equity

    Rules per fragment, first match wins:
    1. currency symbol or a "K" magnitude (e.g. "120K") -> salary
    2. percent sign -> equity
    3. first non-empty leftover -> location; later leftovers are dropped

    Example:
        ["San Francisco", "$120K-$150K", "0.10%"]
        -> {"location": "San Francisco", "salary": "$120K-$150K", "equity": "0.10%"}
    """
    details = {"location": "", "salary": "", "equity": ""}

    for fragment in fragments:
        text = (fragment or "").strip()
        if any(symbol in text for symbol in CURRENCY_SYMBOLS) or MAGNITUDE_PATTERN.search(text):
            details["salary"] = text
        elif "%" in text:
            details["equity"] = text
        elif not details["location"] and text:
            details["location"] = text

    return details


def resolve_job_url(href: str | None) -> str:
    """Absolute application link, or empty if the card had none"""
    if not href:
        return ""
    return urljoin(settings.YC_ORIGIN, href)


class YCJobsScraper:
    """Extract jobs from YC company job pages"""

    def __init__(
        self,
        navigation_timeout_ms: int = settings.NAVIGATION_TIMEOUT_MS,
        log: Callable[[str], None] | None = None,
    ) -> None:
        self.navigation_timeout_ms = navigation_timeout_ms
        self._log = log or (lambda message: None)

    def extract_jobs(self, page: Any, job_url: str) -> list[JobListing]:
        """
        Navigate to a company's job page and parse its job cards

        Args:
            page: Playwright sync Page
            job_url: Company job board URL

        Returns:
            List of JobListing (empty if the company has no openings)

        Raises:
            Navigation errors and timeouts propagate to the caller.
        """
        page.goto(job_url, wait_until="networkidle", timeout=self.navigation_timeout_ms)

        if page.locator(NO_JOBS_SELECTOR).count() > 0:
            logger.info("No openings listed at %s", job_url)
            return []

        jobs = []
        for card in page.locator(JOB_CARD_SELECTOR).all():
            try:
                jobs.append(self.parse_job_card(card))
            except Exception as e:
                logger.warning("Failed to parse a job card on %s: %s", job_url, e)
                self._log(f"   Warning: Failed to parse a job card: {e}")

        return jobs

    def parse_job_card(self, card: Any) -> JobListing:
        """Build a JobListing from one job card locator"""
        title_link = card.locator(TITLE_LINK_SELECTOR).first
        title = title_link.text_content(timeout=CARD_ELEMENT_TIMEOUT_MS)
        href = title_link.get_attribute("href", timeout=CARD_ELEMENT_TIMEOUT_MS)

        fragments = (
            card.locator(DETAILS_CONTAINER_SELECTOR)
            .locator(DETAIL_SELECTOR)
            .all_text_contents()
        )
        details = classify_job_details(fragments)

        return JobListing(
            title=(title or "").strip(),
            location=details["location"],
            salary=details["salary"],
            equity=details["equity"],
            url=resolve_job_url(href),
        )
