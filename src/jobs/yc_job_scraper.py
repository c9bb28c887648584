"""
YC Job Scraper
Resolves a filtered list of YC companies, visits each company's job board
with headless Chromium, and saves the collected jobs to a JSON file after
every company.

Usage:
    python src/jobs/yc_job_scraper.py 50 --year 2024 --industry fintech
    python src/jobs/yc_job_scraper.py all --region "san francisco"
    python src/jobs/yc_job_scraper.py --query stripe

Only one run may write to a given output file at a time.
"""

import logging
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError

import settings
from models import CompanyScrapeResult, ScrapeFilters, ScrapeSummary, YCCompany
from scrapers.company_source import CompanySourceResolver, DataSourceUnavailableError
from scrapers.yc_jobs_scraper import YCJobsScraper
from utils.json_store import backup_path_for, load_from_json, save_to_json
from utils.progress import CallbackProgressReporter, ProgressReporter

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class ScrapeRunState:
    """Results collected so far in one run, in resolution order"""

    results: list[CompanyScrapeResult] = field(default_factory=list)
    total_jobs: int = 0

    def add(self, result: CompanyScrapeResult) -> None:
        self.results.append(result)
        self.total_jobs += len(result.jobs)

    def to_json(self) -> list[dict[str, Any]]:
        return [result.to_dict() for result in self.results]


class YCJobScraper:
    """
    Runs one scrape from company resolution to final save

    Companies are processed strictly one at a time on a single browser
    context. The whole result list is rewritten to the output file after
    each company, and any previous file is backed up once before the first
    write.
    """

    def __init__(
        self,
        reporter: ProgressReporter | None = None,
        resolver: CompanySourceResolver | None = None,
        jobs_scraper: YCJobsScraper | None = None,
        output_file: str | Path | None = None,
        headless: bool | None = None,
    ) -> None:
        self.reporter = reporter or CallbackProgressReporter()
        self.resolver = resolver or CompanySourceResolver(log=self.reporter.report)
        self.jobs_scraper = jobs_scraper or YCJobsScraper(log=self.reporter.report)
        self.output_file = Path(output_file or settings.YC_JOBS_FILE)
        self.headless = settings.YC_HEADLESS if headless is None else headless

        self._playwright: Any = None
        self._browser: Any = None

    def run(
        self,
        filters: ScrapeFilters | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ScrapeSummary:
        """
        Execute a scrape run

        Args:
            filters: Company filters and limit
            cancel_event: When set, the run stops before the next company.
                Companies already scraped stay saved.

        Returns:
            ScrapeSummary. success is False only when no company source
            could be reached, in which case nothing is written.

        Raises:
            Browser launch failures and file write errors propagate after the
            reporter receives an error event.
        """
        filters = filters or ScrapeFilters()
        self.reporter.report("--- YC Job Scraper Bot started ---")

        try:
            companies = self.resolver.resolve(filters)
        except DataSourceUnavailableError as e:
            self.reporter.error(str(e))
            return ScrapeSummary(success=False, error=str(e))

        try:
            summary = self._scrape_companies(companies, cancel_event)
        except Exception as e:
            logger.error("Scrape run aborted: %s", e, exc_info=True)
            self.reporter.error(str(e))
            raise

        self.reporter.complete(summary)
        return summary

    def _scrape_companies(
        self, companies: list[YCCompany], cancel_event: threading.Event | None
    ) -> ScrapeSummary:
        state = ScrapeRunState()
        cancelled = False

        self._launch_browser()
        try:
            context = self._browser.new_context(user_agent=USER_AGENT)
            backup_file = self._backup_existing()

            for i, company in enumerate(companies, 1):
                if cancel_event is not None and cancel_event.is_set():
                    self.reporter.report(
                        f"Cancellation requested. Stopping after {len(state.results)} companies."
                    )
                    cancelled = True
                    break

                self.reporter.report(f"[{i}/{len(companies)}] Scraping {company.name}...")
                result = self._scrape_company(context, company)

                state.add(result)
                save_to_json(state.to_json(), self.output_file)

                if result.error is None:
                    self.reporter.report(f"   ✓ Found {len(result.jobs)} jobs. Saved to file.")
                else:
                    self.reporter.report(f"   ✗ Failed to scrape {company.name}: {result.error}")
        finally:
            self._close_browser()

        self.reporter.report("\n✅ Scraping complete!")
        self.reporter.report(f"Total companies scraped: {len(state.results)}")
        self.reporter.report(f"Total jobs found: {state.total_jobs}")
        self.reporter.report(f"Results saved to {self.output_file}")

        return ScrapeSummary(
            success=True,
            companies_scraped=len(state.results),
            jobs_found=state.total_jobs,
            output_file=str(self.output_file),
            backup_file=str(backup_file) if backup_file else None,
            cancelled=cancelled,
            results=state.results,
        )

    def _scrape_company(self, context: Any, company: YCCompany) -> CompanyScrapeResult:
        """Scrape one company on its own page. Errors become a failed result."""
        page = context.new_page()
        try:
            jobs = self.jobs_scraper.extract_jobs(page, company.jobs_url)
            return CompanyScrapeResult.success(company, jobs)
        except Exception as e:
            logger.warning("Failed to scrape %s: %s", company.name, e)
            return CompanyScrapeResult.failure(company, str(e) or type(e).__name__)
        finally:
            page.close()

    def _backup_existing(self) -> Path | None:
        """Copy the previous output file to backup/ before it is overwritten"""
        existing = load_from_json(self.output_file)

        if not existing:
            self.reporter.report("No existing data found. Starting fresh scrape...")
            return None

        count = len(existing) if isinstance(existing, list) else 1
        self.reporter.report(f"⚠️  Found {count} existing records in {self.output_file.name}")

        backup_file = backup_path_for(self.output_file.parent)
        save_to_json(existing, backup_file)
        self.reporter.report(f"✅ Backup created: {backup_file}")
        self.reporter.report("Starting fresh scrape...")
        return backup_file

    def _launch_browser(self) -> None:
        from playwright.sync_api import sync_playwright

        logger.info("Starting Playwright Chromium browser (headless=%s)", self.headless)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless)
        except Exception:
            self._playwright.stop()
            self._playwright = None
            raise

    def _close_browser(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except Exception as e:
                logger.warning("Error closing browser: %s", e)
            self._browser = None

        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.warning("Error stopping playwright: %s", e)
            self._playwright = None


def build_filters(args: Any) -> ScrapeFilters:
    """Build ScrapeFilters from parsed CLI arguments"""
    return ScrapeFilters(
        limit=args.limit,
        year=args.year,
        industry=args.industry,
        region=args.region,
        stage=args.stage,
        query=args.query,
    )


def main():
    """CLI entry point"""
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Scrape job listings from YC company pages")
    parser.add_argument(
        "limit",
        nargs="?",
        default=None,
        help=f"Number of companies to scrape, or 'all' (default: {settings.YC_DEFAULT_LIMIT})",
    )
    parser.add_argument("--year", help="Batch year, e.g. 2024 or W24")
    parser.add_argument("--industry", help="Industry substring, e.g. fintech")
    parser.add_argument("--region", help="Location substring, e.g. 'san francisco'")
    parser.add_argument("--stage", help="Company stage, e.g. Early")
    parser.add_argument("--query", "-q", help="Company name to scrape")
    parser.add_argument(
        "--api-url",
        default=settings.YC_API_URL,
        help=f"Primary company source (default: {settings.YC_API_URL})",
    )
    parser.add_argument(
        "--output",
        default=settings.YC_JOBS_FILE,
        help=f"Output JSON file (default: {settings.YC_JOBS_FILE})",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")

    args = parser.parse_args()

    try:
        filters = build_filters(args)
    except ValidationError as e:
        parser.error(f"invalid arguments: {e.errors()[0]['msg']}")

    reporter = CallbackProgressReporter()
    scraper = YCJobScraper(
        reporter=reporter,
        resolver=CompanySourceResolver(api_url=args.api_url, log=reporter.report),
        output_file=args.output,
        headless=not args.headed,
    )

    summary = scraper.run(filters)

    print("\n" + "=" * 80)
    print("YC JOB SCRAPER SUMMARY")
    print("=" * 80)
    if not summary.success:
        print(f"❌ Aborted: {summary.error}")
        sys.exit(1)

    print(f"Companies scraped: {summary.companies_scraped}")
    print(f"Jobs found: {summary.jobs_found}")
    failed = [r for r in summary.results if r.error]
    if failed:
        print(f"Companies failed: {len(failed)}")
    if summary.backup_file:
        print(f"Backup: {summary.backup_file}")
    print(f"Output: {summary.output_file}")


if __name__ == "__main__":
    main()
