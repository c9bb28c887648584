"""Company source and job board scrapers for the YC directory"""

from scrapers.company_source import CompanySourceResolver, DataSourceUnavailableError
from scrapers.yc_jobs_scraper import YCJobsScraper

__all__ = ["CompanySourceResolver", "DataSourceUnavailableError", "YCJobsScraper"]
