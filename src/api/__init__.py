"""
API package for the YC directory and job scraper
"""

from .app import app
from .directory_service import DirectoryService
from .scrape_runner import ScrapeRunManager

__all__ = ["app", "DirectoryService", "ScrapeRunManager"]
