"""
Scraper configuration

Values come from environment variables (a local .env file is loaded first),
falling back to the defaults below.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Primary company source: the directory API served by api/app.py
YC_API_URL = os.getenv("YC_API_URL", "http://127.0.0.1:5000/api/hiring")

# Static snapshots used when the primary source is unreachable
YC_HIRING_SNAPSHOT_URL = os.getenv(
    "YC_HIRING_SNAPSHOT_URL", "https://yc-oss.github.io/api/companies/hiring.json"
)
YC_ALL_SNAPSHOT_URL = os.getenv(
    "YC_ALL_SNAPSHOT_URL", "https://yc-oss.github.io/api/companies/all.json"
)

# Job pages link relative to this origin
YC_ORIGIN = "https://www.ycombinator.com"

YC_RESULTS_DIR = os.getenv("YC_RESULTS_DIR", "bot/results")
YC_JOBS_FILE = os.getenv("YC_JOBS_FILE", os.path.join(YC_RESULTS_DIR, "jobs.json"))

YC_DEFAULT_LIMIT = int(os.getenv("YC_DEFAULT_LIMIT", "100"))

# Upper bound used when the caller asks for "all" companies
ALL_COMPANIES_LIMIT = 2000

YC_HEADLESS = os.getenv("YC_HEADLESS", "true").lower() in ("1", "true", "yes")

# Per-company navigation ceiling (milliseconds, Playwright units)
NAVIGATION_TIMEOUT_MS = 30000

# Company-source HTTP timeout (seconds)
REQUEST_TIMEOUT = 30
