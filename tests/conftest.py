"""
Pytest configuration for yc-job-scraper tests.

This conftest.py adds the project root to sys.path and points the scraper's
output file at a temp location before any project module reads settings.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to Python path so tests can import src
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# CRITICAL: Keep test runs away from the real bot/results/jobs.json
if "pytest" in sys.modules and "YC_JOBS_FILE" not in os.environ:
    test_results_dir = Path(tempfile.gettempdir()) / "pytest_yc_results"
    os.environ["YC_RESULTS_DIR"] = str(test_results_dir)
    os.environ["YC_JOBS_FILE"] = str(test_results_dir / "jobs.json")

# Never hit a real directory API from tests
os.environ.setdefault("YC_API_URL", "http://127.0.0.1:9/api/hiring")
