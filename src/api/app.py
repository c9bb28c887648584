"""
Flask API for the YC directory and job scraper

Serves the filtered company directory (also the scraper's primary company
source), the latest scrape results, and endpoints to start a scrape run
either in the background or as a Server-Sent Events stream.
"""

import json
import logging
import os
from pathlib import Path

import requests
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError

import settings
from models import ScrapeFilters

from .directory_service import DirectoryQuery, DirectoryService
from .scrape_runner import ScrapeRunBusyError, ScrapeRunManager

logger = logging.getLogger(__name__)

# Runs started over HTTP default to a small batch
HTTP_DEFAULT_LIMIT = 10

# CSRF protection not needed: stateless API with no session/cookie auth
app = Flask(__name__)  # NOSONAR

# Enable CORS - configurable via environment variable
CORS_ORIGINS = os.getenv("FLASK_CORS_ORIGINS", "http://localhost:*,http://127.0.0.1:*")
cors_origins_list = [origin.strip() for origin in CORS_ORIGINS.split(",")]
CORS(app, resources={r"/*": {"origins": cors_origins_list}})

# Initialize services
directory_service = DirectoryService()
scrape_runs = ScrapeRunManager()
jobs_file = Path(settings.YC_JOBS_FILE)


@app.route("/")
def home():
    """API health check"""
    return jsonify(
        {
            "status": "ok",
            "message": "YC Job Scraper API",
            "version": "1.0",
            "scraper_running": scrape_runs.is_running,
            "endpoints": {
                "GET /api/hiring": "Hiring companies (filters, search, pagination)",
                "GET /api/all": "All companies (filters, search, pagination)",
                "GET /api/scraper/results": "Latest scrape results",
                "POST /api/scraper/start": "Start a scrape run in the background",
                "GET /api/scraper/stream": "Run a scrape and stream progress (SSE)",
            },
        }
    )


@app.route("/api/hiring", methods=["GET"])
def get_hiring_companies():
    """
    Hiring companies, newest batch first

    Query params:
        page, limit, q, year, industry, region, stage, teamSizeMin,
        teamSizeMax, status, topCompany, nonprofit, tags, launchedAfter,
        launchedBefore, subindustry
    """
    return _directory_response("hiring", "Failed to fetch hiring data")


@app.route("/api/all", methods=["GET"])
def get_all_companies():
    """
    All companies, newest batch first

    Query params:
        page, limit, q, year, industry, region, stage
    """
    return _directory_response("all", "Failed to fetch YC data")


def _directory_response(snapshot: str, error_message: str):
    try:
        query = DirectoryQuery.from_args(request.args)
    except ValidationError as e:
        return _invalid_params("Invalid query parameters", e)

    try:
        return jsonify(directory_service.list_companies(query, snapshot=snapshot))
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching YC %s data: %s", snapshot, e)
        return jsonify({"error": error_message}), 500


@app.route("/api/scraper/results", methods=["GET"])
def get_scraper_results():
    """Contents of the scraper's output file"""
    if not jobs_file.exists():
        return jsonify({"data": []})

    try:
        content = jobs_file.read_text(encoding="utf-8")
        if not content.strip():
            return jsonify({"data": []})
        data = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Error reading %s: %s", jobs_file, e)
        return jsonify({"data": [], "error": str(e)}), 500

    return jsonify({"data": data})


@app.route("/api/scraper/start", methods=["POST"])
def start_scraper():
    """
    Start a scrape run in the background and return immediately

    Expected JSON body (all optional):
    {
        "limit": 10,
        "year": "2024",
        "industry": "Fintech",
        "region": "San Francisco",
        "stage": "Early",
        "query": "Stripe"
    }
    """
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        filters = _filters_from(body)
    except ValidationError as e:
        return _invalid_params("Invalid scraper parameters", e)

    try:
        scrape_runs.submit(filters)
    except ScrapeRunBusyError as e:
        return jsonify({"error": str(e)}), 409

    return jsonify(
        {
            "message": "Scraper started successfully! Check the server log for progress.",
            "params": filters.model_dump(exclude_none=True),
            "status": "running",
        }
    )


@app.route("/api/scraper/stream", methods=["GET"])
def stream_scraper():
    """
    Run a scrape and stream its progress as Server-Sent Events

    Each event is `data: <json>`: {"message": ...} per progress line, then
    one {"type": "complete", ...} or {"type": "error", "message": ...}.
    """
    try:
        filters = _filters_from(request.args)
    except ValidationError as e:
        return _invalid_params("Invalid scraper parameters", e)

    try:
        frames = scrape_runs.stream(filters)
    except ScrapeRunBusyError as e:
        return jsonify({"error": str(e)}), 409

    response = Response(
        frames,
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
    # Client disconnects can close the response before any frame is read
    response.call_on_close(frames.close)
    return response


def _invalid_params(message: str, error: ValidationError):
    details = error.errors(include_url=False, include_context=False)
    return jsonify({"error": message, "details": details}), 400


def _filters_from(params) -> ScrapeFilters:
    """Scraper parameters from a JSON body or query string"""
    return ScrapeFilters(
        limit=params.get("limit") or HTTP_DEFAULT_LIMIT,
        year=params.get("year"),
        industry=params.get("industry"),
        region=params.get("region"),
        stage=params.get("stage"),
        query=params.get("query"),
    )


if __name__ == "__main__":
    # Run development server
    # Only accessible from localhost for security
    # Debug mode controlled by FLASK_DEBUG environment variable (default: False)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    debug_mode = os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes")
    app.run(host="127.0.0.1", port=5000, debug=debug_mode, threaded=True)
