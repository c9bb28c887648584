"""
Pytest configuration for unit tests
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(src_path))

from models import YCCompany  # noqa: E402


def make_company(name: str, **kwargs) -> YCCompany:
    """Build a YCCompany with a slug and profile URL derived from the name."""
    slug = name.lower().replace(" ", "-")
    defaults = {
        "id": abs(hash(name)) % 100000,
        "name": name,
        "slug": slug,
        "url": f"https://www.ycombinator.com/companies/{slug}",
        "batch": "Summer 2024",
        "industries": ["B2B"],
        "all_locations": "San Francisco, CA, USA",
        "stage": "Early",
    }
    defaults.update(kwargs)
    return YCCompany.model_validate(defaults)


@pytest.fixture
def companies() -> list[YCCompany]:
    """Small mixed directory used across tests"""
    return [
        make_company(
            "Stripe",
            batch="Summer 2009",
            industries=["Fintech", "Payments"],
            all_locations="San Francisco, CA, USA",
            stage="Growth",
        ),
        make_company(
            "Ledgerly",
            batch="Winter 2024",
            industries=["Fintech"],
            all_locations="New York, NY, USA",
            stage="Early",
        ),
        make_company(
            "RoboDock",
            batch="S24",
            industries=["Industrials", "Robotics"],
            all_locations="Toronto, ON, Canada",
            stage="Early",
        ),
        make_company(
            "CareLoop",
            batch="Summer 2023",
            industries=["Healthcare"],
            all_locations="London, England, United Kingdom",
            stage="Growth",
        ),
    ]


@pytest.fixture
def company_factory():
    """Factory fixture wrapping make_company"""
    return make_company
