# backend/estimator/pricing.py

from typing import Dict

from .models import Quote

# USD per square foot of cleanable surface.
SERVICE_RATES_PER_SQFT: Dict[str, float] = {
    "house": 0.15,
    "windows": 0.35,
    "roof": 0.25,
    "driveway": 0.18,
    "gutters": 1.00,
}
DEFAULT_RATE_PER_SQFT = 0.15

MIN_JOB_FEE = 150.0

# Typical visible area per service, used when the AI estimate is unavailable.
BASE_AREA_BY_SERVICE: Dict[str, float] = {
    "house": 1500,
    "windows": 800,
    "roof": 1200,
    "driveway": 400,
    "gutters": 200,
}
DEFAULT_BASE_AREA = 1000

COMPLEXITY_MIN = 1.0
COMPLEXITY_MAX = 5.0
DEFAULT_COMPLEXITY = 2.5


def COMPLEXITY_MULTIPLIER(complexity: float) -> float:
    """
    Linear surcharge: 1.0 at complexity 1, +15% per point, 1.6 at complexity 5.
    Inputs outside 1-5 are clamped first.
    """
    c = clamp_complexity(complexity)
    return round(1.0 + (c - COMPLEXITY_MIN) * 0.15, 4)


def clamp_complexity(complexity: float) -> float:
    return min(COMPLEXITY_MAX, max(COMPLEXITY_MIN, float(complexity)))


def rate_for(service: str) -> float:
    return SERVICE_RATES_PER_SQFT.get(service, DEFAULT_RATE_PER_SQFT)


def price_job(service: str, area_sqft: float, complexity: float) -> Quote:
    rate = rate_for(service)
    complexity_factor = COMPLEXITY_MULTIPLIER(complexity)
    subtotal = max(MIN_JOB_FEE, area_sqft * rate * complexity_factor)
    return Quote(
        rate=rate,
        complexity_factor=complexity_factor,
        total=round(subtotal, 2),
    )


def rate_card() -> Dict[str, object]:
    return {
        "services": list(SERVICE_RATES_PER_SQFT),
        "rates": dict(SERVICE_RATES_PER_SQFT),
        "default_rate": DEFAULT_RATE_PER_SQFT,
        "min_job_fee": MIN_JOB_FEE,
    }
