# backend/estimator/agents/heuristic_agent.py

from ..models import InferenceResult
from ..pricing import BASE_AREA_BY_SERVICE, DEFAULT_BASE_AREA, DEFAULT_COMPLEXITY

SMART_NOTES = (
    "Smart Estimator used - AI analysis temporarily unavailable. "
    "Estimate based on typical property size for this service type."
)


def run_smart_estimator(service: str) -> InferenceResult:
    """
    Smart Estimator: typical area for the service (1000 sqft when unknown)
    at average complexity. Used when the vision agent cannot reach the model.
    """
    return InferenceResult(
        area_sqft=float(BASE_AREA_BY_SERVICE.get(service, DEFAULT_BASE_AREA)),
        complexity=DEFAULT_COMPLEXITY,
        notes=SMART_NOTES,
        estimation_method="smart",
    )
