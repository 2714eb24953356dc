# backend/estimator/agents/vision_agent.py

import asyncio
import math
from typing import Any, Dict, List, Optional

from ..logging_config import log, measure
from ..models import InferenceResult
from ..openai_client import OpenAIVisionClient, parse_json_object
from ..pricing import DEFAULT_COMPLEXITY, clamp_complexity

DEFAULT_AI_NOTES = "AI-computed from uploaded photos."

VISION_SYSTEM = """You are an estimator for an exterior cleaning company in Jonesboro, Arkansas.
Analyze residential/exterior property photos and output a conservative, *numeric* estimate of:
- VISIBLE exterior surface area in square feet (house siding/windows/roof or concrete depending on service)
- Complexity score from 1 (very simple) to 5 (very complex). Complexity increases with multiple stories, architectural details, obstructions, steep roof pitch, heavy staining, etc.
Return STRICT JSON like: {"area_sqft": <number>, "complexity": <number>, "notes": "<short reason>"}.
If the scene is not a property exterior, use best judgment from visible context."""


def build_user_prompt(service: str) -> str:
    return (
        f"Service type: {service}.\n"
        "From ALL provided images, estimate total *cleanable* area in square feet visible "
        "(do not overestimate) and a complexity 1-5.\n"
        "Keep JSON short. Do not include anything else."
    )


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # e.g. "large", or an integer too big for a float
        return None
    return number if math.isfinite(number) else None


def parse_estimate_content(content: Optional[str]) -> InferenceResult:
    """
    Turn the model's message content into an InferenceResult.

    Missing, zero, non-numeric or unparseable values fall back to defaults
    (area 0, complexity 2.5, stock notes) and are listed in
    ``defaulted_fields``. Area is floored at 0, complexity clamped to 1-5.
    """
    raw: Dict[str, Any] = parse_json_object(content)
    defaulted: List[str] = []

    area = _as_number(raw.get("area_sqft"))
    if not area:
        defaulted.append("area_sqft")
        area = 0.0

    complexity = _as_number(raw.get("complexity"))
    if not complexity:
        defaulted.append("complexity")
        complexity = DEFAULT_COMPLEXITY

    notes = raw.get("notes")
    if not notes:
        defaulted.append("notes")
        notes = DEFAULT_AI_NOTES

    return InferenceResult(
        area_sqft=max(0.0, area),
        complexity=clamp_complexity(complexity),
        notes=str(notes),
        estimation_method="ai",
        defaulted_fields=defaulted,
    )


async def run_vision_agent(
    client: OpenAIVisionClient,
    service: str,
    data_uris: List[str],
) -> InferenceResult:
    """
    Vision agent:
    - Sends every photo with the estimator prompt to the model.
    - Parses the JSON answer with defaults.
    Raises InferenceTransportError when the API call fails.
    """
    with measure("inference"):
        # Blocking SDK call runs in a worker thread
        content = await asyncio.to_thread(
            client.complete_json,
            VISION_SYSTEM,
            build_user_prompt(service),
            data_uris,
        )

    result = parse_estimate_content(content)
    if result.defaulted_fields:
        log.warning(f"Vision agent filled defaults for: {', '.join(result.defaulted_fields)}")
    return result
