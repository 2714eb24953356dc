# backend/estimator/estimator.py

from typing import Any, Iterable, List, Optional, Sequence

from fastapi import UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from .agents.heuristic_agent import run_smart_estimator
from .agents.vision_agent import run_vision_agent
from .config import Settings
from .errors import ConfigurationError, InferenceTransportError, ValidationError
from .logging_config import inc_metric, log, record_estimate
from .models import EstimateResponse, InferenceResult
from .openai_client import OpenAIVisionClient
from .pricing import price_job
from .utils import image_to_data_uri

DEFAULT_SERVICE = "house"


def select_image_uploads(parts: Iterable[Any]) -> List[UploadFile]:
    """Keep the form parts that are real file uploads; drop text values and empty file inputs."""
    return [part for part in parts if isinstance(part, StarletteUploadFile) and part.filename]


class Estimator:
    """
    Request pipeline: validate -> encode photos -> vision agent (or Smart
    Estimator on API failure) -> price.

    Settings are injected once; the environment is never read here.
    """

    def __init__(self, settings: Settings, client: Optional[OpenAIVisionClient] = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> OpenAIVisionClient:
        if self._client is None:
            self._client = OpenAIVisionClient(
                api_key=self.settings.openai_api_key,
                model=self.settings.openai_model,
                base_url=self.settings.openai_base_url,
                timeout=self.settings.openai_timeout,
            )
        return self._client

    async def estimate(self, service: Optional[str], images: Optional[Sequence[UploadFile]]) -> EstimateResponse:
        service = service or DEFAULT_SERVICE

        if not images:
            raise ValidationError("No images uploaded")
        if not self.settings.openai_api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY on server")

        data_uris: List[str] = []
        for upload in images:
            data = await upload.read()
            data_uris.append(image_to_data_uri(data, upload.content_type))

        result = await self._infer(service, data_uris)
        quote = price_job(service, result.area_sqft, result.complexity)

        record_estimate(result.estimation_method, len(data_uris))
        log.info(
            f"🏁 Estimate ready: service={service} method={result.estimation_method} "
            f"area={result.area_sqft} complexity={result.complexity} total={quote.total}"
        )

        return EstimateResponse(
            service=service,
            area_sqft=result.area_sqft,
            complexity=result.complexity,
            rate=quote.rate,
            complexity_factor=quote.complexity_factor,
            total=quote.total,
            notes=result.notes,
            images_analyzed=len(data_uris),
            estimation_method=result.estimation_method,
        )

    async def _infer(self, service: str, data_uris: List[str]) -> InferenceResult:
        try:
            log.info(f"🧠 Running Vision Agent on {len(data_uris)} image(s)...")
            return await run_vision_agent(self._get_client(), service, data_uris)
        except InferenceTransportError as e:
            log.warning(f"AI estimation failed, using Smart Estimator fallback: {e}")
            inc_metric("inference_failures")
            return run_smart_estimator(service)
