import json
from typing import Any, Dict, List, Optional

from openai import APIError, OpenAI

from .errors import InferenceTransportError
from .logging_config import log

TEMPERATURE = 0.2


# --- Helpers ---

def build_messages(system_prompt: str, user_prompt: str, data_uris: List[str]) -> List[Dict[str, Any]]:
    """System message plus one user message: the text first, then one part per image."""
    content: List[Dict[str, Any]] = [{"type": "text", "text": user_prompt}]
    content.extend({"type": "image_url", "image_url": {"url": uri}} for uri in data_uris)
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": content},
    ]


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse model output that should be a JSON object.
    Returns {} for empty, malformed or non-object content.
    """
    if not text:
        return {}
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        log.warning("Model returned content that is not valid JSON.")
        return {}
    if not isinstance(parsed, dict):
        log.warning("Model returned JSON that is not an object.")
        return {}
    return parsed


# --- Client ---

class OpenAIVisionClient:
    """Thin wrapper over the chat completions endpoint for image + prompt requests."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def complete_json(self, system_prompt: str, user_prompt: str, data_uris: List[str]) -> str:
        """
        Send the prompts and images, asking for a JSON object back.
        Returns the raw message content ("{}" when the model sent nothing).
        Raises InferenceTransportError on any API or connection failure.
        """
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(system_prompt, user_prompt, data_uris),
                temperature=TEMPERATURE,
                response_format={"type": "json_object"},
            )
        except APIError as e:
            status = getattr(e, "status_code", None)
            raise InferenceTransportError(f"OpenAI request failed (status={status}): {e}") from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            return "{}"
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or "{}"
