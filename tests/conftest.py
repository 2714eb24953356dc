import json
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from backend.estimator.config import Settings, get_settings
from backend.estimator.errors import InferenceTransportError
from backend.estimator.estimator import Estimator
from backend.estimator.logging_config import reset_metrics
from backend.estimator.main import app, get_estimator


class FakeVisionClient:
    """Stands in for OpenAIVisionClient; records every call."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[dict] = []

    def complete_json(self, system_prompt: str, user_prompt: str, data_uris: List[str]) -> str:
        self.calls.append(
            {"system_prompt": system_prompt, "user_prompt": user_prompt, "data_uris": list(data_uris)}
        )
        if self.error is not None:
            raise self.error
        return self.content if self.content is not None else "{}"


@pytest.fixture(autouse=True)
def _clean_state():
    reset_metrics()
    yield
    app.dependency_overrides.clear()
    reset_metrics()


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", _env_file=None)


@pytest.fixture
def make_client(settings):
    """Build a TestClient whose estimator uses the given fake inference client."""

    def _make(fake: FakeVisionClient, settings_override: Optional[Settings] = None) -> TestClient:
        active = settings_override or settings
        app.dependency_overrides[get_settings] = lambda: active
        app.dependency_overrides[get_estimator] = lambda: Estimator(active, client=fake)
        return TestClient(app)

    return _make


@pytest.fixture
def ai_content():
    def _content(**fields) -> str:
        return json.dumps(fields)

    return _content


@pytest.fixture
def failing_client():
    return FakeVisionClient(error=InferenceTransportError("OpenAI request failed (status=503)"))


@pytest.fixture
def photo_files():
    def _files(count: int = 1, content_type: str = "image/jpeg"):
        return [
            ("images", (f"photo_{i}.jpg", b"\xff\xd8\xff fake jpeg %d" % i, content_type))
            for i in range(count)
        ]

    return _files
