import base64

import pytest
from pydantic import ValidationError as SettingsValidationError

from backend.estimator.config import Settings, get_settings
from backend.estimator.errors import (
    ConfigurationError,
    EstimatorError,
    InferenceTransportError,
    ValidationError,
)
from backend.estimator.utils import image_to_data_uri

ENV_NAMES = ("OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_BASE_URL", "OPENAI_TIMEOUT", "CORS_ORIGINS")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_read_environment(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-live")
    clean_env.setenv("OPENAI_MODEL", "gpt-4o")
    clean_env.setenv("OPENAI_TIMEOUT", "12.5")
    clean_env.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = Settings(_env_file=None)

    assert settings.openai_api_key == "sk-live"
    assert settings.openai_model == "gpt-4o"
    assert settings.openai_timeout == 12.5
    assert settings.openai_base_url is None
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.inference_configured


def test_env_names_are_case_insensitive(clean_env):
    clean_env.setenv("openai_model", "gpt-4.1-mini")
    assert Settings(_env_file=None).openai_model == "gpt-4.1-mini"


def test_settings_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_timeout == 60.0
    assert settings.cors_origins == ["*"]
    assert not settings.inference_configured


@pytest.mark.parametrize("value", ["", "   "])
def test_blank_api_key_counts_as_missing(clean_env, value):
    clean_env.setenv("OPENAI_API_KEY", value)
    assert Settings(_env_file=None).openai_api_key is None


def test_blank_values_passed_directly_are_normalised():
    settings = Settings(openai_api_key=" ", openai_model="", openai_base_url="", _env_file=None)
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_base_url is None


def test_empty_cors_list_means_any_origin(clean_env):
    clean_env.setenv("CORS_ORIGINS", " , ")
    assert Settings(_env_file=None).cors_origins == ["*"]


@pytest.mark.parametrize("value", ["soon", "-5", "0"])
def test_bad_timeout_is_rejected(clean_env, value):
    clean_env.setenv("OPENAI_TIMEOUT", value)
    with pytest.raises(SettingsValidationError):
        Settings(_env_file=None)


def test_settings_read_from_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("OPENAI_API_KEY=sk-from-file\nUNRELATED=1\n", encoding="utf-8")
    assert Settings(_env_file=env_file).openai_api_key == "sk-from-file"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_error_status_codes():
    assert ValidationError("No images uploaded").status_code == 400
    assert ConfigurationError("Missing OPENAI_API_KEY on server").status_code == 500
    assert EstimatorError("teapot", status_code=418).status_code == 418


def test_data_uri_uses_declared_type():
    uri = image_to_data_uri(b"\x89PNG", "image/png")
    assert uri == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()


def test_data_uri_defaults_to_jpeg():
    assert image_to_data_uri(b"abc", None).startswith("data:image/jpeg;base64,")
    assert image_to_data_uri(b"abc", "").startswith("data:image/jpeg;base64,")


def test_transport_error_keeps_base_status():
    assert InferenceTransportError("down").status_code == EstimatorError.status_code
