from __future__ import annotations

from vysper.config import Settings, load_settings, mask_api_key
from vysper.state import ServiceState


def test_load_settings_reads_environment() -> None:
    settings = load_settings(
        {
            "GEMINI_API_KEY": " AIzaSyExampleKey123456 ",
            "VYSPER_MODEL": "gemini-1.5-pro",
            "VYSPER_TIMEOUT_S": "12.5",
            "VYSPER_MAX_RETRIES": "5",
            "VYSPER_FALLBACK_ENABLED": "false",
            "VYSPER_PREFLIGHT": "0",
            "VYSPER_TRANSPORT": "mock",
        }
    )
    assert settings.api_key == "AIzaSyExampleKey123456"
    assert settings.model == "gemini-1.5-pro"
    assert settings.timeout_s == 12.5
    assert settings.max_retries == 5
    assert not settings.fallback_enabled
    assert not settings.preflight_enabled
    assert settings.transport_mode == "mock"


def test_invalid_values_fall_back_to_defaults() -> None:
    settings = load_settings({"VYSPER_TIMEOUT_S": "soon", "VYSPER_MAX_RETRIES": "0", "VYSPER_TRANSPORT": "fax"})
    assert settings.timeout_s == 30.0
    assert settings.max_retries == 1
    assert settings.transport_mode == "remote"
    assert settings.api_key is None


def test_placeholder_key_is_not_configured() -> None:
    assert not Settings(api_key="your-api-key-here").api_key_configured
    assert not Settings(api_key=None).api_key_configured
    assert Settings(api_key="AIzaSyRealLookingKey").api_key_configured


def test_endpoint_and_redaction() -> None:
    settings = Settings(api_key="abc123")
    assert settings.endpoint_url() == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent?key=abc123"
    )
    assert "abc123" not in settings.redacted_endpoint()
    assert settings.api_host == "generativelanguage.googleapis.com"
    assert settings.to_dict()["api_key"] == "******"


def test_mask_api_key() -> None:
    assert mask_api_key(None) == "NOT SET"
    assert mask_api_key("AIzaSyExampleKey123456") == "AIzaSyEx...3456"


def test_state_counters_survive_reinitialization() -> None:
    state = ServiceState()
    state.mark_initialized()
    assert state.next_request_id() == 1
    assert state.next_request_id() == 2
    state.record_error()
    state.mark_uninitialized()

    snapshot = state.snapshot()
    assert not snapshot.initialized
    assert snapshot.to_dict() == {
        "initialized": False,
        "request_count": 2,
        "error_count": 1,
        "success_rate": 50.0,
    }
