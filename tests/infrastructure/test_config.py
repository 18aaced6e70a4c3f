"""Tests for environment-driven configuration."""

from verifai.infrastructure.config import VerifAIConfig


def test_defaults(monkeypatch):
    for name in ("VERIFAI_OLLAMA_ENDPOINT", "VERIFAI_SEARCH_RECENCY", "VERIFAI_SETTINGS_PATH", "VERIFAI_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = VerifAIConfig.from_env()

    assert config.ollama_endpoint == "http://localhost:11434"
    assert config.max_search_iterations == 3
    assert config.max_search_results == 7
    assert config.search_recency == "m"
    assert config.settings_path is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("VERIFAI_OLLAMA_ENDPOINT", "http://gpu-box:11434/")
    monkeypatch.setenv("VERIFAI_MAX_SEARCH_ITERATIONS", "5")
    monkeypatch.setenv("VERIFAI_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("VERIFAI_SEARCH_RECENCY", "")
    monkeypatch.setenv("VERIFAI_LOG_LEVEL", "debug")

    config = VerifAIConfig.from_env()

    assert config.ollama_endpoint == "http://gpu-box:11434"
    assert config.max_search_iterations == 5
    assert config.request_timeout == 30.0
    assert config.search_recency is None
    assert config.log_level == "DEBUG"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("VERIFAI_MAX_RETRIES", "lots")
    monkeypatch.setenv("VERIFAI_TOOL_CACHE_TTL", "soon")

    config = VerifAIConfig.from_env()

    assert config.max_retries == 3
    assert config.tool_cache_ttl == 3600.0


def test_component_configs():
    config = VerifAIConfig(ollama_endpoint="http://ollama.test", max_retries=2, request_timeout=60.0, search_recency=None)

    assert config.ollama_config().base_url == "http://ollama.test"
    assert config.ollama_config().max_attempts == 2
    assert config.search_config().recency is None
    assert config.orchestrator_config().request_timeout == 60.0
