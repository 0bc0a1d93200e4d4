from __future__ import annotations

import pytest

from pynojs._constants import DEFAULT_PIPELINE
from pynojs.config import EngineConfig
from pynojs.exceptions import NoJsConfigError


def test_defaults() -> None:
    config = EngineConfig()
    assert config.language == "en"
    assert config.autoescape is True
    assert config.pipeline == DEFAULT_PIPELINE
    assert dict(config.namespace) == {}


def test_from_env_reads_nojs_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOJS_LANGUAGE", "pt-br")
    monkeypatch.setenv("NOJS_BASE_URL", "https://example.com/app")
    monkeypatch.setenv("NOJS_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("NOJS_AUTOESCAPE", "off")
    monkeypatch.setenv("NOJS_PIPELINE", "conditionals, loops,")

    config = EngineConfig.from_env()

    assert config.language == "pt-br"
    assert config.base_url == "https://example.com/app"
    assert config.request_timeout == 2.5
    assert config.autoescape is False
    assert config.pipeline == ("conditionals", "loops")


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOJS_LANGUAGE", "pt-br")
    monkeypatch.setenv("NOJS_REQUEST_TIMEOUT", "not-a-number")

    config = EngineConfig.from_env(language="es", request_timeout=3.0)

    assert config.language == "es"
    assert config.request_timeout == 3.0


def test_invalid_timeout_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOJS_REQUEST_TIMEOUT", "soon")
    with pytest.raises(NoJsConfigError):
        EngineConfig.from_env()


def test_unknown_scanner_is_rejected() -> None:
    with pytest.raises(NoJsConfigError, match="teleport"):
        EngineConfig(pipeline=("loops", "teleport"))


def test_non_positive_timeout_is_rejected() -> None:
    with pytest.raises(NoJsConfigError):
        EngineConfig(request_timeout=0)


def test_resolve_url() -> None:
    config = EngineConfig(base_url="https://example.com/app/")
    assert config.resolve_url("/api/user") == "https://example.com/app/api/user"
    assert config.resolve_url("http://other.test/x") == "http://other.test/x"
    assert EngineConfig().resolve_url("/api/user") == "/api/user"
