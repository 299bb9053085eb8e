"""Tests for configuration."""

from shamba_trace.config import DEFAULT_BASE_URL, TraceConfig


def test_defaults(monkeypatch):
    monkeypatch.delenv("SHAMBA_TRACE_BASE_URL", raising=False)
    monkeypatch.delenv("FRONTEND_URL", raising=False)
    monkeypatch.delenv("SHAMBA_TRACE_MAX_WORKERS", raising=False)

    config = TraceConfig.from_env()

    assert config.base_url == DEFAULT_BASE_URL
    assert config.max_workers == 8


def test_from_env_prefers_service_variable(monkeypatch):
    monkeypatch.setenv("SHAMBA_TRACE_BASE_URL", "https://trace.example/")
    monkeypatch.setenv("FRONTEND_URL", "https://frontend.example")
    monkeypatch.setenv("SHAMBA_TRACE_MAX_WORKERS", "3")

    config = TraceConfig.from_env()

    assert config.base_url == "https://trace.example"
    assert config.max_workers == 3


def test_from_env_falls_back_to_frontend_url(monkeypatch):
    monkeypatch.delenv("SHAMBA_TRACE_BASE_URL", raising=False)
    monkeypatch.setenv("FRONTEND_URL", "https://frontend.example")
    monkeypatch.setenv("SHAMBA_TRACE_MAX_WORKERS", "lots")

    config = TraceConfig.from_env()

    assert config.base_url == "https://frontend.example"
    assert config.max_workers == 8


def test_max_workers_floor():
    assert TraceConfig(max_workers=0).max_workers == 1
