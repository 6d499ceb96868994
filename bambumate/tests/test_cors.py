from __future__ import annotations

import pytest
from fastapi.middleware.cors import CORSMiddleware


def _cors_options(main):
    cors_layers = [m for m in main.app.user_middleware if m.cls is CORSMiddleware]
    assert cors_layers, "CORS middleware should be registered"
    layer = cors_layers[0]
    return getattr(layer, "kwargs", None) or layer.options


def test_production_cors_uses_allowlist(fresh_app):
    main = fresh_app(
        ENVIRONMENT="production",
        ALLOWED_ORIGINS="https://app.example.com,https://console.example.com",
    )
    assert _cors_options(main)["allow_origins"] == [
        "https://app.example.com",
        "https://console.example.com",
    ]


def test_production_without_allowlist_fails(fresh_app, monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    with pytest.raises(RuntimeError):
        fresh_app(ENVIRONMENT="production")


def test_development_cors_allows_any_origin(fresh_app, monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    main = fresh_app(ENVIRONMENT="development")
    assert _cors_options(main)["allow_origins"] == ["*"]
