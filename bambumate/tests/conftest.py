from __future__ import annotations

import importlib
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).resolve().parent / "fixtures"

# Settings are read at import time, so these must be in place before the app loads.
os.environ.setdefault("RATE_LIMIT_REQUESTS", "1000")
os.environ.setdefault("PROFILES_DIR", str(FIXTURES / "profiles"))

from bambumate.profiles import ProfileRegistry  # noqa: E402
from bambumate.rules import RuleEngine, default_rules  # noqa: E402


def _load_app():
    module = importlib.import_module("bambumate.main")
    return module.app


def _reload_bambumate_modules() -> None:
    for name in list(sys.modules):
        if name == "bambumate" or name.startswith("bambumate."):
            sys.modules.pop(name)


@pytest.fixture()
def client() -> TestClient:
    app = _load_app()
    return TestClient(app)


@pytest.fixture()
def fresh_app(monkeypatch):
    """Re-import the app under patched environment variables, restoring it afterwards."""

    def _load(**env: str):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        _reload_bambumate_modules()
        return importlib.import_module("bambumate.main")

    yield _load

    monkeypatch.undo()
    _reload_bambumate_modules()
    importlib.import_module("bambumate.main")


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture()
def engine() -> RuleEngine:
    return RuleEngine(default_rules())


@pytest.fixture()
def registry() -> ProfileRegistry:
    return ProfileRegistry.from_directory(FIXTURES / "profiles")
