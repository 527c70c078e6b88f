"""Shared fixtures for kit-market tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point kit-market at a temporary home and clear registry env vars."""
    home = tmp_path / "kit-home"
    monkeypatch.setenv("KIT_MARKET_HOME", str(home))
    for var in ["KIT_MARKET_REGISTRY", "GH_TOKEN", "GITHUB_TOKEN"]:
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def small_registry() -> dict:
    """Two plugins, three agents, no commands or hooks."""
    return {
        "plugins": [
            {
                "id": "sec-pack",
                "name": "Security Pack",
                "description": "Scanners and audit helpers",
                "icon": "🔒",
                "tags": ["security", "audit"],
                "components": {"agents": 2, "commands": 1, "hooks": 0},
            },
            {
                "id": "docs-pack",
                "name": "Docs Pack",
                "description": "Documentation generators",
                "tags": ["docs"],
                "components": {"agents": 0, "commands": 0, "hooks": 0},
            },
        ],
        "agents": [
            {"name": "auditor", "description": "Reviews code", "category": "quality", "tags": ["security"]},
            {"name": "writer", "description": "Writes docs", "category": "docs", "tags": ["docs"]},
            {"name": "builder", "description": "Builds apps", "category": "dev", "tags": ["build"]},
        ],
        "commands": [],
        "hooks": [],
    }


@pytest.fixture
def registry_file(tmp_path: Path, small_registry: dict) -> Path:
    """The small registry written to a marketplace.json file."""
    path = tmp_path / "marketplace.json"
    path.write_text(json.dumps(small_registry), encoding="utf-8")
    return path
