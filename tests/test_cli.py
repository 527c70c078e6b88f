"""Tests for the kit-market command line."""

import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from kit_market import app
from kit_market import registry as registry_module


runner = CliRunner()


def invoke(registry_path: Path, *args: str):
    return runner.invoke(app, ["--registry", str(registry_path), *args])


def test_search_by_tag_counts_results(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--search", "security")

    assert result.exit_code == 0
    assert "2 results" in result.stdout
    assert "Security Pack" in result.stdout
    assert "Auditor" in result.stdout
    assert "Writer" not in result.stdout


def test_generate_single_plugin(registry_file: Path) -> None:
    result = invoke(registry_file, "generate", "--select", "plugin:sec-pack")

    assert result.exit_code == 0
    assert result.stdout.strip().splitlines() == ["/plugin install sec-pack"]


def test_generate_batches_agents(registry_file: Path) -> None:
    result = invoke(
        registry_file,
        "generate",
        "-s", "agent:writer",
        "-s", "plugin:docs-pack",
        "-s", "agent:auditor",
        "-s", "agent:writer",
    )

    assert result.exit_code == 0
    assert result.stdout.strip().splitlines() == [
        "/plugin install docs-pack",
        "/agent install writer auditor",
    ]


def test_generate_rejects_malformed_key(registry_file: Path) -> None:
    result = invoke(registry_file, "generate", "--select", "writer")

    assert result.exit_code == 1
    assert "Error:" in result.stdout


def test_generate_rejects_unknown_item(registry_file: Path) -> None:
    result = invoke(registry_file, "generate", "--select", "agent:ghost")

    assert result.exit_code == 1
    assert "not found in registry" in result.stdout


def test_list_agents_category_count(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--category", "agents")

    assert result.exit_code == 0
    assert "3 results" in result.stdout
    assert "Hidden by category filter" in result.stdout


def test_list_single_result_is_singular(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "-s", "builds")

    assert result.exit_code == 0
    assert "1 result" in result.stdout
    assert "1 results" not in result.stdout


def test_list_rejects_unknown_category(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--category", "skills")

    assert result.exit_code == 1
    assert "Unknown category" in result.stdout


def test_list_json(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--json", "--sort", "name", "-c", "agents")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["results"] == 3
    assert [a["name"] for a in data["agents"]] == ["auditor", "builder", "writer"]
    assert data["plugins"] == []


def test_list_with_selection_and_generate(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--select", "agent:writer", "--generate")

    assert result.exit_code == 0
    assert "Your Stack" in result.stdout
    assert "/agent install writer" in result.stdout


def test_list_generate_without_selection_prints_placeholder(registry_file: Path) -> None:
    result = invoke(registry_file, "list", "--generate")

    assert result.exit_code == 0
    assert "# Select components to generate installation commands" in result.stdout


def test_unreachable_registry_uses_embedded_data(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_get(url, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(registry_module.httpx, "get", fake_get)

    result = runner.invoke(app, ["--remote", "list", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["results"] == 32
    assert all(data[kind] for kind in ["plugins", "agents", "commands", "hooks"])


def test_browse_without_tty_prints_listing(registry_file: Path) -> None:
    result = invoke(registry_file, "browse")

    assert result.exit_code == 0
    assert "Interactive mode unavailable" in result.stdout
    assert "5 results" in result.stdout


def test_show_item(registry_file: Path) -> None:
    result = invoke(registry_file, "show", "SEC-PACK")

    assert result.exit_code == 0
    assert "Security Pack" in result.stdout
    assert "/plugin install sec-pack" in result.stdout
    assert "2 agents • 1 commands" in result.stdout


def test_show_missing_item(registry_file: Path) -> None:
    result = invoke(registry_file, "show", "ghost", "--kind", "agent")

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_quickstart() -> None:
    result = runner.invoke(app, ["quickstart"])

    assert result.exit_code == 0
    assert "/plugin marketplace add zpaper-com/ClaudeKit" in result.stdout


def test_config_set_and_show(isolated_home: Path, registry_file: Path) -> None:
    result = runner.invoke(app, ["config", "set", "registry", str(registry_file)])
    assert result.exit_code == 0

    stored = json.loads((isolated_home / "config.json").read_text(encoding="utf-8"))
    assert stored["registry"] == str(registry_file)

    # the configured registry is now used without --registry
    listing = runner.invoke(app, ["list", "--json"])
    assert json.loads(listing.stdout)["results"] == 5


def test_config_set_rejects_unknown_key() -> None:
    result = runner.invoke(app, ["config", "set", "colour", "blue"])

    assert result.exit_code == 1
    assert "Unknown key" in result.stdout


def test_config_set_rejects_bad_sort() -> None:
    result = runner.invoke(app, ["config", "set", "sort", "random"])

    assert result.exit_code == 1


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "Version" in result.stdout
