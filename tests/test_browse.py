"""Tests for filtering, sorting and display helpers."""

import copy

import pytest

from kit_market.browse import (
    card_title,
    component_count_label,
    filter_and_sort,
    format_name,
    format_result_count,
    get_icon,
    result_count,
)
from kit_market.registry import KINDS, get_embedded_registry


@pytest.mark.parametrize("category", ["plugins", "commands", "hooks"])
def test_category_gate_hides_other_kinds(small_registry: dict, category: str) -> None:
    assert filter_and_sort(small_registry["agents"], "agents", category=category) == []


def test_category_all_and_matching_kind_pass(small_registry: dict) -> None:
    agents = small_registry["agents"]

    assert filter_and_sort(agents, "agents", category="all") == agents
    assert filter_and_sort(agents, "agents", category="agents") == agents


def test_search_matches_name_description_and_tags() -> None:
    registry = get_embedded_registry()

    for search in ["review", "git", "api", "qa", "xyz-no-match"]:
        for kind in KINDS:
            items = registry[kind]
            kept = filter_and_sort(items, kind, search=search)
            for item in items:
                text = f"{item.get('name', '')} {item.get('description', '')} {' '.join(item.get('tags', []))}".lower()
                assert (item in kept) == (search in text)


def test_search_is_case_insensitive(small_registry: dict) -> None:
    kept = filter_and_sort(small_registry["plugins"], "plugins", search="SECURITY")

    assert [item["id"] for item in kept] == ["sec-pack"]


def test_search_is_substring_not_tokens(small_registry: dict) -> None:
    kept = filter_and_sort(small_registry["agents"], "agents", search="ws co")

    assert [item["name"] for item in kept] == ["auditor"]  # "reviews code"


def test_sort_by_name_is_idempotent_and_pure(small_registry: dict) -> None:
    agents = small_registry["agents"]
    original = copy.deepcopy(agents)

    by_name = filter_and_sort(agents, "agents", sort="name")
    filter_and_sort(agents, "agents", sort="category")
    again = filter_and_sort(agents, "agents", sort="name")

    assert [a["name"] for a in by_name] == ["auditor", "builder", "writer"]
    assert again == by_name
    assert agents == original


def test_sort_by_category(small_registry: dict) -> None:
    by_category = filter_and_sort(small_registry["agents"], "agents", sort="category")

    assert [a["category"] for a in by_category] == ["dev", "docs", "quality"]


def test_no_sort_keeps_registry_order(small_registry: dict) -> None:
    result = filter_and_sort(small_registry["agents"], "agents", sort="none")

    assert [a["name"] for a in result] == ["auditor", "writer", "builder"]


def test_missing_fields_sort_first() -> None:
    items = [{"name": "beta"}, {"description": "no name"}, {"name": "Alpha"}]

    by_name = filter_and_sort(items, "hooks", sort="name")
    by_category = filter_and_sort(items, "hooks", sort="category")

    assert by_name == [{"description": "no name"}, {"name": "Alpha"}, {"name": "beta"}]
    # every category is missing: stable, original order
    assert by_category == items


def test_result_count(small_registry: dict) -> None:
    assert result_count(small_registry) == 5
    assert result_count(small_registry, category="agents") == 3
    assert result_count(small_registry, search="security") == 2
    assert result_count(small_registry, category="hooks") == 0


def test_format_result_count() -> None:
    assert format_result_count(0) == "0 results"
    assert format_result_count(1) == "1 result"
    assert format_result_count(2) == "2 results"


def test_format_name() -> None:
    assert format_name("code-reviewer") == "Code Reviewer"
    assert format_name("debugger") == "Debugger"
    assert format_name("") == ""


def test_card_titles() -> None:
    assert card_title({"name": "UI/UX Studio"}, "plugins") == "UI/UX Studio"
    assert card_title({"name": "code-review"}, "commands") == "/code-review"
    assert card_title({"name": "code-reviewer"}, "agents") == "Code Reviewer"
    assert card_title({"name": "git-commit-settings"}, "hooks") == "Git Commit Settings"


def test_component_count_label() -> None:
    assert component_count_label({"agents": 5, "commands": 0, "hooks": 0}) == "5 agents"
    assert component_count_label({"agents": 1, "commands": 1, "hooks": 2}) == "1 agents • 1 commands • 2 hooks"
    assert component_count_label({"agents": 0, "commands": 0, "hooks": 0}) == "Bundle"
    assert component_count_label(None) == ""


def test_get_icon_accepts_both_kind_spellings() -> None:
    assert get_icon("agent") == get_icon("agents") == "🤖"
    assert get_icon("unknown") == ""
