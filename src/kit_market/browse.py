"""Filtering, sorting and display helpers for registry items."""

from typing import Dict, List, Any, Iterable, Tuple

from kit_market.registry import KINDS, Registry


CATEGORIES = ["all"] + KINDS

# Per-kind display configuration, used by the generic renderer
KIND_CONFIG: Dict[str, Dict[str, Any]] = {
    "plugins": {
        "key": "plugin",
        "label": "Plugins",
        "icon": "🔌",
        "title": "name",        # plugin names are already display names
        "color": "cyan",
    },
    "agents": {
        "key": "agent",
        "label": "Agents",
        "icon": "🤖",
        "title": "formatted",
        "color": "magenta",
    },
    "commands": {
        "key": "command",
        "label": "Commands",
        "icon": "⚡",
        "title": "slash",       # shown the way the user types it
        "color": "blue",
    },
    "hooks": {
        "key": "hook",
        "label": "Hooks",
        "icon": "🪝",
        "title": "formatted",
        "color": "yellow",
    },
}

# Selection key kind ("plugin") -> registry kind ("plugins")
KIND_BY_KEY = {config["key"]: kind for kind, config in KIND_CONFIG.items()}


# =============================================================================
# Filter / Sort
# =============================================================================

def search_text(item: Dict[str, Any]) -> str:
    """Lowercased text an item is searched by: name, description and tags."""
    tags = " ".join(str(tag) for tag in (item.get("tags") or []))
    return f"{item.get('name') or ''} {item.get('description') or ''} {tags}".lower()


def collation_key(value: Any) -> Tuple[str, str]:
    """Case-insensitive ordering key, raw value breaking ties."""
    text = str(value) if value is not None else ""
    return (text.casefold(), text)


def filter_and_sort(
    items: Iterable[Dict[str, Any]],
    kind: str,
    category: str = "all",
    search: str = "",
    sort: str = "none",
) -> List[Dict[str, Any]]:
    """Filter ``items`` of ``kind`` by category and search text, then sort.

    The category gate is all-or-nothing: any category other than "all" or
    ``kind`` yields an empty list. Search is plain substring containment.
    ``items`` is never modified; a new list is returned.
    """
    if category != "all" and category != kind:
        return []

    filtered = list(items)

    if search:
        needle = search.lower()
        filtered = [item for item in filtered if needle in search_text(item)]

    if sort == "name":
        filtered.sort(key=lambda item: collation_key(item.get("name")))
    elif sort == "category":
        filtered.sort(key=lambda item: collation_key(item.get("category")))

    return filtered


def filter_registry(
    registry: Registry,
    category: str = "all",
    search: str = "",
    sort: str = "none",
) -> Dict[str, List[Dict[str, Any]]]:
    """Apply ``filter_and_sort`` to every kind of the registry."""
    return {
        kind: filter_and_sort(registry.get(kind) or [], kind, category, search, sort)
        for kind in KINDS
    }


def result_count(registry: Registry, category: str = "all", search: str = "") -> int:
    """Total number of items visible across all kinds."""
    return sum(len(items) for items in filter_registry(registry, category, search).values())


def format_result_count(total: int) -> str:
    return f"{total} result{'s' if total != 1 else ''}"


# =============================================================================
# Display Helpers
# =============================================================================

def format_name(name: str) -> str:
    """Turn a hyphenated id into a title: "code-reviewer" -> "Code Reviewer"."""
    return " ".join(word[:1].upper() + word[1:] for word in (name or "").split("-"))


def get_icon(kind: str) -> str:
    """Icon for a kind, accepting either "plugins" or "plugin"."""
    kind = KIND_BY_KEY.get(kind, kind)
    return KIND_CONFIG.get(kind, {}).get("icon", "")


def card_title(item: Dict[str, Any], kind: str) -> str:
    name = item.get("name") or ""
    style = KIND_CONFIG[kind]["title"]
    if style == "slash":
        return f"/{name}"
    if style == "formatted":
        return format_name(name)
    return name


def component_count_label(components: Any) -> str:
    """Summarize a plugin's bundled components, e.g. "5 agents • 2 commands".

    Returns "Bundle" when every count is zero and "" when there is no summary.
    """
    if not components or not isinstance(components, dict):
        return ""
    counts = []
    for kind in ["agents", "commands", "hooks"]:
        count = components.get(kind)
        if isinstance(count, int) and count > 0:
            counts.append(f"{count} {kind}")
    return " • ".join(counts) or "Bundle"
