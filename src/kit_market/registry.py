"""Marketplace registry loading.

The registry is a JSON object with four arrays (``plugins``, ``agents``,
``commands``, ``hooks``). Loading never fails: anything that goes wrong while
fetching or parsing the document is logged and the embedded copy is used.
"""

import os
import copy
import json
import logging
from pathlib import Path
from typing import Optional, Dict, List, Any

import httpx


logger = logging.getLogger(__name__)

KINDS = ["plugins", "agents", "commands", "hooks"]

Registry = Dict[str, List[Dict[str, Any]]]


# =============================================================================
# Embedded Fallback
# =============================================================================

EMBEDDED_REGISTRY: Registry = {
    "plugins": [
        {"id": "fullstack-pro", "name": "Full-Stack Pro", "description": "Complete full-stack development toolkit", "icon": "🚀", "tags": ["fullstack", "development"], "components": {"agents": 5, "commands": 0, "hooks": 0}},
        {"id": "code-quality-suite", "name": "Code Quality Suite", "description": "Comprehensive code quality toolkit", "icon": "✨", "tags": ["quality", "testing"], "components": {"agents": 3, "commands": 2, "hooks": 0}},
        {"id": "documentation-master", "name": "Documentation Master", "description": "Complete documentation suite", "icon": "📚", "tags": ["documentation"], "components": {"agents": 1, "commands": 3, "hooks": 0}},
        {"id": "product-workflow", "name": "Product Workflow", "description": "Product management and release workflow", "icon": "📋", "tags": ["management"], "components": {"agents": 0, "commands": 2, "hooks": 1}},
        {"id": "ui-ux-studio", "name": "UI/UX Studio", "description": "Design-focused toolkit", "icon": "🎨", "tags": ["design", "ui"], "components": {"agents": 2, "commands": 0, "hooks": 1}},
        {"id": "architect-toolkit", "name": "Architect Toolkit", "description": "Senior-level architecture review", "icon": "🏗️", "tags": ["architecture"], "components": {"agents": 3, "commands": 1, "hooks": 0}},
        {"id": "git-workflow-pro", "name": "Git Workflow Pro", "description": "Enhanced git workflow", "icon": "🌿", "tags": ["git", "workflow"], "components": {"agents": 0, "commands": 1, "hooks": 2}},
        {"id": "devops-complete", "name": "DevOps Complete", "description": "Full DevOps toolkit", "icon": "⚙️", "tags": ["devops"], "components": {"agents": 1, "commands": 1, "hooks": 1}},
        {"id": "startup-essentials", "name": "Startup Essentials", "description": "Everything a startup needs", "icon": "🚀", "tags": ["startup"], "components": {"agents": 4, "commands": 4, "hooks": 2}},
        {"id": "enterprise-complete", "name": "Enterprise Complete", "description": "Enterprise-grade development", "icon": "🏢", "tags": ["enterprise"], "components": {"agents": 12, "commands": 7, "hooks": 3}},
    ],
    "agents": [
        {"name": "frontend-developer", "description": "Expert frontend developer", "category": "development-team", "tags": ["react", "vue", "frontend"]},
        {"name": "backend-architect", "description": "Senior backend architect", "category": "development-team", "tags": ["backend", "api"]},
        {"name": "fullstack-developer", "description": "Versatile fullstack developer", "category": "development-team", "tags": ["fullstack"]},
        {"name": "ui-ux-designer", "description": "Skilled UI/UX designer", "category": "development-team", "tags": ["ui", "ux", "design"]},
        {"name": "devops-engineer", "description": "DevOps engineer", "category": "development-team", "tags": ["devops", "ci-cd"]},
        {"name": "code-reviewer", "description": "Meticulous code reviewer", "category": "development-tools", "tags": ["quality", "review"]},
        {"name": "debugger", "description": "Expert debugger", "category": "development-tools", "tags": ["debugging"]},
        {"name": "test-engineer", "description": "Quality-focused test engineer", "category": "development-tools", "tags": ["testing", "qa"]},
        {"name": "typescript-pro", "description": "TypeScript expert", "category": "programming-languages", "tags": ["typescript"]},
        {"name": "database-architect", "description": "Database architect", "category": "database", "tags": ["database", "sql"]},
        {"name": "architect-review", "description": "Senior software architect", "category": "expert-advisors", "tags": ["architecture"]},
        {"name": "api-documenter", "description": "API documentation expert", "category": "documentation", "tags": ["documentation", "api"]},
    ],
    "commands": [
        {"name": "create-architecture-documentation", "description": "Create comprehensive architecture documentation", "category": "documentation", "tags": ["documentation"]},
        {"name": "refactor-code", "description": "Refactor code for better quality", "category": "utilities", "tags": ["refactoring"]},
        {"name": "code-review", "description": "Perform comprehensive code review", "category": "utilities", "tags": ["review"]},
        {"name": "add-changelog", "description": "Create or update CHANGELOG.md", "category": "deployment", "tags": ["changelog"]},
        {"name": "update-docs", "description": "Update project documentation", "category": "documentation", "tags": ["documentation"]},
        {"name": "create-prd", "description": "Create Product Requirements Document", "category": "project-management", "tags": ["prd"]},
        {"name": "generate-api-documentation", "description": "Generate API documentation", "category": "documentation", "tags": ["api"]},
    ],
    "hooks": [
        {"name": "git-commit-settings", "description": "Configure git commit behavior", "category": "global", "tags": ["git"]},
        {"name": "colorful-statusline", "description": "Colorful status line", "category": "statusline", "tags": ["ui"]},
        {"name": "git-branch-statusline", "description": "Git-focused status line", "category": "statusline", "tags": ["git"]},
    ],
}


def get_embedded_registry() -> Registry:
    """Return a fresh copy of the embedded registry."""
    return copy.deepcopy(EMBEDDED_REGISTRY)


# =============================================================================
# Loading
# =============================================================================

def get_github_auth_headers() -> Dict[str, str]:
    """Return Authorization header dict if GH_TOKEN or GITHUB_TOKEN is set."""
    token = (os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()
    return {"Authorization": f"Bearer {token}"} if token else {}


def is_url(location: str) -> bool:
    return location.startswith("http://") or location.startswith("https://")


def normalize_registry(data: Any) -> Registry:
    """Coerce a parsed document into the four-array registry shape.

    Missing or null arrays become empty lists and entries that are not
    objects are dropped. Raises ValueError if ``data`` is not an object.
    """
    if not isinstance(data, dict):
        raise ValueError(f"registry must be a JSON object, got {type(data).__name__}")

    registry: Registry = {}
    for kind in KINDS:
        items = data.get(kind) or []
        if not isinstance(items, list):
            logger.warning("Registry field '%s' is not a list, treating as empty", kind)
            items = []
        registry[kind] = [item for item in items if isinstance(item, dict)]
    return registry


def fetch_registry_document(location: str) -> Any:
    """Read and parse the registry JSON from a URL or a local path.

    Raises on any network, HTTP status, I/O or parse error.
    """
    if is_url(location):
        response = httpx.get(
            location,
            follow_redirects=True,
            headers=get_github_auth_headers(),
        )
        response.raise_for_status()
        return response.json()

    with open(Path(location).expanduser(), "r", encoding="utf-8") as f:
        return json.load(f)


def load_registry(location: str) -> Registry:
    """Load the marketplace registry, falling back to the embedded copy.

    Never raises: the caller always gets a registry with all four kinds.
    """
    try:
        registry = normalize_registry(fetch_registry_document(location))
    except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as e:
        logger.warning("Error loading marketplace data from %s: %s", location, e)
        logger.info("Using embedded marketplace data")
        return get_embedded_registry()

    logger.debug(
        "Loaded registry from %s (%s)",
        location,
        ", ".join(f"{len(registry[k])} {k}" for k in KINDS),
    )
    return registry


def get_item_id(item: Dict[str, Any], kind: str) -> str:
    """Return the id used in selection keys: plugins use ``id``, others ``name``."""
    if kind == "plugins":
        return item.get("id") or item.get("name") or ""
    return item.get("name") or ""


def find_item(registry: Registry, kind: str, item_id: str) -> Optional[Dict[str, Any]]:
    """Find an item of ``kind`` by its id."""
    for item in registry.get(kind, []):
        if get_item_id(item, kind) == item_id:
            return item
    return None
