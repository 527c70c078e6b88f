"""Configuration and logging setup for kit-market."""

import os
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any


# =============================================================================
# Constants
# =============================================================================

# Path used by the static page when served next to the marketplace repo
DEFAULT_REGISTRY_LOCATION = ".claude-plugin/marketplace.json"

# Absolute URL the production deployment rewrites the fetch to
REMOTE_REGISTRY_URL = (
    "https://raw.githubusercontent.com/zpaper-com/ClaudeKit/main/.claude-plugin/marketplace.json"
)

DEFAULT_MARKETPLACE = "zpaper-com/ClaudeKit"

SORT_OPTIONS = ["none", "name", "category"]

DEFAULT_CONFIG: Dict[str, Any] = {
    "registry": None,
    "marketplace": DEFAULT_MARKETPLACE,
    "sort": "none",
}


# =============================================================================
# Config File
# =============================================================================

def get_home() -> Path:
    """Return the kit-market home directory (``KIT_MARKET_HOME`` or ~/.kit-market)."""
    override = os.getenv("KIT_MARKET_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".kit-market"


def get_config_path() -> Path:
    """Get the path to the kit-market config file."""
    return get_home() / "config.json"


def load_config() -> Dict[str, Any]:
    """Load the kit-market configuration, filling in defaults.

    A config file that cannot be parsed is treated as missing.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (ValueError, OSError) as e:
            logging.getLogger(__name__).warning("Ignoring unreadable config %s: %s", config_path, e)
            return config
        if isinstance(stored, dict):
            config.update({k: v for k, v in stored.items() if k in DEFAULT_CONFIG})
    return config


def save_config(config: Dict[str, Any]):
    """Save the kit-market configuration."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


def resolve_registry_location(
    cli_location: Optional[str] = None,
    remote: bool = False,
    config: Optional[Dict[str, Any]] = None,
) -> str:
    """Pick the registry location.

    Order: explicit ``--registry``, ``--remote``, ``KIT_MARKET_REGISTRY``,
    the config file, then the default relative path.
    """
    if cli_location:
        return cli_location
    if remote:
        return REMOTE_REGISTRY_URL
    env_location = os.getenv("KIT_MARKET_REGISTRY", "").strip()
    if env_location:
        return env_location
    if config is None:
        config = load_config()
    location = config.get("registry")
    if location is not None and not isinstance(location, str):
        logging.getLogger(__name__).warning("Ignoring non-string registry setting: %r", location)
        location = None
    return location or DEFAULT_REGISTRY_LOCATION


# =============================================================================
# Logging
# =============================================================================

LOG_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def setup_logging(level: str = "warning") -> None:
    """Configure Python logging with a Rich handler on stderr.

    Maps string level ('error', 'warning', 'info', 'debug') to logging constants.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    log_level = LOG_LEVELS.get(level.lower(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(log_level)

    if not root.handlers:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=(log_level == logging.DEBUG),
            show_path=False,
            show_time=False,
        )
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(log_level)

    # httpx logs every request at INFO
    if log_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
