"""Selected components and the install commands generated from them."""

from typing import Dict, List, Iterator, Tuple

from kit_market.browse import KIND_BY_KEY


EMPTY_SELECTION_COMMAND = "# Select components to generate installation commands"


def selection_key(kind: str, item_id: str) -> str:
    """Build a selection key such as ``agent:code-reviewer``."""
    return f"{kind}:{item_id}"


def parse_selection_key(key: str) -> Tuple[str, str]:
    """Split a selection key into ``(kind, id)``.

    Only the first colon separates the kind, so ids may contain colons.
    Raises ValueError for malformed keys or unknown kinds.
    """
    kind, sep, item_id = key.partition(":")
    if not sep or not item_id:
        raise ValueError(f"Invalid selection '{key}', expected kind:id (e.g. agent:code-reviewer)")
    if kind not in KIND_BY_KEY:
        raise ValueError(
            f"Unknown kind '{kind}' in '{key}'. Valid kinds: {', '.join(KIND_BY_KEY)}"
        )
    return kind, item_id


class Selection:
    """Set of selection keys, remembering insertion order.

    Membership is the only meaning; the order is used to keep generated
    commands in the order items were picked.
    """

    def __init__(self, keys=None):
        self._keys: Dict[str, None] = {}
        for key in keys or []:
            parse_selection_key(key)
            self._keys[key] = None

    def toggle(self, kind: str, item_id: str) -> None:
        key = selection_key(kind, item_id)
        if key in self._keys:
            del self._keys[key]
        else:
            self._keys[key] = None

    def clear(self) -> None:
        self._keys.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def items(self) -> List[Tuple[str, str]]:
        """Return ``(kind, id)`` pairs in insertion order."""
        pairs = []
        for key in self._keys:
            kind, _, item_id = key.partition(":")
            pairs.append((kind, item_id))
        return pairs

    def __repr__(self) -> str:
        return f"Selection({list(self._keys)!r})"


def generate_commands(selection: Selection) -> str:
    """Turn the selection into install commands, one per line.

    Plugins, commands and hooks are installed one per line; agents are
    installed together on a single line. Blocks are ordered plugins, agents,
    commands, hooks.
    """
    if len(selection) == 0:
        return EMPTY_SELECTION_COMMAND

    components: Dict[str, List[str]] = {
        "plugin": [],
        "agent": [],
        "command": [],
        "hook": [],
    }
    for kind, item_id in selection.items():
        components[kind].append(item_id)

    commands = []
    for plugin in components["plugin"]:
        commands.append(f"/plugin install {plugin}")
    if components["agent"]:
        commands.append(f"/agent install {' '.join(components['agent'])}")
    for command in components["command"]:
        commands.append(f"/command install {command}")
    for hook in components["hook"]:
        commands.append(f"/hook install {hook}")

    return "\n".join(commands)


def quick_install_command(marketplace: str) -> str:
    """Command that adds the marketplace itself to the host tool."""
    return f"/plugin marketplace add {marketplace}"
