"""Interactive marketplace browser.

A single-threaded key loop: each key press changes one piece of state and
the whole view is rebuilt from scratch.

Controls:
- ↑/↓: move the cursor
- Space: toggle the item under the cursor (remove, when the stack has focus)
- Tab: switch focus between the grids and the selected stack
- ←/→ or 1-5: choose category
- /: search (type, Backspace to delete, Enter/Esc to finish)
- s: cycle sort (none, name, category)
- c: clear selection
- g: generate install commands
- y: copy commands (or the quick-install command)
- Enter: done
- q/Esc: quit
"""

import time
import logging
from typing import Optional, List, Tuple

import readchar
from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

from kit_market.browse import CATEGORIES, KIND_CONFIG, filter_registry
from kit_market.clipboard import COPIED_FEEDBACK_SECONDS, copy_text
from kit_market.config import DEFAULT_MARKETPLACE, SORT_OPTIONS
from kit_market.registry import KINDS, Registry, get_item_id
from kit_market.render import render_view
from kit_market.selection import (
    EMPTY_SELECTION_COMMAND,
    Selection,
    generate_commands,
    quick_install_command,
    selection_key,
)


logger = logging.getLogger(__name__)

HELP_LINE = (
    "↑/↓: move  Space: toggle  Tab: stack  ←/→: category  /: search  "
    "s: sort  c: clear  g: generate  y: copy  Enter: done  q: quit"
)


def get_key() -> str:
    """Read a single keypress and name the ones the browser cares about."""
    key = readchar.readkey()

    if key == readchar.key.UP or key == readchar.key.CTRL_P:
        return 'up'
    if key == readchar.key.DOWN or key == readchar.key.CTRL_N:
        return 'down'
    if key == readchar.key.LEFT:
        return 'left'
    if key == readchar.key.RIGHT:
        return 'right'
    if key in (readchar.key.ENTER, "\r", "\n"):
        return 'enter'
    if key == readchar.key.ESC:
        return 'esc'
    if key == readchar.key.TAB:
        return 'tab'
    if key == readchar.key.BACKSPACE:
        return 'backspace'
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    if key == ' ':
        return 'space'
    return key


class BrowseSession:
    """State of one browsing session: view state, selection and cursor."""

    def __init__(
        self,
        registry: Registry,
        sort: str = "none",
        marketplace: str = DEFAULT_MARKETPLACE,
        selection: Optional[Selection] = None,
    ):
        self.registry = registry
        self.selection = selection if selection is not None else Selection()
        self.category = "all"
        self.search = ""
        self.sort = sort if sort in SORT_OPTIONS else "none"
        self.marketplace = marketplace

        self.cursor = 0
        self.panel_cursor = 0
        self.focus = "grid"
        self.search_active = False
        self.command_text: Optional[str] = None
        self.copied_at: Optional[float] = None
        self.status: Optional[str] = None
        self.confirmed = False

    # -- derived state -------------------------------------------------------

    def visible_items(self) -> List[Tuple[str, str]]:
        """``(kind, id)`` of every visible card, in display order."""
        visible = filter_registry(self.registry, self.category, self.search, self.sort)
        return [
            (KIND_CONFIG[kind]["key"], get_item_id(item, kind))
            for kind in KINDS
            for item in visible[kind]
        ]

    def visible_keys(self) -> List[str]:
        return [selection_key(kind, item_id) for kind, item_id in self.visible_items()]

    def cursor_item(self) -> Optional[Tuple[str, str]]:
        if self.focus != "grid":
            return None
        items = self.visible_items()
        if not items:
            return None
        return items[min(self.cursor, len(items) - 1)]

    def cursor_key(self) -> Optional[str]:
        current = self.cursor_item()
        return selection_key(*current) if current else None

    @property
    def copied(self) -> bool:
        if self.copied_at is None:
            return False
        return time.monotonic() - self.copied_at < COPIED_FEEDBACK_SECONDS

    def render(self) -> Group:
        view = render_view(
            self.registry,
            self.selection,
            category=self.category,
            search=self.search,
            sort=self.sort,
            cursor_key=self.cursor_key(),
            panel_cursor=self.panel_cursor if self.focus == "panel" else None,
            command_text=self.command_text,
            copied=self.copied,
            search_active=self.search_active,
            status=self.status,
        )
        return Group(view, Text(HELP_LINE, style="dim"))

    # -- mutations -----------------------------------------------------------

    def set_category(self, category: str) -> None:
        self.category = category
        self.cursor = 0

    def set_search(self, search: str) -> None:
        self.search = search.lower()
        self.cursor = 0

    def toggle(self, kind: str, item_id: str) -> None:
        self.selection.toggle(kind, item_id)
        if len(self.selection) == 0:
            self.command_text = None
            self.focus = "grid"
        self.panel_cursor = min(self.panel_cursor, max(len(self.selection) - 1, 0))

    def clear(self) -> None:
        self.selection.clear()
        self.command_text = None
        self.focus = "grid"
        self.panel_cursor = 0

    def generate(self) -> str:
        self.command_text = generate_commands(self.selection)
        if len(self.selection) == 0:
            self.status = EMPTY_SELECTION_COMMAND
        return self.command_text

    def copy(self) -> None:
        if self.command_text is not None and len(self.selection) > 0:
            text = self.command_text
        else:
            text = quick_install_command(self.marketplace)
        if copy_text(text):
            self.copied_at = time.monotonic()

    def move(self, step: int) -> None:
        if self.focus == "panel":
            count = len(self.selection)
            if count:
                self.panel_cursor = (self.panel_cursor + step) % count
            return
        count = len(self.visible_keys())
        if count:
            self.cursor = (min(self.cursor, count - 1) + step) % count

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the session should end."""
        self.status = None

        if self.search_active:
            if key in ('enter', 'esc'):
                self.search_active = False
                return True
            if key == 'backspace':
                self.set_search(self.search[:-1])
                return True
            if key == 'space':
                self.set_search(self.search + " ")
                return True
            if len(key) == 1 and key.isprintable():
                self.set_search(self.search + key)
                return True

        if key == 'up':
            self.move(-1)
        elif key == 'down':
            self.move(1)
        elif key == 'space':
            if self.focus == "panel":
                pairs = self.selection.items()
                if pairs:
                    self.toggle(*pairs[min(self.panel_cursor, len(pairs) - 1)])
            else:
                current = self.cursor_item()
                if current is not None:
                    self.toggle(*current)
        elif key == 'tab':
            if self.focus == "grid" and len(self.selection) > 0:
                self.focus = "panel"
                self.panel_cursor = 0
            else:
                self.focus = "grid"
        elif key in ('left', 'right'):
            step = -1 if key == 'left' else 1
            index = CATEGORIES.index(self.category)
            self.set_category(CATEGORIES[(index + step) % len(CATEGORIES)])
        elif key in ('1', '2', '3', '4', '5'):
            self.set_category(CATEGORIES[int(key) - 1])
        elif key == '/':
            self.search_active = True
        elif key == 's':
            self.sort = SORT_OPTIONS[(SORT_OPTIONS.index(self.sort) + 1) % len(SORT_OPTIONS)]
        elif key == 'c':
            self.clear()
        elif key == 'g':
            self.generate()
        elif key == 'y':
            self.copy()
        elif key == 'enter':
            self.confirmed = True
            return False
        elif key in ('q', 'esc'):
            return False
        return True


def run_browser(session: BrowseSession, console: Optional[Console] = None) -> BrowseSession:
    """Run the key loop until the user finishes or quits.

    The view is rebuilt on every refresh, so the "Copied!" marker clears
    by itself after a couple of seconds. Live refreshes from its own thread
    while holding ``live._lock``; key handling takes the same lock so a
    refresh never renders half-applied state.
    """
    console = console or Console()
    with Live(
        get_renderable=session.render,
        console=console,
        transient=True,
        auto_refresh=True,
        refresh_per_second=4,
        screen=True,
    ) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                session.confirmed = False
                break
            with live._lock:
                running = session.handle_key(key)
            if not running:
                break
            live.refresh()
    logger.debug("Browser closed with %d selected", len(session.selection))
    return session
