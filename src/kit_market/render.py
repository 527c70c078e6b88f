"""Rich renderables for the marketplace view.

Every function here builds a fresh renderable from the data it is given;
nothing is cached, so a redraw always reflects the current selection.
"""

from typing import Optional, Dict, List, Any

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from kit_market.browse import (
    CATEGORIES,
    KIND_CONFIG,
    card_title,
    component_count_label,
    filter_registry,
    format_name,
    format_result_count,
    get_icon,
)
from kit_market.registry import KINDS, Registry, get_item_id
from kit_market.selection import Selection, selection_key


CARD_WIDTH = 38
MAX_CARD_TAGS = 3
EMPTY_SELECTION_MESSAGE = "No components selected"


def render_card(
    item: Dict[str, Any],
    kind: str,
    selected: bool,
    focused: bool = False,
) -> Panel:
    """Render one registry item as a card."""
    config = KIND_CONFIG[kind]
    icon = config["icon"]
    if kind == "plugins":
        icon = item.get("icon") or icon

    title = Text()
    if selected:
        title.append("✓ ", style="bold green")
    title.append(f"{icon} ")
    title.append(card_title(item, kind), style="bold")

    body = Text()
    body.append(item.get("description") or "", style="dim")

    if kind == "plugins":
        summary = component_count_label(item.get("components"))
        if summary:
            body.append("\n")
            body.append(summary, style=f"italic {config['color']}")

    tags = [str(tag) for tag in (item.get("tags") or [])][:MAX_CARD_TAGS]
    if tags:
        body.append("\n")
        for i, tag in enumerate(tags):
            if i:
                body.append(" ")
            body.append(f" {tag} ", style="black on grey70")

    if focused:
        border = "bold green" if selected else "bold cyan"
    else:
        border = "green" if selected else "dim"

    return Panel(
        body,
        title=title,
        title_align="left",
        border_style=border,
        width=CARD_WIDTH,
    )


def render_grid(
    kind: str,
    items: List[Dict[str, Any]],
    selection: Selection,
    cursor_key: Optional[str] = None,
    hidden: bool = False,
) -> Panel:
    """Render the cards for one kind, marking selected items.

    ``hidden`` means the category filter excludes this kind entirely.
    """
    config = KIND_CONFIG[kind]
    cards = []
    for item in items:
        key = selection_key(config["key"], get_item_id(item, kind))
        cards.append(render_card(item, kind, key in selection, focused=(key == cursor_key)))

    if cards:
        content = Columns(cards)
    elif hidden:
        content = Text("Hidden by category filter", style="dim italic")
    else:
        content = Text(f"No matching {kind}", style="dim italic")

    return Panel(
        content,
        title=f"[bold {config['color']}]{config['icon']} {config['label']}[/bold {config['color']}] [dim]({len(items)})[/dim]",
        title_align="left",
        border_style=config["color"],
    )


def render_selected_panel(
    selection: Selection,
    cursor: Optional[int] = None,
) -> Panel:
    """Render the list of selected components.

    ``cursor`` is the index of the focused entry when the panel has focus.
    """
    if len(selection) == 0:
        return Panel(
            Text(EMPTY_SELECTION_MESSAGE, style="dim italic"),
            title="[bold]Your Stack[/bold]",
            title_align="left",
            border_style="dim",
        )

    lines = Text()
    for i, (kind, item_id) in enumerate(selection.items()):
        if i:
            lines.append("\n")
        focused = i == cursor
        lines.append("→ " if focused else "  ", style="bold cyan")
        lines.append(format_name(item_id), style="bold cyan" if focused else "bold")
        lines.append(f"  {get_icon(kind)} {kind}", style="dim")
        lines.append("  ✕", style="red")

    return Panel(
        lines,
        title=f"[bold]Your Stack[/bold] [dim]({len(selection)})[/dim]",
        title_align="left",
        subtitle="[dim]Tab: focus  Space: remove[/dim]" if cursor is not None else None,
        border_style="cyan" if cursor is not None else "green",
    )


def render_command_panel(command_text: str, copied: bool = False) -> Panel:
    """Render generated install commands."""
    return Panel(
        Text(command_text, style="bold white"),
        title="[bold]Install Commands[/bold]",
        title_align="left",
        subtitle="[green]✓ Copied![/green]" if copied else "[dim]y: copy[/dim]",
        border_style="green" if copied else "cyan",
    )


def render_result_count(total: int) -> Text:
    return Text(format_result_count(total), style="bold")


def render_header(
    category: str,
    search: str,
    sort: str,
    total: int,
    search_active: bool = False,
) -> Text:
    """Category tabs, search box, sort key and result count on two lines."""
    header = Text()
    for i, name in enumerate(CATEGORIES):
        if i:
            header.append(" ")
        label = f" {i + 1} {name.capitalize()} "
        header.append(label, style="bold black on cyan" if name == category else "dim")

    header.append("\n")
    header.append("Search: ", style="cyan")
    if search or search_active:
        header.append(search, style="bold")
        if search_active:
            header.append("▏", style="blink bold cyan")
    else:
        header.append("(press / to search)", style="dim")
    header.append("   Sort: ", style="cyan")
    header.append(sort, style="bold")
    header.append("   ")
    header.append_text(render_result_count(total))
    return header


def render_view(
    registry: Registry,
    selection: Selection,
    category: str = "all",
    search: str = "",
    sort: str = "none",
    cursor_key: Optional[str] = None,
    panel_cursor: Optional[int] = None,
    command_text: Optional[str] = None,
    copied: bool = False,
    search_active: bool = False,
    status: Optional[str] = None,
) -> Group:
    """Compose the whole marketplace view.

    The command panel is only shown once commands were generated and while
    something is selected.
    """
    visible = filter_registry(registry, category, search, sort)
    total = sum(len(items) for items in visible.values())

    parts: List[Any] = [render_header(category, search, sort, total, search_active)]
    for kind in KINDS:
        hidden = category not in ("all", kind)
        parts.append(render_grid(kind, visible[kind], selection, cursor_key, hidden=hidden))

    parts.append(render_selected_panel(selection, panel_cursor))
    if command_text is not None and len(selection) > 0:
        parts.append(render_command_panel(command_text, copied))

    if status:
        parts.append(Text(status, style="yellow"))

    return Group(*parts)
