#!/usr/bin/env python3
"""
Kit Market - browse a plugin marketplace and build an install stack.

Loads a marketplace registry (plugins, agents, commands, hooks), lets you
filter, search and sort it, pick components, and prints the install
commands to paste into your coding agent.

Usage:
    uv tool install kit-market
    kit-market browse
    kit-market list --category agents --search review
    kit-market generate -s plugin:fullstack-pro -s agent:code-reviewer
"""

import sys
import importlib.metadata
from typing import Optional, List, Dict, Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kit_market.browse import (
    CATEGORIES,
    KIND_BY_KEY,
    KIND_CONFIG,
    component_count_label,
    filter_registry,
)
from kit_market.clipboard import copy_text
from kit_market.config import (
    DEFAULT_CONFIG,
    LOG_LEVELS,
    SORT_OPTIONS,
    get_config_path,
    load_config,
    resolve_registry_location,
    save_config,
    setup_logging,
)
from kit_market.interactive import BrowseSession, run_browser
from kit_market.registry import KINDS, Registry, find_item, get_item_id, load_registry
from kit_market.render import render_card, render_command_panel, render_view
from kit_market.selection import (
    Selection,
    generate_commands,
    parse_selection_key,
    quick_install_command,
)


# Package version - keep in sync with pyproject.toml
__version__ = "0.1.0"

BANNER = """
 ╦╔═╦╔╦╗  ╔╦╗╔═╗╦═╗╦╔═╔═╗╔╦╗
 ╠╩╗║ ║   ║║║╠═╣╠╦╝╠╩╗║╣  ║
 ╩ ╩╩ ╩   ╩ ╩╩ ╩╩╚═╩ ╩╚═╝ ╩
"""

console = Console()
app = typer.Typer(
    name="kit-market",
    help="Browse a plugin marketplace and build an install stack",
    add_completion=False,
)

config_app = typer.Typer(
    help="Show or change kit-market settings",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    registry: Optional[str] = typer.Option(
        None, "--registry", "-r",
        help="Registry location: path to marketplace.json or an http(s) URL",
    ),
    remote: bool = typer.Option(
        False, "--remote",
        help="Load the published registry from GitHub",
    ),
    log_level: str = typer.Option(
        "warning", "--log-level",
        help="Diagnostic log level: error, warning, info, debug",
    ),
):
    """
    Browse a plugin marketplace and build an install stack.
    """
    if log_level.lower() not in LOG_LEVELS:
        console.print(f"[red]Error:[/red] Unknown log level: {log_level}")
        console.print(f"Valid levels: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)
    setup_logging(log_level)

    ctx.obj = {
        "registry_option": registry,
        "remote": remote,
        "registry": None,
    }

    if ctx.invoked_subcommand is None:
        show_banner()
        console.print(ctx.get_help())


# =============================================================================
# Utility Functions
# =============================================================================

def show_banner():
    """Display the ASCII art banner."""
    console.print(f"[cyan]{BANNER}[/cyan]")
    console.print("[dim]Browse a plugin marketplace and build an install stack[/dim]\n")


def get_registry(ctx: typer.Context) -> Registry:
    """Load the registry once per invocation."""
    obj = ctx.ensure_object(dict)
    if obj.get("registry") is None:
        location = resolve_registry_location(obj.get("registry_option"), obj.get("remote", False))
        obj["registry"] = load_registry(location)
    return obj["registry"]


def validate_choice(value: str, choices: List[str], what: str) -> str:
    """Exit with an error unless ``value`` is one of ``choices``."""
    if value not in choices:
        console.print(f"[red]Error:[/red] Unknown {what}: {value}")
        console.print(f"Valid {what}s: {', '.join(choices)}")
        raise typer.Exit(1)
    return value


def build_selection(registry: Registry, keys: List[str]) -> Selection:
    """Build a selection from ``kind:id`` keys, checking each against the registry."""
    selection = Selection()
    for key in keys:
        try:
            kind, item_id = parse_selection_key(key)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

        if find_item(registry, KIND_BY_KEY[kind], item_id) is None:
            console.print(f"[red]Error:[/red] {kind.capitalize()} '{item_id}' not found in registry")
            console.print("[dim]Use 'kit-market list' to see available components[/dim]")
            raise typer.Exit(1)

        if key not in selection:
            selection.toggle(kind, item_id)
    return selection


def print_commands(text: str, copy: bool = False):
    """Print generated commands as plain text, optionally copying them."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)
    if copy:
        if copy_text(text):
            console.print("[green]✓[/green] Copied to clipboard")
        else:
            console.print("[dim]Clipboard unavailable[/dim]")


# =============================================================================
# Browse Commands
# =============================================================================

@app.command()
def browse(
    ctx: typer.Context,
    sort: Optional[str] = typer.Option(
        None, "--sort",
        help="Initial sort: none, name, category",
    ),
):
    """
    Browse the marketplace interactively and build an install stack.

    Examples:
        kit-market browse
        kit-market --remote browse --sort name
    """
    config = load_config()
    sort = validate_choice(sort or config.get("sort") or "none", SORT_OPTIONS, "sort")
    registry = get_registry(ctx)

    if not sys.stdin.isatty():
        # Non-interactive: show everything once
        console.print("[yellow]Interactive mode unavailable, showing full listing[/yellow]\n")
        console.print(render_view(registry, Selection(), sort=sort))
        return

    session = BrowseSession(
        registry,
        sort=sort,
        marketplace=config.get("marketplace") or DEFAULT_CONFIG["marketplace"],
    )
    try:
        run_browser(session, console=console)
    except KeyboardInterrupt:
        session.confirmed = False

    if not session.confirmed:
        console.print("[yellow]Selection cancelled[/yellow]")
        raise typer.Exit(1)

    if len(session.selection) == 0:
        console.print("[dim]No components selected[/dim]")
        return

    console.print(f"\n[bold cyan]Install commands[/bold cyan] ({len(session.selection)} selected)\n")
    print_commands(generate_commands(session.selection))


@app.command(name="list")
def list_components(
    ctx: typer.Context,
    category: str = typer.Option(
        "all", "--category", "-c",
        help="Category: all, plugins, agents, commands, hooks",
    ),
    search: str = typer.Option(
        "", "--search", "-s",
        help="Only show items whose name, description or tags contain this text",
    ),
    sort: Optional[str] = typer.Option(
        None, "--sort",
        help="Sort: none, name, category",
    ),
    select: Optional[List[str]] = typer.Option(
        None, "--select",
        help="Mark an item as selected (kind:id, repeatable)",
    ),
    generate: bool = typer.Option(
        False, "--generate", "-g",
        help="Also show install commands for the selection",
    ),
    json_output: bool = typer.Option(
        False, "--json",
        help="Output as JSON",
    ),
):
    """
    List marketplace components with filters.

    Examples:
        kit-market list                          # Everything
        kit-market list -c agents                # Only agents
        kit-market list -s review --sort name    # Search and sort
        kit-market list --select agent:debugger -g
        kit-market list --json
    """
    validate_choice(category, CATEGORIES, "category")
    sort = validate_choice(sort or load_config().get("sort") or "none", SORT_OPTIONS, "sort")
    search = search.lower()

    registry = get_registry(ctx)
    selection = build_selection(registry, select or [])

    if json_output:
        visible = filter_registry(registry, category, search, sort)
        output: Dict[str, Any] = {
            "category": category,
            "search": search,
            "sort": sort,
            "results": sum(len(items) for items in visible.values()),
        }
        output.update(visible)
        console.print_json(data=output)
        return

    command_text = generate_commands(selection) if generate else None
    console.print(render_view(
        registry,
        selection,
        category=category,
        search=search,
        sort=sort,
        command_text=command_text,
    ))

    if generate and len(selection) == 0:
        print_commands(command_text)


@app.command(name="show")
def show_component(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Id of the component (plugin id or item name)"),
    kind: Optional[str] = typer.Option(
        None, "--kind", "-k",
        help="Component kind: plugin, agent, command, hook (auto-detected if not specified)",
    ),
):
    """
    Show the details of one component.

    Examples:
        kit-market show code-reviewer
        kit-market show fullstack-pro -k plugin
    """
    search_order = list(KINDS)
    if kind:
        kind = kind.lower()
        kind = KIND_BY_KEY.get(kind, kind)
        validate_choice(kind, KINDS, "kind")
        search_order = [kind]

    registry = get_registry(ctx)

    found = None
    found_kind = None
    for comp_kind in search_order:
        found = find_item(registry, comp_kind, item_id)
        if found is None:
            # Try case-insensitive match
            for item in registry[comp_kind]:
                if get_item_id(item, comp_kind).lower() == item_id.lower():
                    found = item
                    break
        if found is not None:
            found_kind = comp_kind
            break

    if found is None:
        console.print(f"[red]Error:[/red] Component '{item_id}' not found")
        console.print(f"\n[dim]Searched in: {', '.join(search_order)}[/dim]")
        console.print("[dim]Use 'kit-market list' to see available components[/dim]")
        raise typer.Exit(1)

    config = KIND_CONFIG[found_kind]
    found_id = get_item_id(found, found_kind)
    console.print(render_card(found, found_kind, selected=False))

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")
    table.add_row("Kind", config["key"])
    table.add_row("Id", found_id)
    if found.get("category"):
        table.add_row("Category", str(found["category"]))
    if found.get("tags"):
        table.add_row("Tags", ", ".join(str(tag) for tag in found["tags"]))
    if found_kind == "plugins" and found.get("components"):
        table.add_row("Bundles", component_count_label(found["components"]))
    table.add_row("Install", f"/{config['key']} install {found_id}")
    console.print(table)


# =============================================================================
# Install Commands
# =============================================================================

@app.command()
def generate(
    ctx: typer.Context,
    select: List[str] = typer.Option(
        ..., "--select", "-s",
        help="Component to install as kind:id (repeatable)",
    ),
    copy: bool = typer.Option(
        False, "--copy",
        help="Copy the commands to the clipboard",
    ),
    panel: bool = typer.Option(
        False, "--panel",
        help="Show the commands in a panel instead of plain text",
    ),
):
    """
    Generate install commands for selected components.

    Agents are installed together on one line; everything else one per line.

    Examples:
        kit-market generate -s plugin:fullstack-pro
        kit-market generate -s agent:code-reviewer -s agent:debugger --copy
    """
    registry = get_registry(ctx)
    selection = build_selection(registry, select)
    text = generate_commands(selection)

    if panel:
        console.print(render_command_panel(text))
        if copy and copy_text(text):
            console.print("[green]✓[/green] Copied to clipboard")
        return
    print_commands(text, copy=copy)


@app.command()
def quickstart(
    copy: bool = typer.Option(
        False, "--copy",
        help="Copy the command to the clipboard",
    ),
):
    """Show the command that adds this marketplace to your agent."""
    marketplace = load_config().get("marketplace") or DEFAULT_CONFIG["marketplace"]
    console.print("[dim]Add the marketplace first:[/dim]")
    print_commands(quick_install_command(marketplace), copy=copy)


# =============================================================================
# Config Commands
# =============================================================================

@config_app.command("show")
def config_show():
    """Show the current configuration."""
    config = load_config()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")
    for key in DEFAULT_CONFIG:
        value = config.get(key)
        table.add_row(key, "[dim]default[/dim]" if value is None else str(value))
    table.add_row("registry (resolved)", resolve_registry_location(config=config))

    console.print(Panel(
        table,
        title=f"[bold cyan]{get_config_path()}[/bold cyan]",
        border_style="cyan",
    ))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting: registry, marketplace, sort"),
    value: str = typer.Argument(..., help="New value (empty string resets to default)"),
):
    """
    Change a setting.

    Examples:
        kit-market config set registry https://example.com/marketplace.json
        kit-market config set sort name
        kit-market config set registry ""
    """
    validate_choice(key, list(DEFAULT_CONFIG), "key")
    if key == "sort" and value:
        validate_choice(value, SORT_OPTIONS, "sort")

    config = load_config()
    config[key] = value or DEFAULT_CONFIG[key]
    save_config(config)
    console.print(f"[green]✓[/green] Set {key} = {config[key]}")


# =============================================================================
# Version
# =============================================================================

def get_installed_version() -> str:
    """Get the currently installed version."""
    try:
        return importlib.metadata.version("kit-market")
    except importlib.metadata.PackageNotFoundError:
        return __version__


@app.command()
def version():
    """Display version information."""
    import platform

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")

    table.add_row("Version", get_installed_version())
    table.add_row("Python", platform.python_version())
    table.add_row("Platform", platform.system())
    table.add_row("Config", str(get_config_path()))

    console.print(Panel(
        table,
        title="[bold cyan]Kit Market[/bold cyan]",
        border_style="cyan",
        padding=(1, 2),
    ))


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
