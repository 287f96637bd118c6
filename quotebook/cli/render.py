"""Rich renderables for quote and collection lists."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from quotebook.core.models import Collection, Quote
from quotebook.listing.controller import SelectableListController

SELECTED = "[green]●[/green]"
UNSELECTED = "[dim]○[/dim]"


def _marker(controller: SelectableListController, entity) -> str:
    if not controller.in_selection_mode:
        return ""
    return (SELECTED if controller.is_selected(entity) else UNSELECTED) + " "


def quote_tree(controller: SelectableListController[Quote]) -> Tree:
    """Render a quote list as a tree of sections."""
    tree = Tree(f"[bold]{escape(controller.title)}[/bold]")
    for section in controller.sections:
        branch = tree.add(f"[bold cyan]{escape(section.id)}[/bold cyan]")
        for quote in section:
            branch.add(
                f"{_marker(controller, quote)}{escape(quote.display_text)}"
                f"\n[dim]{quote.id}[/dim]"
            )
    return tree


def collection_table(
    controller: SelectableListController[Collection], counts: dict[str, int]
) -> Table:
    """Render a collection list as a table, one row group per section."""
    table = Table(title=controller.title, show_header=True, header_style="bold")
    table.add_column("Section", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Quotes", justify="right")
    table.add_column("Updated")
    table.add_column("ID", style="dim")

    for section in controller.sections:
        for index, collection in enumerate(section):
            table.add_row(
                section.id if index == 0 else "",
                f"{_marker(controller, collection)}{escape(collection.name)}",
                str(counts.get(collection.id, 0)),
                collection.updated_at.strftime("%Y-%m-%d %H:%M"),
                collection.id,
            )
    return table


def sort_table(sorts, current_name: str, title: str = "Sorts") -> Table:
    """Render sort options with the current choice marked."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("", width=1)
    table.add_column("Sort")
    for option in sorts:
        table.add_row("✓" if option.name == current_name else "", option.name)
    return table
