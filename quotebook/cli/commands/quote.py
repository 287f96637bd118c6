"""Quote CLI commands."""

from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel

from quotebook.cli.config import document_name
from quotebook.cli.helpers import (
    apply_view_options,
    confirmer,
    find_entity,
    report,
    select_ids,
)
from quotebook.cli.render import quote_tree
from quotebook.core.models import Quote
from quotebook.core.tags import TagsEditMode
from quotebook.operations.forms import BulkEditForm, MoveForm, QuoteForm
from quotebook.operations.lists import quote_list


def get_store(ctx):
    """Get the quote store from context."""
    return ctx.obj.store


def open_quotes(ctx, collection_id: str | None = None, **handlers):
    """Open a quote list over one collection, or over every quote."""
    store = get_store(ctx)
    collection = store.get_collection(collection_id) if collection_id else None
    return quote_list(
        store,
        ctx.obj.registry,
        collection=collection,
        confirm=confirmer(ctx.obj.assume_yes),
        document_name=document_name(ctx.obj.config),
        **handlers,
    )


def quote_panel(quote: Quote, collection_name: str) -> Panel:
    """Detail page of one quote."""
    lines = [
        escape(quote.display_text),
        "",
        f"[bold]Author:[/bold] {escape(quote.author)}",
        f"[bold]Tags:[/bold] {escape(quote.tags) or '[dim]none[/dim]'}",
        f"[bold]Collection:[/bold] {escape(collection_name)}",
        f"[bold]Length:[/bold] {quote.length}",
        f"[bold]Created:[/bold] {quote.created_at:%Y-%m-%d %H:%M}",
        f"[bold]Changed:[/bold] {quote.updated_at:%Y-%m-%d %H:%M}",
    ]
    return Panel("\n".join(lines), title=quote.id, expand=False)


@click.group()
def quote():
    """Add, browse and organize quotes."""
    pass


# Command: list
@quote.command(name="list")
@click.option("--collection", "-c", "collection_id", help="Only this collection")
@click.option("--search", "-s", help="Match text, author names or tags")
@click.option("--sort", "sort_name", help="Sort by this option and remember it")
@click.pass_context
def list_quotes(
    ctx: click.Context,
    collection_id: str | None,
    search: str | None,
    sort_name: str | None,
) -> None:
    """List quotes in sections."""
    console = ctx.obj.console
    controller = open_quotes(ctx, collection_id)

    try:
        apply_view_options(controller, search, sort_name)
        if controller.is_empty():
            console.print("[yellow]No quotes found[/yellow]")
            return

        console.print(quote_tree(controller))
        console.print(f"[dim]Sorted by {controller.sort.name}[/dim]")
    finally:
        controller.close()


# Command: add
@quote.command()
@click.argument("collection_id")
@click.argument("text")
@click.option("--first", "-f", "first_name", default="", help="Author first name")
@click.option("--last", "-l", "last_name", default="", help="Author last name")
@click.option("--tags", "-t", default="", help="Comma-separated tags")
@click.pass_context
def add(
    ctx: click.Context,
    collection_id: str,
    text: str,
    first_name: str,
    last_name: str,
    tags: str,
) -> None:
    """Add a quote to a collection."""
    form = QuoteForm(get_store(ctx), collection_id=collection_id)
    form.text = text
    form.author_first_name = first_name
    form.author_last_name = last_name
    form.tags = tags
    result = form.submit()
    report(ctx, result, f"Added quote {result.entity_id}")


# Command: show
@quote.command()
@click.argument("quote_id")
@click.pass_context
def show(ctx: click.Context, quote_id: str) -> None:
    """Show a quote."""
    store = get_store(ctx)

    def open_page(target: Quote) -> Panel:
        return quote_panel(target, store.get_collection(target.collection_id).name)

    controller = open_quotes(ctx, open=open_page)
    try:
        ctx.obj.console.print(
            controller.activate(find_entity(controller, quote_id, "quote"))
        )
    finally:
        controller.close()


# Command: edit
@quote.command()
@click.argument("quote_id")
@click.option("--text", help="New quote text")
@click.option("--first", "-f", "first_name", help="New author first name")
@click.option("--last", "-l", "last_name", help="New author last name")
@click.option("--tags", "-t", help="New comma-separated tags")
@click.pass_context
def edit(
    ctx: click.Context,
    quote_id: str,
    text: str | None,
    first_name: str | None,
    last_name: str | None,
    tags: str | None,
) -> None:
    """Edit a quote; options left out keep their value."""
    store = get_store(ctx)

    def edit_quote(target: Quote):
        form = QuoteForm(store, quote=target)
        if text is not None:
            form.text = text
        if first_name is not None:
            form.author_first_name = first_name
        if last_name is not None:
            form.author_last_name = last_name
        if tags is not None:
            form.tags = tags
        return form.submit()

    controller = open_quotes(ctx, edit=edit_quote)
    try:
        result = controller.edit(find_entity(controller, quote_id, "quote"))
    finally:
        controller.close()
    report(ctx, result, f"Updated quote {quote_id}")


# Command: style
@quote.command()
@click.argument("quote_id")
@click.option(
    "--quotation-marks/--no-quotation-marks",
    default=None,
    help="Wrap the text in quotation marks",
)
@click.option("--author/--no-author", default=None, help="Show the author")
@click.option(
    "--new-line/--same-line",
    "author_on_new_line",
    default=None,
    help="Put the author on its own line",
)
@click.pass_context
def style(
    ctx: click.Context,
    quote_id: str,
    quotation_marks: bool | None,
    author: bool | None,
    author_on_new_line: bool | None,
) -> None:
    """Change how a quote is displayed.

    New quotes use the most recently chosen style.
    """
    updated = get_store(ctx).set_display_flags(
        quote_id,
        quotation_marks=quotation_marks,
        author=author,
        author_on_new_line=author_on_new_line,
    )
    ctx.obj.console.print(escape(updated.display_text))


# Command: move
@quote.command()
@click.argument("quote_ids", nargs=-1, required=True)
@click.option("--to", "target_id", required=True, help="Target collection ID")
@click.pass_context
def move(ctx: click.Context, quote_ids: tuple[str, ...], target_id: str) -> None:
    """Move quotes to another collection."""
    console = ctx.obj.console
    store = get_store(ctx)
    target = store.get_collection(target_id)
    results = []

    def move_one(quote_to_move: Quote) -> None:
        results.append(MoveForm(store, [quote_to_move], target.id).submit())

    def move_many(snapshot: tuple[Quote, ...], exit_selection) -> None:
        result = MoveForm(store, snapshot, target.id).submit()
        if result.success:
            exit_selection()
        results.append(result)

    controller = open_quotes(
        ctx,
        move=move_one,
        move_message=lambda q: f'Move this quote to "{target.name}"?',
        bulk_move=move_many,
    )
    try:
        if len(quote_ids) == 1:
            controller.move(find_entity(controller, quote_ids[0], "quote"))
        else:
            select_ids(controller, quote_ids, "quote")
            controller.bulk_move()
    finally:
        controller.close()

    if not results:
        console.print("[yellow]Cancelled[/yellow]")
        return
    report(ctx, results[0], f"Moved {len(quote_ids)} quote(s) to {target.name}")


# Command: delete
@quote.command()
@click.argument("quote_ids", nargs=-1, required=True)
@click.pass_context
def delete(ctx: click.Context, quote_ids: tuple[str, ...]) -> None:
    """Delete quotes."""
    console = ctx.obj.console
    controller = open_quotes(ctx)

    try:
        if len(quote_ids) == 1:
            done = controller.delete(find_entity(controller, quote_ids[0], "quote"))
        else:
            select_ids(controller, quote_ids, "quote")
            done = controller.bulk_delete()
    finally:
        controller.close()

    if done:
        console.print(f"[green]✓[/green] Deleted {len(set(quote_ids))} quote(s)")
    else:
        console.print("[yellow]Cancelled[/yellow]")


# Command: bulk-edit
@quote.command(name="bulk-edit")
@click.argument("quote_ids", nargs=-1, required=True)
@click.option("--first", "-f", "first_name", help="Set author first name")
@click.option("--last", "-l", "last_name", help="Set author last name")
@click.option("--tags", "-t", help="Comma-separated tags")
@click.option(
    "--tags-mode",
    type=click.Choice([mode.value for mode in TagsEditMode]),
    default=TagsEditMode.REPLACE.value,
    show_default=True,
    help="Replace the tags, add to them, or remove from them",
)
@click.pass_context
def bulk_edit(
    ctx: click.Context,
    quote_ids: tuple[str, ...],
    first_name: str | None,
    last_name: str | None,
    tags: str | None,
    tags_mode: str,
) -> None:
    """Edit author names and tags of several quotes."""
    store = get_store(ctx)

    def edit_selection(snapshot: tuple[Quote, ...], exit_selection):
        form = BulkEditForm(store, snapshot)
        form.author_first_name = first_name
        form.author_last_name = last_name
        form.tags_mode = TagsEditMode(tags_mode)
        form.tags = tags
        result = form.submit()
        if result.success:
            exit_selection()
        return result

    controller = open_quotes(ctx, bulk_edit=edit_selection)
    try:
        select_ids(controller, quote_ids, "quote")
        result = controller.bulk_edit()
    finally:
        controller.close()
    report(ctx, result, f"Updated {len(result.entity_ids)} quote(s)")


# Command: export
@quote.command()
@click.argument("quote_ids", nargs=-1)
@click.option("--collection", "-c", "collection_id", help="Only this collection")
@click.option("--search", "-s", help="Only quotes matching this text")
@click.option("--sort", "sort_name", help="Sort by this option and remember it")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write the document into this directory instead of printing it",
)
@click.pass_context
def export(
    ctx: click.Context,
    quote_ids: tuple[str, ...],
    collection_id: str | None,
    search: str | None,
    sort_name: str | None,
    output: Path | None,
) -> None:
    """Export quotes as plain text, in list order.

    Without QUOTE_IDS every listed quote is exported.
    """
    console = ctx.obj.console
    controller = open_quotes(ctx, collection_id)

    try:
        apply_view_options(controller, search, sort_name)
        if controller.is_empty():
            console.print("[yellow]No quotes to export[/yellow]")
            return

        if quote_ids:
            select_ids(controller, quote_ids, "quote")
        else:
            controller.enter_selection()
            controller.invert_selection()
        count = controller.selected_count
        document = controller.bulk_export()
    finally:
        controller.close()

    if output:
        path = document.write_to(output)
        console.print(f"[green]✓[/green] Exported {count} quote(s) to {path}")
    else:
        click.echo(document.text)
