"""Collection management CLI commands."""

import click

from quotebook.cli.config import document_name
from quotebook.cli.helpers import apply_view_options, confirmer, find_entity, report
from quotebook.cli.render import collection_table, quote_tree
from quotebook.operations.forms import CollectionForm
from quotebook.operations.lists import collection_list, quote_list


def get_store(ctx):
    """Get the quote store from context."""
    return ctx.obj.store


def open_collections(ctx, search: str | None = None, sort_name: str | None = None):
    """Open the collection list, applying search and sort options."""
    controller = collection_list(
        get_store(ctx), ctx.obj.registry, confirm=confirmer(ctx.obj.assume_yes)
    )
    try:
        apply_view_options(controller, search, sort_name)
    except click.BadParameter:
        controller.close()
        raise
    return controller


@click.group()
def collection():
    """Manage quote collections."""
    pass


# Command: list
@collection.command(name="list")
@click.option("--search", "-s", help="Only collections whose name contains this")
@click.option("--sort", "sort_name", help="Sort by this option and remember it")
@click.pass_context
def list_collections(ctx: click.Context, search: str | None, sort_name: str | None):
    """List collections in sections."""
    console = ctx.obj.console
    controller = open_collections(ctx, search, sort_name)

    try:
        if controller.is_empty():
            console.print("[yellow]No collections found[/yellow]")
            return

        counts = get_store(ctx).get_statistics()["quotes_by_collection"]
        console.print(collection_table(controller, counts))
        console.print(f"[dim]Sorted by {controller.sort.name}[/dim]")
    finally:
        controller.close()


# Command: create
@collection.command()
@click.argument("name")
@click.pass_context
def create(ctx: click.Context, name: str) -> None:
    """Create a new collection."""
    form = CollectionForm(get_store(ctx))
    form.name = name
    result = form.submit()
    report(ctx, result, f"Created collection {name} ({result.entity_id})")


# Command: rename
@collection.command()
@click.argument("collection_id")
@click.argument("name")
@click.pass_context
def rename(ctx: click.Context, collection_id: str, name: str) -> None:
    """Rename a collection."""
    form = CollectionForm(get_store(ctx), get_store(ctx).get_collection(collection_id))
    form.name = name
    report(ctx, form.submit(), f"Renamed collection to {name}")


# Command: show
@collection.command()
@click.argument("collection_id")
@click.option("--search", "-s", help="Only quotes matching this text")
@click.option("--sort", "sort_name", help="Sort by this option and remember it")
@click.pass_context
def show(
    ctx: click.Context, collection_id: str, search: str | None, sort_name: str | None
) -> None:
    """Show a collection and its quotes."""
    console = ctx.obj.console
    store = get_store(ctx)
    controller = quote_list(
        store,
        ctx.obj.registry,
        collection=store.get_collection(collection_id),
        document_name=document_name(ctx.obj.config),
    )

    try:
        apply_view_options(controller, search, sort_name)
        if controller.is_empty():
            console.print(f"[bold]{controller.title}[/bold]")
            console.print("[yellow]No quotes found[/yellow]")
            return
        console.print(quote_tree(controller))
    finally:
        controller.close()


# Command: delete
@collection.command()
@click.argument("collection_id")
@click.pass_context
def delete(ctx: click.Context, collection_id: str) -> None:
    """Delete a collection and all of its quotes."""
    console = ctx.obj.console
    controller = open_collections(ctx)

    try:
        target = find_entity(controller, collection_id, "collection")
        if controller.delete(target):
            console.print(f"[green]✓[/green] Deleted collection {target.name}")
        else:
            console.print("[yellow]Cancelled[/yellow]")
    finally:
        controller.close()
