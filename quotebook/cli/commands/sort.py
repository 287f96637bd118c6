"""Sort preference CLI commands."""

import click

from quotebook.cli.render import sort_table
from quotebook.core.models import Collection, Quote

ENTITY_TYPES = {"quote": Quote, "collection": Collection}


def _scope(ctx: click.Context, entity: str, collection_id: str | None) -> str | None:
    if collection_id is None:
        return None
    if entity != "quote":
        raise click.BadParameter(
            "only quote lists are scoped to a collection", param_hint="--collection"
        )
    return ctx.obj.store.get_collection(collection_id).id


entity_option = click.option(
    "--entity",
    "-e",
    type=click.Choice(sorted(ENTITY_TYPES)),
    default="quote",
    show_default=True,
    help="Kind of list",
)
collection_option = click.option(
    "--collection",
    "-c",
    "collection_id",
    help="Quote list of this collection instead of all quotes",
)


@click.group()
def sort():
    """Show and choose list sorts."""
    pass


# Command: list
@sort.command(name="list")
@entity_option
@collection_option
@click.pass_context
def list_sorts(ctx: click.Context, entity: str, collection_id: str | None) -> None:
    """List sort options, marking the one in use."""
    registry = ctx.obj.registry
    entity_type = ENTITY_TYPES[entity]
    current = registry.get_user_default(entity_type, _scope(ctx, entity, collection_id))
    ctx.obj.console.print(
        sort_table(
            registry.list_sorts(entity_type),
            current.name,
            title=f"{entity.capitalize()} sorts",
        )
    )


# Command: set
@sort.command(name="set")
@click.argument("name")
@entity_option
@collection_option
@click.pass_context
def set_sort(
    ctx: click.Context, name: str, entity: str, collection_id: str | None
) -> None:
    """Choose the sort used by a list."""
    registry = ctx.obj.registry
    entity_type = ENTITY_TYPES[entity]
    chosen = registry.get(entity_type, name)
    if chosen is None:
        raise click.BadParameter(f"Unknown sort: {name}", param_hint="NAME")

    registry.set_user_default(chosen, _scope(ctx, entity, collection_id))
    ctx.obj.console.print(f"[green]✓[/green] {entity.capitalize()} lists sorted by {name}")
