"""CLI helper functions."""

from __future__ import annotations

from collections.abc import Iterable

import click

from quotebook.core.exceptions import NotFoundError
from quotebook.listing.controller import Confirm, SelectableListController
from quotebook.operations.results import OperationResult


def confirmer(assume_yes: bool) -> Confirm:
    """Build a confirmation prompt; ``assume_yes`` answers every prompt."""

    def confirm(title: str, message: str) -> bool:
        if assume_yes:
            return True
        return click.confirm(f"{title} {message}", default=False)

    return confirm


def select_ids(
    controller: SelectableListController, entity_ids: Iterable[str], kind: str
) -> None:
    """Enter selection mode and select the given entities.

    Args:
        controller: List holding the entities
        entity_ids: IDs to select
        kind: Entity kind used in error messages

    Raises:
        NotFoundError: If an ID is not in the list
    """
    entity_ids = list(dict.fromkeys(entity_ids))
    visible = {entity.id: entity for entity in controller.entities}
    missing = [entity_id for entity_id in entity_ids if entity_id not in visible]
    if missing:
        raise NotFoundError(kind, missing[0])

    controller.enter_selection()
    for entity_id in entity_ids:
        controller.toggle(visible[entity_id])


def find_entity(controller: SelectableListController, entity_id: str, kind: str):
    """Find one entity in a list.

    Raises:
        NotFoundError: If the ID is not in the list
    """
    for entity in controller.entities:
        if entity.id == entity_id:
            return entity
    raise NotFoundError(kind, entity_id)


def report(ctx: click.Context, result: OperationResult, success: str) -> None:
    """Print a form result; exit with status 1 when it failed."""
    console = ctx.obj.console
    if result.success:
        console.print(f"[green]✓[/green] {success}")
        return

    alert = result.alert
    message = alert.message if alert else result.message
    console.print(f"[red]{alert.title if alert else 'Error'}:[/red] {message}")
    ctx.exit(1)


def apply_view_options(
    controller: SelectableListController,
    search: str | None = None,
    sort_name: str | None = None,
) -> None:
    """Apply ``--search`` and ``--sort`` to a list.

    Raises:
        click.BadParameter: If no sort has that name
    """
    if search:
        controller.set_search_term(search)
    if sort_name:
        try:
            controller.select_sort(sort_name)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--sort") from e
