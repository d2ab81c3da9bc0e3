"""Rule management commands for disciplog CLI.

Handles adding, listing, toggling, editing and deleting trading rules.
"""

from typing import Optional

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from disciplog.cli.common import (
    console,
    fail,
    get_data_store,
    get_user_id,
    resolve_id,
    short_id,
)
from disciplog.models import RuleCategory
from disciplog.models.rule import RULE_CATEGORY_COLORS

CATEGORY_CHOICE = click.Choice([c.value for c in RuleCategory])


def _resolve_rule_id(store, user_id: str, prefix: str) -> str:
    ids = [r.id for r in store.get_rules(user_id)]
    return resolve_id(prefix, ids, "rule")


@click.group()
def rule() -> None:
    """Manage your trading rules.

    \b
    Examples:
      disciplog rule add "Risk max 1% per trade" --category risk
      disciplog rule list
      disciplog rule toggle 3fa2c1d0
    """
    pass


@rule.command("add")
@click.argument("name")
@click.option("-c", "--category", type=CATEGORY_CHOICE, required=True, help="Rule category.")
@click.option("-d", "--description", default=None, help="Optional description.")
@click.option("--inactive", is_flag=True, default=False, help="Create the rule disabled.")
def add_rule(name: str, category: str, description: Optional[str], inactive: bool) -> None:
    """Add a rule.

    NAME is a short statement of the rule.
    """
    from disciplog.validations import RuleInput

    try:
        rule_input = RuleInput(
            name=name,
            description=description,
            category=RuleCategory(category),
            is_active=not inactive,
        )
    except ValidationError as e:
        fail(escape(str(e)), title="Invalid rule")

    created = get_data_store().create_rule(get_user_id(), rule_input)
    console.print(f"[green]✓ Added rule {short_id(created.id)}: {created.name}[/green]")


@rule.command("list")
@click.option("--active", "active_only", is_flag=True, default=False, help="Only show active rules.")
def list_rules(active_only: bool) -> None:
    """List your rules grouped by category."""
    rules = get_data_store().get_rules(get_user_id(), active_only=active_only)

    if not rules:
        console.print("[dim]No rules yet. Add one with 'disciplog rule add'.[/dim]")
        return

    table = Table(title="Trading Rules", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Category")
    table.add_column("Rule", style="bold")
    table.add_column("Description", max_width=40)
    table.add_column("Active", justify="center")

    for r in rules:
        color = RULE_CATEGORY_COLORS[r.category]
        table.add_row(
            short_id(r.id),
            f"[{color}]{r.category.label}[/{color}]",
            escape(r.name),
            escape(r.description or "-"),
            "[green]✓[/green]" if r.is_active else "[dim]✗[/dim]",
        )

    console.print(table)


@rule.command("toggle")
@click.argument("rule_id")
def toggle_rule(rule_id: str) -> None:
    """Activate or deactivate a rule."""
    store = get_data_store()
    user_id = get_user_id()
    full_id = _resolve_rule_id(store, user_id, rule_id)

    current = store.get_rule(user_id, full_id)
    updated = store.set_rule_active(user_id, full_id, not current.is_active)
    state = "activated" if updated.is_active else "deactivated"
    console.print(f"[green]✓ Rule '{updated.name}' {state}[/green]")


@rule.command("edit")
@click.argument("rule_id")
@click.option("-n", "--name", default=None, help="New rule name.")
@click.option("-c", "--category", type=CATEGORY_CHOICE, default=None, help="New category.")
@click.option("-d", "--description", default=None, help="New description.")
def edit_rule(
    rule_id: str,
    name: Optional[str],
    category: Optional[str],
    description: Optional[str],
) -> None:
    """Edit a rule's name, category or description."""
    from disciplog.validations import RuleInput

    store = get_data_store()
    user_id = get_user_id()
    full_id = _resolve_rule_id(store, user_id, rule_id)
    current = store.get_rule(user_id, full_id)

    try:
        rule_input = RuleInput(
            name=name if name is not None else current.name,
            description=description if description is not None else current.description,
            category=RuleCategory(category) if category else current.category,
            is_active=current.is_active,
        )
    except ValidationError as e:
        fail(escape(str(e)), title="Invalid rule")

    updated = store.update_rule(user_id, full_id, rule_input)
    console.print(f"[green]✓ Updated rule '{updated.name}'[/green]")


@rule.command("delete")
@click.argument("rule_id")
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip confirmation.")
def delete_rule(rule_id: str, yes: bool) -> None:
    """Delete a rule."""
    store = get_data_store()
    user_id = get_user_id()
    full_id = _resolve_rule_id(store, user_id, rule_id)
    current = store.get_rule(user_id, full_id)

    if not yes and not click.confirm(f"Delete rule '{current.name}'?"):
        console.print("[dim]Cancelled[/dim]")
        return

    store.delete_rule(user_id, full_id)
    console.print(f"[green]✓ Deleted rule '{current.name}'[/green]")
