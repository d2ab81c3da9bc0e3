"""Helpers shared by the CLI command modules."""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


def get_data_store():
    """Get the data store instance."""
    from disciplog.config import get_db_path
    from disciplog.db.store import DataStore

    return DataStore(get_db_path())


def get_config(ctx: Optional[click.Context] = None) -> dict:
    """Configuration loaded by the root command, or loaded now."""
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None and ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]

    from disciplog.config import load_config

    return load_config()


def get_user_id(ctx: Optional[click.Context] = None) -> str:
    """User the CLI acts for."""
    from disciplog.config import get_user_id as user_from_config

    return user_from_config(get_config(ctx))


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def short_id(value: str) -> str:
    """First eight characters of an ID, as shown in tables."""
    return value[:8]


def resolve_id(prefix: str, ids: list[str], kind: str) -> str:
    """Expand an ID prefix typed by the user to a full ID."""
    matches = [i for i in ids if i.startswith(prefix)]
    if not matches:
        fail(f"No {kind} matches '{prefix}'")
    if len(matches) > 1:
        fail(f"'{prefix}' matches {len(matches)} {kind}s; type more characters")
    return matches[0]


def format_pnl(value: Optional[float]) -> str:
    """Colour a P&L amount green or red."""
    if value is None:
        return "-"
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}${abs(value):,.2f}[/{color}]"


def format_score(score: Optional[int]) -> str:
    """Colour a discipline score by band."""
    if score is None:
        return "[dim]-[/dim]"
    if score >= 80:
        color = "green"
    elif score >= 60:
        color = "yellow"
    else:
        color = "red"
    return f"[{color}]{score}[/{color}]"
