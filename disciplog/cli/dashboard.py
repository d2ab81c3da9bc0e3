"""Dashboard and history commands for disciplog CLI."""

import json
from datetime import date

import click
from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from disciplog.analytics import TimeWindow
from disciplog.cli.common import (
    console,
    fail,
    format_pnl,
    format_score,
    get_config,
    get_data_store,
    get_user_id,
    short_id,
)

WINDOW_CHOICE = click.Choice([w.value for w in TimeWindow])


def _card(title: str, value: str, subtitle: str = "") -> Panel:
    body = f"[bold]{value}[/bold]"
    if subtitle:
        body += f"\n[dim]{subtitle}[/dim]"
    return Panel(body, title=title, border_style="cyan", expand=True)


@click.command("dashboard")
@click.option("-w", "--window", type=WINDOW_CHOICE, default=None, help="P&L chart window.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the dashboard as JSON.")
@click.pass_context
def dashboard(ctx: click.Context, window: str, as_json: bool) -> None:
    """Show your discipline and performance dashboard.

    \b
    Examples:
      disciplog dashboard
      disciplog dashboard --window 90d
      disciplog dashboard --json
    """
    from disciplog.analytics import filter_pnl_window, load_dashboard, period_pnl

    config = get_config(ctx)
    dash_config = config.get("dashboard", {})
    store = get_data_store()
    user_id = get_user_id(ctx)
    today = date.today()

    result = load_dashboard(
        store,
        user_id,
        today=today,
        trend_length=dash_config.get("score_trend_length", 14),
        recent_count=dash_config.get("recent_sessions", 5),
    )
    if result["error"]:
        fail(escape(result["error"]), title="Could not load dashboard")

    data = result["data"]

    if as_json:
        click.echo(data.model_dump_json(indent=2))
        return

    if data.active_session_id:
        console.print(
            f"[yellow]Session {short_id(data.active_session_id)} in progress.[/yellow] "
            "[dim]Log trades with 'disciplog session trade'.[/dim]\n"
        )

    if data.total_sessions == 0 and not data.active_session_id:
        console.print(Panel(
            "No completed sessions yet.\n\n"
            "1. Add rules: [cyan]disciplog rule add \"...\" --category risk[/cyan]\n"
            "2. Start a session: [cyan]disciplog session start[/cyan]",
            title="[bold cyan]Welcome[/bold cyan]",
            border_style="cyan",
        ))
        return

    cards = [
        _card("Discipline", format_score(data.latest_score), f"avg {data.avg_discipline_score or '-'}"),
        _card("Streak", f"{data.streak} day{'s' if data.streak != 1 else ''}"),
        _card("Win Rate", f"{data.win_rate}%", f"{data.wins}W / {data.losses}L"),
        _card("Total P&L", format_pnl(data.total_pnl), f"{data.total_trades} trades"),
        _card("Rules Followed", f"{data.rules_followed_percentage}%", f"{data.rules_count} active rules"),
    ]
    console.print(Columns(cards, equal=True, expand=True))

    if data.score_trend:
        table = Table(title="Discipline Trend", show_header=True, header_style="bold cyan")
        table.add_column("Date")
        table.add_column("Score", justify="right")
        table.add_column("")
        for point in data.score_trend:
            table.add_row(point.display_date, format_score(point.score), "█" * (point.score // 5))
        console.print(table)

    pnl_window = TimeWindow(window or dash_config.get("pnl_window", TimeWindow.MONTH.value))
    points = filter_pnl_window(data.pnl_trend, pnl_window, today)
    if points:
        period = period_pnl(points)
        table = Table(
            title=f"P&L ({pnl_window.value}): {format_pnl(period.total)}",
            show_header=True,
            caption=(
                f"Change {format_pnl(period.change)}  "
                f"Cumulative {format_pnl(points[-1].cumulative_pnl)}"
            ),
            header_style="bold cyan",
        )
        table.add_column("Date")
        table.add_column("Day", justify="right")
        table.add_column("Cumulative", justify="right")
        for point in points:
            table.add_row(point.display_date, format_pnl(point.pnl), format_pnl(point.cumulative_pnl))
        console.print(table)

    if data.emotion_win_rate:
        table = Table(title="Emotions", show_header=True, header_style="bold cyan")
        table.add_column("Emotion")
        table.add_column("Trades", justify="right")
        table.add_column("Win Rate", justify="right")
        for row in data.emotion_win_rate:
            color = row.emotion.color
            table.add_row(
                f"[{color}]{row.emotion.label}[/{color}]",
                str(data.emotion_distribution.get(row.emotion, row.total)),
                f"{row.win_rate}%",
            )
        console.print(table)

    if data.broken_rules:
        table = Table(title="Most Broken Rules", show_header=True, header_style="bold red")
        table.add_column("Rule")
        table.add_column("Times", justify="right")
        for rule_id, count in list(data.broken_rules.items())[:5]:
            table.add_row(escape(data.rule_names.get(rule_id, "(deleted rule)")), str(count))
        console.print(table)

    if data.recent_sessions:
        table = Table(title="Recent Sessions", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Date")
        table.add_column("Score", justify="right")
        for s in data.recent_sessions:
            table.add_row(short_id(s.id), f"{s.date:%a %d %b}", format_score(s.discipline_score))
        console.print(table)


@click.command("history")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the history as JSON.")
def history(as_json: bool) -> None:
    """Show all sessions grouped by month."""
    from disciplog.analytics import load_history

    result = load_history(get_data_store(), get_user_id())
    if result["error"]:
        fail(escape(result["error"]), title="Could not load history")

    groups = result["data"]

    if as_json:
        click.echo(json.dumps([g.model_dump(mode="json") for g in groups], indent=2))
        return

    if not groups:
        console.print("[dim]No sessions yet. Start one with 'disciplog session start'.[/dim]")
        return

    for group in groups:
        table = Table(
            title=(
                f"{group.label}  avg score {format_score(group.avg_score)}  "
                f"P&L {format_pnl(group.total_pnl)}"
            ),
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("ID", style="dim")
        table.add_column("Date")
        table.add_column("Status")
        table.add_column("Trades", justify="right")
        table.add_column("W/L", justify="right")
        table.add_column("P&L", justify="right")
        table.add_column("Score", justify="right")

        for row in group.sessions:
            s = row.session
            stats = row.trade_stats
            table.add_row(
                short_id(s.id),
                f"{s.date:%a %d}",
                "[green]completed[/green]" if s.is_completed else "[yellow]active[/yellow]",
                str(stats.count),
                f"{stats.wins}/{stats.losses}",
                format_pnl(stats.pnl),
                format_score(s.discipline_score),
            )
        console.print(table)
