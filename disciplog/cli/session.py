"""Session commands for disciplog CLI.

Handles the session workflow: the pre-session check, logging trades,
and the post-session reflection that produces the discipline score.
"""

from datetime import datetime
from typing import Optional

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from disciplog.cli.common import (
    console,
    fail,
    format_pnl,
    format_score,
    get_data_store,
    get_config,
    get_user_id,
    resolve_id,
    short_id,
)
from disciplog.models import EmotionTag, TradeResult

RATING = click.IntRange(1, 5)
EMOTION_CHOICE = click.Choice([e.value for e in EmotionTag])
RESULT_CHOICE = click.Choice([r.value for r in TradeResult])


def _require_active_session(store, user_id: str):
    active = store.get_active_session(user_id)
    if active is None:
        fail(
            "No active session.\n\nStart one with [cyan]disciplog session start[/cyan].",
            title="No Session",
        )
    return active


@click.group()
def session() -> None:
    """Run a trading session.

    \b
    Examples:
      disciplog session start --sleep-hours 7.5 --stress 2 --focus 4 --max-trades 3
      disciplog session trade win 150 --emotion calm
      disciplog session trade loss 80 --emotion fomo --broke 3fa2c1d0
      disciplog session end --plan 4 --emotional 3
      disciplog session show
    """
    pass


@session.command("start")
@click.option("--sleep", "sleep_rating", type=RATING, default=None, help="Sleep quality 1-5.")
@click.option("--sleep-hours", type=float, default=None, help="Hours slept; converted to a 1-5 rating.")
@click.option("--stress", type=RATING, prompt="Stress level (1=calm, 5=very stressed)", help="Stress level 1-5.")
@click.option("--focus", type=RATING, prompt="Focus (1-5)", help="Focus rating 1-5.")
@click.option("--max-trades", type=click.IntRange(1, 100), default=None, help="Maximum trades planned.")
@click.option("--max-loss", type=click.FloatRange(min=0), default=None, help="Maximum acceptable loss.")
@click.option("--setups", default=None, help="Setups you plan to trade.")
@click.option("--notes", default=None, help="Wellness notes.")
@click.option(
    "--rules-confirmed/--rules-not-confirmed",
    default=None,
    help="Confirm you reviewed your active rules.",
)
@click.pass_context
def start_session(
    ctx: click.Context,
    sleep_rating: Optional[int],
    sleep_hours: Optional[float],
    stress: int,
    focus: int,
    max_trades: Optional[int],
    max_loss: Optional[float],
    setups: Optional[str],
    notes: Optional[str],
    rules_confirmed: Optional[bool],
) -> None:
    """Start a session with a wellness check and plan."""
    from disciplog.validations import PreSessionInput, sleep_rating_from_hours

    store = get_data_store()
    user_id = get_user_id(ctx)
    config = get_config(ctx)

    if sleep_rating is None:
        if sleep_hours is None:
            sleep_hours = click.prompt("Hours of sleep last night", type=float)
        sleep_rating = sleep_rating_from_hours(sleep_hours)

    if max_trades is None:
        max_trades = config.get("session", {}).get("default_max_trades", 5)

    if rules_confirmed is None:
        rules = store.get_rules(user_id, active_only=True)
        if rules:
            console.print("[bold]Your active rules:[/bold]")
            for r in rules:
                console.print(f"  • {escape(r.name)} [dim]({r.category.label})[/dim]")
        rules_confirmed = click.confirm("Have you reviewed your rules?", default=True)

    try:
        pre_session = PreSessionInput(
            sleep_rating=sleep_rating,
            stress_level=stress,
            focus_rating=focus,
            wellness_notes=notes,
            planned_setups=setups,
            max_trades=max_trades,
            max_loss=max_loss,
            rules_confirmed=rules_confirmed,
        )
        created = store.create_session(user_id, pre_session.to_payload())
    except (ValidationError, ValueError) as e:
        fail(escape(str(e)), title="Cannot start session")

    console.print(Panel(
        f"[bold]Session {short_id(created.id)}[/bold] started {created.started_at:%H:%M}\n\n"
        f"Max trades: {max_trades}"
        + (f" | Max loss: ${max_loss:,.2f}" if max_loss else "")
        + ("" if rules_confirmed else "\n[yellow]Rules not reviewed[/yellow]"),
        title="[bold green]Session Started[/bold green]",
        border_style="green",
    ))


@session.command("trade")
@click.argument("result", type=RESULT_CHOICE)
@click.argument("pnl", type=float, required=False)
@click.option("-e", "--emotion", type=EMOTION_CHOICE, default=EmotionTag.CALM.value, help="How you felt.")
@click.option("-b", "--broke", "broken", multiple=True, help="ID (or prefix) of a rule you broke.")
@click.option("-n", "--notes", default=None, help="Trade notes.")
def log_trade(
    result: str,
    pnl: Optional[float],
    emotion: str,
    broken: tuple[str, ...],
    notes: Optional[str],
) -> None:
    """Log a trade in the active session.

    RESULT is win, loss or breakeven. PNL is the amount; losses are
    recorded as negative whatever sign you type.
    """
    from disciplog.validations import TradeInput

    store = get_data_store()
    user_id = get_user_id()
    active = _require_active_session(store, user_id)

    trades = store.get_trades(active.id)
    max_trades = active.pre_session.max_trades
    if max_trades and len(trades) >= max_trades:
        fail(
            f"You planned at most {max_trades} trades and have logged {len(trades)}.\n"
            "End the session or delete a trade first.",
            title="Max Trades Reached",
        )

    rule_ids = [r.id for r in store.get_rules(user_id, active_only=True)]
    broken_ids = [resolve_id(prefix, rule_ids, "active rule") for prefix in broken]

    try:
        trade_input = TradeInput(
            result=TradeResult(result),
            pnl=pnl,
            broken_rule_ids=broken_ids,
            emotion_tag=EmotionTag(emotion),
            notes=notes,
        )
        stored = store.add_trade(user_id, active.id, trade_input)
    except (ValidationError, ValueError) as e:
        fail(escape(str(e)), title="Cannot log trade")

    status = "[green]rules followed[/green]" if stored.rules_followed else (
        f"[red]{len(stored.broken_rule_ids)} rule(s) broken[/red]"
    )
    console.print(
        f"[green]✓ Trade #{stored.trade_number} logged:[/green] "
        f"{stored.result.value} {format_pnl(stored.pnl)} "
        f"[{stored.emotion_tag.color}]{stored.emotion_tag.label}[/{stored.emotion_tag.color}] | {status}"
    )


@session.command("undo")
@click.argument("trade_number", type=int, required=False)
def undo_trade(trade_number: Optional[int]) -> None:
    """Delete a trade from the active session (the last one by default)."""
    store = get_data_store()
    user_id = get_user_id()
    active = _require_active_session(store, user_id)

    trades = store.get_trades(active.id)
    if not trades:
        fail("No trades logged in this session.", title="Nothing to undo")

    if trade_number is None:
        target = trades[-1]
    else:
        matches = [t for t in trades if t.trade_number == trade_number]
        if not matches:
            fail(f"Trade #{trade_number} not found in this session.")
        target = matches[0]

    store.delete_trade(user_id, target.id)
    console.print(f"[green]✓ Deleted trade #{target.trade_number}[/green]")


@session.command("end")
@click.option("--plan", "plan_rating", type=RATING, prompt="How well did you follow your plan? (1-5)")
@click.option("--emotional", "emotional_rating", type=RATING, prompt="Emotional control (1-5)")
@click.option("--went-well", default=None, help="What went well.")
@click.option("--improve", default=None, help="What to improve.")
@click.option("--tomorrow", default=None, help="Focus for tomorrow.")
def end_session(
    plan_rating: int,
    emotional_rating: int,
    went_well: Optional[str],
    improve: Optional[str],
    tomorrow: Optional[str],
) -> None:
    """End the active session with a reflection and get its score."""
    from disciplog.analytics import score_breakdown
    from disciplog.validations import PostSessionInput

    store = get_data_store()
    user_id = get_user_id()
    active = _require_active_session(store, user_id)

    try:
        post_session = PostSessionInput(
            plan_followed_rating=plan_rating,
            emotional_control_rating=emotional_rating,
            what_went_well=went_well,
            what_to_improve=improve,
            tomorrow_focus=tomorrow,
        ).to_payload()
        completed = store.end_session(user_id, active.id, post_session, ended_at=datetime.now())
    except (ValidationError, ValueError) as e:
        fail(escape(str(e)), title="Cannot end session")

    trades = store.get_trades(completed.id)
    breakdown = score_breakdown(completed.pre_session, completed.post_session, trades)
    _print_breakdown(breakdown)


def _print_breakdown(breakdown) -> None:
    from disciplog.analytics.score import DISCIPLINE_WEIGHTS

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Component")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Points", justify="right")

    rows = [
        ("Rules followed", breakdown.rules_score, DISCIPLINE_WEIGHTS["rules_followed"]),
        ("Pre-session check", breakdown.pre_session_score, DISCIPLINE_WEIGHTS["pre_session_complete"]),
        ("Post-session reflection", breakdown.post_session_score, DISCIPLINE_WEIGHTS["post_session_complete"]),
        ("Emotional control", breakdown.emotional_score, DISCIPLINE_WEIGHTS["emotional_control"]),
    ]
    for label, score, weight in rows:
        table.add_row(label, f"{score:.0f}", f"{weight:.0%}", f"{score * weight:.1f}")

    console.print(Panel(
        table,
        title=f"[bold]Discipline Score: {format_score(breakdown.score)}[/bold]",
        border_style="cyan",
    ))


@session.command("show")
@click.argument("session_id", required=False)
def show_session(session_id: Optional[str]) -> None:
    """Show a session with its trades.

    Defaults to the active session, or the most recent one.
    """
    from disciplog.analytics import rule_name_map, score_breakdown, summarize_trades

    store = get_data_store()
    user_id = get_user_id()

    if session_id:
        ids = [s.id for s in store.get_sessions(user_id)]
        current = store.get_session(user_id, resolve_id(session_id, ids, "session"))
    else:
        current = store.get_active_session(user_id)
        if current is None:
            sessions = store.get_sessions(user_id)
            current = sessions[0] if sessions else None

    if current is None:
        console.print("[dim]No sessions yet. Start one with 'disciplog session start'.[/dim]")
        return

    trades = store.get_trades(current.id)
    summary = summarize_trades(trades)
    pre = current.pre_session

    lines = [
        f"[bold]{current.date:%A, %d %B %Y}[/bold]  [dim]{short_id(current.id)}[/dim]",
        f"Status: {'[green]completed[/green]' if current.is_completed else '[yellow]active[/yellow]'}",
        "",
        f"Trades: {summary.total}" + (f"/{pre.max_trades}" if pre.max_trades else "")
        + f"  ({summary.wins}W {summary.losses}L {summary.breakeven}BE)",
        f"P&L: {format_pnl(summary.total_pnl)}"
        + (f"  [dim](max loss ${pre.max_loss:,.2f})[/dim]" if pre.max_loss else ""),
        f"Rules followed: {summary.rules_followed_percentage}%",
    ]
    if pre.max_loss and summary.total_pnl <= -pre.max_loss:
        lines.append("[bold red]Max loss reached[/bold red]")
    if current.is_completed:
        lines.append(f"Discipline score: {format_score(current.discipline_score)}")

    console.print(Panel("\n".join(lines), title="[bold cyan]Session[/bold cyan]", border_style="cyan"))

    if trades:
        names = rule_name_map(store.get_rules(user_id))
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Time", style="dim")
        table.add_column("Result")
        table.add_column("P&L", justify="right")
        table.add_column("Emotion")
        table.add_column("Broken rules", max_width=40)
        table.add_column("Notes", max_width=30)

        for t in trades:
            broken = escape(", ".join(names.get(rid, "(deleted rule)") for rid in t.broken_rule_ids))
            table.add_row(
                str(t.trade_number),
                t.logged_at.strftime("%H:%M"),
                t.result.value,
                format_pnl(t.pnl),
                f"[{t.emotion_tag.color}]{t.emotion_tag.label}[/{t.emotion_tag.color}]",
                f"[red]{broken}[/red]" if broken else "[green]-[/green]",
                escape(t.notes or "-"),
            )
        console.print(table)

    if current.is_completed:
        _print_breakdown(score_breakdown(current.pre_session, current.post_session, trades))
