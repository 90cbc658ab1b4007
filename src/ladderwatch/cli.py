"""
Ladderwatch CLI - Command Line Interface for roster rating statistics

Provides commands for:
- Roster summaries (volume, rolling averages, percentiles, deltas, tilt)
- Elo cycles
- Rating timelines
- Single-player history reports
- Configuration scaffolding
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ladderwatch import __version__
from ladderwatch.core.config import generate_default_config, get_config, load_config, set_config
from ladderwatch.core.log_setup import setup_logging
from ladderwatch.tracker.cycles import compute_cycles
from ladderwatch.tracker.models import MatchRecord
from ladderwatch.tracker.reports import build_player_history, build_summary
from ladderwatch.tracker.roster import TrackedAccount, filter_matches, parse_roster
from ladderwatch.tracker.timeline import build_timeline

app = typer.Typer(
    name="ladderwatch",
    help="Rating-progress statistics for a community ladder roster",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]Ladderwatch[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (.yaml, .toml or .json)"
    ),
) -> None:
    """Ladderwatch - Community Ladder Tracker"""
    try:
        if config_file is not None:
            set_config(load_config(config_file))
        config = get_config()
    except ValueError as e:
        _fail(e)
    setup_logging(config.logging)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


# =============================================================================
# Input loading
# =============================================================================


def load_matches(path: Path) -> list[MatchRecord]:
    """Read match records from a JSON export.

    Accepts either a list of match dicts or a mapping of profile id to a
    list of match dicts.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        raw = [match for matches in data.values() for match in matches]
    elif isinstance(data, list):
        raw = data
    else:
        raise ValueError(f"{path} must contain a list or an object of match lists")
    return [MatchRecord.from_dict(m) for m in raw]


def load_accounts(roster: Optional[Path], matches: list[MatchRecord]) -> list[TrackedAccount]:
    """Roster accounts from a roster file, or one account per profile seen."""
    if roster is not None:
        return parse_roster(json.loads(roster.read_text(encoding="utf-8")))
    profile_ids = sorted({m.profile_id for m in matches})
    return [TrackedAccount(id=pid, steam="") for pid in profile_ids]


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def _fmt(value: Any, digits: int = 0) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.{digits}f}"
    return str(value)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def summary(
    matches_path: Path = typer.Argument(
        ..., help="JSON export of match records", exists=True, dir_okay=False
    ),
    roster: Optional[Path] = typer.Option(
        None, "--roster", "-r", help="Roster JSON (id, steam, nick)", exists=True
    ),
    ladder: Optional[str] = typer.Option(
        None, "--ladder", "-l", help="Ladder tag (defaults to config)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the summary as JSON"),
) -> None:
    """
    Show per-account and consolidated statistics for the roster.
    """
    config = get_config().tracker
    try:
        matches = filter_matches(load_matches(matches_path), ladder=ladder or config.default_ladder)
        accounts = load_accounts(roster, matches)
    except ValueError as e:
        _fail(e)

    report = build_summary(accounts, matches, config=config)

    if output is not None:
        output.write_text(json.dumps(report, indent=2), encoding="utf-8")
        console.print(f"[green]Summary written to[/green] {output}")
        return

    nicks = {a.id: a.nick for a in accounts}
    table = Table(title="Roster Summary")
    table.add_column("Account", style="cyan")
    table.add_column("Week", justify="right")
    table.add_column("Month", justify="right")
    table.add_column("Avg10", justify="right")
    table.add_column("Avg50", justify="right")
    table.add_column("P50", justify="right")
    table.add_column("Δ10", justify="right")
    table.add_column("Tilt", justify="right")

    rows = report["byAccount"] + [{"profile_id": "ALL", **report["consolidated"]}]
    for row in rows:
        table.add_row(
            str(nicks.get(row["profile_id"]) or row["profile_id"]),
            str(row["volume"]["week"]),
            str(row["volume"]["month"]),
            _fmt(row["rollingAvg"]["g10"]),
            _fmt(row["rollingAvg"]["g50"]),
            _fmt(row["percentiles"]["p50"]),
            _fmt(row["delta"]["g10"]),
            str(len(row["tilt"])),
        )

    console.print(table)


@app.command()
def cycles(
    matches_path: Path = typer.Argument(
        ..., help="JSON export of match records", exists=True, dir_okay=False
    ),
    ladder: Optional[str] = typer.Option(
        None, "--ladder", "-l", help="Ladder tag (defaults to config)"
    ),
) -> None:
    """
    Show how many games and days each rating climb took.
    """
    config = get_config().tracker
    try:
        matches = filter_matches(load_matches(matches_path), ladder=ladder or config.default_ladder)
    except ValueError as e:
        _fail(e)

    found = compute_cycles(matches, thresholds=config.cycle_thresholds)
    if not found:
        console.print("[yellow]No completed elo cycles[/yellow]")
        return

    table = Table(title="Elo Cycles")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Days", justify="right")
    for cycle in found:
        table.add_row(
            str(cycle.elo_from),
            str(cycle.elo_to),
            str(cycle.games_in_cycle),
            str(cycle.days_in_cycle),
        )
    console.print(table)


@app.command()
def timeline(
    matches_path: Path = typer.Argument(
        ..., help="JSON export of match records", exists=True, dir_okay=False
    ),
    granularity: str = typer.Option("day", "--granularity", "-g", help="Bucket size: day or week"),
    days: int = typer.Option(90, "--days", "-d", help="How many days back to include"),
    ladder: Optional[str] = typer.Option(
        None, "--ladder", "-l", help="Ladder tag (defaults to config)"
    ),
) -> None:
    """
    Show the consolidated rating timeline.
    """
    config = get_config().tracker
    try:
        matches = filter_matches(load_matches(matches_path), ladder=ladder or config.default_ladder)
        points = build_timeline(matches, granularity=granularity, days=days)
    except ValueError as e:
        _fail(e)

    table = Table(title=f"Rating Timeline ({granularity})")
    table.add_column("Bucket", style="cyan")
    table.add_column("Avg Elo", justify="right")
    table.add_column("Last Elo", justify="right")
    for point in points:
        table.add_row(point.bucket, str(point.avg_elo), _fmt(point.last_elo))
    console.print(table)


@app.command()
def history(
    matches_path: Path = typer.Argument(
        ..., help="JSON export of match records", exists=True, dir_okay=False
    ),
    profile_id: int = typer.Argument(..., help="Profile id of the player"),
    from_ts: Optional[int] = typer.Option(None, "--from", help="Start (epoch seconds)"),
    to_ts: Optional[int] = typer.Option(None, "--to", help="End (epoch seconds)"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Most recent N matches"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report as JSON"),
) -> None:
    """
    Show a player's progress, volume correlation and play patterns.
    """
    config = get_config().tracker
    try:
        tz = ZoneInfo(config.timezone) if config.timezone else None
        matches = filter_matches(load_matches(matches_path), ladder=config.default_ladder)
        report = build_player_history(
            profile_id, matches, from_ts=from_ts, to_ts=to_ts, limit=limit, tz=tz
        )
    except (ValueError, ZoneInfoNotFoundError) as e:
        _fail(e)

    if output is not None:
        output.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]History written to[/green] {output}")
        return

    table = Table(title=f"Progress for {profile_id}")
    table.add_column("Period", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Elo Δ", justify="right")
    table.add_column("Win %", justify="right")
    table.add_column("Elo/day", justify="right")
    for name, progress in report["progress"].items():
        table.add_row(
            name,
            str(progress["games"]),
            str(progress["elo_change"]),
            _fmt(progress["win_rate"], 1),
            _fmt(progress.get("elo_per_day"), 2),
        )
    console.print(table)

    correlation = report["volume_progress_correlation"]
    patterns = report["game_patterns"]
    lines = [
        f"[cyan]Correlation:[/cyan] {_fmt(correlation['correlation_coefficient'], 3)}",
        f"[cyan]Analysis:[/cyan] {correlation['analysis']}",
        f"[cyan]Recommendation:[/cyan] {correlation['recommendation']}",
        f"[cyan]Peak day:[/cyan] {patterns['peak_day'] or '-'}",
        f"[cyan]Peak hour:[/cyan] {_fmt(patterns['peak_hour'])}",
        f"[cyan]Consistency:[/cyan] {patterns['consistency_score']}",
    ]
    lines += [f"{i['icon']} {i['message']}" for i in patterns["insights"]]
    console.print(
        Panel("\n".join(lines), title="[bold blue]Player Insights[/bold blue]", expand=False)
    )


@app.command()
def init_config(
    path: Path = typer.Argument(Path("ladderwatch.yaml"), help="Where to write the configuration"),
) -> None:
    """
    Write a default configuration file.
    """
    if path.exists():
        console.print(f"[red]Error:[/red] {path} already exists")
        raise typer.Exit(1)
    try:
        generate_default_config(path)
    except ValueError as e:
        _fail(e)
    console.print(f"[green]Configuration written to[/green] {path}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
