"""
CLI for CaptureRecorder.

Replays recorded event files through a Recorder and prints the resulting
capture chain.
"""

import json
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from capture_recorder.core.capture import Capture
from capture_recorder.core.recorder import Recorder
from capture_recorder.sources.memory import InMemorySource

app = typer.Typer(
    name="capturebox",
    help="Record event streams as immutable capture chains",
    add_completion=False,
)

console = Console()


def load_events(path: Path) -> list[tuple[str, Any]]:
    """
    Read a JSON-lines event file.

    Each non-blank line must be an object with an ``emitter`` string and an
    optional ``emittance``.

    Raises:
        ValueError: If a line is not a valid event
    """
    events: list[tuple[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"line {lineno}: invalid JSON ({e.msg})") from e
            if not isinstance(data, dict) or not isinstance(data.get("emitter"), str):
                raise ValueError(f"line {lineno}: expected an object with an 'emitter' string")
            events.append((data["emitter"], data.get("emittance")))
    return events


def parse_where(conditions: list[str]) -> dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs; values are read as JSON when possible."""
    parsed: dict[str, Any] = {}
    for condition in conditions:
        key, sep, raw = condition.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {condition!r}")
        try:
            parsed[key] = json.loads(raw)
        except json.JSONDecodeError:
            parsed[key] = raw
    return parsed


def _build_filter(where: dict[str, Any]) -> Optional[Callable[[Any], bool]]:
    if not where:
        return None

    def matches(emittance: Any) -> bool:
        if not isinstance(emittance, dict):
            return False
        return all(key in emittance and emittance[key] == value for key, value in where.items())

    return matches


def _build_mapper(field: Optional[str]) -> Optional[Callable[[Any], Any]]:
    if field is None:
        return None

    def extract(emittance: Any) -> Any:
        return emittance.get(field) if isinstance(emittance, dict) else None

    return extract


def replay(
    events: list[tuple[str, Any]],
    recorder: Recorder[Any],
    source: InMemorySource,
    emitters: Optional[set[str]] = None,
) -> Optional[Capture[Any]]:
    """Emit ``events`` into ``source`` while ``recorder`` is recording."""
    with recorder.recording() as recording:
        for emitter, emittance in events:
            if emitters and emitter not in emitters:
                continue
            source.emit(emitter, emittance)
    return recording.capture


@app.command()
def record(
    events_file: Path = typer.Argument(..., help="JSON-lines file of events"),
    where: Optional[list[str]] = typer.Option(
        None, "--where", "-w", help="KEY=VALUE the emittance must match (repeatable)"
    ),
    field: Optional[str] = typer.Option(None, "--field", "-f", help="Record only this emittance key"),
    emitter: Optional[list[str]] = typer.Option(
        None, "--emitter", "-e", help="Only replay events from this emitter (repeatable)"
    ),
    oldest_first: bool = typer.Option(False, "--oldest-first", help="Show the origin capture first"),
    limit: int = typer.Option(50, "--limit", "-n", min=0, help="Maximum captures to show"),
    as_json: bool = typer.Option(False, "--json", help="Print the chain as JSON"),
) -> None:
    """
    Record an event file and show the resulting capture chain.
    """
    if not events_file.exists():
        console.print(f"[red]Events file not found:[/red] {events_file}")
        raise typer.Exit(1)

    try:
        events = load_events(events_file)
        conditions = parse_where(where or [])
    except ValueError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise typer.Exit(1)

    source = InMemorySource()
    recorder: Recorder[Any] = Recorder(
        source,
        filter=_build_filter(conditions),
        mapper=_build_mapper(field),
    )
    head = replay(events, recorder, source, set(emitter) if emitter else None)

    if head is None:
        console.print("[yellow]No events recorded.[/yellow]")
        raise typer.Exit(0)

    records = head.as_records()
    if not oldest_first:
        records.reverse()
    shown = records[:limit]

    if as_json:
        typer.echo(json.dumps(shown, indent=2, default=str))
        return

    table = Table(title=f"Capture chain ({head.size} captures)")
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Emitter", style="green")
    table.add_column("Value", style="magenta")

    for entry in shown:
        table.add_row(
            str(entry["index"]),
            escape(str(entry["name"])),
            escape(json.dumps(entry["value"], default=str)),
        )

    if len(records) > limit:
        table.add_row("...", f"({len(records) - limit} more)", "")

    console.print(table)


@app.command()
def version() -> None:
    """
    Show version information.
    """
    from capture_recorder import __version__

    console.print(f"CaptureRecorder v{__version__}")


if __name__ == "__main__":
    app()
