"""Tests for the capturebox CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from capture_recorder.cli import app, load_events, parse_where

runner = CliRunner()


@pytest.fixture
def events_file(tmp_path: Path) -> Path:
    path = tmp_path / "events.jsonl"
    lines = [
        {"emitter": "cli.door", "emittance": {"state": "open", "by": "alice"}},
        {"emitter": "cli.window", "emittance": {"state": "shut", "by": "bob"}},
        {"emitter": "cli.door", "emittance": {"state": "closed", "by": "alice"}},
    ]
    path.write_text("\n".join(json.dumps(line) for line in lines) + "\n\n", encoding="utf-8")
    return path


class TestHelpers:
    """Tests for CLI input parsing."""

    def test_load_events(self, events_file: Path) -> None:
        """Test reading a JSON-lines event file, skipping blank lines."""
        events = load_events(events_file)

        assert len(events) == 3
        assert events[0] == ("cli.door", {"state": "open", "by": "alice"})

    def test_load_events_rejects_bad_lines(self, tmp_path: Path) -> None:
        """Test invalid lines are reported with their line number."""
        path = tmp_path / "bad.jsonl"
        path.write_text('{"emitter": "cli.door"}\n{"emittance": 1}\n', encoding="utf-8")

        with pytest.raises(ValueError, match="line 2"):
            load_events(path)

    def test_parse_where(self) -> None:
        """Test values are decoded as JSON when possible."""
        assert parse_where(["state=open", "count=3", "flag=true"]) == {
            "state": "open",
            "count": 3,
            "flag": True,
        }

        with pytest.raises(ValueError):
            parse_where(["missing-separator"])


class TestRecordCommand:
    """Tests for `capturebox record`."""

    def test_json_newest_first(self, events_file: Path) -> None:
        """Test the chain is printed newest first by default."""
        result = runner.invoke(app, ["record", str(events_file), "--field", "state", "--json"])

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [r["value"] for r in records] == ["closed", "shut", "open"]
        assert [r["index"] for r in records] == [2, 1, 0]
        assert records[0]["name"] == "cli.door"

    def test_where_and_oldest_first(self, events_file: Path) -> None:
        """Test filtering with --where and ordering with --oldest-first."""
        result = runner.invoke(
            app,
            ["record", str(events_file), "-w", "by=alice", "-f", "state", "--oldest-first", "--json"],
        )

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [r["value"] for r in records] == ["open", "closed"]

    def test_emitter_selection(self, events_file: Path) -> None:
        """Test --emitter restricts which events are replayed."""
        result = runner.invoke(
            app, ["record", str(events_file), "-e", "cli.window", "-f", "by", "--json"]
        )

        assert result.exit_code == 0
        assert [r["value"] for r in json.loads(result.stdout)] == ["bob"]

    def test_table_output(self, events_file: Path) -> None:
        """Test the default table rendering."""
        result = runner.invoke(app, ["record", str(events_file), "--field", "state", "--limit", "2"])

        assert result.exit_code == 0
        assert "Capture chain (3 captures)" in result.stdout
        assert "closed" in result.stdout
        assert "1 more" in result.stdout

    def test_nothing_recorded(self, events_file: Path) -> None:
        """Test a filter that rejects everything."""
        result = runner.invoke(app, ["record", str(events_file), "-w", "state=missing"])

        assert result.exit_code == 0
        assert "No events recorded" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing events file fails."""
        result = runner.invoke(app, ["record", str(tmp_path / "nope.jsonl")])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_negative_limit_rejected(self, events_file: Path) -> None:
        """Test a negative --limit is a usage error instead of a silent truncation."""
        result = runner.invoke(app, ["record", str(events_file), "--limit=-1", "--json"])

        assert result.exit_code == 2

    def test_zero_limit(self, events_file: Path) -> None:
        """Test --limit 0 shows only the overflow row."""
        result = runner.invoke(app, ["record", str(events_file), "--limit", "0"])

        assert result.exit_code == 0
        assert "3 more" in result.stdout

    def test_invalid_where(self, events_file: Path) -> None:
        """Test a malformed --where fails."""
        result = runner.invoke(app, ["record", str(events_file), "-w", "oops"])

        assert result.exit_code == 1
        assert "Invalid input" in result.stdout


class TestVersionCommand:
    """Tests for `capturebox version`."""

    def test_version(self) -> None:
        """Test version output."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "CaptureRecorder v0.1.0" in result.stdout
