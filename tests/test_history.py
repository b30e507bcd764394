"""
Tests for the asynchronous history log.
"""

import json
import math
import threading

import pytest

from backend.calcengine.history import HistoryEntry, HistoryLogger
from backend.calcengine.logic.evaluator import Calculator


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_create_sets_timestamp(self):
        """Test created entries are stamped."""
        entry = HistoryEntry.create("1+2", 3.0)
        assert entry.timestamp.endswith("Z")

    def test_format_line(self):
        """Test the expression=result line format."""
        assert HistoryEntry("1+2", 3.0).format_line() == "1+2=3.0"

    def test_from_line_with_negative_result(self):
        """Test parsing splits on the last equals sign."""
        entry = HistoryEntry.from_line("1-2=-1.0")
        assert entry.expression == "1-2"
        assert entry.result == -1.0

    def test_from_line_rejects_garbage(self):
        """Test lines without an expression are rejected."""
        with pytest.raises(ValueError):
            HistoryEntry.from_line("=3")

    def test_json_handles_infinity(self):
        """Test non-finite results survive a JSON line."""
        entry = HistoryEntry.create("6/0", math.inf)
        data = json.loads(entry.to_json())
        assert data["result"] == "inf"
        assert HistoryEntry.from_json(entry.to_json()).result == math.inf


class TestHistoryLogger:
    """Tests for HistoryLogger."""

    def test_writes_text_lines(self, tmp_path):
        """Test entries are written in order as text lines."""
        path = tmp_path / "log.txt"
        with HistoryLogger(path) as history:
            history.notify("2+3", 5.0)
            history.notify("ans*2", 10.0)
        assert path.read_text(encoding="utf-8").splitlines() == ["2+3=5.0", "ans*2=10.0"]

    def test_writes_jsonl(self, tmp_path):
        """Test the JSON lines format."""
        path = tmp_path / "history.jsonl"
        with HistoryLogger(path, fmt="jsonl") as history:
            history.notify("1+1", 2.0)
            history.flush()
            entries = list(history.read_entries())
        assert len(entries) == 1
        assert entries[0].expression == "1+1"
        assert entries[0].result == 2.0

    def test_read_entries_text(self, tmp_path):
        """Test reading back text history."""
        history = HistoryLogger(tmp_path / "log.txt")
        history.notify("4/2", 2.0)
        history.flush()
        assert [(e.expression, e.result) for e in history.read_entries()] == [("4/2", 2.0)]
        history.close()

    def test_truncates_by_default(self, tmp_path):
        """Test a new logger starts from an empty file."""
        path = tmp_path / "log.txt"
        path.write_text("old=1.0\n", encoding="utf-8")
        HistoryLogger(path).close()
        assert path.read_text(encoding="utf-8") == ""

    def test_append_mode(self, tmp_path):
        """Test truncate=False keeps earlier lines."""
        path = tmp_path / "log.txt"
        path.write_text("old=1.0\n", encoding="utf-8")
        with HistoryLogger(path, truncate=False) as history:
            history.notify("new", 2.0)
        assert path.read_text(encoding="utf-8").splitlines() == ["old=1.0", "new=2.0"]

    def test_creates_parent_directories(self, tmp_path):
        """Test nested history paths are created."""
        path = tmp_path / "a" / "b" / "log.txt"
        HistoryLogger(path).close()
        assert path.exists()

    def test_close_is_idempotent(self, tmp_path):
        """Test closing twice is harmless."""
        history = HistoryLogger(tmp_path / "log.txt")
        history.close()
        history.close()
        assert history.closed

    def test_notify_after_close_is_dropped(self, tmp_path):
        """Test notifications after close do not raise."""
        path = tmp_path / "log.txt"
        history = HistoryLogger(path)
        history.close()
        history.notify("1+1", 2.0)
        assert path.read_text(encoding="utf-8") == ""

    def test_unknown_format(self, tmp_path):
        """Test an unsupported format is rejected."""
        with pytest.raises(ValueError):
            HistoryLogger(tmp_path / "log.txt", fmt="csv")

    def test_calculator_integration(self, tmp_path):
        """Test a calculator session feeding the logger."""
        path = tmp_path / "log.txt"
        with HistoryLogger(path) as history:
            calc = Calculator(history=history)
            calc.calculate("2 + 3")
            calc.calculate("ans * 2")
        assert path.read_text(encoding="utf-8").splitlines() == ["2+3=5.0", "ans*2=10.0"]

    def test_flush_returns_true_when_drained(self, tmp_path):
        """Test flush reports a drained queue."""
        with HistoryLogger(tmp_path / "log.txt") as history:
            history.notify("1+1", 2.0)
            assert history.flush(timeout=5.0) is True

    def test_stuck_worker_times_out_and_file_is_closed(self, tmp_path):
        """Test flush and close give up on a blocked worker without leaking the file."""
        history = HistoryLogger(tmp_path / "log.txt")
        release = threading.Event()
        history._write = lambda entry: release.wait(5.0)

        history.notify("1+1", 2.0)
        assert history.flush(timeout=0.05) is False

        history.close(timeout=0.05)
        assert history._file.closed
        release.set()
