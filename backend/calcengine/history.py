"""
History log for evaluated expressions.

Each successful evaluation is handed to a ``HistoryLogger`` which appends
``expression=result`` lines (or JSON lines) to a file from a background
worker thread, off the critical path of the calculator.
"""

from __future__ import annotations

import json
import queue
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .logging_utils import get_logger

logger = get_logger(__name__)

HISTORY_FORMATS = ("text", "jsonl")

_STOP = object()

FLUSH_POLL_INTERVAL = 0.01


@dataclass
class HistoryEntry:
    """
    One line of history.

    Attributes:
        expression: Expression text without whitespace.
        result: Evaluated value.
        timestamp: ISO format timestamp.
    """

    expression: str
    result: float
    timestamp: str = ""

    @classmethod
    def create(cls, expression: str, result: float) -> "HistoryEntry":
        """Create an entry stamped with the current time."""
        return cls(
            expression=expression,
            result=result,
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        )

    def format_line(self) -> str:
        return f"{self.expression}={self.result}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        # NaN and infinities are written as strings to keep the line valid JSON
        data = self.to_dict()
        data["result"] = repr(self.result)
        return json.dumps(data)

    @classmethod
    def from_json(cls, json_str: str) -> "HistoryEntry":
        data = json.loads(json_str)
        data["result"] = float(data["result"])
        return cls(**data)

    @classmethod
    def from_line(cls, line: str) -> "HistoryEntry":
        """Parse an ``expression=result`` line."""
        expression, _, result = line.rpartition("=")
        if not expression:
            raise ValueError(f"Not a history line: {line!r}")
        return cls(expression=expression, result=float(result))


class HistoryLogger:
    """
    Asynchronous file sink for evaluation history.

    ``notify`` only enqueues; a daemon worker thread writes and flushes.
    Write failures are logged and never reach the caller.
    """

    def __init__(self, path: Path, fmt: str = "text", truncate: bool = True):
        """
        Start the logger.

        Args:
            path: File to write history to.
            fmt: ``text`` for ``expression=result`` lines, ``jsonl`` for JSON lines.
            truncate: Start from an empty file instead of appending.
        """
        if fmt not in HISTORY_FORMATS:
            raise ValueError(f"Unknown history format: {fmt}")

        self.path = Path(path)
        self.fmt = fmt
        self.failures = 0
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._closed = False
        self._lock = threading.Lock()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        mode = "w" if truncate else "a"
        self._file = open(self.path, mode, encoding="utf-8")

        self._worker = threading.Thread(
            target=self._run, name="history-logger", daemon=True
        )
        self._worker.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self, expression: str, result: float) -> None:
        """Queue an evaluated expression for writing."""
        with self._lock:
            if self._closed:
                logger.warning("History logger is closed, dropping %s", expression)
                return
            self._queue.put(HistoryEntry.create(expression, result))

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until every queued entry has been written.

        Returns:
            True if the queue drained, False if the timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._queue.unfinished_tasks:
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(FLUSH_POLL_INTERVAL)
        return True

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """Drain the queue, stop the worker and close the file."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)

        try:
            self._worker.join(timeout)
            if self._worker.is_alive():
                logger.warning("History worker did not stop within %ss", timeout)
        finally:
            self._file.close()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._write(item)
            finally:
                self._queue.task_done()

    def _write(self, entry: HistoryEntry) -> None:
        line = entry.to_json() if self.fmt == "jsonl" else entry.format_line()
        try:
            self._file.write(line + "\n")
            self._file.flush()
        except (OSError, ValueError) as e:
            self.failures += 1
            logger.warning("Could not write history to %s: %s", self.path, e)

    def read_entries(self) -> Iterator[HistoryEntry]:
        """Read back the entries written so far."""
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    if self.fmt == "jsonl":
                        yield HistoryEntry.from_json(line)
                    else:
                        yield HistoryEntry.from_line(line)
                except (ValueError, KeyError, TypeError):
                    logger.debug("Skipping unreadable history line: %s", line)
                    continue

    def __enter__(self) -> "HistoryLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
