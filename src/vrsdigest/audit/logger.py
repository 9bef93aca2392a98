"""JSONL event trail of a batch identification run.

Every event is one JSON object per line, appended and flushed as soon as it
is emitted. Worker threads report record outcomes through the same logger,
so writes are serialized with a lock.
"""

import json
import threading
import time
import traceback
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any

from vrsdigest.audit.models import LogEvent
from vrsdigest.utils import calculate_file_sha256, get_iso_timestamp

__all__ = ["AuditLogger"]

_REJECTION_LEVELS = {"invalid": "WARN", "failed": "ERROR"}


class AuditLogger:
    """Append-only JSONL logger for one or more batch runs.

    Attributes
    ----------
    run_id : str
        Run identifier stamped on every event.
    log_path : Path
        JSONL file the events are appended to.
    current_stage : str | None
        Stage entered last through :meth:`stage`; cleared when the run
        finishes.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the log file; later calls do nothing."""
        with self._lock:
            if not self._file.closed:
                self._file.close()

    def emit(
        self,
        event_type: str,
        data: Mapping[str, Any] | None = None,
        *,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. ``"record_identified"``.
        data : Mapping[str, Any] | None, optional
            Event payload.
        level : str, optional
            "INFO", "WARN" or "ERROR", by default "INFO".
        stage : str | None, optional
            Stage the event belongs to, by default :attr:`current_stage`.
        rid : str | None, optional
            Computed identifier of the record the event concerns.
        """
        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=dict(data or {}),
            stage=stage if stage is not None else self.current_stage,
            rid=rid,
        )
        line = json.dumps(asdict(log_event), ensure_ascii=False, separators=(",", ":"))
        with self._lock:
            self._file.write(f"{line}\n")
            self._file.flush()

    def run_started(self, input_path: Path, parameters: Mapping[str, Any]) -> None:
        """Record the input file and the effective batch parameters."""
        self.emit("run_started", {"input": str(input_path), "parameters": dict(parameters)})

    def run_finished(
        self, status: str, duration_seconds: float, counts: Mapping[str, int]
    ) -> None:
        """Record the run status and its record counts, and leave the stage.

        Parameters
        ----------
        status : str
            "success", "partial" or "failed".
        duration_seconds : float
            Wall time of the whole run.
        counts : Mapping[str, int]
            Record counts, e.g. ``total_records`` and ``identified``.
        """
        self.current_stage = None
        data = {"status": status, "duration_seconds": duration_seconds, **counts}
        self.emit("run_finished", data)

    @contextmanager
    def stage(self, name: str, expected_records: int | None = None) -> Iterator[dict[str, int]]:
        """Bracket a stage with ``stage_started`` and ``stage_finished`` events.

        The yielded dictionary collects the stage's counters; they are
        reported with its elapsed time when the block exits normally. When
        the block raises, no ``stage_finished`` event is written and
        :attr:`current_stage` still names the stage, so an :meth:`error`
        event is attributed to it.

        Parameters
        ----------
        name : str
            Stage name.
        expected_records : int | None, optional
            Number of records the stage will see, when known up front.

        Yields
        ------
        dict[str, int]
            Counters to fill in.

        Examples
        --------
        >>> with logger.stage("read") as counters:  # doctest: +SKIP
        ...     counters["records"] = len(records)
        """
        self.current_stage = name
        started = {} if expected_records is None else {"expected_records": expected_records}
        self.emit("stage_started", started, stage=name)

        counters: dict[str, int] = {}
        start = time.perf_counter()
        yield counters
        self.emit(
            "stage_finished",
            {"duration_seconds": time.perf_counter() - start, "counters": counters},
            stage=name,
        )

    def record_identified(self, index: int, kind: str | None, rid: str | None) -> None:
        """Log an identified record; ``rid`` is its root identifier."""
        self.emit("record_identified", {"index": index, "kind": kind}, rid=rid)

    def record_rejected(self, failure: Mapping[str, Any]) -> None:
        """Log an invalid or failed record from its batch failure entry.

        The event is ``record_invalid`` (WARN) or ``record_failed`` (ERROR)
        after the entry's ``reason``; the remaining fields form the payload.
        """
        reason = failure["reason"]
        data = {key: value for key, value in failure.items() if key != "reason"}
        self.emit(f"record_{reason}", data, level=_REJECTION_LEVELS.get(reason, "ERROR"))

    def artifact_written(self, path: Path, record_count: int) -> None:
        """Record an output file with its name, size, checksum and record count."""
        path = Path(path)
        self.emit(
            "artifact_written",
            {
                "path": path.name,
                "sha256": calculate_file_sha256(path),
                "bytes": path.stat().st_size,
                "record_count": record_count,
            },
        )

    def error(self, exc: BaseException) -> None:
        """Record a run-level error against the current stage, with its traceback."""
        self.emit(
            "error",
            {
                "exception_class": type(exc).__name__,
                "message": str(exc),
                "traceback": "".join(traceback.format_exception(exc)),
            },
            level="ERROR",
        )
