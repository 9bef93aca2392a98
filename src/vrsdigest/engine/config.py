"""Batch configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class BatchConfig:
    """Configuration for a batch identification run.

    Attributes
    ----------
    output_dir : Path
        Directory receiving the identified records and the event log.
    validate : bool
        Check each record against its kind's structural schema before
        identifying it. Invalid records are reported and skipped.
    fail_fast : bool
        Stop at the first invalid or failed record instead of continuing.
    max_workers : int | None
        Worker threads for identification. None or 1 runs sequentially.
    registry_path : Path | None
        Type Registry JSON file. If None, uses the bundled table.
    output_name : str
        File name of the identified records inside ``output_dir``.
    """

    output_dir: Path = Path("out")
    validate: bool = False
    fail_fast: bool = False
    max_workers: int | None = None
    registry_path: Path | None = None
    output_name: str = "identified.jsonl"

    def __post_init__(self) -> None:
        """Coerce paths and validate."""
        self.output_dir = Path(self.output_dir)

        if self.registry_path is not None:
            self.registry_path = Path(self.registry_path)

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        if not self.output_name or "/" in self.output_name or "\\" in self.output_name:
            raise ValueError(f"output_name must be a plain file name, got {self.output_name!r}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["output_dir"] = str(self.output_dir)
        data["registry_path"] = str(self.registry_path) if self.registry_path is not None else None
        return data


@dataclass
class BatchResult:
    """Results from a batch identification run.

    Attributes
    ----------
    success : bool
        Whether the run completed. Per-record failures do not make a run
        unsuccessful unless ``fail_fast`` stopped it.
    total_records : int
        Records read from the input.
    identified : int
        Records identified and written.
    invalid : int
        Records rejected by structural validation.
    failed : int
        Records whose identification raised an error.
    output_files : dict[str, str]
        Map of artifact type to file path.
    failures : list[dict[str, Any]]
        One entry per invalid or failed record: ``index``, ``reason``
        ("invalid" or "failed"), ``exception_class`` and ``message``.
    error_message : str | None
        Error message if the run failed.
    """

    success: bool
    total_records: int = 0
    identified: int = 0
    invalid: int = 0
    failed: int = 0
    output_files: dict[str, str] = field(default_factory=dict)
    failures: list[dict[str, Any]] = field(default_factory=list)
    error_message: str | None = None

    @property
    def status(self) -> str:
        """Run status: "success", "partial" or "failed"."""
        if not self.success:
            return "failed"
        return "partial" if self.failures else "success"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
