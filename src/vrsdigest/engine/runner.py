"""Batch identification runner.

Chains the batch stages into a single deterministic, auditable run:

    read      Load records from a JSON or JSON Lines file
    validate  Optional structural check; invalid records are skipped
    identify  Assign computed identifiers throughout each record tree
    write     Persist identified records as JSON Lines

A failure on one record is recorded and the run continues with the next,
unless ``fail_fast`` is set.
"""

import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from vrsdigest.audit.helpers import generate_run_id, get_package_version
from vrsdigest.audit.logger import AuditLogger
from vrsdigest.engine.config import BatchConfig, BatchResult
from vrsdigest.engine.records import read_records, write_jsonl
from vrsdigest.identify.assigner import identify
from vrsdigest.models.errors import VrsDigestError
from vrsdigest.models.registry import TypeRegistry, default_registry, load_registry
from vrsdigest.validate.schema import validator_for

EVENTS_LOG_NAME = "events.jsonl"


class _FailFast(Exception):
    """Internal signal: a record failed and fail_fast is set."""

    def __init__(self, failure: dict[str, Any]) -> None:
        super().__init__(f"Record {failure['index']} {failure['reason']}: {failure['message']}")
        self.failure = failure


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_registry(config: BatchConfig) -> TypeRegistry:
    if config.registry_path is None:
        return default_registry()
    return load_registry(config.registry_path)


def _kind_of(record: Any, registry: TypeRegistry) -> str | None:
    if not isinstance(record, Mapping):
        return None
    kind = registry.kind_of(record)
    return kind if isinstance(kind, str) else None


def _identify_one(
    record: Any, registry: TypeRegistry
) -> tuple[dict[str, Any] | None, Exception | None]:
    # Nesting too deep for the tree walk fails only that record
    try:
        return identify(record, registry), None
    except (VrsDigestError, RecursionError) as e:
        return None, e


# ---------------------------------------------------------------------------
# Individual stage functions
# ---------------------------------------------------------------------------


def _stage_read(input_path: Path, logger: AuditLogger) -> list[Any]:
    """Stage read: load all records from the input file."""
    with logger.stage("read") as counters:
        records = read_records(input_path)
        counters["records"] = len(records)
    return records


def _stage_validate(
    records: list[Any],
    registry: TypeRegistry,
    config: BatchConfig,
    failures: list[dict[str, Any]],
    logger: AuditLogger,
) -> list[tuple[int, Any]]:
    """Stage validate: drop records that do not match their kind's schema.

    Returns
    -------
    list[tuple[int, Any]]
        ``(index, record)`` pairs that passed.
    """
    validator = validator_for(registry.kind_field)
    passed: list[tuple[int, Any]] = []

    with logger.stage("validate", expected_records=len(records)) as counters:
        for index, record in enumerate(records):
            errors = validator.errors(record)
            if not errors:
                passed.append((index, record))
                continue

            failure = {
                "index": index,
                "reason": "invalid",
                "exception_class": "RecordValidationError",
                "message": "; ".join(errors),
            }
            failures.append(failure)
            logger.record_rejected(failure)
            if config.fail_fast:
                raise _FailFast(failure)

        counters.update(valid=len(passed), invalid=len(records) - len(passed))
    return passed


def _stage_identify(
    indexed: list[tuple[int, Any]],
    registry: TypeRegistry,
    config: BatchConfig,
    failures: list[dict[str, Any]],
    logger: AuditLogger,
) -> list[dict[str, Any]]:
    """Stage identify: assign identifiers, recording per-record failures.

    Returns
    -------
    list[dict[str, Any]]
        Identified records, in input order.
    """
    identified: list[dict[str, Any]] = []
    failed = 0

    def outcomes(executor: ThreadPoolExecutor | None) -> Any:
        if executor is None:
            return (_identify_one(record, registry) for _, record in indexed)
        return executor.map(lambda pair: _identify_one(pair[1], registry), indexed)

    executor = None
    if config.max_workers is not None and config.max_workers > 1:
        executor = ThreadPoolExecutor(max_workers=config.max_workers)

    with logger.stage("identify", expected_records=len(indexed)) as counters:
        try:
            # Results are consumed in input order regardless of completion order
            for (index, record), (result, error) in zip(indexed, outcomes(executor)):
                if error is None:
                    identified.append(result)
                    logger.record_identified(
                        index, _kind_of(record, registry), result.get(registry.identifier_field)
                    )
                    continue

                failed += 1
                failure = {
                    "index": index,
                    "reason": "failed",
                    "exception_class": type(error).__name__,
                    "message": str(error),
                }
                failures.append(failure)
                logger.record_rejected(failure)
                if config.fail_fast:
                    raise _FailFast(failure)
        finally:
            if executor is not None:
                executor.shutdown(wait=True, cancel_futures=True)

        counters.update(identified=len(identified), failed=failed)
    return identified


def _stage_write(
    identified: list[dict[str, Any]],
    config: BatchConfig,
    logger: AuditLogger,
) -> Path:
    """Stage write: persist identified records as JSON Lines."""
    with logger.stage("write", expected_records=len(identified)) as counters:
        output_path = config.output_dir / config.output_name
        count = write_jsonl(identified, output_path)
        logger.artifact_written(output_path, count)
        counters["written"] = count
    return output_path


# ---------------------------------------------------------------------------
# Batch runner
# ---------------------------------------------------------------------------


def _run_stages(
    input_path: Path,
    config: BatchConfig,
    logger: AuditLogger,
) -> BatchResult:
    """Execute the batch stages sequentially.

    Accumulates partial results so that diagnostic information
    is preserved even when a late stage fails.
    """
    config.output_dir.mkdir(parents=True, exist_ok=True)

    total_records = 0
    identified: list[dict[str, Any]] = []
    failures: list[dict[str, Any]] = []

    def counts() -> dict[str, int]:
        invalid = sum(1 for f in failures if f["reason"] == "invalid")
        return {
            "total_records": total_records,
            "identified": len(identified),
            "invalid": invalid,
            "failed": len(failures) - invalid,
        }

    try:
        registry = _load_registry(config)

        records = _stage_read(input_path, logger)
        total_records = len(records)

        if total_records == 0:
            return BatchResult(success=False, error_message="No records found in input")

        if config.validate:
            indexed = _stage_validate(records, registry, config, failures, logger)
        else:
            indexed = list(enumerate(records))

        identified = _stage_identify(indexed, registry, config, failures, logger)

        output_path = _stage_write(identified, config, logger)

        output_files = {"identified": str(output_path), "events": str(logger.log_path)}

        return BatchResult(
            success=True,
            output_files=output_files,
            failures=failures,
            **counts(),
        )

    except _FailFast as e:
        return BatchResult(
            success=False,
            failures=failures,
            error_message=str(e),
            **counts(),
        )

    except Exception as e:
        logger.error(e)
        return BatchResult(
            success=False,
            failures=failures,
            error_message=f"{type(e).__name__}: {e}",
            **counts(),
        )


def _run_logged(input_path: Path, config: BatchConfig, logger: AuditLogger) -> BatchResult:
    parameters = {**config.to_dict(), "package_version": get_package_version()}
    logger.run_started(input_path, parameters)
    start = time.perf_counter()

    result = _run_stages(input_path, config, logger)

    counts = {
        "total_records": result.total_records,
        "identified": result.identified,
        "invalid": result.invalid,
        "failed": result.failed,
    }
    logger.run_finished(result.status, time.perf_counter() - start, counts)
    return result


def run_batch(
    input_path: Path | str,
    config: BatchConfig | None = None,
    logger: AuditLogger | None = None,
) -> BatchResult:
    """Identify every record of an input file.

    Parameters
    ----------
    input_path : Path | str
        ``.jsonl`` or ``.json`` file of records.
    config : BatchConfig | None, optional
        Batch configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger to report to. If None, a logger writing
        ``events.jsonl`` into the output directory is opened for the run.

    Returns
    -------
    BatchResult
        Batch execution results.

    Examples
    --------
    Run with defaults:

        >>> from vrsdigest.engine import run_batch
        >>> result = run_batch("variants.jsonl")
        >>> if result.success:
        ...     print(f"Identified {result.identified} of {result.total_records} records")

    Validate first and use four worker threads:

        >>> from vrsdigest.engine import BatchConfig
        >>> config = BatchConfig(output_dir="out", validate=True, max_workers=4)
        >>> result = run_batch("variants.jsonl", config=config)
    """
    input_path = Path(input_path)

    if config is None:
        config = BatchConfig()

    if not input_path.is_file():
        return BatchResult(
            success=False,
            error_message=f"Input file does not exist: {input_path}",
        )

    if logger is not None:
        return _run_logged(input_path, config, logger)

    config.output_dir.mkdir(parents=True, exist_ok=True)
    with AuditLogger(generate_run_id(), config.output_dir / EVENTS_LOG_NAME) as owned:
        return _run_logged(input_path, config, owned)
