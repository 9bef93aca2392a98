"""Batch orchestration engine.

This package provides the entry point for identifying whole files of
records, including configuration and result types.
"""

from vrsdigest.engine.config import BatchConfig, BatchResult
from vrsdigest.engine.records import read_records, write_jsonl
from vrsdigest.engine.runner import EVENTS_LOG_NAME, run_batch

__all__ = [
    "BatchConfig",
    "BatchResult",
    "EVENTS_LOG_NAME",
    "read_records",
    "run_batch",
    "write_jsonl",
]
