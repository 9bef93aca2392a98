"""Audit logging subsystem for vrsdigest.

Main Components
---------------
- AuditLogger: JSONL event logger
- generate_run_id: run identifier factory
"""

from vrsdigest.audit.helpers import generate_run_id, get_package_version
from vrsdigest.audit.logger import AuditLogger
from vrsdigest.audit.models import LogEvent
from vrsdigest.utils import calculate_file_sha256, get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_package_version",
    "get_iso_timestamp",
    "calculate_file_sha256",
]
