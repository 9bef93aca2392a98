"""Reading and writing record files.

Two input layouts are supported: JSON Lines (``.jsonl``, one record per
line, blank lines ignored) and plain JSON (``.json``, one record or a list
of records). Output is always JSON Lines.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

__all__ = ["SUPPORTED_SUFFIXES", "read_records", "write_jsonl"]

SUPPORTED_SUFFIXES = (".jsonl", ".json")


def read_records(path: Path | str) -> list[Any]:
    """Read records from a JSON or JSON Lines file.

    Parameters
    ----------
    path : Path | str
        Input file.

    Returns
    -------
    list[Any]
        Parsed records, in file order. Values are returned as parsed; a
        non-object entry is left for identification to reject.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the suffix is unsupported or the content is not valid JSON.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported input format {suffix or '(none)'!r}; "
            f"expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    if suffix == ".json":
        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{file_path.name}: invalid JSON: {e}") from e
        return list(data) if isinstance(data, list) else [data]

    records: list[Any] = []
    with file_path.open("r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"{file_path.name}:{line_num}: invalid JSON: {e}") from e
    return records


def write_jsonl(
    records: Iterable[Mapping[str, Any]],
    path: Path | str,
    *,
    sort_keys: bool = True,
) -> int:
    """Write records to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    records : Iterable[Mapping[str, Any]]
        Records to write.
    path : Path | str
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.

    Returns
    -------
    int
        Number of records written.
    """
    file_path = Path(path)
    count = 0
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False, sort_keys=sort_keys) + "\n")
            count += 1
    return count
