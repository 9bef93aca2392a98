"""Command-line interface for vrsdigest.

Provides CLI commands for canonical serialization, digests, identifiers,
structural validation, batch identification and conformance checks.
"""

import importlib.metadata
import json
import sys
from pathlib import Path
from typing import IO, Any, NoReturn

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("vrsdigest")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def _fail(message: str) -> NoReturn:
    click.secho(f"✗ Error: {message}", fg="red", err=True)
    sys.exit(1)


def _load_record(source: IO[str]) -> Any:
    """Parse one JSON record from an open file or stdin."""
    try:
        return json.load(source)
    except json.JSONDecodeError as e:
        _fail(f"invalid JSON input: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="vrsdigest")
def cli() -> None:
    """Computed identifiers for GA4GH variation records.

    Commands that take FILE read one JSON record from it; use '-' for stdin.
    Use 'vrsdigest COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def serialize(source: IO[str]) -> None:
    """Print the canonical serialization of the record in FILE.

    Examples
    --------
        vrsdigest serialize allele.json
        echo '{"type": "Number", "value": 5}' | vrsdigest serialize -
    """
    from vrsdigest import canonicalize

    record = _load_record(source)
    try:
        click.echo(canonicalize(record).decode("utf-8"))
    except Exception as e:
        _fail(str(e))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def digest(source: IO[str]) -> None:
    """Print the digest of the record in FILE."""
    from vrsdigest import digest as compute_digest

    record = _load_record(source)
    try:
        click.echo(compute_digest(record))
    except Exception as e:
        _fail(str(e))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option(
    "--tree",
    is_flag=True,
    help="Print the whole record with identifiers assigned throughout",
)
def identify(source: IO[str], tree: bool) -> None:
    """Print the computed identifier of the record in FILE.

    With --tree, prints the record itself as JSON, every content-addressable
    node carrying its identifier.

    Examples
    --------
        vrsdigest identify allele.json
        vrsdigest identify allele.json --tree
    """
    from vrsdigest import ga4gh_identify
    from vrsdigest import identify as identify_tree

    record = _load_record(source)
    try:
        if tree:
            identified = identify_tree(record)
            click.echo(json.dumps(identified, indent=2, sort_keys=True, ensure_ascii=False))
        else:
            click.echo(ga4gh_identify(record))
    except Exception as e:
        _fail(str(e))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
def validate(source: IO[str]) -> None:
    """Check the record in FILE against its kind's structural schema."""
    from vrsdigest.validate import default_validator

    record = _load_record(source)
    errors = default_validator().errors(record)
    if errors:
        for message in errors:
            click.secho(f"  {message}", fg="red", err=True)
        _fail(f"{len(errors)} validation error(s)")

    kind = record.get("type") if isinstance(record, dict) else None
    click.secho(f"✓ Valid {kind} record", fg="green")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default="out",
    help="Output directory for results (default: out)",
)
@click.option(
    "--validate",
    "validate_records",
    is_flag=True,
    help="Skip records that fail structural validation",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    help="Stop at the first invalid or failed record",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads for identification (default: sequential)",
)
@click.option(
    "--registry",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Type Registry JSON file (default: bundled VRS 1.x table)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def batch(
    input_path: str,
    output_dir: str,
    validate_records: bool,
    fail_fast: bool,
    workers: int | None,
    registry: str | None,
    verbose: bool,
) -> None:
    """Identify every record of INPUT_PATH.

    INPUT_PATH is a JSON Lines file (one record per line) or a JSON file
    holding one record or a list of records.

    Identified records are written to OUTPUT_DIR/identified.jsonl, with an
    audit trail in OUTPUT_DIR/events.jsonl.

    Examples
    --------
        vrsdigest batch variants.jsonl
        vrsdigest batch variants.jsonl -o results --validate --workers 4
    """
    from vrsdigest.engine import BatchConfig, run_batch

    if verbose:
        click.echo("Starting batch identification...", err=True)
        click.echo(f"  Input: {input_path}", err=True)
        click.echo(f"  Output: {output_dir}", err=True)
        click.echo(f"  Validate: {validate_records}", err=True)
        click.echo(f"  Workers: {workers or 1}", err=True)

    try:
        config = BatchConfig(
            output_dir=Path(output_dir),
            validate=validate_records,
            fail_fast=fail_fast,
            max_workers=workers,
            registry_path=Path(registry) if registry else None,
        )
        result = run_batch(input_path=Path(input_path), config=config)
    except Exception as e:
        _fail(str(e))

    if verbose:
        for failure in result.failures:
            click.echo(
                f"  record {failure['index']} {failure['reason']}: "
                f"{failure['exception_class']}: {failure['message']}",
                err=True,
            )

    if not result.success:
        _fail(f"Batch failed: {result.error_message}")

    click.secho(
        f"✓ Identified {result.identified} of {result.total_records} records "
        f"({result.invalid} invalid, {result.failed} failed)",
        fg="green" if not result.failures else "yellow",
    )

    if verbose:
        click.echo("\nOutputs:", err=True)
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)


@cli.command()
@click.argument("source")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="List every failing vector with its mismatches",
)
def conform(source: str, verbose: bool) -> None:
    """Check conformance vectors from SOURCE (a file path or URL).

    Examples
    --------
        vrsdigest conform tests/fixtures/vectors.yaml
        vrsdigest conform https://example.org/models.yaml -v
    """
    from vrsdigest.conformance import check_vectors, load_vectors

    try:
        report = check_vectors(load_vectors(source))
    except Exception as e:
        _fail(str(e))

    if verbose:
        for result in report.results:
            if result.passed:
                continue
            click.secho(f"  ✗ {result.vector.label}", fg="red", err=True)
            for failure in result.failures:
                click.echo(f"      {failure}", err=True)

    if not report.success:
        _fail(f"{report.failed} of {report.total} vectors failed")

    click.secho(f"✓ {report.passed} of {report.total} vectors passed", fg="green")


if __name__ == "__main__":
    cli()
