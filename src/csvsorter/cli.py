from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError

from csvsorter.errors import SortError
from csvsorter.jobs.load import load_job_file
from csvsorter.jobs.normalize import normalize_options
from csvsorter.jobs.types import JobConfig
from csvsorter.sorter import Sorter
from csvsorter.sqlite.script import generate_script

app = typer.Typer(help="Sort and filter large CSV/TSV/PSV files with sqlite3")

_DIRECTIONS = {"ASC", "DESC"}
_VALUE_TYPES = {"string", "number"}
_DELIMITER_NAMES = {"tab": "\t", "\\t": "\t", "comma": ",", "pipe": "|", "semicolon": ";"}


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def _job_logger(quiet: bool) -> logging.Logger:
    logger = logging.getLogger("csvsorter")
    # one handler per command, bound to the current stderr
    for old in list(logger.handlers):
        logger.removeHandler(old)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("[csvsorter] %(message)s"))
    logger.addHandler(h)
    logger.setLevel(logging.WARNING if quiet else logging.INFO)
    return logger


# ---------------------------------------------------------------------------
# Option parsing helpers
# ---------------------------------------------------------------------------
def _split_suffix(text: str, allowed: set, *, upper: bool) -> tuple[str, Optional[str]]:
    # "name:SUFFIX" when SUFFIX is a known keyword; otherwise the whole text is the name
    name, sep, suffix = text.rpartition(":")
    if sep and name:
        key = suffix.upper() if upper else suffix.lower()
        if key in allowed:
            return name, key
    return text, None


def _order_entry(text: str) -> Any:
    name, direction = _split_suffix(text, _DIRECTIONS, upper=True)
    return {"name": name, "direction": direction} if direction else name


def _schema_entry(text: str) -> Any:
    name, value_type = _split_suffix(text, _VALUE_TYPES, upper=False)
    return {"name": name, "type": value_type} if value_type else name


def _delimiter(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _DELIMITER_NAMES.get(value.lower(), value)


def _file_entry(path: Path, delimiter: Optional[str]) -> Any:
    d = _delimiter(delimiter)
    return {"filename": str(path), "delimiter": d} if d else str(path)


def _run(options: Dict[str, Any], *, dry_run: bool, quiet: bool) -> None:
    try:
        job: JobConfig = normalize_options(options)
        if dry_run:
            typer.echo("\n--- SQLITE DRY RUN ---\n")
            typer.echo(generate_script(job))
            return
        Sorter().execute(job)
    except (SortError, ValidationError, OSError, ValueError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not quiet:
        typer.secho(f"Wrote {job.destination.path}", fg=typer.colors.GREEN)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@app.command("sort")
def sort_cmd(
    source: Path = typer.Argument(..., help="Delimited file to sort"),
    destination: Path = typer.Argument(..., help="Where to write the sorted file"),
    order_by: List[str] = typer.Option(..., "--order-by", "-k", help="Sort key, NAME or NAME:DESC (repeatable)"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Output column (repeatable, default all)"),
    schema: Optional[List[str]] = typer.Option(None, "--schema", help="Source column, NAME or NAME:number (repeatable, all columns in file order)"),
    where: Optional[str] = typer.Option(None, "--where", "-w", help="Raw SQL filter, passed through unchanged"),
    offset: Optional[int] = typer.Option(None, "--offset", min=0),
    limit: Optional[int] = typer.Option(None, "--limit", min=1),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", "-d", help="Source delimiter (',' default; 'tab' accepted)"),
    out_delimiter: Optional[str] = typer.Option(None, "--out-delimiter", "-D", help="Destination delimiter"),
    db: Optional[Path] = typer.Option(None, "--db", help="Temporary sqlite database (default: destination with .sqlite)"),
    keep_db: bool = typer.Option(False, "--keep-db", help="Keep the temporary database after the run"),
    sqlite: Optional[str] = typer.Option(None, "--sqlite", help="sqlite3 executable"),
    index: bool = typer.Option(True, "--index/--no-index", help="Index the sort keys before querying"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the sqlite3 script and exit"),
    quiet: bool = typer.Option(False, "--quiet", "-q"),
):
    """Sort SOURCE into DESTINATION."""
    logger = _job_logger(quiet)
    options: Dict[str, Any] = {
        "source": _file_entry(source, delimiter),
        "destination": _file_entry(destination, out_delimiter),
        "schema": [_schema_entry(s) for s in schema or []],
        "select": list(select or []),
        "orderBy": [_order_entry(k) for k in order_by],
        "where": where,
        "offset": offset,
        "limit": limit,
        "sqlite": {
            "filename": str(db) if db else None,
            "keepDB": keep_db,
            "cli": sqlite,
            "createIndex": index,
        },
        "logger": logger.info,
    }
    _run(options, dry_run=dry_run, quiet=quiet)


@app.command("run")
def run_cmd(
    job_file: Path = typer.Argument(..., help="YAML/JSON job description"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the sqlite3 script and exit"),
    quiet: bool = typer.Option(False, "--quiet", "-q"),
):
    """Run a sort job described in a YAML or JSON file."""
    logger = _job_logger(quiet)
    try:
        options = load_job_file(job_file)
    except (OSError, ValueError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    options.setdefault("logger", logger.info)
    _run(options, dry_run=dry_run, quiet=quiet)


def main():
    app()


if __name__ == "__main__":
    main()
