"""
Sort job orchestration.

    VALIDATING -> GENERATING -> EXECUTING -> CLEANING_UP -> DONE

Any error moves the job to FAILED. Cleanup of the temporary database runs
once validation has passed, whatever happens afterwards; the original error
reaches the caller after it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from csvsorter.errors import (
    MissingFolderError,
    MissingLimitError,
    MissingOrderError,
    MissingSourceError,
    SQLiteError,
)
from csvsorter.jobs.normalize import normalize_options
from csvsorter.jobs.types import EngineConfig, JobConfig, Logger
from csvsorter.schemas.models import SortOptions
from csvsorter.sqlite.runner import run_sqlite
from csvsorter.sqlite.script import generate_script

VALIDATING = "VALIDATING"
GENERATING = "GENERATING"
EXECUTING = "EXECUTING"
CLEANING_UP = "CLEANING_UP"
DONE = "DONE"
FAILED = "FAILED"

Runner = Callable[[EngineConfig, str, Logger], int]


def _validate_file_exists(path: Path) -> None:
    if not path.exists():
        raise MissingSourceError(path)


def _validate_folder_exists(path: Path) -> None:
    folder = path.parent
    if str(folder) and not folder.exists():
        raise MissingFolderError(folder)


class Sorter:
    """
    Runs one sort job end to end.

    ``runner`` executes the generated script; it defaults to the sqlite3
    process driver and is replaceable for tests.
    """

    def __init__(self, runner: Optional[Runner] = None):
        self.runner: Runner = runner or run_sqlite
        self.state: Optional[str] = None

    def execute(self, job: JobConfig) -> None:
        try:
            self.state = VALIDATING
            self.validate(job)
            try:
                self.state = GENERATING
                script = self.generate_script(job)
                self.state = EXECUTING
                self.execute_script(job, script)
            except SQLiteError:
                self.remove_partial_destination(job)
                raise
            finally:
                self.state = CLEANING_UP
                self.cleanup(job)
        except Exception:
            self.state = FAILED
            raise
        self.state = DONE

    # ------------------------------------------------------------------
    def validate(self, job: JobConfig) -> None:
        # Every check happens before anything on disk is touched
        _validate_file_exists(job.source.path)
        _validate_folder_exists(job.destination.path)
        _validate_folder_exists(job.engine.db_path)
        if not job.order_by:
            raise MissingOrderError()
        if job.offset and not job.limit:
            raise MissingLimitError()

        destination = job.destination.path
        if destination.exists():
            job.logger(f"Delete destination {destination}")
            destination.unlink()

        db = job.engine.db_path
        if db.exists():
            job.logger(f"Delete SQLite db {db}")
            db.unlink()

    def generate_script(self, job: JobConfig) -> str:
        return generate_script(job)

    def execute_script(self, job: JobConfig, script: str) -> int:
        job.logger(f"Open DB {job.engine.db_path}")
        job.logger("Execute script:")
        for line in script.split("\n"):
            job.logger(f"   {line}")
        return self.runner(job.engine, script, job.logger)

    def remove_partial_destination(self, job: JobConfig) -> None:
        destination = job.destination.path
        if destination.exists():
            job.logger(f"Delete partial destination {destination}")
            destination.unlink()

    def cleanup(self, job: JobConfig) -> None:
        job.logger("Cleanup")
        if not job.engine.keep_after_run:
            job.logger(f"Delete DB {job.engine.db_path}")
            # absent when the engine could not be launched at all
            job.engine.db_path.unlink(missing_ok=True)


def sort(
    options: Union[JobConfig, SortOptions, Mapping[str, Any], None] = None,
    **kwargs: Any,
) -> None:
    """
    Sort a delimited file into a new file through sqlite3.

    ``source``, ``destination`` and ``orderBy`` are required; see
    SortOptions for everything else. Options may be given as a mapping,
    a SortOptions model, or keyword arguments::

        sort(source="in.csv", destination="out.csv",
             orderBy=["code", {"name": "version", "direction": "DESC"}])
    """
    if options is None:
        options = kwargs
    elif kwargs:
        raise TypeError("pass options either as a mapping or as keyword arguments, not both")
    job = normalize_options(options)
    Sorter().execute(job)
