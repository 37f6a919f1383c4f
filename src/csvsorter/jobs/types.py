from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Tuple

DEFAULT_DELIMITER = ","
DEFAULT_SQLITE_CLI = "sqlite3"
SQLITE_CLI_ENV = "CSVSORTER_SQLITE"
DB_SUFFIX = ".sqlite"

Logger = Callable[[str], None]


def noop_logger(_message: str) -> None:
    pass


def default_sqlite_cli() -> str:
    return os.environ.get(SQLITE_CLI_ENV) or DEFAULT_SQLITE_CLI


@dataclass(frozen=True)
class FileSpec:
    path: Path
    delimiter: str = DEFAULT_DELIMITER

    @property
    def has_default_delimiter(self) -> bool:
        return self.delimiter == DEFAULT_DELIMITER


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    value_type: str = "string"      # string|number

    @property
    def sql_type(self) -> str:
        return "NUMERIC" if self.value_type == "number" else "TEXT"


@dataclass(frozen=True)
class SortKey:
    name: str
    direction: str = "ASC"          # ASC|DESC


@dataclass(frozen=True)
class EngineConfig:
    db_path: Path
    keep_after_run: bool = False
    executable: str = field(default_factory=default_sqlite_cli)
    build_index: bool = True


@dataclass(frozen=True)
class JobConfig:
    """
    A fully resolved sort job.

    Invariants:
    - every "name or object" input has been resolved to its dataclass
    - schema, select and order_by are tuples in user order
    - built once per run and never mutated
    """

    source: FileSpec
    destination: FileSpec
    engine: EngineConfig
    order_by: Tuple[SortKey, ...]

    schema: Tuple[ColumnSpec, ...] = ()
    select: Tuple[str, ...] = ()
    where: Optional[str] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    logger: Logger = field(default=noop_logger, compare=False, repr=False)
