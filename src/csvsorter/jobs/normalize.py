from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from csvsorter.jobs.types import (
    DB_SUFFIX,
    ColumnSpec,
    EngineConfig,
    FileSpec,
    JobConfig,
    SortKey,
    default_sqlite_cli,
    noop_logger,
)
from csvsorter.schemas.models import (
    FileOptions,
    SchemaColumn,
    SortedColumn,
    SortOptions,
    SQLiteOptions,
)


def default_db_path(destination: Path) -> Path:
    """Temporary database next to the destination: ``out.csv`` -> ``out.sqlite``."""
    return Path(destination).with_suffix(DB_SUFFIX)


def _file_spec(f: Union[str, FileOptions]) -> FileSpec:
    if isinstance(f, str):
        return FileSpec(path=Path(f))
    return FileSpec(path=Path(f.filename), delimiter=f.delimiter)


def _column_spec(c: Union[str, SchemaColumn]) -> ColumnSpec:
    if isinstance(c, str):
        return ColumnSpec(name=c)
    return ColumnSpec(name=c.name, value_type=c.type)


def _sort_key(k: Union[str, SortedColumn]) -> SortKey:
    if isinstance(k, str):
        return SortKey(name=k)
    return SortKey(name=k.name, direction=k.direction)


def _engine_config(opts: Optional[SQLiteOptions], destination: FileSpec) -> EngineConfig:
    if opts is None:
        return EngineConfig(db_path=default_db_path(destination.path))
    return EngineConfig(
        db_path=Path(opts.filename) if opts.filename else default_db_path(destination.path),
        keep_after_run=opts.keep_db,
        executable=opts.cli or default_sqlite_cli(),
        build_index=opts.create_index,
    )


def normalize_options(options: Union[JobConfig, SortOptions, Mapping[str, Any]]) -> JobConfig:
    """
    Resolve a permissive sort description into a JobConfig.

    ``options`` may be a SortOptions model or any mapping accepted by it
    (camelCase or snake_case keys). A JobConfig is returned unchanged.
    No file system access happens here.
    """
    if isinstance(options, JobConfig):
        return options
    if not isinstance(options, SortOptions):
        options = SortOptions.model_validate(dict(options))

    source = _file_spec(options.source)
    destination = _file_spec(options.destination)

    return JobConfig(
        source=source,
        destination=destination,
        engine=_engine_config(options.sqlite, destination),
        order_by=tuple(_sort_key(k) for k in options.order_by),
        schema=tuple(_column_spec(c) for c in options.columns),
        select=tuple(options.select),
        where=options.where,
        offset=options.offset,
        limit=options.limit,
        logger=options.logger or noop_logger,
    )
