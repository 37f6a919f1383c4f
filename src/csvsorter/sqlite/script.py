from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from csvsorter.jobs.types import DEFAULT_DELIMITER, JobConfig, SortKey
from csvsorter.sqlite.quoting import quote_dot_argument, quote_identifier

TABLE = "DATA"
SCRIPT_TEMPLATE = "sqlite/sort_job.sql.j2"


@lru_cache(maxsize=1)
def get_script_env() -> Environment:
    """
    Jinja environment for sqlite3 shell scripts.

    Block tags sit on their own lines and leave no trace in the output; the
    rendered text has no trailing newline.
    """
    here = Path(__file__).resolve()
    for p in here.parents:
        cand = p / "templates" / "sqlite"
        if cand.is_dir():
            env = Environment(
                loader=FileSystemLoader(str(cand.parent)),
                undefined=StrictUndefined,
                autoescape=False,
                trim_blocks=True,
                lstrip_blocks=True,
                keep_trailing_newline=False,
            )
            env.filters["ident"] = quote_identifier
            env.filters["dot_quote"] = quote_dot_argument
            return env

    raise RuntimeError("Could not locate templates/sqlite directory")


def _order_term(key: SortKey) -> str:
    # ASC is the engine default and never written out
    col = quote_identifier(key.name)
    return f"{col} {key.direction}" if key.direction != "ASC" else col


def build_query(job: JobConfig) -> str:
    columns = ", ".join(quote_identifier(c) for c in job.select) or "*"
    sql = f"select {columns} from {TABLE}"
    if job.where:
        sql += f" where {job.where}"
    sql += " order by " + ", ".join(_order_term(k) for k in job.order_by)
    if job.limit:
        sql += f" limit {job.limit}"
    if job.offset:
        sql += f" offset {job.offset}"
    return sql + ";"


def _destination_separator(job: JobConfig) -> Optional[str]:
    if not job.destination.has_default_delimiter:
        return job.destination.delimiter
    if not job.source.has_default_delimiter:
        # reset so the import separator does not leak into the export
        return DEFAULT_DELIMITER
    return None


def generate_script(job: JobConfig) -> str:
    """
    Render the sqlite3 shell script for one sort job.

    Order: optional typed CREATE TABLE, csv import, optional index on the
    sort keys, export settings, the select query, ``.quit``. Identical jobs
    always produce identical text.
    """
    tpl = get_script_env().get_template(SCRIPT_TEMPLATE)
    return tpl.render(
        table=TABLE,
        schema=job.schema,
        source=str(job.source.path),
        source_separator=None if job.source.has_default_delimiter else job.source.delimiter,
        build_index=job.engine.build_index,
        index_columns=", ".join(quote_identifier(k.name) for k in job.order_by),
        destination_separator=_destination_separator(job),
        destination=str(job.destination.path),
        query=build_query(job),
    )
