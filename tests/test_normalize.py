from pathlib import Path

import pytest
from pydantic import ValidationError

from csvsorter.jobs.normalize import default_db_path, normalize_options
from csvsorter.jobs.types import (
    ColumnSpec,
    DEFAULT_SQLITE_CLI,
    JobConfig,
    SortKey,
    noop_logger,
)
from csvsorter.schemas.models import SortOptions


# -------------------------------------------------------
# Defaults
# -------------------------------------------------------

def test_bare_strings_get_defaults(monkeypatch):
    monkeypatch.delenv("CSVSORTER_SQLITE", raising=False)
    job = normalize_options({
        "source": "data/in.csv",
        "destination": "out/in.sorted.csv",
        "orderBy": ["id"],
    })

    assert job.source.path == Path("data/in.csv")
    assert job.source.delimiter == ","
    assert job.destination.path == Path("out/in.sorted.csv")
    assert job.order_by == (SortKey("id", "ASC"),)
    assert job.schema == ()
    assert job.select == ()
    assert job.where is None and job.offset is None and job.limit is None
    assert job.engine.db_path == Path("out/in.sorted.sqlite")
    assert job.engine.keep_after_run is False
    assert job.engine.build_index is True
    assert job.engine.executable == DEFAULT_SQLITE_CLI
    assert job.logger is noop_logger


def test_default_db_path_replaces_extension():
    assert default_db_path(Path("a/b.csv")) == Path("a/b.sqlite")
    assert default_db_path(Path("a/b")) == Path("a/b.sqlite")


def test_executable_default_from_environment(monkeypatch):
    monkeypatch.setenv("CSVSORTER_SQLITE", "/opt/sqlite/bin/sqlite3")
    job = normalize_options({"source": "a.csv", "destination": "b.csv", "orderBy": ["x"]})
    assert job.engine.executable == "/opt/sqlite/bin/sqlite3"


# -------------------------------------------------------
# Structured forms
# -------------------------------------------------------

def test_structured_entries_are_resolved():
    logs = []
    job = normalize_options({
        "source": {"filename": "in.tsv", "delimiter": "\t"},
        "destination": {"path": Path("out.psv"), "delimiter": "|"},
        "schema": ["id", {"name": "age", "type": "number"}, {"name": "name"}],
        "select": ["age", "id"],
        "orderBy": ["code", {"name": "version", "direction": "desc"}, {"name": "x", "sortDirection": "DESC"}],
        "where": "age > 2",
        "offset": 1,
        "limit": 2,
        "sqlite": {"filename": "tmp/job.db", "keepDB": True, "cli": "sqlite3.exe", "createIndex": False},
        "logger": logs.append,
    })

    assert job.source.delimiter == "\t"
    assert job.destination.path == Path("out.psv")
    assert job.destination.delimiter == "|"
    assert job.schema == (
        ColumnSpec("id", "string"),
        ColumnSpec("age", "number"),
        ColumnSpec("name", "string"),
    )
    assert [c.sql_type for c in job.schema] == ["TEXT", "NUMERIC", "TEXT"]
    assert job.select == ("age", "id")
    assert job.order_by == (SortKey("code"), SortKey("version", "DESC"), SortKey("x", "DESC"))
    assert (job.where, job.offset, job.limit) == ("age > 2", 1, 2)
    assert job.engine.db_path == Path("tmp/job.db")
    assert job.engine.keep_after_run is True
    assert job.engine.executable == "sqlite3.exe"
    assert job.engine.build_index is False

    job.logger("hello")
    assert logs == ["hello"]


def test_snake_case_keys_and_model_input():
    opts = SortOptions(source="a.csv", destination="b.csv", order_by=["id"], sqlite={"keep_db": True})
    job = normalize_options(opts)
    assert job.order_by == (SortKey("id"),)
    assert job.engine.keep_after_run is True
    # db filename still derived when the sqlite block omits it
    assert job.engine.db_path == Path("b.sqlite")


def test_job_config_passes_through():
    job = normalize_options({"source": "a.csv", "destination": "b.csv", "orderBy": ["id"]})
    assert normalize_options(job) is job
    assert isinstance(job, JobConfig)


def test_normalizing_twice_gives_equal_jobs():
    opts = {"source": "a.csv", "destination": "b.csv", "orderBy": ["id", {"name": "v", "direction": "DESC"}]}
    assert normalize_options(opts) == normalize_options(opts)


def test_empty_order_by_is_left_for_the_sorter():
    job = normalize_options({"source": "a.csv", "destination": "b.csv"})
    assert job.order_by == ()


# -------------------------------------------------------
# Rejected payloads
# -------------------------------------------------------

@pytest.mark.parametrize(
    "overrides",
    [
        {"limit": 0},
        {"offset": -1},
        {"orderBy": [{"name": "id", "direction": "UP"}]},
        {"schema": [{"name": "id", "type": "date"}]},
        {"source": {"filename": "a.csv", "delimiter": ";;"}},
        {"unknown": True},
    ],
)
def test_invalid_options_are_rejected(overrides):
    opts = {"source": "a.csv", "destination": "b.csv", "orderBy": ["id"]}
    opts.update(overrides)
    with pytest.raises(ValidationError):
        normalize_options(opts)
