from __future__ import annotations

import os
from typing import Any, Callable, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _fspath(v: Any) -> Any:
    return os.fspath(v) if isinstance(v, os.PathLike) else v


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FileOptions(_Options):
    # A delimited file on disk (source or destination)
    filename: str = Field(validation_alias=AliasChoices("filename", "path"))
    delimiter: str = Field(default=",", min_length=1, max_length=1)

    @field_validator("filename", mode="before")
    @classmethod
    def _filename_path(cls, v: Any) -> Any:
        return _fspath(v)


class SchemaColumn(_Options):
    # One declared column of the working table, in physical file order
    name: str
    type: Literal["string", "number"] = Field(
        default="string",
        validation_alias=AliasChoices("type", "valueType", "value_type"),
    )


class SortedColumn(_Options):
    # One sort key; precedence follows list order
    name: str
    direction: Literal["ASC", "DESC"] = Field(
        default="ASC",
        validation_alias=AliasChoices("direction", "sortDirection", "sort_direction"),
    )

    @field_validator("direction", mode="before")
    @classmethod
    def _upper_direction(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class SQLiteOptions(_Options):
    # Temporary database and sqlite3 shell settings
    filename: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("filename", "path", "dbFilePath", "db_file_path"),
    )
    keep_db: bool = Field(
        default=False,
        validation_alias=AliasChoices("keep_db", "keepDB", "keepAfterRun", "keep_after_run"),
    )
    cli: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("cli", "executable", "executablePath", "executable_path"),
    )
    create_index: bool = Field(
        default=True,
        validation_alias=AliasChoices("create_index", "createIndex", "buildIndex", "build_index"),
    )

    @field_validator("filename", "cli", mode="before")
    @classmethod
    def _paths(cls, v: Any) -> Any:
        return _fspath(v)


class SortOptions(_Options):
    """
    User-facing sort job description.

    Fields that take "a name or an object" (source, destination, schema and
    orderBy entries) are kept as given here; ``normalize_options`` resolves
    them into the frozen job types.
    """

    source: Union[str, FileOptions]
    destination: Union[str, FileOptions]
    columns: List[Union[str, SchemaColumn]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("schema", "columns"),
    )
    select: List[str] = Field(default_factory=list)
    order_by: List[Union[str, SortedColumn]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("order_by", "orderBy"),
    )
    where: Optional[str] = None
    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, gt=0)
    sqlite: Optional[SQLiteOptions] = None
    logger: Optional[Callable[[str], Any]] = None

    @field_validator("source", "destination", mode="before")
    @classmethod
    def _paths(cls, v: Any) -> Any:
        return _fspath(v)

    @field_validator("columns", "select", "order_by", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v
