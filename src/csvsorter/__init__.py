"""
csvsorter: sort and filter large delimited files through the sqlite3 shell.

Exports the public API:
- sort / Sorter
- normalize_options / JobConfig
- generate_script / run_sqlite / quote_identifier
"""
from .errors import (
    ColumnMismatchError,
    MissingFolderError,
    MissingLimitError,
    MissingOrderError,
    MissingSourceError,
    SortError,
    SQLiteError,
)
from .jobs import JobConfig, load_job_file, normalize_options
from .schemas.models import SortOptions
from .sqlite import generate_script, quote_identifier, run_sqlite
from .sorter import Sorter, sort

__version__ = "0.1.0"
