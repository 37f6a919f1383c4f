from __future__ import annotations

from typing import List, Optional, Sequence


class SortError(Exception):
    """Base class for every failure raised by a sort job."""


# ---------------------------------------------------------------------------
# Preconditions (raised before the engine is started)
# ---------------------------------------------------------------------------
class MissingSourceError(SortError, FileNotFoundError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"File '{path}' does not exist!")


class MissingFolderError(SortError, FileNotFoundError):
    def __init__(self, folder):
        self.folder = folder
        super().__init__(f"Folder '{folder}' does not exist!")


class MissingOrderError(SortError, ValueError):
    def __init__(self):
        super().__init__("You must provide an orderBy option to order the file!")


class MissingLimitError(SortError, ValueError):
    def __init__(self):
        super().__init__("You must also specify a limit when using an offset!")


# ---------------------------------------------------------------------------
# Engine failures
# ---------------------------------------------------------------------------
MAX_ERROR_LINES = 20

COLUMN_MISMATCH_MESSAGE = (
    "SQLite command was killed because a column mismatch between schema and inputs was detected."
)


class SQLiteError(SortError, RuntimeError):
    """
    The sqlite3 process exited with a non-zero (or signal) status.

    Only the first MAX_ERROR_LINES collected stderr lines are kept.
    """

    def __init__(self, exit_code: Optional[int], lines: Sequence[str], suffix: Sequence[str] = ()):
        self.exit_code = exit_code
        self.lines: List[str] = list(lines)[:MAX_ERROR_LINES] + list(suffix)
        super().__init__(
            f"SQLite error (Exit code = {exit_code}):\n" + "\n".join(self.lines)
        )


class ColumnMismatchError(SQLiteError):
    """The import step reported a row whose column count differs from the schema."""

    def __init__(self, exit_code: Optional[int], lines: Sequence[str]):
        # the explanation survives truncation of a long stderr burst
        super().__init__(exit_code, lines, suffix=(COLUMN_MISMATCH_MESSAGE,))
