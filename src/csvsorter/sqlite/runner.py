"""
Drive the sqlite3 shell: feed it a script, relay its output, judge the exit.
"""

from __future__ import annotations

import logging
import re
import subprocess
import threading
from typing import Callable, List, TextIO

from csvsorter.errors import ColumnMismatchError, SQLiteError
from csvsorter.jobs.types import EngineConfig, Logger, noop_logger

log = logging.getLogger(__name__)

OUTPUT_PREFIX = "[SQLite] "

# sqlite3 reports this while importing a row wider than the declared table
COLUMN_MISMATCH_RE = re.compile(r"expected \d+ columns but found \d+(?: columns)? - extras ignored")


def _pump(stream: TextIO, handle: Callable[[str], None]) -> None:
    # Same segments as text.split("\n"), including the empty tail after a final newline
    ends_with_newline = False
    with stream:
        for line in stream:
            ends_with_newline = line.endswith("\n")
            handle(line[:-1] if ends_with_newline else line)
    if ends_with_newline:
        handle("")


def _feed(proc: subprocess.Popen, script: str) -> None:
    # engine may exit before reading everything; its exit status says why
    try:
        proc.stdin.write(script)
    except BrokenPipeError:
        log.debug("sqlite3 closed stdin early (pid %s)", proc.pid)
    try:
        proc.stdin.close()
    except BrokenPipeError:
        log.debug("sqlite3 stdin already closed (pid %s)", proc.pid)


def run_sqlite(engine: EngineConfig, script: str, logger: Logger = noop_logger) -> int:
    """
    Run ``<executable> <db_path>`` with ``script`` on stdin.

    Every stdout/stderr line is passed to ``logger`` prefixed with
    ``[SQLite] ``; stderr lines are also collected for the error message.
    Returns 0 on success. Raises SQLiteError on a non-zero exit and
    ColumnMismatchError when the import reported a schema/data column
    mismatch (the process is terminated as soon as that line is seen).
    OS errors from launching the executable propagate unchanged, and so
    does an exception raised by ``logger`` (after the engine is stopped).
    """
    proc = subprocess.Popen(
        [engine.executable, str(engine.db_path)],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )

    lock = threading.Lock()
    errors: List[str] = []
    failures: List[BaseException] = []
    mismatch = threading.Event()

    def on_stdout(line: str) -> None:
        with lock:
            logger(OUTPUT_PREFIX + line)

    def on_stderr(line: str) -> None:
        with lock:
            errors.append(line)
            logger(OUTPUT_PREFIX + line)
        if not mismatch.is_set() and COLUMN_MISMATCH_RE.search(line):
            mismatch.set()
            proc.terminate()

    def read(stream: TextIO, handle: Callable[[str], None]) -> None:
        try:
            _pump(stream, handle)
        except Exception as e:
            log.debug("stopping sqlite3 (pid %s) after reader failure: %s", proc.pid, e)
            failures.append(e)
            proc.kill()

    readers = [
        threading.Thread(target=read, args=(proc.stdout, on_stdout), daemon=True),
        threading.Thread(target=read, args=(proc.stderr, on_stderr), daemon=True),
    ]
    for t in readers:
        t.start()

    _feed(proc, script)

    for t in readers:
        t.join()
    code = proc.wait()

    if failures:
        raise failures[0]
    if mismatch.is_set():
        raise ColumnMismatchError(code, errors)
    if code != 0:
        raise SQLiteError(code, errors)
    return code
