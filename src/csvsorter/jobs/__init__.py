"""
Sort job model.

Exports the public API:
- JobConfig and its parts
- normalize_options
- load_job_file
"""
from .types import ColumnSpec, EngineConfig, FileSpec, JobConfig, SortKey
from .normalize import normalize_options
from .load import load_job_file
