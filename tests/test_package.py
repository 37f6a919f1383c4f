import csvsorter


def test_package_exposes_public_api():
    for name in (
        "sort",
        "Sorter",
        "SortOptions",
        "JobConfig",
        "normalize_options",
        "load_job_file",
        "generate_script",
        "run_sqlite",
        "quote_identifier",
        "SortError",
        "SQLiteError",
        "ColumnMismatchError",
    ):
        assert hasattr(csvsorter, name), name


def test_version():
    assert csvsorter.__version__ == "0.1.0"


def test_cli_module_imports():
    from csvsorter.cli import app

    assert app is not None
