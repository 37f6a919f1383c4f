from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/csvsorter").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".")}

setup(
    name="csvsorter",
    version="0.1.0",
    description="Sort and filter very large CSV/TSV/PSV files through the sqlite3 shell",
    python_requires=">=3.9",
    install_requires=[
        "jinja2>=3.0",
        "pydantic>=2.0",
        "pyyaml>=6.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "csvsorter=csvsorter.cli:main",
        ],
    },
    package_data={"csvsorter": ["templates/sqlite/*.j2"]},
    include_package_data=True,
    **pkg_args
)
