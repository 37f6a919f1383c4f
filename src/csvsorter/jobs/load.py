from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml


def load_job_file(path: Path) -> Dict[str, Any]:
    """
    Load a sort job description from YAML (or JSON).

    The document must be a mapping using the SortOptions keys, e.g.::

        source: data/orders.csv
        destination: {filename: out/orders.tsv, delimiter: "\\t"}
        orderBy: [customer, {name: total, direction: DESC}]
        limit: 100
    """
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(path)

    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: invalid job file") from e

    if not isinstance(doc, dict):
        raise ValueError(f"{path}: job file must contain a mapping")
    return doc
