"""
Reference citations and the bundled reference tables they come from.

Tables under ``data/`` are read once per process and never modified.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List

from .models import Reference

DATA_DIR = Path(__file__).parent / "data"


def dedupe_references(references: Iterable[Reference]) -> List[Reference]:
    """Drop repeated citations, keeping first-seen order.

    Two references are the same when source, page and equation all match;
    a missing page or equation compares equal to an empty one.
    """
    seen = set()
    unique = []
    for ref in references:
        if ref.key in seen:
            continue
        seen.add(ref.key)
        unique.append(ref)
    return unique


@lru_cache(maxsize=None)
def load_table(name: str) -> dict:
    """Load a bundled JSON table by file name."""
    with open(DATA_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def table_reference(table: dict) -> Reference:
    """Citation stored at the top of a bundled table."""
    return Reference(**table["reference"])
