#!/usr/bin/env python3
"""Reading and writing the intermediate repository file."""

from __future__ import annotations

import json
import os
import re
import tempfile
from typing import Iterable, List

from exceptions import RecordError
from logging_utils import Logger
from models import RepositoryRecord

# awk field splitting only treats blanks and tabs as separators
_BLANK_RUNS = re.compile(r"[ \t]+")


def normalize_lines(lines: Iterable[str]) -> List[str]:
    """Collapse blank runs, drop blank lines, then sort and dedupe as text.

    Duplicates are detected on the whole serialized line, not on a parsed
    field, so two records only merge when every field matches.
    """
    cleaned = {_BLANK_RUNS.sub(" ", line).strip(" \t") for line in lines}
    cleaned.discard("")
    return sorted(cleaned)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def render_json_array(lines: List[str]) -> str:
    return "[\n" + ",\n".join(lines) + "\n]\n"


def write_repository_file(path: str, lines: Iterable[str]) -> int:
    """Atomically write serialized records as a JSON array.

    The array is written to a temporary file next to ``path`` and moved into
    place, so a failure never leaves a half-written file behind.
    Returns the number of records written.
    """
    normalized = normalize_lines(lines)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".new", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(render_json_array(normalized))
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    Logger.debug(f"wrote {len(normalized)} records to {path}")
    return len(normalized)


def load_repository_file(path: str) -> List[RepositoryRecord]:
    """Load and validate the repository file written by the collector."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as e:
        raise RecordError(f"cannot read repository file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise RecordError(f"repository file '{path}' is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise RecordError(f"repository file '{path}' must contain a JSON array")

    return [RepositoryRecord.from_dict(entry) for entry in data]
