#!/usr/bin/env python3
"""Repository record exchanged between the collector and the migrator."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from exceptions import RecordError
from utils import UNCATEGORIZED


@dataclass(frozen=True)
class RepositoryRecord:
    """One entry of the intermediate repository file."""
    clone_url: str
    project_name: str = UNCATEGORIZED
    repository_name: str = ""
    full_name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryRecord":
        if not isinstance(data, dict):
            raise RecordError(f"repository entry must be an object, got: {data!r}")
        clone_url = data.get("clone_url")
        if not isinstance(clone_url, str) or not clone_url:
            raise RecordError(f"repository entry without clone_url: {data!r}")
        project_name = data.get("project_name")
        return cls(
            clone_url=clone_url,
            project_name=UNCATEGORIZED if project_name is None else str(project_name),
            repository_name=str(data.get("repository_name") or ""),
            full_name=str(data.get("full_name") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "clone_url": self.clone_url,
            "project_name": self.project_name,
            "repository_name": self.repository_name,
            "full_name": self.full_name,
        }

    def to_line(self) -> str:
        """Compact single-line JSON, keys in a fixed order."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
