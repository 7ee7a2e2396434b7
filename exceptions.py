#!/usr/bin/env python3
"""Exceptions raised by bitbucket-to-github components."""

from __future__ import annotations

from typing import List, Optional


class MigrationToolError(Exception):
    """Base exception for collector and migrator errors."""


class FetchError(MigrationToolError):
    """Bitbucket API request failed while listing repositories."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


class RecordError(MigrationToolError):
    """Repository file or record is malformed."""


class MigrationError(MigrationToolError):
    """A repository could not be created or configured on GitHub."""


class GitCommandError(MigrationToolError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, cmd: List[str], returncode: int, stderr: str = "") -> None:
        super().__init__(
            f"git command failed ({returncode}): {' '.join(cmd)}"
            + (f": {stderr.strip()}" if stderr and stderr.strip() else "")
        )
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
