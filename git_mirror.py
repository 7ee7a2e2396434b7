#!/usr/bin/env python3
"""Local git operations for mirroring repositories."""

from __future__ import annotations

import os
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from exceptions import GitCommandError
from logging_utils import Logger
from security import SecurityValidator
from utils import repo_dir_from_clone_url


def _create_askpass_script(username: str, password: str) -> str:
    """Create a temporary askpass script for credential injection."""
    fd, path = tempfile.mkstemp(prefix="b2g_askpass_", text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as script:
            script.write("#!/bin/sh\n")
            script.write("case \"$1\" in\n")
            script.write(f"  *Username*) echo '{username}' ;;\n")
            script.write(f"  *Password*) echo '{password}' ;;\n")
            script.write("  *) exit 1 ;;\n")
            script.write("esac\n")
        os.chmod(path, 0o700)
    except Exception:
        os.unlink(path)
        raise
    return path


@contextmanager
def askpass_env(username: str, password: str) -> Iterator[Dict[str, str]]:
    """Environment for git that answers HTTPS prompts with the given credentials."""
    path = _create_askpass_script(username, password)
    env = os.environ.copy()
    env.update({"GIT_ASKPASS": path, "GIT_TERMINAL_PROMPT": "0"})
    try:
        yield env
    finally:
        try:
            os.remove(path)
        except OSError as error:
            Logger.warn(f"failed to clean up temporary credential helper: {error}")


class GitMirror:
    """Runs git against mirror clones kept under an explicit work directory.

    Every command receives its own ``cwd``; the process working directory is
    never changed.
    """

    def __init__(self, workdir: str) -> None:
        self.workdir = Path(workdir)

    def _run(
        self,
        args: List[str],
        cwd: Path,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        cmd = ["git", *args]
        try:
            return subprocess.run(
                cmd,
                cwd=str(cwd),
                check=True,
                capture_output=True,
                text=True,
                env=env,
            )
        except subprocess.CalledProcessError as e:
            safe_stderr = SecurityValidator.sanitize_for_logging(e.stderr or e.stdout or "")
            raise GitCommandError(
                [SecurityValidator.sanitize_for_logging(part) for part in cmd],
                e.returncode,
                safe_stderr,
            ) from None

    def clone(self, clone_url: str, env: Optional[Dict[str, str]] = None) -> Path:
        """Mirror-clone into <workdir>/<last URL segment> and return that path."""
        self.workdir.mkdir(parents=True, exist_ok=True)
        repo_dir = self.workdir / repo_dir_from_clone_url(clone_url)
        self._run(["clone", "--mirror", clone_url, str(repo_dir)], self.workdir, env)
        Logger.info(f"Local repo created: {repo_dir.name}")
        return repo_dir

    def set_origin(self, repo_dir: Path, url: str) -> None:
        self._run(["remote", "set-url", "origin", url], repo_dir)

    def add_remote(self, repo_dir: Path, name: str, url: str) -> None:
        self._run(["remote", "add", name, url], repo_dir)

    def push_mirror(
        self,
        repo_dir: Path,
        remote: str = "origin",
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        """Push every ref and tag to ``remote``."""
        self._run(["push", remote, "--mirror"], repo_dir, env)
