#!/usr/bin/env python3
"""GitHub API wrapper for creating mirror destination repositories."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

import github

if TYPE_CHECKING:
    from github.Organization import Organization

from config import DEFAULT_GITHUB_API, CloneMethod, GitHubTargetConfig
from exceptions import MigrationError
from logging_utils import Logger

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_GITHUB_ERROR = 31


def resolve_github_token(explicit: Optional[str] = None) -> Optional[str]:
    """Find a GitHub token: flag, then environment, then the gh CLI session."""
    token = explicit or os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    if token:
        return token

    gh = shutil.which("gh")
    if gh is None:
        return None
    try:
        result = subprocess.run(
            [gh, "auth", "token"],
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError:
        Logger.warn("gh CLI is installed but not authenticated (gh auth login)")
        return None
    return result.stdout.strip() or None


class GitHubTarget:
    """Wrapper around the GitHub API to create repos, assign teams and topics."""

    def __init__(self, config: GitHubTargetConfig) -> None:
        self.config = config
        self.api: Optional[github.Github] = None
        self.org: Optional["Organization"] = None
        self._team_ids: dict = {}

    def connect(self) -> None:
        Logger.info(f"init github API: {self.config.api_url}")
        try:
            auth = github.Auth.Token(self.config.token)
            if self.config.api_url != DEFAULT_GITHUB_API:
                self.api = github.Github(base_url=self.config.api_url, auth=auth)
            else:
                self.api = github.Github(auth=auth)
            self.org = self.api.get_organization(self.config.org_name)
            Logger.debug(f"github org: {self.org.login}")
        except github.BadCredentialsException:
            Logger.error("authentication failed (github): invalid token")
            sys.exit(EXIT_AUTH_ERROR)
        except github.GithubException as e:
            Logger.error(f"github error: {e}")
            sys.exit(EXIT_GITHUB_ERROR)

    def _require_org(self) -> "Organization":
        if self.api is None or self.org is None:
            Logger.error("github API not initialized")
            sys.exit(EXIT_GITHUB_ERROR)
        return self.org

    def _git_base_url(self) -> str:
        """Return base URL for Git operations derived from API endpoint."""
        parsed = urlparse(self.config.api_url)
        if parsed.netloc == "api.github.com":
            return "https://github.com"

        base_path = parsed.path.rstrip("/")
        if base_path.endswith("/api/v3"):
            base_path = base_path[: -len("/api/v3")]
        return f"{parsed.scheme}://{parsed.netloc}{base_path}"

    def _git_hostname(self) -> str:
        """Return hostname for SSH Git operations."""
        parsed = urlparse(self.config.api_url)
        if parsed.netloc == "api.github.com":
            return "github.com"
        return parsed.netloc

    def remote_url(self, name: str) -> str:
        """GitHub remote URL for the configured push method."""
        if self.config.push_method == CloneMethod.SSH:
            return f"git@{self._git_hostname()}:{self.config.org_name}/{name}"
        return f"{self._git_base_url()}/{self.config.org_name}/{name}.git"

    def _team_id(self, team: str) -> int:
        if team not in self._team_ids:
            org = self._require_org()
            try:
                self._team_ids[team] = org.get_team_by_slug(team).id
            except github.GithubException as e:
                raise MigrationError(
                    f"team '{team}' not found in '{self.config.org_name}': {e}"
                ) from e
        return self._team_ids[team]

    def create_repo(self, name: str, private: bool = True, team: str = "") -> None:
        """Create an empty repository, optionally granting a team access."""
        org = self._require_org()
        kwargs = {}
        if team:
            kwargs["team_id"] = self._team_id(team)
        try:
            org.create_repo(
                name=name,
                private=private,
                auto_init=False,
                **kwargs,
            )
        except github.GithubException as e:
            raise MigrationError(f"failed to create repo '{name}': {e}") from e
        Logger.info(
            f"created repo: {self.config.org_name}/{name}"
            + (f" (team: {team})" if team else "")
        )

    def add_topic(self, name: str, topic: str) -> None:
        """Attach ``topic`` to the repository, keeping existing topics."""
        org = self._require_org()
        try:
            repo = org.get_repo(name)
            topics = repo.get_topics()
            if topic not in topics:
                repo.replace_topics(topics + [topic])
        except github.GithubException as e:
            raise MigrationError(f"failed to add topic '{topic}' to '{name}': {e}") from e
        Logger.info(f"  Adding topic: {topic}")
