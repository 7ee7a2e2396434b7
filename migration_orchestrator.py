#!/usr/bin/env python3
"""Orchestrates mirroring Bitbucket repositories into a GitHub organization."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from typing import List, Optional

from config import CloneMethod, GitHubTargetConfig, MigratorConfig
from exceptions import MigrationError, MigrationToolError, RecordError
from git_mirror import GitMirror, askpass_env
from github_target import GitHubTarget
from logging_utils import Logger
from models import RepositoryRecord
from repository_file import load_repository_file
from security import SecurityValidator
from utils import (github_name_from_dir, is_attachable_topic,
                   repo_dir_from_clone_url, sanitize_topic)

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1


@dataclass
class MigrationResult:
    """Outcome of migrating a single repository."""
    record: RepositoryRecord
    github_name: str = ""
    topic: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def plan_github_name(record: RepositoryRecord) -> str:
    """GitHub repository name for a record, validated for safe use."""
    try:
        return SecurityValidator.validate_repo_name(
            github_name_from_dir(repo_dir_from_clone_url(record.clone_url))
        )
    except ValueError as e:
        raise MigrationError(str(e)) from e


class MigrationOrchestrator:
    def __init__(
        self,
        cfg: MigratorConfig,
        target: Optional[GitHubTarget] = None,
        mirror: Optional[GitMirror] = None,
    ) -> None:
        self.cfg = cfg
        self.gh = target or GitHubTarget(
            GitHubTargetConfig(
                api_url=cfg.github.api_url.rstrip("/"),
                token=cfg.github.token,
                org_name=cfg.github.org,
                push_method=cfg.behavior.push_method,
            )
        )
        self.mirror = mirror or GitMirror(cfg.behavior.workdir)

    def run(self) -> int:
        try:
            records = load_repository_file(self.cfg.behavior.input_path)
        except RecordError as e:
            Logger.error(str(e))
            return EXIT_EXECUTION_ERROR

        Logger.info(
            f"loaded {len(records)} repositories from {self.cfg.behavior.input_path}"
        )

        if self.cfg.behavior.dry_run:
            return self._dry_run(records)

        try:
            self.gh.connect()
            results = self.migrate_all(records)
        except SystemExit as e:
            return int(e.code) if isinstance(e.code, int) else EXIT_EXECUTION_ERROR
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

        failed = [result for result in results if not result.ok]
        if failed:
            self._report(results)
            return EXIT_EXECUTION_ERROR
        if self.cfg.behavior.continue_on_error:
            self._report(results)
        Logger.info("mission accomplished")
        return EXIT_SUCCESS

    def migrate_all(self, records: List[RepositoryRecord]) -> List[MigrationResult]:
        """Migrate records in order.

        Without continue_on_error the first failure stops the batch; the
        failed record is the last entry of the returned list.
        """
        results: List[MigrationResult] = []
        total = len(records)
        for idx, record in enumerate(records, start=1):
            Logger.info(f"[{idx}/{total}]")
            try:
                results.append(self.migrate(record))
            except MigrationToolError as e:
                Logger.error(f"migration failed for {record.clone_url}: {e}")
                results.append(MigrationResult(record=record, error=str(e)))
                if not self.cfg.behavior.continue_on_error:
                    Logger.error("stopping at first failure")
                    break
        return results

    def migrate(self, record: RepositoryRecord) -> MigrationResult:
        """Mirror one repository to GitHub. Raises on the first failing step."""
        org = self.cfg.github.org
        team = self.cfg.github.team

        Logger.info(f"Processing: {record.repository_name}")
        Logger.info(f"  Clone URL: {record.clone_url}")
        Logger.info(f"  Project: {record.project_name}")

        gh_name = plan_github_name(record)
        repo_dir = self.mirror.clone(record.clone_url)

        topic = sanitize_topic(record.project_name)
        self.gh.create_repo(gh_name, private=True, team=team)
        if is_attachable_topic(topic):
            self.gh.add_topic(gh_name, topic)

        self.mirror.set_origin(repo_dir, self.gh.remote_url(gh_name))
        self.mirror.add_remote(repo_dir, self.cfg.behavior.source_remote, record.clone_url)

        with ExitStack() as stack:
            env = None
            if self.cfg.behavior.push_method == CloneMethod.HTTPS:
                env = stack.enter_context(
                    askpass_env("x-access-token", self.cfg.github.token)
                )
            self.mirror.push_mirror(repo_dir, "origin", env=env)

        Logger.info(f"mirrored: {record.clone_url} -> {org}/{gh_name}")
        return MigrationResult(record=record, github_name=gh_name, topic=topic)

    def _dry_run(self, records: List[RepositoryRecord]) -> int:
        total = len(records)
        for idx, record in enumerate(records, start=1):
            try:
                gh_name = plan_github_name(record)
            except MigrationError as e:
                Logger.warn(f"[{idx}/{total}] cannot plan {record.clone_url}: {e}")
                continue
            topic = sanitize_topic(record.project_name)
            topic_note = f" topic={topic}" if is_attachable_topic(topic) else ""
            Logger.info(
                f"[{idx}/{total}] would mirror: {record.clone_url} -> "
                f"{self.cfg.github.org}/{gh_name}{topic_note}"
            )
        Logger.info("dry-run completed")
        return EXIT_SUCCESS

    def _report(self, results: List[MigrationResult]) -> None:
        succeeded = [r for r in results if r.ok]
        failed = [r for r in results if not r.ok]
        Logger.info(f"migrated {len(succeeded)} repositories, {len(failed)} failed")
        for result in failed:
            Logger.error(f"  failed: {result.record.clone_url}: {result.error}")
