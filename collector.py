#!/usr/bin/env python3
"""Collects Bitbucket workspace repositories into the repository file."""

from __future__ import annotations

from typing import Optional

from bitbucket_source import BitbucketSource
from config import CollectorConfig
from exceptions import FetchError
from logging_utils import Logger
from repository_file import write_repository_file

# Exit codes
EXIT_SUCCESS = 0
EXIT_FETCH_ERROR = 3


class RepositoryCollector:
    def __init__(
        self, cfg: CollectorConfig, source: Optional[BitbucketSource] = None
    ) -> None:
        self.cfg = cfg
        self.bb = source or BitbucketSource(
            cfg.bitbucket.username, cfg.bitbucket.token, api_url=cfg.bitbucket.api_url
        )

    def run(self) -> int:
        try:
            lines = self.bb.collect_lines(
                self.cfg.bitbucket.workspace, self.cfg.clone_method, self.cfg.page_len
            )
        except FetchError as e:
            Logger.error(f"error: {e}")
            if e.body:
                Logger.raw_error("Response body:")
                Logger.raw_error("\n".join(e.body.splitlines()[:200]))
            return EXIT_FETCH_ERROR

        count = write_repository_file(self.cfg.output_path, lines)
        Logger.info(f"Wrote {count} repositories to {self.cfg.output_path}")
        Logger.info("Done.")
        return EXIT_SUCCESS
