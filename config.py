#!/usr/bin/env python3
"""Configuration dataclasses for bitbucket-to-github."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_REPOSITORY_FILE = "bitbucket_repos.json"
DEFAULT_BITBUCKET_API = "https://api.bitbucket.org/2.0"
DEFAULT_GITHUB_API = "https://api.github.com"
DEFAULT_GITHUB_ORG = "Four-Agency"
DEFAULT_GITHUB_TEAM = "CTU"
DEFAULT_PAGE_LEN = 100
DEFAULT_SOURCE_REMOTE = "bitbucket"


class CloneMethod(Enum):
    """Enumeration for git clone/push transports."""
    HTTPS = "https"
    SSH = "ssh"


@dataclass
class BitbucketConfig:
    """Bitbucket-specific configuration."""
    api_url: str
    username: str
    token: str
    workspace: str


@dataclass
class CollectorConfig:
    """Configuration for the repository collector."""
    bitbucket: BitbucketConfig
    clone_method: CloneMethod
    output_path: str
    page_len: int = DEFAULT_PAGE_LEN


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    api_url: str
    token: str
    org: str
    team: str


@dataclass
class MigrationBehaviorConfig:
    """Migration behavior configuration."""
    input_path: str
    workdir: str
    push_method: CloneMethod = CloneMethod.SSH
    source_remote: str = DEFAULT_SOURCE_REMOTE
    continue_on_error: bool = False
    dry_run: bool = False


@dataclass
class MigratorConfig:
    """Main configuration for Bitbucket-to-GitHub migration."""
    github: GitHubConfig
    behavior: MigrationBehaviorConfig


@dataclass
class GitHubTargetConfig:
    """Configuration for GitHub target operations."""
    api_url: str
    token: str
    org_name: str
    push_method: CloneMethod
