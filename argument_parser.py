#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, NoReturn, Optional

from config import (DEFAULT_BITBUCKET_API, DEFAULT_GITHUB_API,
                    DEFAULT_GITHUB_ORG, DEFAULT_GITHUB_TEAM, DEFAULT_PAGE_LEN,
                    DEFAULT_REPOSITORY_FILE, DEFAULT_SOURCE_REMOTE,
                    BitbucketConfig, CloneMethod, CollectorConfig, GitHubConfig,
                    MigrationBehaviorConfig, MigratorConfig)
from github_target import resolve_github_token
from logging_utils import Logger
from security import SecurityValidator

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_MISSING_ARGUMENTS = 2


def _fail(parser: argparse.ArgumentParser, message: str) -> NoReturn:
    Logger.error(f"error: {message}")
    parser.print_help(sys.stderr)
    sys.exit(EXIT_MISSING_ARGUMENTS)


def _create_collector_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Fetch Bitbucket workspace repositories and write clone URLs with "
            "project names to a JSON file."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  BITBUCKET_USER=you@example.com BITBUCKET_TOKEN=app_token %(prog)s -w marmelo
  %(prog)s -w marmelo -u you@example.com -t app_token -c ssh -o my_repos.json
        """,
    )
    parser.add_argument(
        "-w",
        "--workspace",
        dest="workspace",
        required=True,
        help="Bitbucket workspace ID or slug",
    )
    parser.add_argument(
        "-u",
        "--user",
        dest="user",
        help="Bitbucket username/email (or set BITBUCKET_USER env var)",
    )
    parser.add_argument(
        "-t",
        "--token",
        dest="token",
        help="Bitbucket app password / API token (or set BITBUCKET_TOKEN env var)",
    )
    parser.add_argument(
        "-c",
        "--clone-type",
        dest="clone_type",
        choices=[method.value for method in CloneMethod],
        default=CloneMethod.HTTPS.value,
        help="Clone URL transport to record: https or ssh (default: https)",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        default=f"./{DEFAULT_REPOSITORY_FILE}",
        help=f"Output file path (default: ./{DEFAULT_REPOSITORY_FILE})",
    )
    parser.add_argument(
        "-p",
        "--pagelen",
        dest="page_len",
        type=int,
        default=DEFAULT_PAGE_LEN,
        help=f"Page size (default: {DEFAULT_PAGE_LEN}, max depends on API)",
    )
    parser.add_argument(
        "--bb-api",
        dest="bb_api_url",
        default=DEFAULT_BITBUCKET_API,
        help=f"Base URL of the Bitbucket API (default: {DEFAULT_BITBUCKET_API})",
    )
    return parser


def parse_collector_arguments(argv: Optional[List[str]] = None) -> CollectorConfig:
    """Parse collector arguments; exits with code 2 on invalid input."""
    parser = _create_collector_parser()
    args = parser.parse_args(argv)

    user = args.user or os.getenv("BITBUCKET_USER", "")
    token = args.token or os.getenv("BITBUCKET_TOKEN", "")
    if not user or not token:
        _fail(
            parser,
            "provide credentials via BITBUCKET_USER and BITBUCKET_TOKEN env vars "
            "or -u/-t options",
        )

    if args.page_len < 1:
        _fail(parser, "page size must be a positive integer")

    try:
        workspace = SecurityValidator.validate_slug(args.workspace, "Workspace")
        user = SecurityValidator.validate_username(user)
        api_url = SecurityValidator.validate_url(args.bb_api_url, ["https", "http"])
        output = SecurityValidator.validate_file_path(args.output)
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        _fail(parser, str(e))

    return CollectorConfig(
        bitbucket=BitbucketConfig(
            api_url=api_url.rstrip("/"),
            username=user,
            token=token,
            workspace=workspace,
        ),
        clone_method=CloneMethod(args.clone_type),
        output_path=output,
        page_len=args.page_len,
    )


def _create_migrator_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mirror repositories listed in the repository file to GitHub",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s
  %(prog)s --dry-run
  %(prog)s --gh-org my-org --team platform --input my_repos.json
  %(prog)s --team "" --push-method https --continue-on-error

Without --gh-token, GITHUB_TOKEN, GH_TOKEN or an authenticated gh CLI
session (gh auth token) is used. Defaults: org {DEFAULT_GITHUB_ORG},
team {DEFAULT_GITHUB_TEAM}.
        """,
    )
    parser.add_argument(
        "-i",
        "--input",
        dest="input_path",
        default=DEFAULT_REPOSITORY_FILE,
        help=f"Repository file written by the collector (default: {DEFAULT_REPOSITORY_FILE})",
    )
    parser.add_argument(
        "--gh-api",
        dest="gh_api_url",
        default=DEFAULT_GITHUB_API,
        help="Base URL of the GitHub API",
    )
    parser.add_argument(
        "--gh-token",
        dest="gh_token",
        help="GitHub API token (or set GITHUB_TOKEN env var)",
    )
    parser.add_argument(
        "--gh-org",
        dest="gh_org",
        default=DEFAULT_GITHUB_ORG,
        help=f"GitHub organization to mirror into (default: {DEFAULT_GITHUB_ORG})",
    )
    parser.add_argument(
        "--team",
        dest="team",
        default=DEFAULT_GITHUB_TEAM,
        help=f"Team slug granted access to created repos; empty for none "
        f"(default: {DEFAULT_GITHUB_TEAM})",
    )
    parser.add_argument(
        "--workdir",
        dest="workdir",
        default=".",
        help="Directory where mirror clones are created and kept (default: .)",
    )
    parser.add_argument(
        "--push-method",
        dest="push_method",
        choices=[method.value for method in CloneMethod],
        default=CloneMethod.SSH.value,
        help="Push method for GitHub target: https or ssh (default: ssh)",
    )
    parser.add_argument(
        "--source-remote",
        dest="source_remote",
        default=DEFAULT_SOURCE_REMOTE,
        help=f"Remote name kept for the Bitbucket source (default: {DEFAULT_SOURCE_REMOTE})",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        dest="continue_on_error",
        help="Keep going after a failed repository and report failures at the end",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="List actions without doing them",
    )
    return parser


def parse_migrator_arguments(argv: Optional[List[str]] = None) -> MigratorConfig:
    """Parse migrator arguments; every option has a default."""
    parser = _create_migrator_parser()
    args = parser.parse_args(argv)

    try:
        gh_api_url = SecurityValidator.validate_url(args.gh_api_url, ["https"])
        gh_org = SecurityValidator.validate_slug(args.gh_org, "Organization")
        team = SecurityValidator.validate_slug(args.team, "Team") if args.team else ""
        source_remote = SecurityValidator.validate_slug(args.source_remote, "Remote name")
        input_path = SecurityValidator.validate_file_path(args.input_path)
        workdir = SecurityValidator.validate_file_path(args.workdir)
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        _fail(parser, str(e))

    token = resolve_github_token(args.gh_token)
    if not token and not args.dry_run:
        Logger.error(
            "error: github token not provided (use --gh-token, GITHUB_TOKEN "
            "or gh auth login)"
        )
        sys.exit(EXIT_AUTH_ERROR)

    return MigratorConfig(
        github=GitHubConfig(
            api_url=gh_api_url,
            token=token or "",
            org=gh_org,
            team=team,
        ),
        behavior=MigrationBehaviorConfig(
            input_path=input_path,
            workdir=workdir,
            push_method=CloneMethod(args.push_method),
            source_remote=source_remote,
            continue_on_error=args.continue_on_error,
            dry_run=args.dry_run,
        ),
    )
