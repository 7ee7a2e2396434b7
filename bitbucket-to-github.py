#!/usr/bin/env python3
"""
bitbucket-to-github - Mirror Bitbucket repositories into a GitHub organization.

Reads the repository file produced by populate-bitbucket-repos.py and, for
each entry, mirror-clones the repository, creates a private GitHub repository
assigned to a team, tags it with a topic derived from the Bitbucket project,
and pushes every ref with git push --mirror.

Runs without arguments using the default organization, team and input file;
see --help for overrides.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_migrator_arguments
from logging_utils import Logger
from migration_orchestrator import MigrationOrchestrator

# Exit codes
EXIT_EXECUTION_ERROR = 1


def main() -> NoReturn:
    if __name__ != "__main__":
        sys.exit(EXIT_EXECUTION_ERROR)

    Logger.set_process_name("bitbucket-to-github")
    cfg = parse_migrator_arguments()
    orchestrator = MigrationOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
