#!/usr/bin/env python3
"""
populate-bitbucket-repos - Fetch every repository of a Bitbucket workspace
and write clone URLs with project names to a JSON file.

The file is the input of bitbucket-to-github.py, which mirrors each listed
repository into a GitHub organization.

Usage:
  BITBUCKET_USER=you@example.com BITBUCKET_TOKEN=app_token \\
      ./populate-bitbucket-repos.py -w marmelo
  ./populate-bitbucket-repos.py -w marmelo -u you@example.com -t app_token \\
      -c ssh -o my_repos.json
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_collector_arguments
from collector import RepositoryCollector
from logging_utils import Logger

# Exit codes
EXIT_EXECUTION_ERROR = 1


def main() -> NoReturn:
    if __name__ != "__main__":
        sys.exit(EXIT_EXECUTION_ERROR)

    Logger.set_process_name("populate-bitbucket-repos")
    cfg = parse_collector_arguments()
    sys.exit(RepositoryCollector(cfg).run())


if __name__ == "__main__":
    main()
