#!/usr/bin/env python3
"""
GitHub Forgejo Mirror - Mirror all repositories owned by a GitHub user
into a Forgejo instance.

This tool lists the repositories of a GitHub account, filters them and asks
Forgejo to create a pull-mirror for each one through its migration API, so
Forgejo keeps them up to date on its own. Mirrors whose GitHub source is
gone can be reported with --cleanup; they are never deleted.

Licensed under the MIT License. See LICENSE file for details.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from sync_orchestrator import SyncOrchestrator


def main() -> NoReturn:
    cfg = parse_arguments()
    orchestrator = SyncOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
