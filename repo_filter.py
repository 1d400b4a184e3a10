#!/usr/bin/env python3
"""Selection of GitHub repositories to mirror."""

from __future__ import annotations

from config import FilterConfig
from models import RepositoryRecord


def include(repo: RepositoryRecord, config: FilterConfig) -> bool:
    """Return True if ``repo`` should be mirrored under ``config``.

    Rules are checked in order and the first match decides. An explicit
    ``only_names`` list overrides everything else, including the exclude
    list and the fork/private switches.
    """
    if config.only_names:
        return repo.name in config.only_names
    if repo.name in config.exclude_names:
        return False
    if repo.fork and not config.include_forks:
        return False
    if repo.private and not config.include_private:
        return False
    return True
