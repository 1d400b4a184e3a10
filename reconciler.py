#!/usr/bin/env python3
"""Detection of Forgejo mirrors that no longer have a GitHub source."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List

from models import MirrorRecord


def find_orphans(
    source_names: AbstractSet[str], destination_mirrors: Iterable[MirrorRecord]
) -> List[str]:
    """Return names of Forgejo mirrors absent from ``source_names``.

    Repositories created directly on Forgejo (``mirror`` false) are never
    reported. Nothing is deleted here.
    """
    return [
        record.name
        for record in destination_mirrors
        if record.mirror and record.name not in source_names
    ]
