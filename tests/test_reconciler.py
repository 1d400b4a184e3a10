"""Tests for orphaned mirror detection."""

from __future__ import annotations

from models import MirrorRecord
from reconciler import find_orphans


def _mirror(name: str, mirror: bool = True, repo_id: int = 1) -> MirrorRecord:
    return MirrorRecord(id=repo_id, name=name, full_name=f'octocat/{name}', mirror=mirror)


def test_only_mirrors_missing_from_source_are_orphans() -> None:
    destination = [_mirror('a', repo_id=1), _mirror('c', repo_id=2), _mirror('d', False, 3)]

    assert find_orphans({'a', 'b'}, destination) == ['c']


def test_no_orphans_when_every_mirror_has_a_source() -> None:
    assert find_orphans({'a'}, [_mirror('a')]) == []


def test_orphans_keep_destination_order() -> None:
    destination = [_mirror('z'), _mirror('m'), _mirror('b')]

    assert find_orphans(set(), destination) == ['z', 'm', 'b']
