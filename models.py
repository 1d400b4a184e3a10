#!/usr/bin/env python3
"""Records exchanged between the listers, the orchestrator and the reconciler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from errors import DecodeError


@dataclass(frozen=True)
class RepositoryRecord:
    """A GitHub repository as seen by the mirror run."""
    name: str
    full_name: str
    clone_url: str
    description: str = ""
    language: str = ""
    stars: int = 0
    updated_at: str = ""
    private: bool = False
    fork: bool = False

    @classmethod
    def from_api(cls, item: Any) -> "RepositoryRecord":
        """Normalize one item of the GitHub ``/user/repos`` listing.

        Optional fields that GitHub returns as null become empty values;
        an item without a name or clone URL is rejected.
        """
        if not isinstance(item, Mapping):
            raise DecodeError(f"unexpected repository item: {type(item).__name__}")
        name = item.get("name")
        clone_url = item.get("clone_url")
        if not name or not clone_url:
            raise DecodeError("repository item without name or clone_url")
        try:
            stars = int(item.get("stargazers_count") or 0)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"malformed repository item '{name}': {e}") from e
        return cls(
            name=name,
            full_name=item.get("full_name") or name,
            clone_url=clone_url,
            description=item.get("description") or "",
            language=item.get("language") or "",
            stars=stars,
            updated_at=item.get("updated_at") or "",
            private=bool(item.get("private", False)),
            fork=bool(item.get("fork", False)),
        )


@dataclass(frozen=True)
class MirrorRecord:
    """A repository on the Forgejo side."""
    id: int
    name: str
    full_name: str
    mirror: bool

    @classmethod
    def from_api(cls, item: Any) -> "MirrorRecord":
        if not isinstance(item, Mapping):
            raise DecodeError(f"unexpected forgejo item: {type(item).__name__}")
        try:
            return cls(
                id=int(item["id"]),
                name=str(item["name"]),
                full_name=str(item.get("full_name") or item["name"]),
                mirror=bool(item.get("mirror", False)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"malformed forgejo repository item: {e}") from e


class OutcomeKind(Enum):
    """Result of processing a single repository."""
    MIGRATED = "migrated"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class MigrationOutcome:
    repo_name: str
    kind: OutcomeKind
    reason: Optional[str] = None

    @classmethod
    def migrated(cls, repo_name: str) -> "MigrationOutcome":
        return cls(repo_name, OutcomeKind.MIGRATED)

    @classmethod
    def already_exists(cls, repo_name: str) -> "MigrationOutcome":
        return cls(repo_name, OutcomeKind.ALREADY_EXISTS)

    @classmethod
    def failed(cls, repo_name: str, reason: str) -> "MigrationOutcome":
        return cls(repo_name, OutcomeKind.FAILED, reason)

    @classmethod
    def skipped(cls, repo_name: str) -> "MigrationOutcome":
        return cls(repo_name, OutcomeKind.SKIPPED)


@dataclass(frozen=True)
class RunSummary:
    """Totals of a migration run, derived from its outcomes."""
    total: int
    migrated: int
    skipped: int
    failed: int
    elapsed_s: float
    failures: Tuple[str, ...] = ()

    @classmethod
    def from_outcomes(
        cls, outcomes: Iterable[MigrationOutcome], elapsed_s: float
    ) -> "RunSummary":
        """Fold outcomes into totals.

        Dry-run skips count toward ``total`` only.
        """
        total = migrated = skipped = failed = 0
        failures = []
        for outcome in outcomes:
            total += 1
            if outcome.kind is OutcomeKind.MIGRATED:
                migrated += 1
            elif outcome.kind is OutcomeKind.ALREADY_EXISTS:
                skipped += 1
            elif outcome.kind is OutcomeKind.FAILED:
                failed += 1
                failures.append(outcome.reason or outcome.repo_name)
        return cls(
            total=total,
            migrated=migrated,
            skipped=skipped,
            failed=failed,
            elapsed_s=elapsed_s,
            failures=tuple(failures),
        )
