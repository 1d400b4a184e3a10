#!/usr/bin/env python3
"""Concurrent creation of Forgejo mirrors for a set of GitHub repositories."""

from __future__ import annotations

import queue
import threading
import time
from typing import List, Sequence

from errors import ConfigError, NetworkError
from forgejo_target import ForgejoTarget, MigrationRequest
from logging_utils import Logger
from models import MigrationOutcome, RepositoryRecord, RunSummary

HTTP_CREATED = 201
HTTP_CONFLICT = 409

# Wake-up interval for the collector so interrupts are seen promptly
POLL_INTERVAL_S = 0.5


class MigrationOrchestrator:
    """Fan repositories out to worker threads and fold their outcomes.

    Each repository gets its own thread; a bounded semaphore admits at most
    ``concurrency`` of them into the migration call at a time. Workers
    report through a queue that the calling thread drains exactly once per
    repository.
    """

    def __init__(
        self,
        target: ForgejoTarget,
        owner: str,
        auth_username: str,
        auth_token: str,
        sync_existing: bool = False,
    ) -> None:
        self.target = target
        self.owner = owner
        self.auth_username = auth_username
        self.auth_token = auth_token
        self.sync_existing = sync_existing
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop starting new migrations; queued tasks report failure.

        Applies to the current (or next) run only; the signal is reset when
        ``run`` returns.
        """
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(
        self, repos: Sequence[RepositoryRecord], concurrency: int, dry_run: bool
    ) -> RunSummary:
        if concurrency < 1:
            raise ConfigError(f"concurrency must be at least 1, got {concurrency}")

        repos = list(repos)
        started = time.monotonic()
        gate = threading.BoundedSemaphore(concurrency)
        results: "queue.Queue[MigrationOutcome]" = queue.Queue()

        workers: List[threading.Thread] = []
        for repo in repos:
            worker = threading.Thread(
                target=self._worker,
                args=(repo, dry_run, gate, results),
                name=f"migrate-{repo.name}",
                daemon=True,
            )
            worker.start()
            workers.append(worker)

        outcomes: List[MigrationOutcome] = []
        try:
            while len(outcomes) < len(repos):
                try:
                    outcomes.append(results.get(timeout=POLL_INTERVAL_S))
                except queue.Empty:
                    if results.empty() and not any(w.is_alive() for w in workers):
                        outcomes.extend(self._lost_outcomes(repos, outcomes))
                    continue
                except KeyboardInterrupt:
                    Logger.warn("interrupted, cancelling pending migrations")
                    self.cancel()

            # Every worker has already queued its outcome
            for worker in workers:
                worker.join(timeout=POLL_INTERVAL_S)
        finally:
            # A cancelled run must not leak into the next one
            self._cancelled.clear()

        return RunSummary.from_outcomes(outcomes, time.monotonic() - started)

    @staticmethod
    def _lost_outcomes(
        repos: List[RepositoryRecord], outcomes: List[MigrationOutcome]
    ) -> List[MigrationOutcome]:
        """Fail repositories whose outcome was dropped by an interrupted get."""
        reported = {outcome.repo_name for outcome in outcomes}
        return [
            MigrationOutcome.failed(repo.name, f"outcome lost on interrupt: {repo.name}")
            for repo in repos
            if repo.name not in reported
        ]

    def _worker(
        self,
        repo: RepositoryRecord,
        dry_run: bool,
        gate: threading.BoundedSemaphore,
        results: "queue.Queue[MigrationOutcome]",
    ) -> None:
        with gate:
            try:
                outcome = self._process(repo, dry_run)
            except Exception as e:
                outcome = MigrationOutcome.failed(
                    repo.name, f"unexpected error migrating {repo.name}: {e}"
                )
        results.put(outcome)

    def _process(self, repo: RepositoryRecord, dry_run: bool) -> MigrationOutcome:
        if self.cancelled:
            return MigrationOutcome.failed(repo.name, f"cancelled: {repo.name}")

        Logger.debug(f"processing: {repo.name} (stars={repo.stars}, {repo.language})")

        if dry_run:
            Logger.info(f"[DRY RUN] would migrate: {repo.name}")
            if self.sync_existing:
                Logger.info(f"[DRY RUN] would sync mirror if present: {repo.name}")
            return MigrationOutcome.skipped(repo.name)

        request = MigrationRequest.for_repository(
            repo, self.owner, self.auth_username, self.auth_token
        )
        try:
            status = self.target.migrate(request)
        except NetworkError as e:
            reason = f"failed to migrate {repo.name}: {e}"
            Logger.error(reason)
            return MigrationOutcome.failed(repo.name, reason)

        if status == HTTP_CREATED:
            Logger.success(f"migrated: {repo.name}")
            return MigrationOutcome.migrated(repo.name)
        if status == HTTP_CONFLICT:
            Logger.warn(f"repository already exists: {repo.name}")
            self._sync_existing(repo.name)
            return MigrationOutcome.already_exists(repo.name)

        reason = f"migration failed with status {status} for repo {repo.name}"
        Logger.error(reason)
        return MigrationOutcome.failed(repo.name, reason)

    def _sync_existing(self, name: str) -> None:
        if not self.sync_existing:
            return
        try:
            self.target.sync_mirror(self.owner, name)
        except NetworkError as e:
            Logger.warn(f"could not trigger sync for {name}: {e}")
            return
        Logger.info(f"sync triggered for: {name}")
