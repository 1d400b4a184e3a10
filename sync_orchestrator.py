#!/usr/bin/env python3
"""Main orchestrator for mirroring GitHub repositories into Forgejo."""

from __future__ import annotations

from typing import List, Optional

from config import VERSION, Config
from errors import ConfigError, DecodeError, NetworkError
from forgejo_target import ForgejoTarget
from github_source import GitHubSource
from logging_utils import Logger
from migration_orchestrator import MigrationOrchestrator
from models import MirrorRecord, RepositoryRecord, RunSummary
from reconciler import find_orphans
from utils import format_duration

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_MISSING_ARGUMENTS = 2
EXIT_GITHUB_ERROR = 31
EXIT_FORGEJO_ERROR = 32


class SyncOrchestrator:
    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        Logger.set_verbose(cfg.behavior.verbose)
        self.gh = GitHubSource(
            cfg.github, cfg.filters, timeout_s=cfg.behavior.timeout_s
        )
        self.fj = ForgejoTarget(cfg.forgejo, timeout_s=cfg.behavior.timeout_s)
        self.migrator = MigrationOrchestrator(
            self.fj,
            owner=cfg.forgejo.owner,
            auth_username=cfg.github.user,
            auth_token=cfg.github.token,
            sync_existing=cfg.behavior.sync_existing,
        )
        self.orphans: List[str] = []

    def run(self) -> int:
        self._print_banner()

        try:
            self.gh.connect()
            Logger.info("fetching GitHub repositories")
            repos = self.gh.list_repositories()
        except (NetworkError, DecodeError) as e:
            Logger.error(f"failed to fetch GitHub repositories: {e}")
            return EXIT_GITHUB_ERROR

        try:
            self.fj.connect()
            mirrors = self._fetch_mirrors()
        except (NetworkError, DecodeError) as e:
            Logger.error(f"failed to fetch Forgejo repositories: {e}")
            return EXIT_FORGEJO_ERROR

        Logger.info(f"starting migration of {len(repos)} repositories")
        try:
            summary = self.migrator.run(
                repos,
                concurrency=self.cfg.behavior.concurrency,
                dry_run=self.cfg.behavior.dry_run,
            )
        except ConfigError as e:
            Logger.error(f"configuration error: {e}")
            return EXIT_MISSING_ARGUMENTS

        if mirrors is not None:
            self.orphans = self._report_orphans(repos, mirrors)

        self._print_summary(summary)

        if summary.failed > 0:
            Logger.warn(
                f"{summary.failed} repositories failed to migrate. "
                "Check logs for details."
            )
            return EXIT_EXECUTION_ERROR

        Logger.success("migration completed successfully")
        return EXIT_SUCCESS

    def _fetch_mirrors(self) -> Optional[List[MirrorRecord]]:
        """Fetch Forgejo repositories when orphan detection is requested."""
        if not self.cfg.behavior.cleanup_orphans:
            return None
        Logger.info("fetching Forgejo repositories for cleanup")
        mirrors = self.fj.list_repositories()
        Logger.info(f"found {len(mirrors)} repositories on Forgejo")
        return mirrors

    def _report_orphans(
        self, repos: List[RepositoryRecord], mirrors: List[MirrorRecord]
    ) -> List[str]:
        Logger.info("checking for orphaned mirrors")
        orphans = find_orphans({repo.name for repo in repos}, mirrors)
        for name in orphans:
            Logger.warn(f"found orphaned mirror: {name}")
        if orphans:
            Logger.info(
                f"{len(orphans)} orphaned mirrors left in place; "
                "delete them on Forgejo if they are no longer needed"
            )
        else:
            Logger.info("no orphaned mirrors found")
        return orphans

    def _print_banner(self) -> None:
        Logger.info(f"GitHub to Forgejo Mirror Tool v{VERSION}")
        Logger.info(f"source: {self.cfg.github.user}@{self.cfg.github.api_url}")
        Logger.info(f"target: {self.cfg.forgejo.url} ({self.cfg.forgejo.owner})")
        if self.cfg.behavior.dry_run:
            Logger.info("mode: DRY RUN")

    def _print_summary(self, summary: RunSummary) -> None:
        Logger.info("migration summary:")
        Logger.info(f"   total repos: {summary.total}")
        Logger.info(f"   migrated: {summary.migrated}")
        Logger.info(f"   skipped: {summary.skipped}")
        Logger.info(f"   failed: {summary.failed}")
        Logger.info(f"   duration: {format_duration(summary.elapsed_s)}")
        for reason in summary.failures:
            Logger.debug(f"   failure: {reason}")
