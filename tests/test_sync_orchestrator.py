"""Tests for the end-to-end SyncOrchestrator flow."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from config import (Config, FilterConfig, ForgejoConfig, GitHubConfig,
                    MirrorBehaviorConfig)
from errors import NetworkError
from models import MirrorRecord, RepositoryRecord
from sync_orchestrator import (EXIT_EXECUTION_ERROR, EXIT_FORGEJO_ERROR,
                               EXIT_GITHUB_ERROR, EXIT_SUCCESS,
                               SyncOrchestrator)


def _make_config(dry_run: bool = False, cleanup: bool = False) -> Config:
    return Config(
        github=GitHubConfig(token='ghp_token', user='octocat'),
        forgejo=ForgejoConfig(
            url='https://git.example.com',
            token='fj-token',
            user='octocat',
            organization='mirrors',
        ),
        filters=FilterConfig(),
        behavior=MirrorBehaviorConfig(
            dry_run=dry_run,
            cleanup_orphans=cleanup,
            concurrency=3,
        ),
    )


def _repos(*names: str):
    return [
        RepositoryRecord(
            name=name,
            full_name=f'octocat/{name}',
            clone_url=f'https://github.com/octocat/{name}.git',
        )
        for name in names
    ]


@pytest.fixture
def clients():
    with patch('sync_orchestrator.GitHubSource') as gh_cls, \
            patch('sync_orchestrator.ForgejoTarget') as fj_cls:
        yield gh_cls.return_value, fj_cls.return_value


def test_failed_repository_gives_non_zero_exit(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = _repos(*[f'r{i}' for i in range(10)])

    def migrate(request):
        if request.repo_name == 'r3':
            raise NetworkError('connection reset')
        return 201

    fj.migrate.side_effect = migrate

    orchestrator = SyncOrchestrator(_make_config())

    assert orchestrator.run() == EXIT_EXECUTION_ERROR
    assert fj.migrate.call_count == 10


def test_successful_run_uses_organization_as_owner(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = _repos('a', 'b')
    fj.migrate.return_value = 201

    assert SyncOrchestrator(_make_config()).run() == EXIT_SUCCESS
    owners = {call.args[0].repo_owner for call in fj.migrate.call_args_list}
    assert owners == {'mirrors'}


def test_dry_run_makes_no_writes(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = _repos('a', 'b', 'c')

    assert SyncOrchestrator(_make_config(dry_run=True)).run() == EXIT_SUCCESS
    fj.migrate.assert_not_called()
    fj.sync_mirror.assert_not_called()


def test_source_listing_failure_aborts_before_migration(clients) -> None:
    gh, fj = clients
    gh.list_repositories.side_effect = NetworkError('GitHub API returned status 500', 500)

    assert SyncOrchestrator(_make_config()).run() == EXIT_GITHUB_ERROR
    fj.migrate.assert_not_called()


def test_destination_listing_failure_aborts_before_migration(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = _repos('a')
    fj.list_repositories.side_effect = NetworkError('Forgejo API returned status 503', 503)

    assert SyncOrchestrator(_make_config(cleanup=True)).run() == EXIT_FORGEJO_ERROR
    fj.migrate.assert_not_called()


def test_cleanup_reports_orphans_without_deleting(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = _repos('a', 'b')
    fj.list_repositories.return_value = [
        MirrorRecord(id=1, name='a', full_name='mirrors/a', mirror=True),
        MirrorRecord(id=2, name='c', full_name='mirrors/c', mirror=True),
        MirrorRecord(id=3, name='d', full_name='mirrors/d', mirror=False),
    ]
    fj.migrate.return_value = 409

    orchestrator = SyncOrchestrator(_make_config(cleanup=True))

    assert orchestrator.run() == EXIT_SUCCESS
    assert orchestrator.orphans == ['c']
    assert not any('delete' in name for name, *_ in fj.method_calls)


def test_destination_not_listed_without_cleanup(clients) -> None:
    gh, fj = clients
    gh.list_repositories.return_value = []

    assert SyncOrchestrator(_make_config()).run() == EXIT_SUCCESS
    fj.list_repositories.assert_not_called()
