"""Tests for configuration building from flags and environment."""

from __future__ import annotations

import pytest

from argument_parser import EXIT_AUTH_ERROR, EXIT_MISSING_ARGUMENTS, parse_arguments

ENV_VARS = (
    'GITHUB_TOKEN', 'GITHUB_USER', 'GITHUB_API_URL', 'FORGEJO_URL',
    'FORGEJO_TOKEN', 'FORGEJO_USER', 'FORGEJO_ORG', 'INCLUDE_PRIVATE',
    'INCLUDE_FORKS', 'ONLY_REPOS', 'EXCLUDE_REPOS',
)


@pytest.fixture
def env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('GITHUB_TOKEN', 'ghp_token')
    monkeypatch.setenv('GITHUB_USER', 'octocat')
    monkeypatch.setenv('FORGEJO_URL', 'https://git.example.com/')
    monkeypatch.setenv('FORGEJO_TOKEN', 'fj-token')
    monkeypatch.setenv('FORGEJO_USER', 'octocat')
    return monkeypatch


def test_environment_supplies_defaults(env) -> None:
    env.setenv('INCLUDE_PRIVATE', 'true')
    env.setenv('EXCLUDE_REPOS', 'dotfiles, scratch,')

    cfg = parse_arguments([])

    assert cfg.github.token == 'ghp_token'
    assert cfg.github.api_url == 'https://api.github.com'
    assert cfg.forgejo.url == 'https://git.example.com'
    assert cfg.forgejo.api_url == 'https://git.example.com/api/v1'
    assert cfg.forgejo.owner == 'octocat'
    assert cfg.filters.include_private is True
    assert cfg.filters.include_forks is False
    assert cfg.filters.exclude_names == frozenset({'dotfiles', 'scratch'})
    assert cfg.filters.only_names == frozenset()
    assert cfg.behavior.concurrency == 3
    assert cfg.behavior.dry_run is False


def test_flags_override_environment(env) -> None:
    env.setenv('ONLY_REPOS', 'from-env')

    cfg = parse_arguments([
        '--github-user', 'hubot',
        '--organization', 'mirrors',
        '--only', 'api,web',
        '--include-forks',
        '--dry-run',
        '--cleanup',
        '--concurrent', '5',
    ])

    assert cfg.github.user == 'hubot'
    assert cfg.forgejo.owner == 'mirrors'
    assert cfg.filters.only_names == frozenset({'api', 'web'})
    assert cfg.filters.include_forks is True
    assert cfg.behavior.dry_run is True
    assert cfg.behavior.cleanup_orphans is True
    assert cfg.behavior.concurrency == 5


@pytest.mark.parametrize('missing', ['GITHUB_TOKEN', 'GITHUB_USER', 'FORGEJO_URL', 'FORGEJO_TOKEN'])
def test_missing_identity_refuses_to_start(env, missing: str) -> None:
    env.delenv(missing)

    with pytest.raises(SystemExit) as excinfo:
        parse_arguments([])

    assert excinfo.value.code == EXIT_AUTH_ERROR


def test_forgejo_user_or_organization_required(env) -> None:
    env.delenv('FORGEJO_USER')

    with pytest.raises(SystemExit) as excinfo:
        parse_arguments([])
    assert excinfo.value.code == EXIT_AUTH_ERROR

    cfg = parse_arguments(['--organization', 'mirrors'])
    assert cfg.forgejo.user is None
    assert cfg.forgejo.owner == 'mirrors'


@pytest.mark.parametrize('value', ['0', '-2'])
def test_non_positive_concurrency_rejected(env, value: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['--concurrent', value])

    assert excinfo.value.code == EXIT_MISSING_ARGUMENTS


def test_invalid_forgejo_url_rejected(env) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['--forgejo-url', 'ftp://git.example.com'])

    assert excinfo.value.code == EXIT_MISSING_ARGUMENTS


def test_version_flag_exits_cleanly(env, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['--version'])

    assert excinfo.value.code == 0
    assert '1.0.0' in capsys.readouterr().out
