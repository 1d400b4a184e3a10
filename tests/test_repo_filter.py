"""Tests for the repository selection rules."""

from __future__ import annotations

import pytest

from config import FilterConfig
from models import RepositoryRecord
from repo_filter import include


def _repo(name: str = 'demo', private: bool = False, fork: bool = False) -> RepositoryRecord:
    return RepositoryRecord(
        name=name,
        full_name=f'octocat/{name}',
        clone_url=f'https://github.com/octocat/{name}.git',
        private=private,
        fork=fork,
    )


def test_public_source_repo_included_by_default() -> None:
    assert include(_repo(), FilterConfig()) is True


def test_forks_and_private_repos_excluded_by_default() -> None:
    assert include(_repo(fork=True), FilterConfig()) is False
    assert include(_repo(private=True), FilterConfig()) is False


def test_switches_admit_forks_and_private_repos() -> None:
    config = FilterConfig(include_private=True, include_forks=True)
    assert include(_repo(fork=True, private=True), config) is True


@pytest.mark.parametrize('private', [False, True])
@pytest.mark.parametrize('fork', [False, True])
def test_only_names_decides_on_membership_alone(private: bool, fork: bool) -> None:
    """Fork and private flags must not matter once an only-list is given."""
    config = FilterConfig(only_names=frozenset({'keep'}))
    assert include(_repo('keep', private=private, fork=fork), config) is True
    assert include(_repo('other', private=private, fork=fork), config) is False


def test_only_names_takes_precedence_over_exclude() -> None:
    config = FilterConfig(
        only_names=frozenset({'both'}), exclude_names=frozenset({'both'})
    )
    assert include(_repo('both'), config) is True


@pytest.mark.parametrize('private', [False, True])
@pytest.mark.parametrize('fork', [False, True])
def test_excluded_name_always_rejected(private: bool, fork: bool) -> None:
    config = FilterConfig(
        include_private=True,
        include_forks=True,
        exclude_names=frozenset({'dotfiles'}),
    )
    assert include(_repo('dotfiles', private=private, fork=fork), config) is False
