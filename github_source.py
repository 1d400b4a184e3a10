#!/usr/bin/env python3
"""GitHub API wrapper for enumerating repositories owned by the user."""

from __future__ import annotations

from typing import List, Optional

import github
import requests

from config import USER_AGENT, FilterConfig, GitHubConfig
from errors import DecodeError, NetworkError
from logging_utils import Logger
from models import RepositoryRecord
from repo_filter import include
from utils import RateLimiter

PER_PAGE = 100


class GitHubSource:
    """Wrapper around the GitHub API to list the repositories to mirror."""

    def __init__(
        self,
        config: GitHubConfig,
        filters: FilterConfig,
        timeout_s: float = 30.0,
        per_page: int = PER_PAGE,
    ) -> None:
        self.config = config
        self.filters = filters
        self.timeout_s = timeout_s
        self.per_page = per_page
        self.api: Optional[github.Github] = None
        self.rate_limiter = RateLimiter(
            max_requests_per_minute=50
        )  # GitHub's standard rate limit

    def connect(self) -> None:
        """Authenticate and check the token belongs to the configured user."""
        Logger.info(f"init github API: {self.config.api_url}")
        try:
            auth = github.Auth.Token(self.config.token)
            if self.config.api_url != "https://api.github.com":
                self.api = github.Github(
                    base_url=self.config.api_url, auth=auth, user_agent=USER_AGENT
                )
            else:
                self.api = github.Github(auth=auth, user_agent=USER_AGENT)
            self.rate_limiter.wait_if_needed("GitHub API")
            login = self.api.get_user().login
        except github.BadCredentialsException as e:
            raise NetworkError(
                "authentication failed (github): invalid token", e.status
            ) from e
        except github.GithubException as e:
            raise NetworkError(f"github error: {e}", e.status) from e
        except requests.RequestException as e:
            raise NetworkError(f"failed to contact github api: {e}") from e

        Logger.debug(f"github user: {login}")
        if login.lower() != self.config.user.lower():
            Logger.warn(
                f"token belongs to '{login}', not '{self.config.user}'; "
                "listing repositories owned by the token user"
            )

    def _get_api_headers(self) -> dict:
        """Get standard API headers for GitHub requests."""
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.token}",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _fetch_page(self, url: str, params: Optional[dict]) -> requests.Response:
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            response = requests.get(
                url,
                headers=self._get_api_headers(),
                params=params,
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise NetworkError(f"failed to fetch GitHub repos: {e}") from e

        if response.status_code != 200:
            raise NetworkError(
                f"GitHub API returned status {response.status_code}",
                response.status_code,
            )
        return response

    def list_repositories(self) -> List[RepositoryRecord]:
        """Return every owned repository that passes the configured filters.

        Pages are requested until GitHub stops sending a ``next`` link. Any
        failing page aborts the whole listing.
        """
        url: Optional[str] = f"{self.config.api_url}/user/repos"
        params: Optional[dict] = {
            "type": "owner",
            "sort": "updated",
            "direction": "desc",
            "per_page": self.per_page,
        }
        repos: List[RepositoryRecord] = []
        seen = 0
        page = 0

        while url:
            page += 1
            response = self._fetch_page(url, params)
            try:
                items = response.json()
            except ValueError as e:
                raise DecodeError(f"failed to decode GitHub repos: {e}") from e
            if not isinstance(items, list):
                raise DecodeError("GitHub repos response is not a list")

            for item in items:
                repo = RepositoryRecord.from_api(item)
                seen += 1
                if not include(repo, self.filters):
                    Logger.debug(f"excluding: {repo.full_name}")
                    continue
                repos.append(repo)
                Logger.debug(f"found: {repo.full_name}")

            Logger.debug(f"fetched page {page} ({len(items)} repositories)")
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        Logger.info(f"found {seen} repositories on GitHub, {len(repos)} selected")
        return repos
