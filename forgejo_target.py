#!/usr/bin/env python3
"""Forgejo API wrapper for creating pull-mirrors and listing repositories."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List

import requests

from config import USER_AGENT, ForgejoConfig
from errors import DecodeError, NetworkError
from logging_utils import Logger
from models import MirrorRecord, RepositoryRecord
from security import SecurityValidator
from utils import RateLimiter

# Forgejo caps list endpoints; larger instances are only partially listed
LIST_LIMIT = 100


@dataclass(frozen=True)
class MigrationRequest:
    """Body of ``POST /repos/migrate`` for a GitHub pull-mirror."""
    clone_addr: str
    repo_name: str
    repo_owner: str
    description: str
    private: bool
    auth_username: str
    auth_token: str = field(repr=False)
    mirror: bool = True
    issues: bool = True
    pull_requests: bool = True
    releases: bool = True
    wiki: bool = True
    milestones: bool = True
    labels: bool = True

    @classmethod
    def for_repository(
        cls, repo: RepositoryRecord, owner: str, auth_username: str, auth_token: str
    ) -> "MigrationRequest":
        """Build the request mirroring ``repo`` under ``owner``.

        The GitHub credentials are handed to Forgejo so it can keep pulling
        private repositories on its own schedule.
        """
        return cls(
            clone_addr=repo.clone_url,
            repo_name=repo.name,
            repo_owner=owner,
            description=repo.description,
            private=repo.private,
            auth_username=auth_username,
            auth_token=auth_token,
        )

    def to_payload(self) -> dict:
        payload = asdict(self)
        if not payload["repo_owner"]:
            del payload["repo_owner"]
        return payload


class ForgejoTarget:
    """Wrapper around the Forgejo API to create and inspect mirrors."""

    def __init__(self, config: ForgejoConfig, timeout_s: float = 30.0) -> None:
        self.config = config
        self.timeout_s = timeout_s
        self.rate_limiter = RateLimiter(max_requests_per_minute=120)

    def _get_api_headers(self) -> dict:
        """Get standard API headers for Forgejo requests."""
        return {
            "Accept": "application/json",
            "Authorization": f"token {self.config.token}",
            "User-Agent": USER_AGENT,
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.config.api_url}{path}"
        try:
            self.rate_limiter.wait_if_needed("Forgejo API")
            return requests.request(
                method,
                url,
                headers=self._get_api_headers(),
                timeout=self.timeout_s,
                **kwargs,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

    def connect(self) -> None:
        """Check the token and, if set, that the target organization is visible."""
        Logger.info(f"init forgejo API: {self.config.url}")
        r_user = self._request("GET", "/user")
        if r_user.status_code == 401:
            raise NetworkError(
                "unauthorized (401): forgejo token invalid or expired", 401
            )
        if r_user.status_code != 200:
            raise NetworkError(
                f"unexpected response checking forgejo user: {r_user.status_code}",
                r_user.status_code,
            )
        try:
            login = r_user.json().get("login", "")
        except (ValueError, AttributeError) as e:
            raise DecodeError(f"failed to decode forgejo user: {e}") from e
        Logger.debug(f"forgejo user: {login}")

        if not self.config.organization:
            return
        r_org = self._request("GET", f"/orgs/{self.config.organization}")
        if r_org.status_code == 404:
            raise NetworkError(
                f"not found (404): organization '{self.config.organization}' "
                "does not exist or is not visible to this token",
                404,
            )
        if r_org.status_code != 200:
            Logger.warn(
                f"unexpected response checking organization: {r_org.status_code}"
            )

    def list_repositories(self) -> List[MirrorRecord]:
        """Fetch the repositories of the token user in a single call.

        Only the first ``LIST_LIMIT`` repositories are returned.
        """
        response = self._request("GET", "/user/repos", params={"limit": LIST_LIMIT})
        if response.status_code != 200:
            raise NetworkError(
                f"Forgejo API returned status {response.status_code}",
                response.status_code,
            )
        try:
            items = response.json()
        except ValueError as e:
            raise DecodeError(f"failed to decode Forgejo repos: {e}") from e
        if not isinstance(items, list):
            raise DecodeError("Forgejo repos response is not a list")
        records = [MirrorRecord.from_api(item) for item in items]
        if len(records) >= LIST_LIMIT:
            Logger.warn(
                f"forgejo returned {len(records)} repositories; listing is capped "
                f"at {LIST_LIMIT}, orphan detection may be incomplete"
            )
        return records

    def migrate(self, request: MigrationRequest) -> int:
        """Submit a migration and return the HTTP status code.

        Status interpretation is left to the caller; only transport errors
        raise.
        """
        response = self._request("POST", "/repos/migrate", json=request.to_payload())
        return response.status_code

    def sync_mirror(self, owner: str, name: str) -> None:
        """Ask Forgejo to pull the latest changes into an existing mirror."""
        try:
            name = SecurityValidator.validate_repo_name(name)
        except ValueError as e:
            raise NetworkError(f"refusing to sync '{name}': {e}") from e
        response = self._request("POST", f"/repos/{owner}/{name}/mirror-sync")
        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"sync failed with status {response.status_code} for repo {name}",
                response.status_code,
            )
