#!/usr/bin/env python3
"""Configuration dataclasses for github-forgejo-mirror."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

VERSION = "1.0.0"
USER_AGENT = f"github-forgejo-mirror/{VERSION}"

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_CONCURRENCY = 3
DEFAULT_TIMEOUT_S = 30.0


@dataclass
class GitHubConfig:
    """GitHub (source) configuration."""
    token: str
    user: str
    api_url: str = DEFAULT_GITHUB_API_URL


@dataclass
class ForgejoConfig:
    """Forgejo (destination) configuration."""
    url: str
    token: str
    user: Optional[str] = None
    organization: Optional[str] = None

    @property
    def api_url(self) -> str:
        return f"{self.url}/api/v1"

    @property
    def owner(self) -> str:
        """Owner of created mirrors; the organization wins over the user."""
        return self.organization or self.user or ""


@dataclass(frozen=True)
class FilterConfig:
    """Repository selection rules."""
    include_private: bool = False
    include_forks: bool = False
    only_names: FrozenSet[str] = field(default_factory=frozenset)
    exclude_names: FrozenSet[str] = field(default_factory=frozenset)


@dataclass
class MirrorBehaviorConfig:
    """Run behavior configuration."""
    dry_run: bool = False
    cleanup_orphans: bool = False
    sync_existing: bool = False
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_s: float = DEFAULT_TIMEOUT_S
    verbose: bool = False


@dataclass
class Config:
    """Main configuration for GitHub-to-Forgejo mirroring."""
    github: GitHubConfig
    forgejo: ForgejoConfig
    filters: FilterConfig
    behavior: MirrorBehaviorConfig
