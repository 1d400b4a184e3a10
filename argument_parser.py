#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Mapping, Optional

from config import (DEFAULT_CONCURRENCY, DEFAULT_GITHUB_API_URL,
                    DEFAULT_TIMEOUT_S, VERSION, Config, FilterConfig,
                    ForgejoConfig, GitHubConfig, MirrorBehaviorConfig)
from errors import ConfigError
from logging_utils import Logger
from security import SecurityValidator
from utils import parse_name_list

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_MISSING_ARGUMENTS = 2


class MissingCredentialError(ConfigError):
    """A required token, user or URL was not provided."""


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() == "true"


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="github-forgejo-mirror",
        description="Mirror GitHub repositories to a Forgejo instance via API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --github-user octocat --forgejo-url https://git.example.com \\
           --forgejo-user octocat
  %(prog)s --dry-run --include-private --exclude dotfiles,scratch
  %(prog)s --organization mirrors --only api,web --concurrent 5
  %(prog)s --cleanup --sync-existing --verbose

Tokens and users can also be supplied through GITHUB_TOKEN, GITHUB_USER,
FORGEJO_URL, FORGEJO_TOKEN, FORGEJO_USER and FORGEJO_ORG.
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s version {VERSION}",
    )
    return parser


def _add_github_arguments(parser: argparse.ArgumentParser) -> None:
    """Add GitHub-related arguments to parser."""
    parser.add_argument(
        "--github-token",
        dest="github_token",
        help="GitHub personal access token (or set GITHUB_TOKEN env var)",
    )
    parser.add_argument(
        "--github-user",
        dest="github_user",
        help="GitHub username (or set GITHUB_USER env var)",
    )
    parser.add_argument(
        "--github-api",
        dest="github_api_url",
        help=f"Base URL of the GitHub API (default: {DEFAULT_GITHUB_API_URL})",
    )


def _add_forgejo_arguments(parser: argparse.ArgumentParser) -> None:
    """Add Forgejo-related arguments to parser."""
    parser.add_argument(
        "--forgejo-url",
        dest="forgejo_url",
        help="Forgejo instance URL (or set FORGEJO_URL env var)",
    )
    parser.add_argument(
        "--forgejo-token",
        dest="forgejo_token",
        help="Forgejo access token (or set FORGEJO_TOKEN env var)",
    )
    parser.add_argument(
        "--forgejo-user",
        dest="forgejo_user",
        help="Forgejo username owning the mirrors (or set FORGEJO_USER env var)",
    )
    parser.add_argument(
        "--organization",
        dest="organization",
        help="Forgejo organization owning the mirrors (or set FORGEJO_ORG env var)",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add filter and behavior arguments to parser."""
    parser.add_argument(
        "--include-private",
        action="store_true",
        default=None,
        dest="include_private",
        help="Include private repositories (or INCLUDE_PRIVATE=true)",
    )
    parser.add_argument(
        "--include-forks",
        action="store_true",
        default=None,
        dest="include_forks",
        help="Include forked repositories (or INCLUDE_FORKS=true)",
    )
    parser.add_argument(
        "--only",
        dest="only",
        help="Comma-separated list of repos to migrate, ignoring other filters "
        "(or ONLY_REPOS)",
    )
    parser.add_argument(
        "--exclude",
        dest="exclude",
        help="Comma-separated list of repos to exclude (or EXCLUDE_REPOS)",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Show what would be done without making changes",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        dest="cleanup_orphans",
        help="Report Forgejo mirrors that no longer exist on GitHub",
    )
    parser.add_argument(
        "--sync-existing",
        action="store_true",
        dest="sync_existing",
        help="Trigger a mirror sync for repositories that already exist",
    )
    parser.add_argument(
        "--concurrent",
        dest="concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Number of concurrent migrations (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout_s",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        dest="verbose",
        help="Enable verbose logging",
    )


def _require(value: Optional[str], message: str) -> str:
    if not value:
        raise MissingCredentialError(message)
    return value


def _build_github_config(args, environ: Mapping[str, str]) -> GitHubConfig:
    token = _require(
        args.github_token or environ.get("GITHUB_TOKEN"),
        "GitHub token is required (--github-token or GITHUB_TOKEN)",
    )
    user = _require(
        args.github_user or environ.get("GITHUB_USER"),
        "GitHub username is required (--github-user or GITHUB_USER)",
    )
    api_url = (
        args.github_api_url or environ.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL
    )
    try:
        return GitHubConfig(
            token=token,
            user=SecurityValidator.validate_username(user),
            api_url=SecurityValidator.validate_url(api_url, ["https", "http"]),
        )
    except ValueError as e:
        raise ConfigError(f"invalid github configuration: {e}") from e


def _build_forgejo_config(args, environ: Mapping[str, str]) -> ForgejoConfig:
    url = _require(
        args.forgejo_url or environ.get("FORGEJO_URL"),
        "Forgejo URL is required (--forgejo-url or FORGEJO_URL)",
    )
    token = _require(
        args.forgejo_token or environ.get("FORGEJO_TOKEN"),
        "Forgejo token is required (--forgejo-token or FORGEJO_TOKEN)",
    )
    user = args.forgejo_user or environ.get("FORGEJO_USER") or None
    organization = args.organization or environ.get("FORGEJO_ORG") or None
    if not user and not organization:
        raise MissingCredentialError(
            "Either Forgejo user or organization is required "
            "(--forgejo-user/FORGEJO_USER or --organization/FORGEJO_ORG)"
        )
    try:
        return ForgejoConfig(
            url=SecurityValidator.validate_url(url, ["https", "http"]),
            token=token,
            user=SecurityValidator.validate_username(user) if user else None,
            organization=(
                SecurityValidator.validate_username(organization)
                if organization
                else None
            ),
        )
    except ValueError as e:
        raise ConfigError(f"invalid forgejo configuration: {e}") from e


def _build_filter_config(args, environ: Mapping[str, str]) -> FilterConfig:
    include_private = args.include_private
    if include_private is None:
        include_private = _env_flag(environ, "INCLUDE_PRIVATE")
    include_forks = args.include_forks
    if include_forks is None:
        include_forks = _env_flag(environ, "INCLUDE_FORKS")

    only = args.only if args.only is not None else environ.get("ONLY_REPOS")
    exclude = args.exclude if args.exclude is not None else environ.get("EXCLUDE_REPOS")
    return FilterConfig(
        include_private=include_private,
        include_forks=include_forks,
        only_names=parse_name_list(only),
        exclude_names=parse_name_list(exclude),
    )


def _build_behavior_config(args) -> MirrorBehaviorConfig:
    if args.concurrency < 1:
        raise ConfigError(f"concurrency must be at least 1, got {args.concurrency}")
    if args.timeout_s <= 0 or args.timeout_s > 600:
        raise ConfigError("timeout must be between 0 and 600 seconds")
    return MirrorBehaviorConfig(
        dry_run=args.dry_run,
        cleanup_orphans=args.cleanup_orphans,
        sync_existing=args.sync_existing,
        concurrency=args.concurrency,
        timeout_s=float(args.timeout_s),
        verbose=args.verbose,
    )


def build_config(args, environ: Mapping[str, str]) -> Config:
    """Combine parsed flags with environment variables into a Config.

    Flags win over environment variables. Raises ConfigError (or its
    MissingCredentialError subclass) when a value is absent or invalid.
    """
    return Config(
        github=_build_github_config(args, environ),
        forgejo=_build_forgejo_config(args, environ),
        filters=_build_filter_config(args, environ),
        behavior=_build_behavior_config(args),
    )


def parse_arguments(argv: Optional[List[str]] = None) -> Config:
    """Parse command line arguments and return configuration object."""
    parser = _create_argument_parser()
    _add_github_arguments(parser)
    _add_forgejo_arguments(parser)
    _add_behavior_arguments(parser)

    args = parser.parse_args(argv)

    try:
        cfg = build_config(args, os.environ)
    except MissingCredentialError as e:
        Logger.error(f"error: {e}")
        sys.exit(EXIT_AUTH_ERROR)
    except ConfigError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        Logger.error(f"configuration validation error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)

    Logger.security_event(
        "CONFIG_VALIDATION", "successfully validated all configuration inputs"
    )
    return cfg
