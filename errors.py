#!/usr/bin/env python3
"""Exception types for github-forgejo-mirror."""


class MirrorError(Exception):
    """Base class for all errors raised by the mirror tool."""


class ConfigError(MirrorError):
    """Missing or invalid configuration; raised before any network call."""


class NetworkError(MirrorError):
    """Transport failure or unexpected HTTP status from GitHub or Forgejo."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(NetworkError):
    """Response body could not be decoded into the expected records."""
