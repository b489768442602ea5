"""Chirp exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ChirpError(Exception):
    """Base exception for all Chirp failures."""


class ChirpConfigError(ChirpError):
    """Raised for invalid runtime configuration or write options."""


class ChirpFeedError(ChirpError):
    """Raised when the feed API cannot be reached or decoded."""


class ChirpStoreError(ChirpError):
    """Raised for document store connection, query, and insert failures."""


class ChirpDependencyError(ChirpError):
    """Raised when a driver library is missing."""
