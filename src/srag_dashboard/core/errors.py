"""
Ingestion exceptions.
"""

from __future__ import annotations


class SeedError(RuntimeError):
    """Base exception for ingestion failures."""


class SourceDownloadError(SeedError):
    """Raised when a remote extract cannot be downloaded."""


class DataDirectoryNotFound(SeedError, FileNotFoundError):
    """Raised when the local extract directory does not exist."""
