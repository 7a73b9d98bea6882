"""
HTTP Client Utilities
=====================

Provides the raw-content HTTP client used by the remote source resolver.
"""

from .client import RawContentClient

__all__ = [
    "RawContentClient",
]
