"""Adapters layer - repository client implementations.

Following Cosmic Python Chapter 2: Repository Pattern
Abstracts the content repository behind a small capability interface.
"""

from .repository import AbstractRepositoryClient, RepositoryNode
from .sling_client import SlingRepositoryClient
from .snapshot_client import SnapshotRepositoryClient


__all__ = [
    "AbstractRepositoryClient",
    "RepositoryNode",
    "SlingRepositoryClient",
    "SnapshotRepositoryClient",
]
