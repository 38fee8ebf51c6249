"""Repository client abstractions.

Defines the capability interface the search engine consumes from the backing
content repository, following the Repository Pattern. Concrete clients
translate transport failures into ``RepositoryError`` values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
import logging

from pydantic import BaseModel, ConfigDict


logger = logging.getLogger(__name__)


class RepositoryNode(BaseModel):
    """A node returned by a child listing."""

    model_config = ConfigDict(frozen=True)

    path: str
    title: str
    last_modified: datetime | None = None
    node_type: str = "cq:Page"
    active: bool = True

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]


class AbstractRepositoryClient(ABC):
    """Abstract client for a hierarchical content repository.

    Implementations may talk HTTP, read a snapshot, or anything else; the
    search engine only relies on these three capabilities.
    """

    @abstractmethod
    async def exists(self, path: str, include_inactive: bool = True) -> bool:
        """Cheap existence probe for ``path``.

        Args:
            path: Absolute repository path
            include_inactive: When False, inactive (deactivated) nodes count as missing

        Raises:
            RepositoryError: On transport or permission failures
        """
        raise NotImplementedError

    @abstractmethod
    async def list_children(self, path: str, depth: int, include_inactive: bool) -> list[RepositoryNode]:
        """List descendants of ``path`` up to ``depth`` levels, excluding ``path`` itself.

        Raises:
            RepositoryError: On transport or permission failures
        """
        raise NotImplementedError

    async def get_locales(self, path: str) -> set[str]:
        """Optional hook returning locale codes available beneath ``path``.

        Clients that cannot enumerate locales leave this unimplemented and
        callers fall back to their configured defaults.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Optional hook for releasing transport resources."""

        return
