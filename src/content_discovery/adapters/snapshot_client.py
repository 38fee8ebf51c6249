"""In-memory repository client backed by a node snapshot.

Used for offline operation and tests. A snapshot file is a JSON array of
node objects::

    [
        {"path": "/content/mysite/en/homepage", "title": "Homepage"},
        {"path": "/content/mysite/de/de/ueber-uns", "title": "Ueber Uns", "active": false}
    ]

Ancestor paths that are not listed explicitly are implied and exist as
untitled folders.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path

import orjson

from content_discovery.adapters.repository import AbstractRepositoryClient, RepositoryNode
from content_discovery.domain.errors import RepositoryError, RepositoryErrorKind


logger = logging.getLogger(__name__)


class SnapshotRepositoryClient(AbstractRepositoryClient):
    """Serves the repository interface from a fixed set of nodes."""

    def __init__(self, nodes: Iterable[RepositoryNode]) -> None:
        self._nodes: dict[str, RepositoryNode] = {}
        for node in nodes:
            self._nodes[_clean(node.path)] = node
        self._known_paths: set[str] = {"/"}
        for path in self._nodes:
            self._known_paths.update(_ancestors_and_self(path))

    @classmethod
    def from_json_file(cls, snapshot_path: Path) -> SnapshotRepositoryClient:
        """Load a snapshot written as a JSON array of node objects."""
        payload = orjson.loads(Path(snapshot_path).read_bytes())
        if not isinstance(payload, list):
            raise ValueError(f"Snapshot {snapshot_path} must contain a JSON array of nodes")
        nodes = [RepositoryNode.model_validate(item) for item in payload]
        logger.info("Loaded %d nodes from snapshot %s", len(nodes), snapshot_path)
        return cls(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    async def exists(self, path: str, include_inactive: bool = True) -> bool:
        path = _clean(path)
        if path not in self._known_paths:
            return False
        if include_inactive:
            return True
        return self._is_visible(path)

    async def list_children(self, path: str, depth: int, include_inactive: bool) -> list[RepositoryNode]:
        root = _clean(path)
        if root not in self._known_paths:
            raise RepositoryError(RepositoryErrorKind.NOT_FOUND, root, f"No node at {root}")

        prefix = "/" if root == "/" else root + "/"
        root_depth = _depth(root)
        children: list[RepositoryNode] = []
        for candidate in sorted(self._known_paths):
            if candidate == root or not candidate.startswith(prefix):
                continue
            if _depth(candidate) - root_depth > depth:
                continue
            if not include_inactive and not self._is_visible(candidate):
                continue
            children.append(self._node_for(candidate))
        return children

    async def get_locales(self, path: str) -> set[str]:
        children = await self.list_children(path, depth=1, include_inactive=True)
        return {child.name for child in children}

    def _node_for(self, path: str) -> RepositoryNode:
        node = self._nodes.get(path)
        if node is not None:
            return node
        name = path.rsplit("/", 1)[-1]
        return RepositoryNode(path=path, title=name, node_type="sling:Folder")

    def _is_visible(self, path: str) -> bool:
        for ancestor in _ancestors_and_self(path):
            node = self._nodes.get(ancestor)
            if node is not None and not node.active:
                return False
        return True


def _clean(path: str) -> str:
    return path.rstrip("/") or "/"


def _depth(path: str) -> int:
    return len([segment for segment in path.split("/") if segment])


def _ancestors_and_self(path: str) -> list[str]:
    segments = [segment for segment in path.split("/") if segment]
    return ["/" + "/".join(segments[: i + 1]) for i in range(len(segments))]
