"""Read-only repository client over the Sling JSON servlet.

Listing ``/content/site.3.json`` returns the node tree three levels deep,
with properties inline and child nodes as nested objects. Page titles live
in the ``jcr:content`` child, which costs one extra level of depth.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

import httpx
import orjson

from content_discovery.adapters.repository import AbstractRepositoryClient, RepositoryNode
from content_discovery.domain.errors import RepositoryError, RepositoryErrorKind


logger = logging.getLogger(__name__)

CONTENT_NODE = "jcr:content"
_SKIPPED_CHILD_PREFIXES = ("rep:", "oak:")
_TITLE_PROPERTIES = ("jcr:title", "dc:title", "pageTitle")
_MODIFIED_PROPERTIES = ("cq:lastModified", "jcr:lastModified", "jcr:created")
_DATE_FORMATS = ("%a %b %d %Y %H:%M:%S GMT%z", "%Y-%m-%dT%H:%M:%S.%f%z")


class SlingRepositoryClient(AbstractRepositoryClient):
    """Async HTTP client that reads the repository through ``.json`` selectors."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            follow_redirects=True,
            headers={"Accept": "application/json", **(headers or {})},
            transport=transport,
        )

    async def __aenter__(self) -> SlingRepositoryClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def exists(self, path: str, include_inactive: bool = True) -> bool:
        if include_inactive:
            response = await self._request("HEAD", f"{path}.json", path)
            if response.status_code == 404:
                return False
            _raise_for_status(response, path)
            return True

        # Replication status lives on jcr:content, so an inactive check needs the payload
        response = await self._request("GET", f"{path}.1.json", path)
        if response.status_code == 404:
            return False
        _raise_for_status(response, path)
        return _is_active(_decode(response, path))

    async def list_children(self, path: str, depth: int, include_inactive: bool) -> list[RepositoryNode]:
        response = await self._request("GET", f"{path}.{depth + 1}.json", path)
        _raise_for_status(response, path)
        tree = _decode(response, path)
        nodes: list[RepositoryNode] = []
        _flatten(tree, path.rstrip("/"), 1, depth, include_inactive, nodes)
        logger.debug("Listed %d nodes under %s (depth=%d)", len(nodes), path, depth)
        return nodes

    async def get_locales(self, path: str) -> set[str]:
        children = await self.list_children(path, depth=1, include_inactive=True)
        return {child.name for child in children}

    async def _request(self, method: str, url: str, path: str) -> httpx.Response:
        try:
            return await self._client.request(method, url)
        except httpx.TimeoutException as exc:
            raise RepositoryError(RepositoryErrorKind.TIMEOUT, path, f"{method} {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise RepositoryError(RepositoryErrorKind.UNKNOWN, path, f"{method} {url} failed: {exc}") from exc


def _raise_for_status(response: httpx.Response, path: str) -> None:
    status = response.status_code
    if status < 400:
        return
    if status == 404:
        kind = RepositoryErrorKind.NOT_FOUND
    elif status in (401, 403):
        kind = RepositoryErrorKind.ACCESS_DENIED
    else:
        kind = RepositoryErrorKind.UNKNOWN
    raise RepositoryError(kind, path, f"HTTP {status} for {response.request.url}")


def _decode(response: httpx.Response, path: str) -> dict[str, Any]:
    try:
        payload = orjson.loads(response.content)
    except orjson.JSONDecodeError as exc:
        raise RepositoryError(RepositoryErrorKind.UNKNOWN, path, f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise RepositoryError(RepositoryErrorKind.UNKNOWN, path, "Expected a JSON object")
    return payload


def _flatten(
    tree: dict[str, Any],
    parent_path: str,
    level: int,
    max_depth: int,
    include_inactive: bool,
    out: list[RepositoryNode],
) -> None:
    if level > max_depth:
        return
    for name, child in tree.items():
        if not isinstance(child, dict) or name == CONTENT_NODE or name.startswith(_SKIPPED_CHILD_PREFIXES):
            continue
        active = _is_active(child)
        if not active and not include_inactive:
            continue
        child_path = f"{parent_path}/{name}" if parent_path != "/" else f"/{name}"
        out.append(
            RepositoryNode(
                path=child_path,
                title=_title_of(child, name),
                last_modified=_last_modified_of(child),
                node_type=str(child.get("jcr:primaryType", "nt:unstructured")),
                active=active,
            )
        )
        _flatten(child, child_path, level + 1, max_depth, include_inactive, out)


def _properties(node: dict[str, Any]) -> dict[str, Any]:
    content = node.get(CONTENT_NODE)
    return content if isinstance(content, dict) else node


def _title_of(node: dict[str, Any], fallback: str) -> str:
    for source in (_properties(node), node):
        for key in _TITLE_PROPERTIES:
            value = source.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback


def _last_modified_of(node: dict[str, Any]) -> datetime | None:
    props = _properties(node)
    for key in _MODIFIED_PROPERTIES:
        value = props.get(key) or node.get(key)
        if isinstance(value, str):
            parsed = _parse_date(value)
            if parsed is not None:
                return parsed
    return None


def _parse_date(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _is_active(node: dict[str, Any]) -> bool:
    return _properties(node).get("cq:lastReplicationAction") != "Deactivate"
