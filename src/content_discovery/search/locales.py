"""Locale-aware path candidate generation.

Multi-locale sites keep the same logical page under several subtrees::

    /content/mysite/language-masters/en/...   (language masters)
    /content/mysite/us/en/...                 (country x language)
    /content/mysite/en/...                    (direct locale)

Given a base path, ``PathCandidateGenerator`` proposes the subtrees worth
searching. Every proposal except the base path itself is confirmed with a
cheap existence probe first, so no listing is wasted on a missing subtree.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
import logging

from pydantic import BaseModel, ConfigDict, Field

from content_discovery.adapters.repository import AbstractRepositoryClient
from content_discovery.domain.errors import RepositoryError
from content_discovery.domain.search import PathCandidate, PathSource
from content_discovery.search.fanout import gather_ordered


logger = logging.getLogger(__name__)

DEFAULT_LOCALES = ("en", "de", "fr", "es", "it", "ja", "zh")
DEFAULT_COUNTRIES = ("us", "gb", "ca", "de", "fr", "ch")
DEFAULT_LANGUAGES = ("en", "de", "fr")


class LocaleConfig(BaseModel):
    """Site-structure conventions used to derive locale subtrees.

    Attributes:
        language_masters_segment: Segment below the base path holding language masters
        default_locales: Locales assumed under language masters when the repository cannot list them
        countries: Country codes crossed with ``languages`` (``/us/en``, ``/ca/fr``, ...)
        languages: Language codes crossed with ``countries``
        direct_locales: Locales probed directly below the base path (``/en``, ``/de``, ...)
    """

    model_config = ConfigDict(frozen=True)

    language_masters_segment: str = "language-masters"
    default_locales: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCALES))
    countries: list[str] = Field(default_factory=lambda: list(DEFAULT_COUNTRIES))
    languages: list[str] = Field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    direct_locales: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCALES))


def join_path(base: str, *segments: str) -> str:
    """Join repository path segments without doubling slashes."""
    parts = [base.rstrip("/")] + [segment.strip("/") for segment in segments if segment.strip("/")]
    joined = "/".join(parts)
    return joined if joined.startswith("/") else "/" + joined


class PathCandidateGenerator:
    """Enumerates plausible locale subtrees beneath a base path.

    The generator holds no per-call state, so one instance can serve
    concurrent searches and be re-invoked with any base path.
    """

    def __init__(
        self,
        client: AbstractRepositoryClient,
        config: LocaleConfig | None = None,
        *,
        max_concurrency: int = 8,
        probe_timeout: float | None = None,
    ) -> None:
        self.client = client
        self.config = config or LocaleConfig()
        self.max_concurrency = max_concurrency
        self.probe_timeout = probe_timeout

    async def candidates(
        self,
        base_path: str,
        known_locales: Iterable[str] | None = None,
        include_inactive: bool = False,
    ) -> list[PathCandidate]:
        """Collect every candidate for ``base_path`` in generation order."""
        return [
            candidate
            async for candidate in self.iter_candidates(base_path, known_locales, include_inactive=include_inactive)
        ]

    async def iter_candidates(
        self,
        base_path: str,
        known_locales: Iterable[str] | None = None,
        include_inactive: bool = False,
    ) -> AsyncIterator[PathCandidate]:
        """Yield candidates lazily: as-given, language masters, country locales, direct locales."""
        base = base_path.rstrip("/") or "/"
        emitted = {base}
        yield PathCandidate(path=base, source=PathSource.AS_GIVEN)

        masters_root = join_path(base, self.config.language_masters_segment)
        if await self._probe(masters_root, include_inactive):
            locales, discovered = await self._master_locales(masters_root, known_locales)
            paths = _fresh([join_path(masters_root, locale) for locale in locales], emitted)
            if not (discovered and include_inactive):
                paths = await self._confirm(paths, include_inactive)
            for path in paths:
                emitted.add(path)
                yield PathCandidate(path=path, source=PathSource.LANGUAGE_MASTER)

        country_paths = _fresh(
            [
                join_path(base, country, language)
                for country in self.config.countries
                for language in self.config.languages
            ],
            emitted,
        )
        for path in await self._confirm(country_paths, include_inactive):
            emitted.add(path)
            yield PathCandidate(path=path, source=PathSource.COUNTRY_LOCALE)

        direct_paths = _fresh([join_path(base, locale) for locale in self.config.direct_locales], emitted)
        for path in await self._confirm(direct_paths, include_inactive):
            emitted.add(path)
            yield PathCandidate(path=path, source=PathSource.DIRECT_LOCALE)

    async def _master_locales(self, masters_root: str, known_locales: Iterable[str] | None) -> tuple[list[str], bool]:
        """Return (locales, discovered_from_repository)."""
        if known_locales is not None:
            return sorted(set(known_locales)), False
        try:
            discovered = await self._call(self.client.get_locales(masters_root))
        except NotImplementedError:
            return list(self.config.default_locales), False
        except (RepositoryError, asyncio.TimeoutError) as exc:
            logger.warning("Locale discovery failed under %s, using defaults: %s", masters_root, exc)
            return list(self.config.default_locales), False
        return sorted(discovered), True

    async def _confirm(self, paths: list[str], include_inactive: bool) -> list[str]:
        if not paths:
            return []
        outcomes = await gather_ordered(
            [lambda p=path: self.client.exists(p, include_inactive=include_inactive) for path in paths],
            max_concurrency=self.max_concurrency,
            timeout=self.probe_timeout,
        )
        confirmed = []
        for path, outcome in zip(paths, outcomes):
            if isinstance(outcome, Exception):
                logger.warning("Existence probe failed for %s: %r", path, outcome)
                continue
            if outcome:
                confirmed.append(path)
        return confirmed

    async def _probe(self, path: str, include_inactive: bool) -> bool:
        return bool(await self._confirm([path], include_inactive))

    async def _call(self, awaitable):
        if self.probe_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, self.probe_timeout)


def _fresh(paths: list[str], emitted: set[str]) -> list[str]:
    """Drop paths already emitted and duplicates, keeping first occurrence."""
    seen = set(emitted)
    fresh = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        fresh.append(path)
    return fresh
