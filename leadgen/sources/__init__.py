from __future__ import annotations

import logging

from leadgen.models import BusinessCandidate
from leadgen.sources.base import BusinessSource, likely_needs_website
from leadgen.sources.serpapi import SerpApiSource
from leadgen.sources.tavily import TavilySource

logger = logging.getLogger("leadgen.sources")

__all__ = [
    "BusinessSource",
    "FallbackSearch",
    "SerpApiSource",
    "TavilySource",
    "likely_needs_website",
]


class FallbackSearch:
    """Search the primary provider, switching to the fallback when it is unconfigured or fails."""

    def __init__(self, primary: BusinessSource, fallback: BusinessSource | None = None) -> None:
        self.primary = primary
        self.fallback = fallback

    def search(self, query: str, location: str, limit: int = 20) -> list[BusinessCandidate]:
        if self.primary.configured:
            try:
                return self.primary.search(query, location, limit)
            except Exception as exc:  # noqa: BLE001
                logger.warning("%s search failed, falling back: %s", self.primary.name, exc)
        else:
            logger.warning("%s has no API key, falling back", self.primary.name)

        if self.fallback is None:
            return []
        return self.fallback.safe_search(query, location, limit)
