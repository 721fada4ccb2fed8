from __future__ import annotations

import time

from leadgen.models import BusinessCandidate
from leadgen.sources.base import BusinessSource
from leadgen.utils import extract_phone, unwrap_redirect

TAVILY_URL = "https://api.tavily.com/search"


class TavilySource(BusinessSource):
    """Web search fallback. Results carry no ratings, reviews or structured address."""

    def __init__(self, request_manager, api_key: str = "") -> None:
        super().__init__("tavily", request_manager, api_key)

    def search(self, query: str, location: str, limit: int = 20) -> list[BusinessCandidate]:
        if not self.configured:
            raise RuntimeError("Tavily key is not configured")

        payload = self.request_manager.post_json(
            TAVILY_URL,
            {
                "api_key": self.api_key,
                "query": f"{query} {location} business contact phone address",
                "search_depth": "advanced",
                "max_results": limit,
                "include_answer": False,
            },
        )

        stamp = int(time.time() * 1000)
        candidates: list[BusinessCandidate] = []
        for index, result in enumerate(payload.get("results", [])):
            title = result.get("title") or ""
            candidates.append(
                BusinessCandidate(
                    name=title.split(" - ")[0].split(" | ")[0].strip(),
                    place_id=f"tavily-{index}-{stamp}",
                    address=location,
                    phone=extract_phone(result.get("content") or ""),
                    website=unwrap_redirect(result.get("url") or "") or None,
                )
            )

        self.logger.info("found %d businesses for '%s' in '%s'", len(candidates), query, location)
        return candidates
