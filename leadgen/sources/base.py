from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from leadgen.http import RequestManager
from leadgen.models import BusinessCandidate


class BusinessSource(ABC):
    def __init__(self, name: str, request_manager: RequestManager, api_key: str = "") -> None:
        self.name = name
        self.request_manager = request_manager
        self.api_key = api_key
        self.logger = logging.getLogger(f"leadgen.sources.{name}")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def search(self, query: str, location: str, limit: int = 20) -> list[BusinessCandidate]:
        raise NotImplementedError

    def safe_search(self, query: str, location: str, limit: int = 20) -> list[BusinessCandidate]:
        try:
            return self.search(query, location, limit)
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("source failed: %s", exc)
            return []


def likely_needs_website(candidate: BusinessCandidate) -> bool:
    if not candidate.website:
        return True
    if candidate.review_count is not None and candidate.review_count < 20:
        return True
    if candidate.rating is not None and candidate.rating < 4.0:
        return True
    return False
