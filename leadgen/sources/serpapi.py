from __future__ import annotations

from leadgen.models import BusinessCandidate, Coordinates
from leadgen.sources.base import BusinessSource

SERPAPI_URL = "https://serpapi.com/search"


class SerpApiSource(BusinessSource):
    """Google Maps local results through SerpAPI."""

    def __init__(self, request_manager, api_key: str = "") -> None:
        super().__init__("serpapi", request_manager, api_key)

    def search(self, query: str, location: str, limit: int = 20) -> list[BusinessCandidate]:
        if not self.configured:
            raise RuntimeError("SerpAPI key is not configured")

        params = {
            "engine": "google_maps",
            "q": f"{query} in {location}",
            "type": "search",
            "api_key": self.api_key,
            "hl": "en",
            "gl": "us",
        }
        payload = self.request_manager.get_json(SERPAPI_URL, params=params, headers={"Accept": "application/json"})
        if payload.get("error"):
            raise RuntimeError(f"SerpAPI error: {payload['error']}")

        results = payload.get("local_results") or []
        candidates = [_to_candidate(item) for item in results[:limit]]
        self.logger.info("found %d businesses for '%s' in '%s'", len(candidates), query, location)
        return candidates


def _to_candidate(item: dict) -> BusinessCandidate:
    gps = item.get("gps_coordinates")
    coordinates = None
    if gps:
        coordinates = Coordinates(latitude=float(gps["latitude"]), longitude=float(gps["longitude"]))

    rating = item.get("rating")
    reviews = item.get("reviews")
    return BusinessCandidate(
        name=item.get("title", ""),
        place_id=str(item.get("place_id", "")),
        address=item.get("address"),
        phone=item.get("phone"),
        website=item.get("website"),
        rating=float(rating) if rating is not None else None,
        review_count=int(reviews) if reviews is not None else None,
        business_type=item.get("type"),
        thumbnail=item.get("thumbnail"),
        coordinates=coordinates,
    )
