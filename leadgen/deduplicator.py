from __future__ import annotations

from leadgen.models import BusinessCandidate


def candidate_key(candidate: BusinessCandidate) -> str:
    """Place id when the provider gave one, else the lower-cased name and address."""
    if candidate.place_id:
        return f"id:{candidate.place_id}"
    name = candidate.name.strip().lower()
    address = (candidate.address or "").strip().lower()
    return f"name:{name}|{address}"


class Deduplicator:
    def __init__(self) -> None:
        self.seen_keys: set[str] = set()

    def split_unique(self, candidates: list[BusinessCandidate]) -> tuple[list[BusinessCandidate], list[BusinessCandidate]]:
        unique: list[BusinessCandidate] = []
        duplicates: list[BusinessCandidate] = []

        # Website domains are shared by chains and directory pages, so they never identify a place.
        for candidate in candidates:
            key = candidate_key(candidate)
            if key in self.seen_keys:
                duplicates.append(candidate)
                continue
            self.seen_keys.add(key)
            unique.append(candidate)

        return unique, duplicates
