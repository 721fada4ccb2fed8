from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

PHONE_PATTERN = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")


def normalize_url(url: str) -> str:
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


def unwrap_redirect(url: str) -> str:
    """Return the target of a Google ``/url?q=`` redirect, or ``url`` unchanged."""
    if not url or "/url?q=" not in url:
        return url
    query = urlparse(url).query
    targets = parse_qs(query).get("q")
    return targets[0] if targets else url


def extract_phone(text: str) -> str | None:
    match = PHONE_PATTERN.search(text or "")
    return match.group(0) if match else None
