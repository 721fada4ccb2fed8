from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any

import requests

API_KEY_PATTERN = re.compile(r"(api_key=)[^&\s)]+")

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; BusinessAnalyzer/1.0; +http://example.com/bot)",
    "Accept": "text/html,application/xhtml+xml",
}
FETCH_CHUNK_BYTES = 16384


@dataclass
class FetchedPage:
    status_code: int
    text: str


@dataclass
class RequestManager:
    timeout_seconds: int = 10
    max_retries: int = 3
    backoff_seconds: tuple[int, int, int] = (2, 4, 8)

    def get_json(self, url: str, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None) -> dict:
        response = self._request("GET", url, params=params, headers=headers)
        return response.json()

    def post_json(self, url: str, payload: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
        response = self._request("POST", url, json=payload, headers=headers)
        return response.json()

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchedPage:
        """Single GET without retries or status checks.

        ``timeout_seconds`` bounds the whole call, body download included;
        ``requests`` alone only bounds each connect and read. Connection,
        timeout and SSL errors propagate as ``requests`` exceptions so callers
        can classify them.
        """
        deadline = time.monotonic() + self.timeout_seconds
        response = requests.get(
            url,
            timeout=self.timeout_seconds,
            headers=headers or BROWSER_HEADERS,
            allow_redirects=True,
            stream=True,
        )
        try:
            chunks: list[bytes] = []
            for chunk in response.iter_content(chunk_size=FETCH_CHUNK_BYTES):
                if time.monotonic() > deadline:
                    raise requests.Timeout(f"{url} exceeded {self.timeout_seconds}s total")
                chunks.append(chunk)
            body = b"".join(chunks)
        finally:
            response.close()
        try:
            text = body.decode(response.encoding or "utf-8", errors="replace")
        except LookupError:
            text = body.decode("utf-8", errors="replace")
        return FetchedPage(status_code=response.status_code, text=text)

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        last_error: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                if method == "GET":
                    resp = requests.get(url, timeout=self.timeout_seconds, **kwargs)
                elif method == "POST":
                    resp = requests.post(url, timeout=self.timeout_seconds, **kwargs)
                else:
                    resp = requests.request(method, url, timeout=self.timeout_seconds, **kwargs)
                if resp.status_code in {429, 500, 502, 503, 504}:
                    raise requests.HTTPError(f"retryable status {resp.status_code}", response=resp)
                resp.raise_for_status()
                return resp
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                if isinstance(exc, requests.ConnectionError) and "NameResolutionError" in str(exc):
                    break
                if attempt >= self.max_retries - 1:
                    break
                delay = self.backoff_seconds[min(attempt, len(self.backoff_seconds) - 1)]
                time.sleep(delay)
        raise RuntimeError(redact(f"Request failed after retries: {url} ({last_error})"))


def redact(text: str) -> str:
    return API_KEY_PATTERN.sub(r"\1REDACTED", text)
