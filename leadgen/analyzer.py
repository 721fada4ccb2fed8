"""Website quality analysis.

Classifies a business website so leads can be ranked by how much they need
web services:

- none: no website at all (score 100)
- broken: errors, timeouts, DNS or SSL failures (score 85-95)
- poor: many issues (HTML score >= 50)
- outdated: some issues (HTML score 25-49)
- good: few or no issues
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone

import requests

from leadgen.http import RequestManager
from leadgen.models import WebsiteAnalysis, utc_now_iso
from leadgen.utils import normalize_url

logger = logging.getLogger("leadgen.analyzer")

COPYRIGHT_PATTERN = re.compile(r"copyright\s*(?:&copy;|©|&#169;)?\s*(\d{4})", re.IGNORECASE)
CONTACT_FORM_PATTERN = re.compile(r"type=[\"']email[\"']|<form.*contact|contact.*form", re.IGNORECASE)

SOCIAL_PATTERNS = [
    (re.compile(r"facebook\.com", re.IGNORECASE), "Facebook"),
    (re.compile(r"twitter\.com|x\.com", re.IGNORECASE), "Twitter/X"),
    (re.compile(r"instagram\.com", re.IGNORECASE), "Instagram"),
    (re.compile(r"linkedin\.com", re.IGNORECASE), "LinkedIn"),
    (re.compile(r"youtube\.com", re.IGNORECASE), "YouTube"),
]

TECHNOLOGY_PATTERNS = [
    (re.compile(r"wordpress|wp-content", re.IGNORECASE), "WordPress"),
    (re.compile(r"wix\.com", re.IGNORECASE), "Wix"),
    (re.compile(r"squarespace", re.IGNORECASE), "Squarespace"),
    (re.compile(r"shopify", re.IGNORECASE), "Shopify"),
    (re.compile(r"react|__NEXT_DATA__|next\.js", re.IGNORECASE), "React/Next.js"),
    (re.compile(r"vue\.js|nuxt", re.IGNORECASE), "Vue/Nuxt"),
    (re.compile(r"bootstrap", re.IGNORECASE), "Bootstrap"),
    (re.compile(r"tailwind", re.IGNORECASE), "Tailwind CSS"),
    (re.compile(r"jquery", re.IGNORECASE), "jQuery"),
]
MODERN_TECHNOLOGIES = {"React/Next.js", "Vue/Nuxt", "Tailwind CSS"}

NO_WEBSITE_ISSUE = "No website detected - highest priority for web services"
GOOD_CONDITION_ISSUE = "Website appears to be in good condition"


class WebsiteAnalyzer:
    def __init__(self, request_manager: RequestManager, current_year: int | None = None) -> None:
        self.request_manager = request_manager
        self.current_year = current_year

    def analyze(self, url: str | None) -> WebsiteAnalysis:
        now = utc_now_iso()
        if not url:
            return WebsiteAnalysis(status="none", score=100, issues=[NO_WEBSITE_ISSUE], has_ssl=False, analyzed_at=now)

        normalized = normalize_url(url)
        https = normalized.startswith("https")
        started = time.monotonic()
        try:
            response = self.request_manager.fetch(normalized)
        except requests.Timeout:
            return self._broken(normalized, 85, "Website takes too long to load (>10 seconds)", https, now)
        except requests.exceptions.SSLError:
            return self._broken(normalized, 85, "SSL certificate error - security issue", False, now)
        except requests.ConnectionError as exc:
            message = str(exc)
            if "NameResolutionError" in message or "getaddrinfo" in message or "Name or service not known" in message:
                return self._broken(normalized, 95, "Domain not found or DNS error - website does not exist", False, now)
            return self._broken(normalized, 85, "Website unreachable or connection error", https, now)
        except requests.RequestException as exc:
            logger.debug("request to %s failed: %s", normalized, exc)
            return self._broken(normalized, 85, "Website unreachable or connection error", https, now)

        load_time = int((time.monotonic() - started) * 1000)
        if response.status_code >= 400:
            analysis = self._broken(
                normalized, 90, f"Website returns {response.status_code} error - needs replacement", https, now
            )
            analysis.load_time = load_time
            return analysis

        analysis = analyze_html(response.text, normalized, load_time, self.current_year)
        analysis.analyzed_at = now
        analysis.url = normalized
        return analysis

    @staticmethod
    def _broken(url: str, score: int, issue: str, has_ssl: bool, now: str) -> WebsiteAnalysis:
        return WebsiteAnalysis(status="broken", score=score, issues=[issue], has_ssl=has_ssl, analyzed_at=now, url=url)


def analyze_html(html: str, url: str, load_time: int, current_year: int | None = None) -> WebsiteAnalysis:
    """Score page HTML for quality problems; a higher score means a worse site."""
    if current_year is None:
        current_year = datetime.now(timezone.utc).year
    issues: list[str] = []
    score = 0

    has_ssl = url.startswith("https")
    if not has_ssl:
        issues.append("No SSL certificate (HTTP only) - security risk")
        score += 20

    copyright_match = COPYRIGHT_PATTERN.search(html)
    copyright_year = int(copyright_match.group(1)) if copyright_match else None
    if copyright_year and copyright_year < current_year - 2:
        issues.append(f"Copyright shows {copyright_year} - website likely outdated")
        score += 30

    mobile_responsive = "viewport" in html or "@media" in html or "responsive" in html
    if not mobile_responsive:
        issues.append("Not mobile responsive - poor mobile experience")
        score += 25

    uses_table_layout = len(re.findall(r"<table", html, re.IGNORECASE)) > 5
    uses_legacy_tags = bool(re.search(r"<font\s|<frame|<frameset|<marquee", html, re.IGNORECASE))
    if uses_legacy_tags:
        issues.append("Uses very outdated HTML (font tags/frames/marquee)")
        score += 30
    elif uses_table_layout:
        issues.append("Uses table-based layout - outdated design approach")
        score += 15

    if load_time > 8000:
        issues.append(f"Very slow load time: {load_time / 1000:.1f}s")
        score += 20
    elif load_time > 5000:
        issues.append(f"Slow load time: {load_time / 1000:.1f}s")
        score += 10

    if not re.search(r"<title[^>]*>[^<]+</title>", html, re.IGNORECASE):
        issues.append("Missing page title - poor SEO")
        score += 10
    if not re.search(r"meta.*name=[\"']description[\"']", html, re.IGNORECASE):
        issues.append("Missing meta description - poor SEO")
        score += 5
    if not re.search(r"<h1[^>]*>", html, re.IGNORECASE):
        issues.append("Missing H1 heading - poor SEO structure")
        score += 5

    has_contact_form = bool(CONTACT_FORM_PATTERN.search(html))
    social_links = [label for pattern, label in SOCIAL_PATTERNS if pattern.search(html)]
    technologies = [label for pattern, label in TECHNOLOGY_PATTERNS if pattern.search(html)]

    if re.search(r"\.swf|<embed.*flash|<object.*flash", html, re.IGNORECASE):
        issues.append("Uses Flash content - completely obsolete")
        score += 25

    if MODERN_TECHNOLOGIES.intersection(technologies):
        score = max(0, score - 15)

    # 100 is reserved for businesses with no website
    score = min(score, 80)

    if score >= 50:
        status = "poor"
    elif score >= 25:
        status = "outdated"
    else:
        status = "good"

    return WebsiteAnalysis(
        status=status,
        score=score,
        issues=issues or [GOOD_CONDITION_ISSUE],
        last_updated=str(copyright_year) if copyright_year else None,
        technologies=technologies or None,
        has_ssl=has_ssl,
        load_time=load_time,
        mobile_responsive=mobile_responsive,
        has_contact_form=has_contact_form,
        social_links=social_links or None,
    )


def get_website_priority(analysis: WebsiteAnalysis) -> str:
    if analysis.status in {"none", "broken", "poor"}:
        return "high"
    if analysis.status == "outdated":
        return "medium"
    return "low"


def format_analysis(analysis: WebsiteAnalysis, business_name: str | None = None) -> str:
    name = business_name or "Business"
    priority = get_website_priority(analysis)
    lines = [
        f"{name}",
        f"Status: {analysis.status.upper()} | Score: {analysis.score}/100 | Priority: {priority.upper()}",
    ]
    if analysis.issues:
        lines.append("Issues:")
        lines.extend(f"  - {issue}" for issue in analysis.issues)
    if analysis.technologies:
        lines.append(f"Tech: {', '.join(analysis.technologies)}")
    return "\n".join(lines)
