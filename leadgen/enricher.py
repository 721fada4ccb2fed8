from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from leadgen.analyzer import WebsiteAnalyzer, get_website_priority
from leadgen.http import RequestManager
from leadgen.models import BusinessCandidate, IdealCustomerProfile, Lead, WebsiteAnalysis, utc_now_iso
from leadgen.scorer import calculate_lead_score

logger = logging.getLogger("leadgen.enricher")

NO_WEBSITE_PAIN = "No website - missing online presence"
BROKEN_WEBSITE_PAIN = "Website is broken or inaccessible"
DEFAULT_INDUSTRY = "Business"


class Analyzer(Protocol):
    def analyze(self, url: str | None) -> WebsiteAnalysis: ...


class Enricher:
    def __init__(self, analyzer: Analyzer | None = None) -> None:
        self.analyzer = analyzer or WebsiteAnalyzer(RequestManager())

    async def enrich(
        self,
        candidate: BusinessCandidate,
        icp: IdealCustomerProfile,
        analyze_websites: bool = True,
    ) -> Lead:
        website_analysis = await self._analyze(candidate) if analyze_websites else None

        result = calculate_lead_score(candidate, website_analysis, icp)
        now = utc_now_iso()

        return Lead(
            company_name=candidate.name,
            industry=candidate.business_type or icp.target_industries[0] or DEFAULT_INDUSTRY,
            place_id=candidate.place_id,
            website=candidate.website,
            phone=candidate.phone,
            address=candidate.address,
            rating=candidate.rating,
            review_count=candidate.review_count,
            coordinates=candidate.coordinates,
            thumbnail=candidate.thumbnail,
            website_analysis=website_analysis,
            score=result.score,
            score_breakdown=result.breakdown,
            icp_score=(result.score + 5) // 10,
            icp_match_reasons=result.breakdown[:3],
            pain_points=derive_pain_points(website_analysis),
            suggested_angle=suggest_angle(candidate.name, website_analysis),
            status="new",
            priority=get_website_priority(website_analysis) if website_analysis else "medium",
            created_at=now,
            updated_at=now,
        )

    async def _analyze(self, candidate: BusinessCandidate) -> WebsiteAnalysis | None:
        try:
            return await asyncio.to_thread(self.analyzer.analyze, candidate.website)
        except Exception as exc:  # noqa: BLE001
            logger.warning("website analysis failed for %s, scoring as not analyzed: %s", candidate.name, exc)
            return None


def derive_pain_points(analysis: WebsiteAnalysis | None) -> list[str]:
    if analysis is None:
        return []
    if analysis.status == "none":
        return [NO_WEBSITE_PAIN]
    if analysis.status == "broken":
        return [BROKEN_WEBSITE_PAIN]
    return list(analysis.issues[:3])


def suggest_angle(business_name: str, analysis: WebsiteAnalysis | None) -> str:
    status = analysis.status if analysis else None
    if status == "none":
        return f"\"Hi, I noticed {business_name} doesn't have a website yet. I built a concept for you...\""
    if status == "broken":
        return "\"I tried visiting your website and noticed it's not loading. I'd love to help fix that...\""
    if status in {"poor", "outdated"}:
        main_issue = analysis.issues[0] if analysis.issues else "could use an update"
        return f"\"I noticed your website {main_issue.lower()}. I have some ideas to improve it...\""
    return f"\"I was impressed by {business_name}. I help businesses like yours grow online...\""
