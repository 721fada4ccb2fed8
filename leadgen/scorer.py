from __future__ import annotations

from leadgen.models import BusinessCandidate, IdealCustomerProfile, ScoreFactors, ScoreResult, WebsiteAnalysis

WEBSITE_OPPORTUNITY_CAP = 40
BUSINESS_SIGNALS_CAP = 25
ICP_MATCH_CAP = 20
CONTACT_AVAILABILITY_CAP = 15
MAX_SCORE = 100

NOT_ANALYZED_POINTS = 15
QUALIFIED_SCORE = 50
HOT_SCORE = 70

# status -> (points, breakdown label)
WEBSITE_STATUS_POINTS = {
    "none": (40, "No website"),
    "broken": (35, "Broken website"),
    "poor": (30, "Poor quality website"),
    "outdated": (20, "Outdated website"),
    "good": (5, "Website exists"),
}


def _fmt_number(value: float) -> str:
    return f"{value:g}"


def _website_opportunity(analysis: WebsiteAnalysis | None, breakdown: list[str]) -> int:
    if analysis is None:
        breakdown.append(f"Website not analyzed (+{NOT_ANALYZED_POINTS})")
        return NOT_ANALYZED_POINTS

    points = 0
    if analysis.status in WEBSITE_STATUS_POINTS:
        points, label = WEBSITE_STATUS_POINTS[analysis.status]
        breakdown.append(f"{label} (+{points})")

    if len(analysis.issues) > 3:
        bonus = min((len(analysis.issues) - 3) * 2, 10)
        points = min(points + bonus, WEBSITE_OPPORTUNITY_CAP)
        if bonus > 0:
            breakdown.append(f"Multiple issues (+{bonus})")

    return min(points, WEBSITE_OPPORTUNITY_CAP)


def _business_signals(business: BusinessCandidate, breakdown: list[str]) -> int:
    points = 0

    # low rating = they need help
    if business.rating is not None:
        if business.rating < 3.5:
            points += 15
            breakdown.append(f"Low rating {_fmt_number(business.rating)} (+15)")
        elif business.rating < 4.0:
            points += 8
            breakdown.append(f"Moderate rating {_fmt_number(business.rating)} (+8)")
        elif business.rating >= 4.5:
            points += 3
            breakdown.append("Good rating - established business (+3)")

    # few reviews = newer business, more receptive
    if business.review_count is not None:
        if business.review_count < 10:
            points += 10
            breakdown.append(f"Few reviews ({business.review_count}) (+10)")
        elif business.review_count < 50:
            points += 5
            breakdown.append(f"Growing business ({business.review_count} reviews) (+5)")

    return min(points, BUSINESS_SIGNALS_CAP)


def _icp_match(business: BusinessCandidate, icp: IdealCustomerProfile, breakdown: list[str]) -> int:
    points = 0

    business_type = (business.business_type or business.name).lower()
    if any(industry.lower() in business_type for industry in icp.target_industries):
        points += 12
        breakdown.append("Industry match (+12)")

    city = icp.target_location.lower().split(",")[0]
    if business.address is not None and city in business.address.lower():
        points += 8
        breakdown.append("Location match (+8)")

    return min(points, ICP_MATCH_CAP)


def _contact_availability(business: BusinessCandidate, breakdown: list[str]) -> int:
    points = 0
    if business.phone:
        points += 8
        breakdown.append("Phone available (+8)")
    if business.website:
        points += 4
        breakdown.append("Website exists (+4)")
    # TODO: award the remaining 3 points once search providers return an email address.
    return min(points, CONTACT_AVAILABILITY_CAP)


def calculate_lead_score(
    business: BusinessCandidate,
    website_analysis: WebsiteAnalysis | None,
    icp: IdealCustomerProfile,
) -> ScoreResult:
    """Score a business 0-100 as a web-services opportunity.

    Four buckets are evaluated in a fixed order and each is capped on its
    own: website opportunity (40), business signals (25), ICP match (20)
    and contact availability (15). The breakdown lists every non-zero
    contribution in that same order.
    """
    breakdown: list[str] = []
    factors = ScoreFactors(
        website_opportunity=_website_opportunity(website_analysis, breakdown),
        business_signals=_business_signals(business, breakdown),
        icp_match=_icp_match(business, icp, breakdown),
        contact_availability=_contact_availability(business, breakdown),
    )
    score = max(0, min(MAX_SCORE, round(factors.total)))
    return ScoreResult(score=score, factors=factors, breakdown=breakdown)


def band(score: int) -> str:
    if score >= HOT_SCORE:
        return "High"
    if score >= QUALIFIED_SCORE:
        return "Medium"
    return "Low"
