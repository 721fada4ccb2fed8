from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

WEBSITE_STATUSES = ("none", "broken", "poor", "outdated", "good")
LEAD_STATUSES = ("new", "contacted", "responded", "closed", "lost")
PRIORITIES = ("low", "medium", "high")

DEFAULT_ICP_PAIN_POINTS = ("Needs website improvement", "Missing online presence")
DEFAULT_SOLUTION_TYPE = "web design"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class BusinessCandidate:
    name: str
    place_id: str = ""
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    rating: float | None = None
    review_count: int | None = None
    business_type: str | None = None
    thumbnail: str | None = None
    coordinates: Coordinates | None = None


@dataclass
class WebsiteAnalysis:
    status: str
    score: int
    issues: list[str] = field(default_factory=list)
    last_updated: str | None = None
    technologies: list[str] | None = None
    has_ssl: bool | None = None
    load_time: int | None = None
    mobile_responsive: bool | None = None
    has_contact_form: bool | None = None
    social_links: list[str] | None = None
    analyzed_at: str = ""
    url: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class IdealCustomerProfile:
    target_industries: tuple[str, ...]
    target_location: str
    pain_points: tuple[str, ...] = DEFAULT_ICP_PAIN_POINTS
    solution_type: str = DEFAULT_SOLUTION_TYPE

    def __post_init__(self) -> None:
        if not self.target_industries:
            raise ValueError("IdealCustomerProfile.target_industries must not be empty")

    @classmethod
    def for_search(cls, category: str, location: str) -> "IdealCustomerProfile":
        return cls(target_industries=(category,), target_location=location)

    def to_dict(self) -> dict:
        return {
            "industries": list(self.target_industries),
            "location": self.target_location,
            "company_size": "small-medium",
            "pain_points": list(self.pain_points),
            "solution_type": self.solution_type,
            "budget": "Varies",
        }


@dataclass
class ScoreFactors:
    website_opportunity: int = 0
    business_signals: int = 0
    icp_match: int = 0
    contact_availability: int = 0

    @property
    def total(self) -> int:
        return self.website_opportunity + self.business_signals + self.icp_match + self.contact_availability


@dataclass
class ScoreResult:
    score: int
    factors: ScoreFactors
    breakdown: list[str]


@dataclass
class Lead:
    company_name: str
    industry: str
    place_id: str = ""
    website: str | None = None
    phone: str | None = None
    address: str | None = None
    rating: float | None = None
    review_count: int | None = None
    coordinates: Coordinates | None = None
    thumbnail: str | None = None
    website_analysis: WebsiteAnalysis | None = None
    score: int = 0
    score_breakdown: list[str] = field(default_factory=list)
    icp_score: int = 0
    icp_match_reasons: list[str] = field(default_factory=list)
    pain_points: list[str] = field(default_factory=list)
    suggested_angle: str = ""
    status: str = "new"
    priority: str = "medium"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = ""

    def __post_init__(self) -> None:
        if self.status not in LEAD_STATUSES:
            raise ValueError(f"Unknown lead status '{self.status}'")
        if self.priority not in PRIORITIES:
            raise ValueError(f"Unknown lead priority '{self.priority}'")
        if not self.updated_at:
            self.updated_at = self.created_at

    @property
    def website_status(self) -> str | None:
        return self.website_analysis.status if self.website_analysis else None

    def to_dict(self) -> dict:
        return asdict(self)

    def to_row(self) -> list[str | int | float]:
        return [
            self.created_at[:10],
            self.company_name,
            self.industry,
            self.website or "",
            self.phone or "",
            self.address or "",
            "" if self.rating is None else self.rating,
            "" if self.review_count is None else self.review_count,
            self.website_status or "not analyzed",
            self.score,
            self.priority,
            self.status,
            "; ".join(self.pain_points),
            self.suggested_angle,
        ]


@dataclass
class SearchSummary:
    total_found: int = 0
    qualified: int = 0
    returned: int = 0
    failed: int = 0
    top_industries: list[str] = field(default_factory=list)
    avg_score: float = 0


@dataclass
class LeadBatchResult:
    leads: list[Lead]
    summary: SearchSummary

    def high_priority_leads(self) -> list[Lead]:
        return [lead for lead in self.leads if lead.website_status in {"none", "broken", "poor"}]

    def insights(self, category: str) -> dict[str, str]:
        hot = sum(1 for lead in self.leads if lead.score >= 70)
        first_pain = ""
        if self.leads and self.leads[0].pain_points:
            first_pain = self.leads[0].pain_points[0]
        return {
            "strongest_vertical": category,
            "common_pain_point": first_pain or "Needs online presence",
            "recommended_focus": f"Focus on {hot} high-priority leads first",
        }
