import asyncio

import pytest

from leadgen.batch import run_batch, summarize
from leadgen.enricher import Enricher
from leadgen.models import BusinessCandidate, IdealCustomerProfile, Lead, WebsiteAnalysis

ICP = IdealCustomerProfile(target_industries=("diner",), target_location="Austin, TX")


def _diner(name: str, business_type: str = "Diner") -> BusinessCandidate:
    # not analyzed 15 + low rating 15 + industry 12 + phone 8 = 50
    return BusinessCandidate(name=name, place_id=name, rating=3.0, phone="555-0000", business_type=business_type)


def _plain(name: str) -> BusinessCandidate:
    # not analyzed 15 only
    return BusinessCandidate(name=name, place_id=name, business_type="Bakery")


class TrackingEnricher(Enricher):
    def __init__(self) -> None:
        super().__init__()
        self.active = 0
        self.peak = 0
        self.started: list[str] = []

    async def enrich(self, candidate, icp, analyze_websites=True):
        self.started.append(candidate.name)
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return await super().enrich(candidate, icp, analyze_websites)


class FailingEnricher(Enricher):
    async def enrich(self, candidate, icp, analyze_websites=True):
        if candidate.name == "Bad":
            raise ValueError("malformed business record")
        return await super().enrich(candidate, icp, analyze_websites)


class FlakyAnalyzer:
    def analyze(self, url):
        if url == "broken.example":
            raise RuntimeError("analyzer timeout")
        return WebsiteAnalysis(status="good", score=5, issues=["Website appears to be in good condition"])


def _run(candidates, desired_count=20, **kwargs):
    return asyncio.run(run_batch(candidates, ICP, False, desired_count, **kwargs))


def test_run_batch_truncates_to_desired_count() -> None:
    candidates = [_plain(f"Shop {n}") for n in range(8)]

    result = _run(candidates, desired_count=5)

    assert len(result.leads) == 5
    assert [lead.company_name for lead in result.leads] == [f"Shop {n}" for n in range(5)]
    assert result.summary.total_found == 8
    assert result.summary.returned == 5


def test_run_batch_fewer_candidates_than_desired() -> None:
    result = _run([_plain("Only")], desired_count=20)

    assert len(result.leads) == 1
    assert result.summary.avg_score == result.leads[0].score == 15


def test_run_batch_empty_input() -> None:
    result = _run([])

    assert result.leads == []
    assert result.summary.total_found == 0
    assert result.summary.returned == 0
    assert result.summary.avg_score == 0
    assert result.summary.top_industries == []


def test_run_batch_bounds_concurrency_to_batch_size() -> None:
    enricher = TrackingEnricher()
    progress: list[tuple[int, int]] = []
    candidates = [_plain(f"Shop {n}") for n in range(12)]

    _run(candidates, enricher=enricher, on_progress=lambda done, total: progress.append((done, total)))

    assert enricher.peak == 5
    assert enricher.started == [f"Shop {n}" for n in range(12)]
    assert progress == [(5, 12), (10, 12), (12, 12)]


def test_run_batch_custom_batch_size() -> None:
    enricher = TrackingEnricher()

    _run([_plain(f"Shop {n}") for n in range(7)], enricher=enricher, batch_size=2)

    assert enricher.peak == 2


def test_run_batch_rejects_zero_batch_size() -> None:
    with pytest.raises(ValueError):
        _run([_plain("Shop")], batch_size=0)


def test_run_batch_sorts_descending_and_keeps_ties_in_input_order() -> None:
    candidates = [_plain("Low"), _diner("A"), _plain("Low 2"), _diner("B")]

    result = _run(candidates)

    assert [lead.company_name for lead in result.leads] == ["A", "B", "Low", "Low 2"]
    assert [lead.score for lead in result.leads] == [50, 50, 15, 15]


def test_run_batch_ties_stay_stable_across_batches() -> None:
    candidates = [_diner(f"Diner {n}") for n in range(9)]

    result = _run(candidates, batch_size=3)

    assert [lead.company_name for lead in result.leads] == [f"Diner {n}" for n in range(9)]


def test_run_batch_summary_statistics() -> None:
    candidates = [
        _plain("Bread Co"),
        _diner("A", business_type="Diner"),
        _diner("B", business_type="Diner"),
        _diner("C", business_type="Family diner"),
    ]

    result = _run(candidates)
    summary = result.summary

    assert summary.qualified == 3
    assert summary.returned == 4
    assert summary.avg_score == 41.3
    assert summary.top_industries == ["Diner", "Family diner", "Bakery"]
    assert summary.failed == 0


def test_run_batch_isolates_enrichment_failures(caplog) -> None:
    candidates = [_plain("Good 1"), _plain("Bad"), _diner("Good 2"), _plain("Good 3"), _plain("Good 4")]

    result = _run(candidates, enricher=FailingEnricher())

    assert [lead.company_name for lead in result.leads] == ["Good 2", "Good 1", "Good 3", "Good 4"]
    assert result.summary.failed == 1
    assert result.summary.returned == 4
    assert "malformed business record" in caplog.text


def test_run_batch_analyzer_failure_scores_candidate_as_not_analyzed() -> None:
    candidates = [
        BusinessCandidate(name=f"Shop {n}", place_id=str(n), website=f"shop{n}.example") for n in range(4)
    ] + [BusinessCandidate(name="Broken", place_id="b", website="broken.example")]

    result = asyncio.run(run_batch(candidates, ICP, True, 20, enricher=Enricher(FlakyAnalyzer())))

    assert len(result.leads) == 5
    broken = next(lead for lead in result.leads if lead.company_name == "Broken")
    assert broken.website_analysis is None
    assert broken.priority == "medium"
    others = [lead for lead in result.leads if lead.company_name != "Broken"]
    assert all(lead.website_analysis is not None and lead.priority == "low" for lead in others)


def test_summarize_single_lead() -> None:
    lead = Lead(company_name="Solo", industry="Cafe", score=73)

    summary = summarize([lead], total_found=3)

    assert summary.avg_score == 73
    assert summary.qualified == 1
    assert summary.total_found == 3
    assert summary.top_industries == ["Cafe"]


def test_run_batch_default_enricher_analyzes_websites() -> None:
    candidates = [BusinessCandidate(name="No Site", place_id="n1")]

    result = asyncio.run(run_batch(candidates, ICP, True, 5))

    lead = result.leads[0]
    assert lead.website_analysis is not None
    assert lead.website_analysis.status == "none"
    assert lead.score_breakdown[0] == "No website (+40)"
    assert lead.priority == "high"
