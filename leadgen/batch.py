from __future__ import annotations

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Sequence

from leadgen.enricher import Enricher
from leadgen.models import BusinessCandidate, IdealCustomerProfile, Lead, LeadBatchResult, SearchSummary
from leadgen.scorer import QUALIFIED_SCORE

logger = logging.getLogger("leadgen.batch")

DEFAULT_BATCH_SIZE = 5

ProgressCallback = Callable[[int, int], None]


async def run_batch(
    candidates: Sequence[BusinessCandidate],
    icp: IdealCustomerProfile,
    analyze_websites: bool = True,
    desired_count: int = 20,
    *,
    enricher: Enricher | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: ProgressCallback | None = None,
) -> LeadBatchResult:
    """Enrich up to ``desired_count`` candidates and rank them by score.

    Candidates are enriched in fixed-size batches: everything inside a batch
    runs concurrently and the next batch starts only once the previous one
    has finished. A candidate whose enrichment raises is logged and left out
    of the result without affecting the rest of its batch. Leads come back
    sorted by score, highest first, keeping input order on ties.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    enricher = enricher or Enricher()
    selected = list(candidates[: max(0, min(len(candidates), desired_count))])

    enriched: list[Lead] = []
    failed = 0
    for start in range(0, len(selected), batch_size):
        batch = selected[start : start + batch_size]
        outcomes = await asyncio.gather(
            *(enricher.enrich(candidate, icp, analyze_websites) for candidate in batch),
            return_exceptions=True,
        )
        for candidate, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failed += 1
                logger.warning("enrichment failed for %s: %s", candidate.name, outcome)
                continue
            enriched.append(outcome)
        if on_progress is not None:
            on_progress(start + len(batch), len(selected))

    # sorted() is stable, including with reverse=True
    ranked = sorted(enriched, key=lambda lead: lead.score, reverse=True)
    summary = summarize(ranked, total_found=len(candidates))
    summary.failed = failed
    return LeadBatchResult(leads=ranked, summary=summary)


def summarize(leads: Sequence[Lead], total_found: int) -> SearchSummary:
    top_industries: list[str] = []
    for lead in leads:
        if lead.industry not in top_industries:
            top_industries.append(lead.industry)
        if len(top_industries) == 3:
            break

    avg_score: float = 0
    if leads:
        mean = sum(lead.score for lead in leads) / len(leads)
        avg_score = float(Decimal(str(mean)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    return SearchSummary(
        total_found=total_found,
        qualified=sum(1 for lead in leads if lead.score >= QUALIFIED_SCORE),
        returned=len(leads),
        top_industries=top_industries,
        avg_score=avg_score,
    )
