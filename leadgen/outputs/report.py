from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from leadgen.models import WEBSITE_STATUSES, Lead, LeadBatchResult
from leadgen.scorer import band


def _fmt_rating(lead: Lead) -> str:
    return f"rating {lead.rating:g}" if lead.rating is not None else ""


def _issues(lead: Lead, count: int = 2) -> str:
    issues = lead.website_analysis.issues if lead.website_analysis else []
    return ", ".join(issues[:count])


def format_leads_for_chat(leads: list[Lead]) -> str:
    groups: dict[str, list[Lead]] = {status: [] for status in WEBSITE_STATUSES}
    for lead in leads:
        if lead.website_status in groups:
            groups[lead.website_status].append(lead)

    lines = ["## Website Analysis Results", ""]

    if groups["none"]:
        lines.append(f"### HIGH PRIORITY - No Website ({len(groups['none'])})")
        for lead in groups["none"]:
            lines.append(f"- **{lead.company_name}** - No online presence detected")
            lines.append(f"  Score: {lead.score}/100 | {lead.phone or 'No phone'} | {_fmt_rating(lead)}".rstrip(" |"))
        lines.append("")

    for status, title in (("broken", "Broken Websites"), ("poor", "Poor Quality")):
        if not groups[status]:
            continue
        lines.append(f"### HIGH PRIORITY - {title} ({len(groups[status])})")
        for lead in groups[status]:
            lines.append(f"- **{lead.company_name}** - {lead.website}")
            lines.append(f"  Issues: {_issues(lead)}")
            lines.append(f"  Score: {lead.score}/100")
        lines.append("")

    if groups["outdated"]:
        lines.append(f"### MEDIUM PRIORITY - Outdated ({len(groups['outdated'])})")
        for lead in groups["outdated"]:
            last_update = lead.website_analysis.last_updated or "Unknown"
            lines.append(f"- **{lead.company_name}** - Last updated: {last_update}")
            lines.append(f"  Score: {lead.score}/100")
        lines.append("")

    if groups["good"]:
        lines.append(f"### LOW PRIORITY - Good Websites ({len(groups['good'])})")
        for lead in groups["good"]:
            lines.append(f"- **{lead.company_name}** - Website in good condition")
            lines.append(f"  Score: {lead.score}/100")
        lines.append("")

    high = len(groups["none"]) + len(groups["broken"]) + len(groups["poor"])
    lines.extend(
        [
            "---",
            f"**Total leads analyzed:** {len(leads)}",
            f"**High priority (no site/broken/poor):** {high}",
            f"**Medium priority (outdated):** {len(groups['outdated'])}",
        ]
    )
    return "\n".join(lines) + "\n"


def generate_markdown_report(
    output_path: str,
    started_at: datetime,
    ended_at: datetime,
    search_criteria: str,
    result: LeadBatchResult,
) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    duration = (ended_at - started_at).total_seconds()
    summary = result.summary
    bands = [band(lead.score) for lead in result.leads]

    lines = [
        "# Lead Generation Last Run Report",
        "",
        f"Run timestamp: {ended_at.astimezone(timezone.utc).isoformat()}",
        f"Duration seconds: {duration:.2f}",
        f"Search: {search_criteria}",
        "",
        "## Summary",
        "",
        f"- Found: {summary.total_found}",
        f"- Returned: {summary.returned}",
        f"- Qualified (50+): {summary.qualified}",
        f"- Failed enrichments: {summary.failed}",
        f"- Average score: {summary.avg_score}",
        f"- Top industries: {', '.join(summary.top_industries) or 'none'}",
        "",
        "## Score Distribution",
        "",
        f"- High (70-100): {bands.count('High')}",
        f"- Medium (50-69): {bands.count('Medium')}",
        f"- Low (0-49): {bands.count('Low')}",
        "",
        "## Top 5 Leads",
        "",
        "| Company | Score | Priority | Pain Point |",
        "|---|---:|---|---|",
    ]

    for lead in result.leads[:5]:
        pain = (lead.pain_points[0] if lead.pain_points else "").replace("|", " ")[:120]
        lines.append(f"| {lead.company_name.replace('|', ' ')} | {lead.score} | {lead.priority} | {pain} |")

    lines.extend(["", format_leads_for_chat(result.leads)])
    path.write_text("\n".join(lines), encoding="utf-8")
