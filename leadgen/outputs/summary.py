from __future__ import annotations

import requests
from rich.console import Console

from leadgen.models import LeadBatchResult


def build_summary_message(location: str, result: LeadBatchResult) -> str:
    high = len(result.high_priority_leads())
    return (
        f"Found {result.summary.returned} leads in {location}. "
        f"{high} high-priority (no/broken/poor website). "
        f"Average opportunity score: {result.summary.avg_score}/100."
    )


def emit_summary(mode: str, webhook: str, location: str, result: LeadBatchResult) -> str:
    message = build_summary_message(location, result)

    if mode == "discord" and webhook:
        try:
            requests.post(webhook, json={"content": message}, timeout=8)
        except requests.RequestException:
            Console().print(message)
    else:
        Console().print(message)
    return message
