from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from leadgen.analyzer import WebsiteAnalyzer
from leadgen.batch import run_batch
from leadgen.config import load_config, validate_lead_count
from leadgen.deduplicator import Deduplicator
from leadgen.enricher import Enricher
from leadgen.http import RequestManager
from leadgen.models import IdealCustomerProfile, LeadBatchResult
from leadgen.outputs.artifact import write_leads_artifact
from leadgen.outputs.csv_writer import write_leads_csv
from leadgen.outputs.report import format_leads_for_chat, generate_markdown_report
from leadgen.outputs.summary import build_summary_message, emit_summary
from leadgen.sources import FallbackSearch, SerpApiSource, TavilySource, likely_needs_website

logger = logging.getLogger("leadgen.run")

NO_BUSINESSES_ERROR = "No businesses found for the given category and location."


def build_search(config: dict, request_manager: RequestManager) -> FallbackSearch:
    providers = config["providers"]
    return FallbackSearch(
        SerpApiSource(request_manager, api_key=providers["serpapi"]["api_key"]),
        TavilySource(request_manager, api_key=providers["tavily"]["api_key"]),
    )


def run_pipeline(
    config_path: str = "config/leads.yaml",
    category: str | None = None,
    location: str | None = None,
    number_of_leads: int | None = None,
    analyze_websites: bool | None = None,
    project_id: str = "default",
    dry_run: bool = False,
    search: FallbackSearch | None = None,
    enricher: Enricher | None = None,
) -> dict:
    config = load_config(config_path)
    search_cfg = config["search"]

    category = (category or search_cfg.get("category") or "").strip()
    location = (location or search_cfg.get("location") or "").strip()
    if not category or not location:
        raise ValueError("Both a category and a location are required")
    number_of_leads = number_of_leads if number_of_leads is not None else int(search_cfg["number_of_leads"])
    validate_lead_count(number_of_leads)
    if analyze_websites is None:
        analyze_websites = bool(search_cfg["analyze_websites"])

    request_manager = RequestManager(timeout_seconds=int(config["http"]["timeout_seconds"]))
    search = search or build_search(config, request_manager)
    enricher = enricher or Enricher(WebsiteAnalyzer(request_manager))
    icp = IdealCustomerProfile.for_search(category, location)

    console = Console()
    started_at = datetime.now(timezone.utc)
    try:
        logger.info("searching for %s in %s", category, location)
        businesses = search.search(f"{category} near {location}", location, limit=number_of_leads * 2)
        if search_cfg.get("needs_website_only"):
            businesses = [business for business in businesses if likely_needs_website(business)]
        businesses, duplicates = Deduplicator().split_unique(businesses)
        if duplicates:
            logger.info("dropped %d duplicate businesses", len(duplicates))

        if not businesses:
            return {"success": False, "error": NO_BUSINESSES_ERROR}

        logger.info("found %d businesses, enriching", len(businesses))
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), transient=True) as progress:
            task = progress.add_task("Enriching and scoring leads", total=min(len(businesses), number_of_leads))
            result = asyncio.run(
                run_batch(
                    businesses,
                    icp,
                    analyze_websites,
                    number_of_leads,
                    enricher=enricher,
                    batch_size=int(config["pipeline"]["batch_size"]),
                    on_progress=lambda done, total: progress.update(task, completed=done),
                )
            )
    except Exception as exc:  # noqa: BLE001
        logger.error("lead generation failed: %s", exc)
        return {"success": False, "error": str(exc)}

    output_cfg = config["output"]
    if not dry_run:
        if output_cfg["csv"].get("enabled", True):
            write_leads_csv(output_cfg["csv"]["path"], result.leads)
        if output_cfg["artifact"].get("enabled", True):
            path = write_leads_artifact(output_cfg["artifact"]["dir"], project_id, result, icp, category, location)
            logger.info("saved leads artifact with %d leads to %s", len(result.leads), path)

    ended_at = datetime.now(timezone.utc)
    generate_markdown_report(
        output_path=output_cfg["report"]["path"],
        started_at=started_at,
        ended_at=ended_at,
        search_criteria=f"{category} in {location}",
        result=result,
    )

    summary_cfg = output_cfg["summary"]
    if summary_cfg.get("enabled", True):
        summary = emit_summary(summary_cfg.get("mode", "stdout"), summary_cfg.get("discord_webhook", ""), location, result)
    else:
        summary = build_summary_message(location, result)

    _print_run_table(console, result)

    return {
        "success": True,
        "leads": result.leads,
        "summary": summary,
        "chat_output": format_leads_for_chat(result.leads),
        "result": result,
    }


def _print_run_table(console: Console, result: LeadBatchResult) -> None:
    table = Table(title="Lead Generation Run Summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    summary = result.summary
    table.add_row("Found", str(summary.total_found))
    table.add_row("Returned", str(summary.returned))
    table.add_row("Qualified (50+)", str(summary.qualified))
    table.add_row("High Priority", str(len(result.high_priority_leads())))
    table.add_row("Failed", str(summary.failed))
    table.add_row("Average Score", str(summary.avg_score))
    table.add_row("Top Industries", ", ".join(summary.top_industries))

    console.print(table)
