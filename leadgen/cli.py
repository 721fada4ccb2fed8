from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.table import Table

from leadgen.analyzer import WebsiteAnalyzer, format_analysis
from leadgen.http import RequestManager
from leadgen.outputs.artifact import load_leads_artifact
from leadgen.outputs.csv_writer import read_leads_csv
from leadgen.run import run_pipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leadgen", description="Local business lead generator")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Search, score and save leads")
    run_cmd.add_argument("--config", default="config/leads.yaml", help="Path to YAML config")
    run_cmd.add_argument("--category", default=None, help="Business category, e.g. restaurants")
    run_cmd.add_argument("--location", default=None, help="Location, e.g. 'Austin, TX'")
    run_cmd.add_argument("--count", type=int, default=None, help="Number of leads (5-50)")
    run_cmd.add_argument("--no-analyze", action="store_true", help="Skip website analysis")
    run_cmd.add_argument("--project-id", default="default", help="Project the leads artifact belongs to")
    run_cmd.add_argument("--dry-run", action="store_true", help="Run without writing csv/artifact")

    stats_cmd = sub.add_parser("stats", help="Show lead statistics")
    stats_cmd.add_argument("--config", default="config/leads.yaml", help="Path to YAML config")
    stats_cmd.add_argument("--project-id", default=None, help="Read the project's leads artifact instead of the CSV")

    export_cmd = sub.add_parser("export", help="Export leads from CSV")
    export_cmd.add_argument("--format", choices=["markdown"], default="markdown")
    export_cmd.add_argument("--csv-path", default="output/leads.csv")

    analyze_cmd = sub.add_parser("analyze", help="Analyze a single website")
    analyze_cmd.add_argument("url", nargs="?", default=None, help="Website URL (omit for a business with no site)")
    analyze_cmd.add_argument("--name", default=None, help="Business name for the report")
    analyze_cmd.add_argument("--timeout", type=int, default=10)

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    result = run_pipeline(
        config_path=args.config,
        category=args.category,
        location=args.location,
        number_of_leads=args.count,
        analyze_websites=False if args.no_analyze else None,
        project_id=args.project_id,
        dry_run=args.dry_run,
    )
    if not result["success"]:
        Console().print(f"[red]{result['error']}[/red]")
        return 1
    return 0


def cmd_stats(config_path: str, project_id: str | None) -> int:
    from leadgen.config import load_config

    cfg = load_config(config_path)
    table = Table(title="Lead Stats")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    if project_id:
        artifact = load_leads_artifact(cfg["output"]["artifact"]["dir"], project_id)
        if artifact is None:
            Console().print(f"No leads artifact for project {project_id}")
            return 1
        data = artifact["data"]
        summary = data.get("search_summary", {})
        table.add_row("Project", project_id)
        table.add_row("Search", data.get("search_criteria", ""))
        table.add_row("Found", str(summary.get("total_found", 0)))
        table.add_row("Returned", str(summary.get("returned", 0)))
        table.add_row("Qualified", str(summary.get("qualified", 0)))
        table.add_row("Average Score", str(summary.get("avg_score", 0)))
        table.add_row("Focus", data.get("icp_insights", {}).get("recommended_focus", ""))
        Console().print(table)
        return 0

    csv_path = cfg["output"]["csv"].get("path", "output/leads.csv")
    rows = read_leads_csv(csv_path)
    scores = [int(row.get("Score") or 0) for row in rows]
    table.add_row("CSV Path", csv_path)
    table.add_row("Total Leads", str(len(rows)))
    table.add_row("High (70+)", str(sum(1 for score in scores if score >= 70)))
    table.add_row("Medium (50-69)", str(sum(1 for score in scores if 50 <= score < 70)))
    table.add_row("Low (<50)", str(sum(1 for score in scores if score < 50)))
    Console().print(table)
    return 0


def cmd_export_markdown(csv_path: str) -> int:
    rows = read_leads_csv(csv_path)
    rows.sort(key=lambda row: int(row.get("Score") or 0), reverse=True)

    lines = [
        "| Company | Website | Phone | Website Status | Score | Priority | Suggested Angle |",
        "|---|---|---|---|---:|---|---|",
    ]
    for row in rows:
        lines.append(
            "| {company} | {website} | {phone} | {status} | {score} | {priority} | {angle} |".format(
                company=row.get("Company", "").replace("|", " "),
                website=row.get("Website", "").replace("|", " "),
                phone=row.get("Phone", "").replace("|", " "),
                status=row.get("Website Status", "").replace("|", " "),
                score=row.get("Score", "0"),
                priority=row.get("Priority", ""),
                angle=(row.get("Suggested Angle", "")[:140]).replace("|", " "),
            )
        )

    Console().print("\n".join(lines))
    return 0


def cmd_analyze(url: str | None, name: str | None, timeout: int) -> int:
    analyzer = WebsiteAnalyzer(RequestManager(timeout_seconds=timeout))
    analysis = analyzer.analyze(url)
    Console().print(format_analysis(analysis, name or url), markup=False)
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "run":
        raise SystemExit(cmd_run(args))

    if args.command == "stats":
        raise SystemExit(cmd_stats(args.config, args.project_id))

    if args.command == "export":
        raise SystemExit(cmd_export_markdown(args.csv_path))

    if args.command == "analyze":
        raise SystemExit(cmd_analyze(args.url, args.name, args.timeout))

    raise SystemExit(1)
