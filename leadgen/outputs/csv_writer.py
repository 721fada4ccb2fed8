from __future__ import annotations

import csv
from pathlib import Path

from leadgen.models import Lead

HEADERS = [
    "Date Found",
    "Company",
    "Industry",
    "Website",
    "Phone",
    "Address",
    "Rating",
    "Reviews",
    "Website Status",
    "Score",
    "Priority",
    "Status",
    "Pain Points",
    "Suggested Angle",
]


def write_leads_csv(path: str, leads: list[Lead]) -> None:
    # each search replaces the previous lead list
    csv_path = Path(path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    with csv_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADERS)
        for lead in leads:
            writer.writerow(lead.to_row())


def read_leads_csv(path: str) -> list[dict[str, str]]:
    csv_path = Path(path)
    if not csv_path.exists():
        return []
    with csv_path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        return list(reader)
