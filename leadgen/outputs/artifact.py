from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

from leadgen.models import IdealCustomerProfile, LeadBatchResult, utc_now_iso

logger = logging.getLogger("leadgen.outputs.artifact")

ARTIFACT_TYPE = "leads"
ARTIFACT_VERSION = 1


def artifact_path(base_dir: str, project_id: str) -> Path:
    return Path(base_dir) / project_id / f"{ARTIFACT_TYPE}.json"


def write_leads_artifact(
    base_dir: str,
    project_id: str,
    result: LeadBatchResult,
    icp: IdealCustomerProfile,
    category: str,
    location: str,
) -> Path:
    path = artifact_path(base_dir, project_id)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "project_id": project_id,
        "type": ARTIFACT_TYPE,
        "version": ARTIFACT_VERSION,
        "updated_at": utc_now_iso(),
        "data": {
            "leads": [lead.to_dict() for lead in result.leads],
            "ideal_customer_profile": icp.to_dict(),
            "search_criteria": f"{category} in {location}",
            "search_summary": asdict(result.summary),
            "icp_insights": result.insights(category),
        },
    }
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def load_leads_artifact(base_dir: str, project_id: str) -> dict | None:
    path = artifact_path(base_dir, project_id)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("unreadable leads artifact %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        return None
    return data
