from __future__ import annotations

import os
from pathlib import Path

import yaml

DEFAULT_API_KEY_ENV = {
    "serpapi": "SERPAPI_KEY",
    "tavily": "TAVILY_API_KEY",
}

MIN_LEADS = 5
MAX_LEADS = 50


def _require_field(section: dict, key: str, section_name: str) -> None:
    if key not in section:
        raise ValueError(f"Missing required field '{section_name}.{key}'")


def _ensure_bool(section: dict, key: str, section_name: str) -> None:
    if key in section and not isinstance(section[key], bool):
        raise ValueError(f"Field '{section_name}.{key}' must be a boolean")


def _ensure_mapping(section: dict, key: str, section_name: str) -> None:
    if key in section and not isinstance(section[key], dict):
        raise ValueError(f"Field '{section_name}.{key}' must be a mapping")


def _ensure_positive_int(section: dict, key: str, section_name: str) -> None:
    if key in section:
        value = section[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"Field '{section_name}.{key}' must be a positive integer")


def validate_lead_count(count: int) -> None:
    if not MIN_LEADS <= count <= MAX_LEADS:
        raise ValueError(f"number_of_leads must be between {MIN_LEADS} and {MAX_LEADS}")


def _validate(config: dict) -> None:
    for top_level in ["providers", "output"]:
        if top_level not in config:
            raise ValueError(f"Missing required top-level section '{top_level}'")
    for optional in ["search", "pipeline", "http"]:
        _ensure_mapping(config, optional, "config")

    providers = config["providers"]
    if not isinstance(providers, dict):
        raise ValueError("providers must be a mapping")
    for name in DEFAULT_API_KEY_ENV:
        _ensure_mapping(providers, name, "providers")
    if not any(name in providers for name in DEFAULT_API_KEY_ENV):
        raise ValueError("providers must configure at least one of: serpapi, tavily")

    search = config.get("search", {})
    _ensure_bool(search, "analyze_websites", "search")
    _ensure_bool(search, "needs_website_only", "search")
    _ensure_positive_int(search, "number_of_leads", "search")
    if "number_of_leads" in search:
        validate_lead_count(search["number_of_leads"])

    _ensure_positive_int(config.get("pipeline", {}), "batch_size", "pipeline")
    _ensure_positive_int(config.get("http", {}), "timeout_seconds", "http")

    output = config["output"]
    if not isinstance(output, dict):
        raise ValueError("output must be a mapping")
    for output_key in ["csv", "artifact", "summary"]:
        _require_field(output, output_key, "output")
        _ensure_mapping(output, output_key, "output")


def _resolve_api_key(provider_cfg: dict, default_env: str) -> str:
    if provider_cfg.get("api_key"):
        return str(provider_cfg["api_key"])
    return os.environ.get(provider_cfg.get("api_key_env", default_env), "")


def _apply_defaults(config: dict) -> dict:
    providers = config["providers"]
    for name, env_name in DEFAULT_API_KEY_ENV.items():
        provider_cfg = providers.setdefault(name, {})
        provider_cfg.setdefault("api_key_env", env_name)
        provider_cfg["api_key"] = _resolve_api_key(provider_cfg, env_name)

    search = config.setdefault("search", {})
    search.setdefault("number_of_leads", 20)
    search.setdefault("analyze_websites", True)
    search.setdefault("needs_website_only", False)

    config.setdefault("pipeline", {})
    config["pipeline"].setdefault("batch_size", 5)

    config.setdefault("http", {})
    config["http"].setdefault("timeout_seconds", 10)

    output = config["output"]
    output["csv"].setdefault("enabled", True)
    output["csv"].setdefault("path", "output/leads.csv")
    output["artifact"].setdefault("enabled", True)
    output["artifact"].setdefault("dir", "output/projects")
    output.setdefault("report", {})
    output["report"].setdefault("path", "output/last-run-report.md")
    output["summary"].setdefault("enabled", True)
    output["summary"].setdefault("mode", "stdout")

    return config


def load_config(path: str = "config/leads.yaml") -> dict:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with config_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}

    if not isinstance(loaded, dict):
        raise ValueError("Top-level config must be a YAML mapping")

    _validate(loaded)
    return _apply_defaults(loaded)
