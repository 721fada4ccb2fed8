from pathlib import Path

import pytest

from leadgen.config import load_config

VALID_CONFIG = """
search:
  category: restaurants
  location: Austin, TX
providers:
  serpapi:
    api_key_env: TEST_SERPAPI_KEY
  tavily:
    api_key: inline-tavily-key
output:
  csv:
    path: output/leads.csv
  artifact: {}
  summary:
    mode: stdout
"""


def test_load_config_valid(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TEST_SERPAPI_KEY", "env-serp-key")
    cfg_path = tmp_path / "leads.yaml"
    cfg_path.write_text(VALID_CONFIG, encoding="utf-8")

    config = load_config(str(cfg_path))

    assert config["search"]["location"] == "Austin, TX"
    assert config["search"]["number_of_leads"] == 20
    assert config["search"]["analyze_websites"] is True
    assert config["providers"]["serpapi"]["api_key"] == "env-serp-key"
    assert config["providers"]["tavily"]["api_key"] == "inline-tavily-key"
    assert config["pipeline"]["batch_size"] == 5
    assert config["http"]["timeout_seconds"] == 10
    assert config["output"]["artifact"]["dir"] == "output/projects"
    assert config["output"]["report"]["path"] == "output/last-run-report.md"


def test_load_config_missing_env_key_is_empty(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("TEST_SERPAPI_KEY", raising=False)
    cfg_path = tmp_path / "leads.yaml"
    cfg_path.write_text(VALID_CONFIG, encoding="utf-8")

    config = load_config(str(cfg_path))

    assert config["providers"]["serpapi"]["api_key"] == ""


def test_load_config_missing_required(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text("providers: {}\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(cfg_path))


@pytest.mark.parametrize(
    "replacement",
    [
        ("search:\n", "search:\n  number_of_leads: 80\n"),
        ("search:\n", "search:\n  analyze_websites: sometimes\n"),
        ("output:\n", "pipeline:\n  batch_size: 0\noutput:\n"),
    ],
)
def test_load_config_rejects_bad_values(tmp_path: Path, replacement) -> None:
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text(VALID_CONFIG.replace(*replacement), encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(cfg_path))


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))
