"""
Tests for the command-line entry point.
"""

import logging
import sqlite3

import pytest

import run
from core.logging import LOGGER_NAMESPACE


@pytest.fixture(autouse=True)
def reset_app_logger():
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_empty_evidence_runs_both_pipelines(tmp_path, evidence_root, capsys):
    case = tmp_path / "case01"

    code = run.main([str(evidence_root), "--case", str(case), "--config-dir", str(tmp_path)])

    assert code == 0
    out = capsys.readouterr().out
    assert "[1] INFO RecentActivity: Started evidence" in out
    assert "[2] INFO RecentActivity: Finished evidence - No errors reported" in out
    assert "[3] INFO RecentActivity: evidence - Browser Results" in out
    assert "[4] INFO Exif Parser: Started evidence" in out
    assert (case / "findings.sqlite").exists()
    assert (case / "logs" / "ingest.log").exists()


def test_missing_evidence(tmp_path):
    code = run.main([str(tmp_path / "nope"), "--case", str(tmp_path / "case"), "--config-dir", str(tmp_path)])
    assert code == 2


def test_single_pipeline_writes_findings(tmp_path, evidence_root, capsys):
    profile = evidence_root / "Users/bob/AppData/Local/Google/Chrome/User Data/Default"
    profile.mkdir(parents=True)
    conn = sqlite3.connect(profile / "History")
    conn.executescript("""
        CREATE TABLE urls (id INTEGER PRIMARY KEY, url TEXT, title TEXT);
        CREATE TABLE visits (id INTEGER PRIMARY KEY, url INTEGER, visit_time INTEGER);
        INSERT INTO urls VALUES (1, 'https://www.bing.com/search?q=case+law', 'case law');
        INSERT INTO visits VALUES (1, 1, 13350000000000000);
    """)
    conn.close()
    case = tmp_path / "case"

    code = run.main([
        str(evidence_root), "--case", str(case), "--config-dir", str(tmp_path),
        "--pipeline", "recent_activity", "--name", "laptop",
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "Exif Parser" not in out
    assert "Started laptop" in out
    with sqlite3.connect(case / "findings.sqlite") as findings:
        types = {row[0] for row in findings.execute("SELECT artifact_type FROM artifacts")}
    assert types == {"web_history", "web_search_query"}


def test_config_disables_extractor(tmp_path, evidence_root, capsys):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.yml").write_text(
        "ingest:\n  pipeline_name: Triage\n  disabled_extractors: [chrome]\n", encoding="utf-8"
    )

    code = run.main([str(evidence_root), "--case", str(tmp_path / "case"), "--config-dir", str(tmp_path),
                     "--pipeline", "recent_activity"])

    assert code == 0
    out = capsys.readouterr().out
    assert "[1] INFO Triage: Started evidence" in out
