#!/usr/bin/env python3
"""
Tests for the kill report command line tool.
"""

import json
import os
import sys

import openpyxl

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.tools.kill_report import KillReport, main

from test_matches import SAMPLE_LOG


def write_log(tmp_path, text=SAMPLE_LOG, name="games.log"):
    log_file = tmp_path / name
    log_file.write_text(text, encoding="utf-8")
    return str(log_file)


def tool_config(tmp_path, **report):
    return {
        "general": {"output_path": str(tmp_path / "output")},
        "report": report,
    }


def use_config(monkeypatch, config):
    monkeypatch.setattr(KillReport, "load_config", staticmethod(lambda profile=None: config))


def test_run_writes_json(tmp_path):
    tool = KillReport(tool_config(tmp_path))
    result = tool.run(write_log(tmp_path), output="report.json")

    assert result["success"]
    assert result["match_count"] == 2
    assert result["kill_count"] == 8
    assert result["lines_dropped"] == 3
    assert result["output_file"] == str(tmp_path / "output" / "report.json")

    with open(result["output_file"], encoding="utf-8") as f:
        data = json.load(f)
    assert data["match_kills"][1] == {"total_kills": 1, "players": ["Zeh"], "kills": {"Zeh": 1}}


def test_run_prints_json_without_output(tmp_path, capsys):
    KillReport(tool_config(tmp_path)).run(write_log(tmp_path))

    data = json.loads(capsys.readouterr().out)
    assert len(data["match_kills"]) == 2


def test_run_uses_report_config(tmp_path):
    tool = KillReport(tool_config(tmp_path, flush_trailing_match=True, missing_names="omit"))
    result = tool.run(write_log(tmp_path), output="report.json")

    with open(result["output_file"], encoding="utf-8") as f:
        data = json.load(f)
    assert result["match_count"] == 3
    assert data["match_kills"][2] == {"total_kills": 1, "players": [], "kills": {}}


def test_excel_export(tmp_path):
    tool = KillReport(tool_config(tmp_path))
    result = tool.run(write_log(tmp_path), output="report.json", excel=True)

    workbook = openpyxl.load_workbook(result["excel_file"])
    assert workbook.sheetnames == ["Kills", "Means"]

    kills = list(workbook["Kills"].iter_rows(values_only=True))
    assert kills[0] == ("match", "player", "kills")
    assert (2, "Zeh", 1) in kills

    means = list(workbook["Means"].iter_rows(values_only=True))
    assert (1, "MOD_TRIGGER_HURT", 3) in means


def test_crlf_and_invalid_utf8(tmp_path):
    log_file = tmp_path / "crlf.log"
    log_file.write_bytes(
        b"  0:00 InitGame:\r\n"
        b"  0:01 ClientUserinfoChanged: 2 n\\Jo\xe3o\\t\\0\r\n"
        b"  0:02 Kill: 2 3 10: Joao killed someone by MOD_RAILGUN\r\n"
        b"  0:03 ShutdownGame:\r\n"
    )
    result = KillReport(tool_config(tmp_path)).run(str(log_file), output="crlf.json")

    with open(result["output_file"], encoding="utf-8") as f:
        data = json.load(f)
    assert data["match_kills"][0]["kills"] == {"Jo\ufffdo": 1}
    assert data["match_by_means"][0]["kills_by_means"] == {"MOD_RAILGUN": 1}


def test_main_success(tmp_path, monkeypatch):
    use_config(monkeypatch, tool_config(tmp_path))

    code = main([write_log(tmp_path), "--output", "out.json"])

    assert code == 0
    assert (tmp_path / "output" / "out.json").exists()


def test_main_flags_override_profile(tmp_path, monkeypatch):
    use_config(monkeypatch, tool_config(tmp_path, missing_names="placeholder"))

    code = main([write_log(tmp_path), "--output", "out.json", "--flush-trailing",
                 "--missing-names", "strict"])

    # The flushed trailing match has a kill by a player that never announced a name
    assert code == 1


def test_main_missing_file(tmp_path, monkeypatch):
    use_config(monkeypatch, tool_config(tmp_path))

    assert main([str(tmp_path / "missing.log")]) == 1
