#!/usr/bin/env python3
"""
Tests for the tool base classes.
"""

import os
import sys

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.base import JSONTool


class EchoTool(JSONTool):
    def run(self):
        return self.config


def relative_tool(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return EchoTool({"general": {"output_path": "output"}})


def test_output_path_keeps_paths_inside_output_dir(tmp_path, monkeypatch):
    tool = relative_tool(tmp_path, monkeypatch)

    assert tool.output_path("output/report.json") == str(tmp_path / "output" / "report.json")
    assert tool.output_path("report.json") == str(tmp_path / "output" / "report.json")


def test_output_path_sibling_prefix_is_not_inside(tmp_path, monkeypatch):
    tool = relative_tool(tmp_path, monkeypatch)

    resolved = tool.output_path(os.path.join("output2", "report.json"))

    assert resolved == str(tmp_path / "output" / "output2" / "report.json")
    assert (tmp_path / "output" / "output2").is_dir()


def test_output_path_with_absolute_output_dir(tmp_path):
    tool = EchoTool({"general": {"output_path": str(tmp_path / "out")}})

    assert tool.output_path("charts/a.png") == str(tmp_path / "out" / "charts" / "a.png")
    assert tool.output_path(str(tmp_path / "elsewhere.json")) == str(tmp_path / "elsewhere.json")
