#!/usr/bin/env python3
"""
Tests for the means of death chart tool.
"""

import os
import sys

import matplotlib
matplotlib.use("Agg")

import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.log.events import DeathCause
from quake_log_tools.log.matches import parse_matches
from quake_log_tools.tools.means_plotter import MeansPlotter, main

from test_matches import SAMPLE_LOG


@pytest.fixture
def plotter(tmp_path):
    return MeansPlotter({"general": {"output_path": str(tmp_path / "charts")}, "plot": {"dpi": 50}})


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "games.log"
    path.write_text(SAMPLE_LOG, encoding="utf-8")
    return str(path)


def test_causes_in_ordinal_order():
    matches = parse_matches(SAMPLE_LOG)

    assert MeansPlotter.causes_in(matches) == [
        DeathCause.SHOTGUN,
        DeathCause.ROCKET,
        DeathCause.ROCKET_SPLASH,
        DeathCause.FALLING,
        DeathCause.TRIGGER_HURT,
    ]


def test_plot_all_matches(plotter, log_file, tmp_path):
    result = plotter.run(log_file, output="all.png", title="All matches")

    assert result["match_count"] == 2
    assert result["kill_count"] == 8
    assert result["output_file"] == str(tmp_path / "charts" / "all.png")
    assert os.path.getsize(result["output_file"]) > 0


def test_plot_single_match_default_name(plotter, log_file):
    result = plotter.run(log_file, match=2)

    assert result["causes"] == ["MOD_SHOTGUN"]
    assert os.path.basename(result["output_file"]).startswith("kills_by_means_")
    assert result["output_file"].endswith("_match2.png")
    assert os.path.exists(result["output_file"])


@pytest.mark.parametrize("match", [0, 3])
def test_match_out_of_range(plotter, log_file, match):
    with pytest.raises(ValueError):
        plotter.run(log_file, match=match)


def test_log_without_matches(plotter, tmp_path):
    path = tmp_path / "empty.log"
    path.write_text("  0:00 InitGame:\n", encoding="utf-8")

    with pytest.raises(ValueError):
        plotter.run(str(path))


def test_main_exit_codes(tmp_path, log_file, monkeypatch):
    config = {"general": {"output_path": str(tmp_path / "charts")}}
    monkeypatch.setattr(MeansPlotter, "load_config", staticmethod(lambda profile=None: config))

    assert main([log_file, "--output", "main.png"]) == 0
    assert (tmp_path / "charts" / "main.png").exists()
    assert main([log_file, "--match", "9"]) == 1
    assert main([str(tmp_path / "missing.log")]) == 1
