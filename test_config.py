#!/usr/bin/env python3
"""
Tests for profile-based configuration.
"""

import json
import os
import sys

import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from config.config import Config


def make_config(tmp_path, profile=None):
    return Config(
        profiles_dir=str(tmp_path / "profiles"),
        profile=profile,
        config={"general": {"output_path": str(tmp_path / "output")}},
    )


def write_profile(tmp_path, name, settings):
    (tmp_path / "profiles").mkdir(exist_ok=True)
    (tmp_path / "profiles" / f"{name}.json").write_text(json.dumps(settings))


def test_default_profile_is_created(tmp_path):
    config = make_config(tmp_path)

    assert (tmp_path / "profiles" / "default.json").exists()
    assert config.get("report.missing_names") == "placeholder"
    assert config.get("report.flush_trailing_match") is False
    assert config.get("plot.dpi") == 150
    assert config.get("no.such.key", "fallback") == "fallback"


def test_named_profile_layers_over_defaults(tmp_path):
    write_profile(tmp_path, "tournament", {
        "general": {"log_level": "DEBUG"},
        "report": {"missing_names": "strict", "flush_trailing_match": True},
    })

    config = make_config(tmp_path, profile="tournament")

    assert config.get("general.log_level") == "DEBUG"
    assert config.get("general.output_path") == "output"
    assert config.get("report.flush_trailing_match") is True
    assert config.get("report.missing_names") == "strict"
    assert config.get("report.missing_name_template") == "<player {id}>"


def test_missing_profile_uses_defaults(tmp_path):
    config = make_config(tmp_path, profile="nope")

    assert config.get() == Config.DEFAULT_SETTINGS
    assert not (tmp_path / "profiles" / "nope.json").exists()
    assert config.switch_profile("also-nope") is False
    assert config.profile == "nope"


def test_unknown_missing_name_policy_is_rejected(tmp_path):
    write_profile(tmp_path, "typo", {"report": {"missing_names": "skip"}})

    with pytest.raises(ValueError, match="missing_names"):
        make_config(tmp_path, profile="typo")


def test_profile_must_be_an_object(tmp_path):
    write_profile(tmp_path, "list", [1, 2])

    with pytest.raises(ValueError):
        make_config(tmp_path, profile="list")


def test_list_and_switch_profiles(tmp_path):
    config = make_config(tmp_path)
    write_profile(tmp_path, "lan", {"plot": {"dpi": 300}})

    assert config.list_profiles() == ["default", "lan"]
    assert config.switch_profile("lan")
    assert config.get("plot.dpi") == 300
    assert config.get("plot.width") == 12
    assert config.run() is config.get()


def test_get_path(tmp_path):
    config = make_config(tmp_path)

    assert config.get_path("general.output_path", "out") == str(tmp_path / "profiles" / "output")
    assert config.get_path("missing.path") == ""
