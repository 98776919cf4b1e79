"""Tests for configuration loading."""

from pathlib import Path

import pytest

from color_matcher.config import MatcherConfig, load_config, parse_config
from color_matcher.errors import ConfigError


class TestParseConfig:
    def test_defaults(self):
        cfg = parse_config({})
        assert cfg == MatcherConfig()
        assert cfg.threshold == 0.5
        assert cfg.table_path is None
        assert cfg.models == {}

    def test_none_is_empty_config(self):
        assert parse_config(None) == MatcherConfig()

    def test_relative_paths_resolve_against_base(self, tmp_path):
        cfg = parse_config({
            "table_path": "res/w2c.txt",
            "debug_folder": "/abs/debug",
            "models": {"red_ball": "models/red_ball.yml"},
        }, tmp_path)
        assert cfg.table_path == tmp_path / "res" / "w2c.txt"
        assert cfg.debug_folder == Path("/abs/debug")
        assert cfg.models == {"red_ball": tmp_path / "models" / "red_ball.yml"}

    @pytest.mark.parametrize("raw", [
        {"threshold": "high"},
        {"threshold": True},
        {"debug": "yes"},
        {"contour_width": 2.5},
        {"sample_stride": 0},
        {"contour_width": -1},
        {"threshold": 1.5},
        {"models": ["red_ball"]},
        {"models": {"red_ball": 3}},
        {"colour_table": "x"},
    ])
    def test_rejects_bad_values(self, raw):
        with pytest.raises(ConfigError):
            parse_config(raw)

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigError):
            parse_config(["threshold", 0.5])


class TestLoadConfig:
    def test_shipped_default_config(self, repo_root):
        cfg = load_config(repo_root / "configs" / "default.yaml")
        assert cfg.threshold == 0.5
        assert not cfg.debug
        assert cfg.models["red_ball"].resolve() == (repo_root / "models" / "red_ball.yml").resolve()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("threshold: [0.5\n")
        with pytest.raises(ConfigError):
            load_config(path)
