"""
Tests for settings validation and YAML loading.
"""

import pytest

from ems_packing.config import (
    DEFAULT_CONTAINER_DIMS,
    GeneratorConfig,
    PackingConfig,
    SimulatorSettings,
    load_settings,
    parse_settings,
)
from ems_packing.core.models import PackingStrategy, WeightingHeuristic
from ems_packing.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        settings = SimulatorSettings()
        assert settings.seed is None
        assert settings.generator.container_dims == DEFAULT_CONTAINER_DIMS
        assert settings.generator.max_items == 30
        assert settings.generator.min_side_len == 400
        assert settings.generator.sa_iterations == 500
        assert settings.packing.strategy == "ffd"
        assert settings.packing.min_support == 0.6
        assert settings.benchmark.runs == 10

    def test_load_without_path(self):
        assert load_settings() == SimulatorSettings()


class TestValidation:
    def test_min_side_must_be_below_largest_extent(self):
        with pytest.raises(ValueError, match="min_side_len"):
            GeneratorConfig(min_side_len=6000)

    def test_min_side_may_exceed_smaller_extents(self):
        config = GeneratorConfig(min_side_len=3000)
        assert config.min_side_len == 3000

    @pytest.mark.parametrize("support", [-0.1, 1.5])
    def test_support_range(self, support):
        with pytest.raises(ValueError):
            PackingConfig(min_support=support)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            PackingConfig(strategy="best-fit")

    def test_unknown_heuristic(self):
        with pytest.raises(ValueError):
            PackingConfig(heuristic="gravity")

    def test_names_are_coerced_to_enums(self):
        config = PackingConfig(strategy="conflict-graph", heuristic="future-space")
        assert config.strategy is PackingStrategy.CONFLICT_GRAPH
        assert config.heuristic is WeightingHeuristic.FUTURE_SPACE

    def test_dump_round_trips(self):
        settings = parse_settings({"packing": {"strategy": "ffh"}})
        assert parse_settings(settings.model_dump()) == settings

    def test_parse_wraps_validation_errors(self):
        with pytest.raises(ConfigurationError):
            parse_settings({"generator": {"max_items": 0}})

    def test_parse_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            parse_settings(["seed", 1])


class TestLoadSettings:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "seed: 42\n"
            "generator:\n"
            "  max_items: 40\n"
            "  min_side_len: 300\n"
            "packing:\n"
            "  strategy: ffh\n"
            "  min_support: 0.75\n"
        )
        settings = load_settings(path)
        assert settings.seed == 42
        assert settings.generator.max_items == 40
        assert settings.packing.strategy == "ffh"
        assert settings.packing.min_support == 0.75
        assert settings.benchmark.runs == 10

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == SimulatorSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("generator: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_settings(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad_values.yaml"
        path.write_text("packing:\n  min_support: 2\n")
        with pytest.raises(ConfigurationError):
            load_settings(path)
