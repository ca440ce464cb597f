"""
Tests for GradingConfig

Verifies configuration validation and the policy/store factories.
"""

import json

import pytest

from grade_engine.config import GradingConfig
from grade_engine.core.policy import AssessmentPolicy
from grade_engine.core.schemas.validator import ValidationError
from grade_engine.store import InMemoryResultStore, JsonFileResultStore


class TestGradingConfigValidation:
    """Tests for construction-time validation."""

    def test_config_when_no_policy_source_then_raises_error(self):
        with pytest.raises(ValueError, match="exactly one"):
            GradingConfig()

    def test_config_when_both_policy_sources_then_raises_error(self, tmp_path):
        with pytest.raises(ValueError, match="exactly one"):
            GradingConfig(policy_preset="three_level", policy_path=tmp_path / "p.json")

    def test_config_when_unknown_preset_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown policy preset"):
            GradingConfig(policy_preset="five_level")

    def test_config_when_results_dir_is_file_then_raises_error(self, tmp_path):
        not_a_dir = tmp_path / "results"
        not_a_dir.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="not a directory"):
            GradingConfig(policy_preset="three_level", results_dir=not_a_dir)

    def test_config_when_frozen_then_cannot_modify(self):
        config = GradingConfig(policy_preset="three_level")
        with pytest.raises(AttributeError):
            config.strict_validation = True


class TestGradingConfigFactories:
    """Tests for load_policy and create_store."""

    def test_load_policy_when_preset_then_returns_preset(self):
        config = GradingConfig(policy_preset="four_level")
        assert config.load_policy() == AssessmentPolicy.preset("four_level")

    def test_load_policy_when_path_then_reads_file(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps({
            "schema_version": 1,
            "labels": [
                {"label": "blank", "fraction": 0},
                {"label": "half", "fraction": 0.5},
                {"label": "full", "fraction": 1},
            ],
        }), encoding="utf-8")

        policy = GradingConfig(policy_path=path, strict_validation=True).load_policy()

        assert policy.labels == ("blank", "half", "full")
        assert policy.awarded_mark("half", 9) == 5

    def test_load_policy_when_file_invalid_then_raises_validation_error(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps({"schema_version": 1, "labels": []}), encoding="utf-8")
        with pytest.raises(ValidationError):
            GradingConfig(policy_path=path).load_policy()

    def test_create_store_when_no_results_dir_then_in_memory(self):
        store = GradingConfig(policy_preset="three_level").create_store()
        assert isinstance(store, InMemoryResultStore)

    def test_create_store_when_results_dir_then_json_store(self, tmp_path):
        config = GradingConfig(
            policy_preset="three_level",
            results_dir=tmp_path / "results",
            strict_validation=True,
        )
        store = config.create_store()
        assert isinstance(store, JsonFileResultStore)
        assert store.results_dir == tmp_path / "results"
        assert store.strict is True
