"""Tests for settings and policy overrides."""

import pytest

from etymos.config import Settings, load_policy
from etymos.errors import ConfigurationError


class TestSettings:
    """Test environment-driven settings."""

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("ETYMOS_MAX_RETRIES", "5")
        monkeypatch.setenv("ETYMOS_INCLUDE_SOUND_CHANGE_COGNATES", "true")
        settings = Settings()
        assert settings.max_retries == 5
        assert settings.include_sound_change_cognates is True

    def test_defaults(self):
        settings = Settings()
        assert settings.policy_file is None
        assert "la" in settings.cognate_target_languages


class TestLoadPolicy:
    """Test JSON policy files."""

    def test_defaults_without_file(self):
        assert load_policy(Settings()).confidence_floor == 0.5

    def test_overrides(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text(
            '{"confidence_floor": 0.6, "suspicious_pairs": [["sun", "moon"]], "cross_reference_limit": 3}',
            encoding="utf-8"
        )
        policy = load_policy(Settings(policy_file=path))
        assert policy.confidence_floor == 0.6
        assert policy.cross_reference_limit == 3
        assert policy.is_suspicious_pair("Moon", "sun")
        assert not policy.is_suspicious_pair("water", "fire")

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"confidence_floor": 7}'])
    def test_bad_files(self, tmp_path, content):
        path = tmp_path / "policy.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_policy(Settings(policy_file=path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_policy(Settings(policy_file=tmp_path / "absent.json"))
