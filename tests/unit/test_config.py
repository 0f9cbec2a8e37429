"""
Unit tests for configuration models and loading.
"""

import pytest
from pydantic import ValidationError

from distillery.config import (
    MODE_PRESETS,
    ExtractionConfig,
    ExtractionMode,
    MonitoringConfig,
    Settings,
    find_config_file,
    load_settings,
)
from distillery.render import DEFAULT_FILTER_KEYWORDS
from distillery.scoring import NoisePolicy


class TestExtractionConfig:
    """Extraction options and mode presets."""

    def test_defaults(self):
        """Test the balanced preset and feature flags are on by default."""
        config = ExtractionConfig()
        assert config.mode is ExtractionMode.BALANCED
        assert config.effective_min_content_score == 0.6
        assert config.effective_noise_threshold == 0.5
        assert config.enable_semantic_analysis
        assert config.enable_noise_filtering
        assert config.enable_boundary_detection
        assert config.noise_policy is NoisePolicy.ACCUMULATE

    @pytest.mark.parametrize(
        "mode,score,noise",
        [("strict", 0.8, 0.3), ("balanced", 0.6, 0.5), ("comprehensive", 0.4, 0.7), ("STRICT", 0.8, 0.3)],
    )
    def test_mode_presets(self, mode, score, noise):
        """Test each mode sets both thresholds."""
        config = ExtractionConfig(mode=mode)
        assert config.effective_min_content_score == score
        assert config.effective_noise_threshold == noise
        assert config.preset is MODE_PRESETS[config.mode]

    def test_explicit_thresholds_override_mode(self):
        """Test explicit thresholds win over the preset."""
        config = ExtractionConfig(mode="strict", min_content_score=0.1, noise_threshold=0.9)
        assert config.effective_min_content_score == 0.1
        assert config.effective_noise_threshold == 0.9

    def test_camel_case_aliases(self):
        """Test camelCase option names are accepted."""
        config = ExtractionConfig.coerce(
            {"minContentScore": 0.7, "enableNoiseFiltering": False, "filterKeywords": "Sponsored"}
        )
        assert config.min_content_score == 0.7
        assert not config.enable_noise_filtering
        assert config.filter_rules().keywords == ["Sponsored"]

    def test_coerce(self):
        """Test None and instances pass through coerce."""
        config = ExtractionConfig(mode="strict")
        assert ExtractionConfig.coerce(config) is config
        assert ExtractionConfig.coerce(None) == ExtractionConfig()

    def test_blank_filter_keywords_use_defaults(self):
        """Test whitespace-only filter keywords select the default rules."""
        rules = ExtractionConfig(filter_keywords="  \n ").filter_rules()
        assert rules.is_default
        assert rules.keywords == list(DEFAULT_FILTER_KEYWORDS)

    @pytest.mark.parametrize(
        "options",
        [
            {"min_content_score": 1.5},
            {"noise_threshold": -0.1},
            {"mode": "aggressive"},
            {"noise_policy": "sometimes"},
            {"unknown_option": True},
            {"include": {"video": False}},
            {"fallback_char_limit": 0},
        ],
    )
    def test_invalid_options(self, options):
        """Test invalid values fail at construction."""
        with pytest.raises(ValidationError):
            ExtractionConfig.coerce(options)

    def test_frozen(self):
        """Test configs are immutable."""
        config = ExtractionConfig()
        with pytest.raises(ValidationError):
            config.mode = ExtractionMode.STRICT


class TestMonitoringConfig:
    """Logging options."""

    def test_level_normalized(self):
        """Test log levels are upper-cased."""
        assert MonitoringConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="chatty")

    def test_log_file_parent_created(self, tmp_path):
        """Test the log file directory is created."""
        target = tmp_path / "logs" / "nested" / "distill.log"
        config = MonitoringConfig(log_file=target)
        assert config.log_file == str(target)
        assert target.parent.is_dir()


class TestSettingsLoading:
    """YAML and environment loading."""

    def test_from_yaml(self, tmp_path):
        """Test sections load from YAML, with camelCase keys allowed."""
        path = tmp_path / "distill.yaml"
        path.write_text(
            "extraction:\n  mode: strict\n  enableBoundaryDetection: false\n"
            "monitoring:\n  log_level: warning\n",
            encoding="utf-8",
        )
        settings = Settings.from_yaml(path)
        assert settings.extraction.mode is ExtractionMode.STRICT
        assert not settings.extraction.enable_boundary_detection
        assert settings.monitoring.log_level == "WARNING"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        """Test an empty file yields default settings."""
        path = tmp_path / "distill.yaml"
        path.write_text("", encoding="utf-8")
        assert Settings.from_yaml(path).extraction == ExtractionConfig()

    def test_missing_file_raises(self, tmp_path):
        """Test from_yaml requires an existing file."""
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "absent.yaml")

    def test_load_settings_falls_back_on_invalid_file(self, tmp_path):
        """Test broken YAML or invalid values fall back to defaults."""
        broken = tmp_path / "broken.yaml"
        broken.write_text("extraction: [unclosed\n", encoding="utf-8")
        invalid = tmp_path / "invalid.yaml"
        invalid.write_text("extraction:\n  mode: aggressive\n", encoding="utf-8")

        assert load_settings(broken).extraction == ExtractionConfig()
        assert load_settings(invalid).extraction == ExtractionConfig()
        assert load_settings(tmp_path / "absent.yaml").extraction == ExtractionConfig()

    def test_config_file_discovered_in_cwd(self, tmp_path, monkeypatch):
        """Test distill.yaml in the working directory is picked up."""
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None
        (tmp_path / "distill.yml").write_text("extraction:\n  mode: comprehensive\n", encoding="utf-8")
        assert find_config_file() == tmp_path / "distill.yml"
        assert load_settings().extraction.mode is ExtractionMode.COMPREHENSIVE

    def test_environment_overrides(self, monkeypatch):
        """Test nested settings can come from DISTILL_ variables."""
        monkeypatch.setenv("DISTILL_EXTRACTION__MODE", "strict")
        monkeypatch.setenv("DISTILL_MONITORING__LOG_LEVEL", "error")
        settings = Settings()
        assert settings.extraction.mode is ExtractionMode.STRICT
        assert settings.monitoring.log_level == "ERROR"
