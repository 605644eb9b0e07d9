"""Tests for settings and pipeline.yaml loading."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.pipeline_config import load_pipeline_config
from core.models.config import PipelineConfig

EXAMPLE_PATH = Path(__file__).parent.parent / "pipeline.example.yaml"


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    monkeypatch.delenv("QUANT_ALPHA_MODEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ── Settings ──────────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.alpha_model is None

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("QUANT_REDIS_URL", "redis://cache:6379/2")
        monkeypatch.setenv("QUANT_NORMALIZATION_TTL_SEC", "60")
        settings = Settings(_env_file=None)
        assert settings.redis_url == "redis://cache:6379/2"
        assert settings.normalization_ttl_sec == 60

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://other:6379/0")
        assert Settings(_env_file=None).redis_url == "redis://localhost:6379/0"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


# ── PipelineConfig model ──────────────────────────────────────────────────


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()
        assert config.alpha_model == "ar4"
        assert config.features.window == 20
        assert config.policy.enter_threshold == 0.5
        assert config.risk.max_daily_loss == 1000
        assert config.alpha_config() is config.ar4

    def test_alpha_config_for_macd(self):
        config = PipelineConfig(alpha_model="macd")
        assert config.alpha_config() is config.macd

    def test_alpha_config_for_custom_alpha(self):
        assert PipelineConfig(alpha_model="custom").alpha_config() is None

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            PipelineConfig(polcy={})

    def test_invalid_hysteresis_rejected(self):
        with pytest.raises(ValidationError, match="enter_threshold"):
            PipelineConfig(policy={"enter_threshold": 0.2, "exit_threshold": 0.4})


# ── load_pipeline_config ──────────────────────────────────────────────────


class TestLoadPipelineConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_pipeline_config(tmp_path / "nonexistent.yaml")
        assert config == PipelineConfig()

    def test_empty_file_returns_defaults(self, tmp_path):
        yaml_path = tmp_path / "pipeline.yaml"
        yaml_path.write_text("")
        assert load_pipeline_config(yaml_path) == PipelineConfig()

    def test_load_sections(self, tmp_path):
        yaml_content = textwrap.dedent("""\
            alpha_model: macd
            features:
              window: 30
            macd:
              min_histogram: 0.0005
              use_crossover: false
            policy:
              enter_threshold: 0.6
              exit_threshold: 0.2
              use_atr_sizing: true
            risk:
              max_daily_loss: 250
        """)
        yaml_path = tmp_path / "pipeline.yaml"
        yaml_path.write_text(yaml_content)

        config = load_pipeline_config(yaml_path)

        assert config.alpha_model == "macd"
        assert config.features.window == 30
        assert config.macd.use_crossover is False
        assert config.policy.use_atr_sizing is True
        assert config.risk.max_daily_loss == 250
        # Untouched sections keep defaults
        assert config.ar4.fit_window == 100

    def test_invalid_values_raise(self, tmp_path):
        yaml_path = tmp_path / "pipeline.yaml"
        yaml_path.write_text("features:\n  window: 0\n")
        with pytest.raises(ValidationError):
            load_pipeline_config(yaml_path)

    def test_env_overrides_alpha(self, tmp_path, monkeypatch):
        monkeypatch.setenv("QUANT_ALPHA_MODEL", "macd")
        yaml_path = tmp_path / "pipeline.yaml"
        yaml_path.write_text("alpha_model: ar4\n")
        assert load_pipeline_config(yaml_path).alpha_model == "macd"

    def test_default_path_from_settings(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "custom.yaml"
        yaml_path.write_text("buffer_size: 50\n")
        monkeypatch.setenv("QUANT_PIPELINE_CONFIG_PATH", str(yaml_path))
        assert load_pipeline_config().buffer_size == 50

    def test_example_file_matches_defaults(self):
        assert load_pipeline_config(EXAMPLE_PATH) == PipelineConfig()
