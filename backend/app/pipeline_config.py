"""Pipeline configuration loaded from pipeline.yaml.

Every section is optional; a missing file yields the documented defaults
(features window 20, AR(4) alpha, threshold-ATR policy, default risk
limits). Unknown keys are rejected so typos fail loudly at startup.
"""

import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv

from app.config import get_settings
from core.models.config import PipelineConfig

logger = logging.getLogger(__name__)


def load_pipeline_config(path: Path | str | None = None) -> PipelineConfig:
    """Load pipeline config from a YAML file.

    Defaults to ``Settings.pipeline_config_path`` and falls back to default
    values if the file doesn't exist. ``QUANT_ALPHA_MODEL`` overrides the
    file's ``alpha_model``.

    Raises:
        pydantic.ValidationError: If the file contains invalid values.
    """
    config_path = Path(path) if path is not None else Path(get_settings().pipeline_config_path)

    # A .env next to the config may carry QUANT_* overrides
    if load_dotenv(config_path.parent / ".env", override=False):
        get_settings.cache_clear()
    settings = get_settings()

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("No pipeline config found at %s, using defaults", config_path)
        raw = {}

    override = settings.alpha_model
    if override:
        raw["alpha_model"] = override

    config = PipelineConfig(**raw)
    logger.info(
        "Loaded pipeline config: alpha=%s, window=%d, enter=%.2f, exit=%.2f",
        config.alpha_model,
        config.features.window,
        config.policy.enter_threshold,
        config.policy.exit_threshold,
    )
    return config
