"""
Utilities to load pipeline configuration from YAML files.

The tuning workflow lives in `config/default_config.yaml` so thresholds can
be adjusted without touching code. Unknown keys are ignored to keep the
loader backwards compatible.
"""
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from target_scoring.core import load_yaml
from .target_locator import TargetConfig
from .motion import MotionConfig
from .hit_resolver import HitResolverConfig
from .pipeline import PipelineConfig

logger = logging.getLogger(__name__)

# Default location for the application-wide settings
DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")


def apply_overrides(target: Any, overrides: Dict[str, Any]) -> None:
    """
    Apply dictionary overrides to a dataclass-like object.

    Unknown keys are ignored to remain forward compatible with new YAML fields.
    """
    for key, value in overrides.items():
        if hasattr(target, key):
            setattr(target, key, value)
        else:
            logger.debug("Ignoring unknown config key: %s", key)


def load_pipeline_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load raw configuration dictionary from YAML.

    Args:
        config_path: Optional path to YAML file (defaults to DEFAULT_CONFIG_PATH)

    Returns:
        Dictionary with configuration values (empty dict on failure)
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.info("Pipeline config not found at %s, using defaults", path)
        return {}

    try:
        return load_yaml(path) or {}
    except Exception as exc:  # YAML/IO errors fall back to safe defaults
        logger.warning("Failed to load pipeline config from %s: %s", path, exc)
        return {}


def build_pipeline_config(settings: Optional[Dict[str, Any]] = None) -> PipelineConfig:
    """
    Construct PipelineConfig (including stage configs) from settings.

    Args:
        settings: Raw settings dictionary (e.g., from load_pipeline_settings)

    Returns:
        Populated PipelineConfig instance
    """
    settings = settings or {}
    target_overrides = settings.get("target_locator") or {}
    motion_overrides = settings.get("motion_detection") or {}
    resolver_overrides = settings.get("hit_resolver") or {}
    grid_overrides = settings.get("grid") or {}

    config = PipelineConfig(
        target_config=TargetConfig(),
        motion_config=MotionConfig(),
        resolver_config=HitResolverConfig(),
    )

    apply_overrides(config.target_config, target_overrides)
    apply_overrides(config.motion_config, motion_overrides)
    apply_overrides(config.resolver_config, resolver_overrides)
    if "extent_factor" in grid_overrides:
        config.grid_extent_factor = float(grid_overrides["extent_factor"])

    # Pixel-count thresholds were tuned for the default stride
    if "sample_stride" in target_overrides and "min_pixel_count" not in target_overrides:
        logger.warning(
            "target_locator.sample_stride changed without min_pixel_count; "
            "the target threshold counts sampled pixels"
        )
    if "sample_stride" in motion_overrides and "min_motion_pixels" not in resolver_overrides:
        logger.warning(
            "motion_detection.sample_stride changed without "
            "hit_resolver.min_motion_pixels; the hit threshold counts sampled pixels"
        )

    return config


def load_pipeline_config(config_path: Optional[Path] = None) -> PipelineConfig:
    """
    Convenience wrapper to load and build a pipeline config in one call.
    """
    settings = load_pipeline_settings(config_path)
    return build_pipeline_config(settings)
