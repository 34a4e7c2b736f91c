"""
Detection module - target localisation, motion, and hit resolution.
"""
from .target_locator import TargetLocator, TargetConfig
from .motion import MotionDetector, MotionConfig
from .hit_resolver import HitResolver, HitResolverConfig
from .pipeline import ScoringPipeline, PipelineConfig, FrameResult
from .config_loader import (
    apply_overrides,
    build_pipeline_config,
    load_pipeline_config,
    load_pipeline_settings,
)

__all__ = [
    "TargetLocator",
    "TargetConfig",
    "MotionDetector",
    "MotionConfig",
    "HitResolver",
    "HitResolverConfig",
    "ScoringPipeline",
    "PipelineConfig",
    "FrameResult",
    "apply_overrides",
    "build_pipeline_config",
    "load_pipeline_config",
    "load_pipeline_settings",
]
