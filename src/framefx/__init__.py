"""framefx: apply per-frame effects to a video and re-encode it."""

from framefx.config import PipelineConfig
from framefx.effects.engine import (
    EffectCapabilities,
    EffectEngine,
    EffectEngineError,
    FrameTransform,
    PillowEffectEngine,
    StagedFrame,
)
from framefx.models.schema import MediaDescriptor, RenderResult
from framefx.pipeline import PipelineError, Renderer, render
from framefx.progress import NullProgress, ProgressObserver, TqdmProgress
from framefx.session import Session, create_session
from framefx.stages.extract import AudioAsset, ExtractionError
from framefx.stages.probe import ProbeError
from framefx.stages.reassemble import EncodeError
from framefx.stages.transform import FrameTransformError

__version__ = "0.1.0"

__all__ = [
    "render",
    "Renderer",
    "PipelineConfig",
    "PipelineError",
    "RenderResult",
    "MediaDescriptor",
    "Session",
    "create_session",
    "AudioAsset",
    "StagedFrame",
    "EffectCapabilities",
    "EffectEngine",
    "PillowEffectEngine",
    "FrameTransform",
    "ProgressObserver",
    "TqdmProgress",
    "NullProgress",
    "ProbeError",
    "ExtractionError",
    "EffectEngineError",
    "FrameTransformError",
    "EncodeError",
    "__version__",
]
