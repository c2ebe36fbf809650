"""Effect engine interfaces and the default Pillow implementation."""

from framefx.effects.engine import (
    BUILTIN_EFFECTS,
    EffectCapabilities,
    EffectEngine,
    EffectEngineError,
    FrameTransform,
    PillowEffectEngine,
    StagedFrame,
)

__all__ = [
    "BUILTIN_EFFECTS",
    "EffectCapabilities",
    "EffectEngine",
    "EffectEngineError",
    "FrameTransform",
    "PillowEffectEngine",
    "StagedFrame",
]
