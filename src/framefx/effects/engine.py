"""Effect engine: stage frames, apply effects, commit results.

The pipeline only talks to the ``EffectEngine`` protocol. The default
``PillowEffectEngine`` loads frames with Pillow, exposes a small catalogue
of named effects through ``EffectCapabilities`` and writes every committed
frame as RGB JPEG at a fixed quality so the encoder always sees the same
input format.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageEnhance, ImageFilter, ImageOps

logger = logging.getLogger(__name__)

EffectFn = Callable[..., Image.Image]


class EffectEngineError(Exception):
    """Error while staging or committing a frame."""

    pass


@dataclass
class StagedFrame:
    """A frame loaded for the effect engine.

    Only valid for the loop iteration that staged it.
    """

    image: Image.Image
    source_path: Path

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def to_array(self) -> NDArray[np.uint8]:
        """Return the pixels as a numpy array (H, W[, C])."""
        return np.asarray(self.image, dtype=np.uint8)

    def with_image(self, image: Image.Image) -> StagedFrame:
        """Return a new staged frame holding ``image``."""
        return StagedFrame(image=image, source_path=self.source_path)

    def with_array(self, array: NDArray[np.uint8]) -> StagedFrame:
        """Return a new staged frame built from a numpy array."""
        return self.with_image(Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8)))


def _rgb(image: Image.Image) -> Image.Image:
    return image if image.mode == "RGB" else image.convert("RGB")


def _channel_shift(image: Image.Image, offset: int = 8, channel: int = 0) -> Image.Image:
    pixels = np.asarray(_rgb(image), dtype=np.uint8).copy()
    pixels[..., channel] = np.roll(pixels[..., channel], offset, axis=1)
    return Image.fromarray(pixels)


BUILTIN_EFFECTS: dict[str, EffectFn] = {
    "grayscale": lambda img: ImageOps.grayscale(img),
    "invert": lambda img: ImageOps.invert(_rgb(img)),
    "mirror": lambda img: ImageOps.mirror(img),
    "flip": lambda img: ImageOps.flip(img),
    "blur": lambda img, radius=2.0: img.filter(ImageFilter.GaussianBlur(radius)),
    "sharpen": lambda img: img.filter(ImageFilter.SHARPEN),
    "edges": lambda img: _rgb(img).filter(ImageFilter.FIND_EDGES),
    "posterize": lambda img, bits=4: ImageOps.posterize(_rgb(img), bits),
    "solarize": lambda img, threshold=128: ImageOps.solarize(_rgb(img), threshold),
    "brightness": lambda img, factor=1.2: ImageEnhance.Brightness(img).enhance(factor),
    "contrast": lambda img, factor=1.2: ImageEnhance.Contrast(img).enhance(factor),
    "channel_shift": _channel_shift,
}


class EffectCapabilities:
    """Operations a transform may apply to a staged frame.

    Passed explicitly to every transform call as ``effects``.

    Example:
        >>> def transform(staged, current, total, effects):
        ...     staged = effects.use_effect(staged, "blur", radius=current / total * 4)
        ...     return effects.use_mode(staged, "L")
    """

    def __init__(self, effects: dict[str, EffectFn] | None = None) -> None:
        self._effects: dict[str, EffectFn] = dict(BUILTIN_EFFECTS if effects is None else effects)

    @property
    def names(self) -> list[str]:
        """Names of the available effects, sorted."""
        return sorted(self._effects)

    def register(self, name: str, effect: EffectFn) -> None:
        """Add or replace a named effect."""
        self._effects[name] = effect

    def use_effect(self, staged: StagedFrame, name: str, **params: Any) -> StagedFrame:
        """Apply the named effect to ``staged``.

        Raises:
            ValueError: If no effect with that name exists.
        """
        effect = self._effects.get(name)
        if effect is None:
            raise ValueError(
                f"Unknown effect: {name}. Available effects: {', '.join(self.names)}"
            )
        return staged.with_image(effect(staged.image, **params))

    def use_mode(self, staged: StagedFrame, mode: str) -> StagedFrame:
        """Convert ``staged`` to a Pillow color mode such as ``"L"`` or ``"P"``."""
        if staged.image.mode == mode:
            return staged
        return staged.with_image(staged.image.convert(mode))


class EffectEngine(Protocol):
    """What the pipeline needs from an effect engine."""

    @property
    def capabilities(self) -> EffectCapabilities: ...

    def stage(self, path: Path) -> StagedFrame: ...

    def commit(self, staged: StagedFrame, destination: Path) -> Path: ...


class FrameTransform(Protocol):
    """Caller-supplied per-frame transform."""

    def __call__(
        self,
        staged: StagedFrame,
        current: int,
        total: int,
        effects: EffectCapabilities,
    ) -> StagedFrame: ...


class PillowEffectEngine:
    """Effect engine backed by Pillow."""

    def __init__(self, quality: int = 85, capabilities: EffectCapabilities | None = None) -> None:
        self.quality = quality
        self._capabilities = capabilities or EffectCapabilities()

    @property
    def capabilities(self) -> EffectCapabilities:
        return self._capabilities

    def stage(self, path: Path) -> StagedFrame:
        """Load a frame image into memory.

        Raises:
            EffectEngineError: If the file cannot be read as an image.
        """
        try:
            with Image.open(path) as img:
                img.load()
                image = img.copy()
        except OSError as e:
            raise EffectEngineError(f"Failed to stage frame {path}: {e}") from e

        return StagedFrame(image=image, source_path=Path(path))

    def commit(self, staged: StagedFrame, destination: Path) -> Path:
        """Write ``staged`` to ``destination`` as RGB JPEG.

        Raises:
            EffectEngineError: If the image cannot be written.
        """
        destination = Path(destination)
        try:
            _rgb(staged.image).save(destination, "JPEG", quality=self.quality)
        except OSError as e:
            raise EffectEngineError(f"Failed to commit frame {destination}: {e}") from e

        return destination
