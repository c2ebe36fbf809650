"""Processing stages for the framefx pipeline.

Each stage handles one part of a render:
- probe: Source geometry and timing via ffprobe
- extract: Frame and audio extraction via ffmpeg
- sequence: Numeric ordering of extracted frames
- transform: Per-frame stage / transform / commit loop
- reassemble: Encoding processed frames back into a video
"""

__all__ = [
    "probe",
    "extract",
    "sequence",
    "transform",
    "reassemble",
]
