#!/usr/bin/env python3
"""framefx Quickstart Example.

Renders a video through a simple time-varying effect.

Usage:
    python examples/quickstart.py path/to/video.mp4 [output.mp4]

Requirements:
    - ffmpeg and ffprobe on PATH
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    """Run the quickstart example."""
    import framefx

    if len(sys.argv) < 2:
        print("Usage: python quickstart.py <video_file> [output_file]")
        print("\nExample:")
        print("  python quickstart.py clip.mp4 clip_fx.mkv")
        sys.exit(1)

    video_path = Path(sys.argv[1])
    video_out = sys.argv[2] if len(sys.argv) > 2 else "./result.mp4"

    if not video_path.exists():
        print(f"Error: File not found: {video_path}")
        sys.exit(1)

    print(f"framefx v{framefx.__version__}")
    print(f"Processing: {video_path}")
    print("-" * 50)

    def pulse(staged, current, total, effects):
        # Blur ramps up over the first half and back down over the second.
        phase = current / total
        radius = 6 * (phase if phase < 0.5 else 1 - phase)
        staged = effects.use_effect(staged, "blur", radius=radius)
        if current % 10 < 5:
            staged = effects.use_effect(staged, "channel_shift", offset=6)
        return staged

    result = framefx.render(video_path, pulse, video_out=video_out)

    print(f"\nOutput: {result.output_path}")
    print(f"Frames: {result.frame_count}")
    print(f"Resolution: {result.descriptor.resolution} @ {result.descriptor.frame_rate:.2f} fps")
    print(f"Audio: {'yes' if result.has_audio else 'no'}")
    print(f"Cache: session {result.session_id} (remove it when done)")
    print(f"Elapsed: {result.elapsed:.1f}s")


if __name__ == "__main__":
    main()
