"""Per-run cache sessions.

Every render gets its own session: a random identifier and a cache tree
rooted at ``<cache_dir>/<id>``::

    <cache_dir>/<id>/frames      raw frames from the source
    <cache_dir>/<id>/processed   transformed frames, same file names
    <cache_dir>/<id>/audio       extracted audio (created on demand)

The session is passed explicitly to every stage. Nothing here is global.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Working context for a single pipeline run."""

    id: str
    root: Path

    @property
    def frames_dir(self) -> Path:
        return self.root / "frames"

    @property
    def processed_dir(self) -> Path:
        return self.frames_dir.parent / "processed"

    @property
    def audio_dir(self) -> Path:
        return self.root / "audio"

    def ensure_audio_dir(self) -> Path:
        """Create the audio directory if missing and return it."""
        self.audio_dir.mkdir(parents=True, exist_ok=True)
        return self.audio_dir

    def cleanup(self) -> None:
        """Remove the whole session tree.

        The pipeline never calls this; cache lifetime belongs to the caller.
        """
        if self.root.exists():
            shutil.rmtree(self.root)
            logger.debug(f"Removed session cache {self.root}")


def create_session(cache_dir: str | Path = "./cache") -> Session:
    """Allocate a new session and create its frame directories.

    Args:
        cache_dir: Root under which the session tree is created.

    Returns:
        A Session whose paths are disjoint from every other session's.
    """
    session_id = uuid.uuid4().hex
    session = Session(id=session_id, root=Path(cache_dir) / session_id)

    session.frames_dir.mkdir(parents=True, exist_ok=True)
    session.processed_dir.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Created session {session_id} at {session.root}")
    return session
