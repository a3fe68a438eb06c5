# =============================================================================
# RENDER: Solve + Encode Pipeline and Frame Hand-off
# =============================================================================
"""
Glue between the solver, the encoder and whatever displays the result.

    render_frame: Run solve_field() and encode_field() for one scene snapshot
    LatestFrame: Holds the newest complete frame. Solves that were started
                 before a newer one finished are dropped instead of replacing it.

Typical use from an interactive front end:

    frames = LatestFrame()
    gen = frames.begin()                       # scene changed
    frame = render_frame(sources, groups, params, w, h, 'SPL')
    frames.publish(gen, frame)                 # ignored if already superseded
    show(frames.current().rgba)
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Optional

import numpy as np

from .constants import MODE_SPL, VIEW_MODES
from .encoding import encode_field
from .simulation import FieldResult, solve_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """One fully rendered snapshot."""
    field: FieldResult
    rgba: np.ndarray
    mode: str

    def to_bytes(self) -> bytes:
        """Raw RGBA pixel buffer (width·height·4 bytes, row-major)."""
        return self.rgba.tobytes()


def render_frame(sources, groups, params, width, height, mode=MODE_SPL, config=None):
    """
    Solve and encode one scene.

    Args:
        sources, groups: Scene snapshot
        params: PhysicsParameters
        width, height: Grid size in cells
        mode: 'SPL' or 'Phase'
        config: Optional solver config overrides (see SOLVER_CONFIG)

    Returns:
        frame: Frame with the field and its RGBA image
    """
    if mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode '{mode}'. Available: {list(VIEW_MODES)}")
    field = solve_field(sources, groups, params, width, height, config=config)
    rgba = encode_field(field, params, mode)
    rgba.flags.writeable = False
    return Frame(field=field, rgba=rgba, mode=mode)


class LatestFrame:
    """
    Thread-safe holder for the most recent complete frame.

    Every scene change calls begin() to get a generation number. A frame is
    only swapped in by publish() if its generation is newer than the one
    currently shown, so a slow solve for an old snapshot can never overwrite
    a newer image.
    """

    def __init__(self):
        self._lock = Lock()
        self._next_generation = 0
        self._generation = -1
        self._frame = None

    def begin(self) -> int:
        with self._lock:
            generation = self._next_generation
            self._next_generation += 1
            return generation

    def publish(self, generation: int, frame: Frame) -> bool:
        """
        Swap in ``frame`` if it is newer than the current one.

        Returns:
            True if the frame was accepted
        """
        with self._lock:
            if generation <= self._generation:
                logger.debug("Dropping stale frame %d (showing %d)", generation, self._generation)
                return False
            self._generation = generation
            self._frame = frame
            return True

    def current(self) -> Optional[Frame]:
        with self._lock:
            return self._frame

    @property
    def generation(self) -> int:
        """Generation of the frame currently held (-1 if none)."""
        with self._lock:
            return self._generation


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'Frame',
    'render_frame',
    'LatestFrame',
]
