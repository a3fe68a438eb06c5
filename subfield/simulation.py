# =============================================================================
# SIMULATION: Free-Field Superposition Solver
# =============================================================================
"""
Functions for computing the complex sound pressure of a subwoofer array on a
2D grid covering the venue.

Each function does ONE thing:
        validate_dimensions: Reject grids with non-positive size
        pixels_to_meters / meters_to_pixels: Grid index <-> venue coordinate
        grid_coordinates: Meter coordinates of every grid column and row
        prepare_sources: Per-source position, linear amplitude, phase offset
        solve_rows: Coherent sum of all sources over a band of grid rows
        solve_field: Full grid solve (parallel over row bands) -> FieldResult

Physics model:
        - Every active source is a point monopole radiating into free field.
        - At distance r a source contributes
              p = (A / max(r, r_min)) · exp(j · (-k·r + φ))
          with A = 10^(gain/20), φ = -2π·f·delay + (π if inverted), and
          k = 2πf / c, c = 331.3 + 0.606·T.
        - Contributions add as complex numbers, so interference between
          sources shows up directly in |p|.
        - r_min (0.1 m) only limits the 1/r term; the phase uses the true
          distance.

Grid convention:
        - Arrays are indexed [row, column] = [y, x], row 0 at the top.
        - Cell (px, py) sits at
              x = (px - width/2) / width · venue_width
              y = (py - height/2) / height · venue_depth
          so the venue is centered on the origin.
"""

import logging
from dataclasses import dataclass

import numpy as np
from joblib import Parallel, delayed

from .constants import SOLVER_CONFIG
from .sources import resolve_active_sources

logger = logging.getLogger(__name__)


class InvalidDimensionsError(ValueError):
    """Raised when a grid width or height is not a positive integer."""


# =============================================================================
# Result Container
# =============================================================================

@dataclass(frozen=True)
class FieldResult:
    """
    Output of one solve. Arrays are (height, width) and read-only.

    Attributes:
        re, im: Real and imaginary part of the summed pressure
        mag: |p| = sqrt(re² + im²)
        max_pressure: Largest magnitude anywhere on the grid (0 if silent)
        active_count: Number of sources that contributed
    """
    re: np.ndarray
    im: np.ndarray
    mag: np.ndarray
    max_pressure: float
    active_count: int

    @property
    def width(self) -> int:
        return self.mag.shape[1]

    @property
    def height(self) -> int:
        return self.mag.shape[0]

    @property
    def is_silent(self) -> bool:
        """True when no source was active (the field is undefined)."""
        return self.active_count == 0

    def min_pressure(self, dynamic_range: float) -> float:
        """Magnitude ``dynamic_range`` dB below the grid maximum."""
        return self.max_pressure * 10 ** (-dynamic_range / 20)


# =============================================================================
# Grid Geometry
# =============================================================================

def validate_dimensions(width, height):
    """
    Check that a grid size is usable.

    Raises:
        InvalidDimensionsError: If width or height is not an int > 0
    """
    for label, value in (('width', width), ('height', height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensionsError(f"Grid {label} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensionsError(f"Grid {label} must be > 0, got {value}")


def pixels_to_meters(pixels, size, venue_size):
    return ((pixels - size / 2) / size) * venue_size


def meters_to_pixels(meters, size, venue_size):
    return (meters / venue_size) * size + size / 2


def grid_coordinates(width, height, params):
    """
    Meter coordinates of the grid columns and rows.

    Args:
        width, height: Grid size in cells
        params: PhysicsParameters (venue_width, venue_depth)

    Returns:
        (xs, ys): 1D arrays of length width and height
    """
    xs = pixels_to_meters(np.arange(width, dtype=float), width, params.venue_width)
    ys = pixels_to_meters(np.arange(height, dtype=float), height, params.venue_depth)
    return xs, ys


def nearest_cell(x, y, width, height, params):
    """
    Grid cell closest to a venue position.

    Returns:
        (row, col): Indices into the (height, width) field arrays
    """
    col = int(round(meters_to_pixels(x, width, params.venue_width)))
    row = int(round(meters_to_pixels(y, height, params.venue_depth)))
    return min(max(row, 0), height - 1), min(max(col, 0), width - 1)


# =============================================================================
# Source Preparation
# =============================================================================

def prepare_sources(active_sources, params):
    """
    Precompute everything the inner loop needs from each active source.

    Args:
        active_sources: Sources that passed mute/solo resolution
        params: PhysicsParameters (frequency)

    Returns:
        prepared: Dict of 1D arrays 'x', 'y', 'amp', 'phase_offset'
    """
    return {
        'x': np.array([s.x for s in active_sources], dtype=float),
        'y': np.array([s.y for s in active_sources], dtype=float),
        'amp': np.array([s.amplitude for s in active_sources], dtype=float),
        'phase_offset': np.array(
            [s.phase_offset(params.frequency) for s in active_sources], dtype=float
        ),
    }


# =============================================================================
# Field Solve
# =============================================================================

def solve_rows(xs, ys, prepared, k, min_distance=SOLVER_CONFIG['min_distance']):
    """
    Coherently sum all prepared sources over a band of grid rows.

    Args:
        xs: Meter x-coordinate of every column (width,)
        ys: Meter y-coordinate of every row in the band (rows,)
        prepared: Output of prepare_sources()
        k: Wavenumber in rad/m
        min_distance: Floor applied to r in the 1/r spreading term

    Returns:
        (re, im): Arrays of shape (rows, width)
    """
    re = np.zeros((len(ys), len(xs)))
    im = np.zeros((len(ys), len(xs)))

    for sx, sy, amp, phase_offset in zip(
        prepared['x'], prepared['y'], prepared['amp'], prepared['phase_offset']
    ):
        dx = xs[np.newaxis, :] - sx
        dy = ys[:, np.newaxis] - sy
        r = np.sqrt(dx * dx + dy * dy)

        mag = amp / np.maximum(r, min_distance)
        phase = -k * r + phase_offset

        re += mag * np.cos(phase)
        im += mag * np.sin(phase)

    return re, im


def _solve_chunk(xs, ys, prepared, k, min_distance):
    re, im = solve_rows(xs, ys, prepared, k, min_distance)
    mag = np.sqrt(re * re + im * im)
    return re, im, mag, float(mag.max())


def _row_chunks(height, rows_per_chunk):
    rows_per_chunk = max(1, int(rows_per_chunk))
    return [(start, min(start + rows_per_chunk, height)) for start in range(0, height, rows_per_chunk)]


def _freeze(array):
    array.flags.writeable = False
    return array


def solve_field(sources, groups, params, width, height, config=None):
    """
    Compute the complex pressure field of a scene on a width × height grid.

    The grid is split into bands of rows that are solved independently
    (joblib, thread backend) and stitched back together; the global maximum
    is the max over the per-band maxima. Nothing is cached between calls.

    Args:
        sources: Sequence of Source
        groups: Sequence of Group
        params: PhysicsParameters
        width, height: Grid size in cells
        config: Dict overriding SOLVER_CONFIG ('n_jobs', 'rows_per_chunk',
                'min_distance')

    Returns:
        field: FieldResult. If no source is active every array is zero,
               max_pressure is 0 and field.is_silent is True.

    Raises:
        InvalidDimensionsError: If width or height is not a positive integer
    """
    validate_dimensions(width, height)
    cfg = {**SOLVER_CONFIG, **(config or {})}

    active = resolve_active_sources(sources, groups)
    logger.debug("Solving %dx%d grid at %.1f Hz with %d/%d active sources",
                 width, height, params.frequency, len(active), len(sources))

    if not active:
        zeros = np.zeros((height, width))
        return FieldResult(
            re=_freeze(zeros.copy()),
            im=_freeze(zeros.copy()),
            mag=_freeze(zeros),
            max_pressure=0.0,
            active_count=0,
        )

    k = params.wavenumber
    xs, ys = grid_coordinates(width, height, params)
    prepared = prepare_sources(active, params)
    chunks = _row_chunks(height, cfg['rows_per_chunk'])

    results = Parallel(n_jobs=cfg['n_jobs'], prefer='threads')(
        delayed(_solve_chunk)(xs, ys[start:stop], prepared, k, cfg['min_distance'])
        for start, stop in chunks
    )

    re = np.concatenate([r[0] for r in results], axis=0)
    im = np.concatenate([r[1] for r in results], axis=0)
    mag = np.concatenate([r[2] for r in results], axis=0)
    max_pressure = max(r[3] for r in results)

    logger.debug("Field solved in %d chunk(s), max pressure %.4g", len(chunks), max_pressure)

    return FieldResult(
        re=_freeze(re),
        im=_freeze(im),
        mag=_freeze(mag),
        max_pressure=max_pressure,
        active_count=len(active),
    )


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'InvalidDimensionsError',
    'FieldResult',
    'validate_dimensions',
    'pixels_to_meters',
    'meters_to_pixels',
    'grid_coordinates',
    'nearest_cell',
    'prepare_sources',
    'solve_rows',
    'solve_field',
]
