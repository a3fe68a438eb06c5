# =============================================================================
# ENCODING: Field -> RGBA Pixel Buffer
# =============================================================================
"""
Color mapping of a solved field.

Main functions:
    heatmap_color / heatmap_colors: SPL colormap, scalar and vectorized
    phase_color / phase_colors: Cyclic HSV phase colormap, scalar and vectorized
    spl_intensity: Magnitude -> normalized [0, 1] level within the dynamic range
    encode_field: FieldResult -> (height, width, 4) uint8 RGBA image

SPL colormap stops (linear per channel inside each segment):
    0.00 black -> 0.20 blue -> 0.40 cyan -> 0.60 green -> 0.80 yellow
    -> 0.95 red -> 1.00 white
"""

import numpy as np

from .constants import BACKGROUND_RGB, MODE_PHASE, MODE_SPL, VIEW_MODES, linear_to_db


def _round_half_up(values):
    return np.floor(values + 0.5)


# =============================================================================
# SPL Colormap
# =============================================================================

def heatmap_colors(values):
    """
    Map normalized levels to heatmap colors.

    Args:
        values: Array of levels; clamped to [0, 1]

    Returns:
        rgb: uint8 array of shape values.shape + (3,)
    """
    v = np.clip(np.asarray(values, dtype=float), 0.0, 1.0)
    r = np.zeros_like(v)
    g = np.zeros_like(v)
    b = np.zeros_like(v)

    # Black -> Blue
    seg = v < 0.2
    b[seg] = (v[seg] / 0.2) * 255

    # Blue -> Cyan
    seg = (v >= 0.2) & (v < 0.4)
    b[seg] = 255
    g[seg] = ((v[seg] - 0.2) / 0.2) * 255

    # Cyan -> Green
    seg = (v >= 0.4) & (v < 0.6)
    b[seg] = 255 - ((v[seg] - 0.4) / 0.2) * 255
    g[seg] = 255

    # Green -> Yellow
    seg = (v >= 0.6) & (v < 0.8)
    g[seg] = 255
    r[seg] = ((v[seg] - 0.6) / 0.2) * 255

    # Yellow -> Red
    seg = (v >= 0.8) & (v < 0.95)
    r[seg] = 255
    g[seg] = 255 - ((v[seg] - 0.8) / 0.15) * 255

    # Red -> White (hottest 5%)
    seg = v >= 0.95
    r[seg] = 255
    g[seg] = ((v[seg] - 0.95) / 0.05) * 255
    b[seg] = ((v[seg] - 0.95) / 0.05) * 255

    rgb = np.stack([r, g, b], axis=-1)
    return _round_half_up(rgb).astype(np.uint8)


def heatmap_color(value):
    """Heatmap color for a single level, as an (r, g, b) tuple of ints."""
    return tuple(int(c) for c in heatmap_colors(np.array([value]))[0])


# =============================================================================
# Phase Colormap
# =============================================================================

def phase_colors(radians):
    """
    Map phase angles to a cyclic hue wheel (saturation = value = 1).

    -π maps to red, then yellow, green, cyan, blue, magenta and back to red
    at +π.

    Args:
        radians: Array of phase angles (any range; wrapped)

    Returns:
        rgb: uint8 array of shape radians.shape + (3,)
    """
    t = (np.asarray(radians, dtype=float) + np.pi) / (2 * np.pi)
    t = t - np.floor(t)

    i = np.floor(t * 6)
    f = t * 6 - i
    sector = i.astype(int) % 6
    q = 1 - f
    one = np.ones_like(f)
    zero = np.zeros_like(f)

    r = np.choose(sector, [one, q, zero, zero, f, one])
    g = np.choose(sector, [f, one, one, q, zero, zero])
    b = np.choose(sector, [zero, zero, f, one, one, q])

    rgb = np.stack([r, g, b], axis=-1) * 255
    return _round_half_up(rgb).astype(np.uint8)


def phase_color(radians):
    """Phase color for a single angle, as an (r, g, b) tuple of ints."""
    return tuple(int(c) for c in phase_colors(np.array([radians]))[0])


# =============================================================================
# Field Encoding
# =============================================================================

def _check_dynamic_range(dynamic_range):
    if not dynamic_range > 0:
        raise ValueError(f"Dynamic range must be > 0 dB, got {dynamic_range}")


def spl_intensity(mag, max_pressure, dynamic_range):
    """
    Normalized SPL level of each cell.

    0 dB relative to the grid maximum maps to 1, -dynamic_range dB to 0.
    Cells with zero magnitude get 0. Values are not clamped here.

    Raises:
        ValueError: If dynamic_range is not a positive number of dB
    """
    _check_dynamic_range(dynamic_range)
    mag = np.asarray(mag, dtype=float)
    intensity = np.zeros_like(mag)
    loud = mag > 0
    if max_pressure > 0 and np.any(loud):
        db_relative = linear_to_db(mag[loud] / max_pressure)
        intensity[loud] = (db_relative + dynamic_range) / dynamic_range
    return intensity


def background_image(width, height):
    """Flat background RGBA image, used when nothing is sounding."""
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = BACKGROUND_RGB
    rgba[..., 3] = 255
    return rgba


def encode_field(field, params, mode=MODE_SPL):
    """
    Render a solved field to an RGBA image.

    Args:
        field: FieldResult from solve_field()
        params: PhysicsParameters (dynamic_range)
        mode: 'SPL' (magnitude heatmap) or 'Phase' (hue wheel)

    Returns:
        rgba: (height, width, 4) uint8 array, row-major, origin top-left.
              rgba.tobytes() is the width·height·4 byte pixel buffer.

    Raises:
        ValueError: If mode is not one of VIEW_MODES, or params.dynamic_range <= 0
    """
    if mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode '{mode}'. Available: {list(VIEW_MODES)}")
    _check_dynamic_range(params.dynamic_range)

    if field.is_silent:
        return background_image(field.width, field.height)

    rgba = np.empty((field.height, field.width, 4), dtype=np.uint8)
    rgba[..., 3] = 255

    if mode == MODE_SPL:
        intensity = spl_intensity(field.mag, field.max_pressure, params.dynamic_range)
        rgba[..., :3] = heatmap_colors(intensity)
    elif mode == MODE_PHASE:
        # Phase is meaningless where the field is below the displayed range
        quiet = field.mag <= field.min_pressure(params.dynamic_range)
        rgba[..., :3] = phase_colors(np.arctan2(field.im, field.re))
        rgba[quiet, :3] = BACKGROUND_RGB

    return rgba


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'heatmap_color',
    'heatmap_colors',
    'phase_color',
    'phase_colors',
    'spl_intensity',
    'background_image',
    'encode_field',
]
