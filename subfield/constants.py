# =============================================================================
# CONSTANTS: Physical Parameters and Rendering Defaults
# =============================================================================
"""
Physical and rendering parameters for the subwoofer interference field engine.

Constants are organized into:
    - Physical constants (speed of sound model)
    - Field solver settings (distance floor, parallelization)
    - Default simulation settings (frequency, venue, dynamic range)
    - Colors (background, markers, group palette)
    - Helper functions for dB / speed of sound / wavelength conversion
"""

import os

import numpy as np

# =============================================================================
# Physical Constants
# =============================================================================
# Linear approximation of the speed of sound in air:
#   c(T) = 331.3 + 0.606 * T    (T in °C, c in m/s)
SPEED_OF_SOUND_0C = 331.3       # m/s at 0 °C
SPEED_OF_SOUND_SLOPE = 0.606    # m/s per °C

# =============================================================================
# Field Solver
# =============================================================================
# Distances below MIN_DISTANCE are clamped when computing 1/r spreading.
# Keeps the magnitude finite at (and right next to) a source.
MIN_DISTANCE = 0.1              # meters

SOLVER_CONFIG = {
    # Parallelization
    'n_jobs': int(os.environ.get('SUBFIELD_N_JOBS', 1)),  # 1=serial, -1=all cores
    'rows_per_chunk': 64,       # Grid rows solved per joblib task

    # Physics
    'min_distance': MIN_DISTANCE,
}

# =============================================================================
# View Modes
# =============================================================================
MODE_SPL = 'SPL'
MODE_PHASE = 'Phase'
VIEW_MODES = (MODE_SPL, MODE_PHASE)

# =============================================================================
# Default Simulation Settings
# =============================================================================
DEFAULT_SETTINGS = {
    'frequency': 60.0,          # Hz, typical subwoofer crossover region
    'temperature': 20.0,        # °C
    'venue_width': 20.0,        # m
    'venue_depth': 20.0,        # m
    'resolution': 5.0,          # grid pixels per meter
    'dynamic_range': 36.0,      # dB span shown above background
}

# =============================================================================
# Colors
# =============================================================================
BACKGROUND_RGB = (15, 23, 42)   # #0f172a, "no sound field" / too quiet
DEFAULT_SOURCE_COLOR = '#3b82f6'
MUTED_SOURCE_COLOR = '#ef4444'

# Cycled through when new groups are created
GROUP_COLORS = ['#3b82f6', '#ef4444', '#22c55e', '#facc15', '#a855f7', '#f97316', '#ec4899']

# =============================================================================
# Helper Functions
# =============================================================================

def speed_of_sound(temperature):
    """
    Speed of sound in air for a temperature in °C.

    Args:
        temperature: Air temperature in °C

    Returns:
        c: Speed of sound in m/s
    """
    return SPEED_OF_SOUND_0C + SPEED_OF_SOUND_SLOPE * temperature


def db_to_linear(db):
    """Convert a level in dB to a linear amplitude factor (20·log10 convention)."""
    return 10 ** (db / 20)


def linear_to_db(linear):
    """Convert a linear amplitude factor to dB. Zero maps to -inf."""
    with np.errstate(divide='ignore'):
        return 20 * np.log10(linear)


def wavelength(frequency, c):
    """Wavelength in meters for a frequency in Hz and speed of sound c in m/s."""
    return c / frequency


def wavenumber(frequency, c):
    """
    Angular wavenumber k = 2πf / c.

    Args:
        frequency: Frequency in Hz
        c: Speed of sound in m/s

    Returns:
        k: Wavenumber in rad/m
    """
    return 2 * np.pi * frequency / c


def delay_to_phase(delay_ms, frequency, polarity=False):
    """
    Phase offset of a source's output in radians.

    A delay of t seconds at frequency f lags the source by ω·t, and an
    inverted polarity adds π:
        φ = -2π·f·(delay/1000) + (π if polarity else 0)

    Args:
        delay_ms: Signal delay in milliseconds
        frequency: Frequency in Hz
        polarity: True if the source is polarity-inverted

    Returns:
        phase_offset: Phase in radians (not wrapped)
    """
    phase_offset = -(2 * np.pi * frequency * (delay_ms / 1000))
    if polarity:
        phase_offset += np.pi
    return phase_offset


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    # Physical constants
    'SPEED_OF_SOUND_0C', 'SPEED_OF_SOUND_SLOPE',
    # Solver
    'MIN_DISTANCE', 'SOLVER_CONFIG',
    # Modes
    'MODE_SPL', 'MODE_PHASE', 'VIEW_MODES',
    # Defaults
    'DEFAULT_SETTINGS',
    # Colors
    'BACKGROUND_RGB', 'DEFAULT_SOURCE_COLOR', 'MUTED_SOURCE_COLOR', 'GROUP_COLORS',
    # Functions
    'speed_of_sound', 'db_to_linear', 'linear_to_db',
    'wavelength', 'wavenumber', 'delay_to_phase',
]
