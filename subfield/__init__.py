# =============================================================================
# subfield - Subwoofer Array Interference Field Engine
# =============================================================================
"""
This package computes and renders the low-frequency sound field of an array
of point sources (subwoofers) over a 2D venue plane.

Modules:
    constants: Physical constants, defaults, dB / speed-of-sound helpers
    sources: Source, Group, PhysicsParameters, mute/solo resolution, store edits
    presets: Broadside, end-fire, gradient and inverted-stack layouts
    simulation: Free-field superposition solver (solve_field)
    encoding: SPL and phase colormaps, RGBA encoding (encode_field)
    wavefronts: Peak/trough ring radii for overlays (ring_radii)
    render: Solve + encode pipeline, LatestFrame hand-off
    visualization: matplotlib plots of fields and overlays

Quick Start:
    from subfield import (
        PhysicsParameters, build_preset, solve_field, encode_field, ring_radii,
    )

    params = PhysicsParameters(frequency=60, temperature=20)
    sources = build_preset('endfire', params)

    field = solve_field(sources, [], params, width=200, height=200)
    rgba = encode_field(field, params, mode='SPL')     # (200, 200, 4) uint8

    peaks = list(ring_radii(sources[0], params, kind='peak'))
"""

# Re-export everything from submodules for convenience
from .constants import *
from .sources import *
from .presets import *
from .simulation import *
from .encoding import *
from .wavefronts import *
from .render import *
from .visualization import *
from .logging_config import setup_logging

__version__ = "0.1.0"
