# =============================================================================
# WAVEFRONTS: Phase Ring Radii for Overlay Drawing
# =============================================================================
"""
Radii of the circles around a source where its own contribution has phase
0° (peaks) or 180° (troughs).

A source with phase offset φ has phase -k·r + φ at distance r, which is
zero (mod 2π) at

    r = baseR + m·λ,    baseR = φ / (2π) · λ

Troughs sit half a wavelength earlier. Radii below zero are skipped; the
sequence stops at max_radius (default: the venue diagonal).
"""

import math
from typing import Dict, Iterator, List

from .sources import PhysicsParameters, Source

RING_KINDS = ('peak', 'trough')


def base_radius(source: Source, params: PhysicsParameters) -> float:
    """Distance (possibly negative) at which the source's phase is 0 mod 2π."""
    return (source.phase_offset(params.frequency) / (2 * math.pi)) * params.wavelength


def ring_radii(source: Source, params: PhysicsParameters, max_radius: float = None,
               kind: str = 'peak') -> Iterator[float]:
    """
    Lazily produce ring radii in meters, ascending.

    Args:
        source: Source whose rings to compute (position is irrelevant)
        params: PhysicsParameters (frequency, temperature)
        max_radius: Stop once a radius exceeds this (default: params.max_radius)
        kind: 'peak' (0°) or 'trough' (180°)

    Returns:
        radii: Iterator of non-negative radii, each one λ larger than the last.
               Calling ring_radii() again restarts the sequence.

    Raises:
        ValueError: If kind is not 'peak' or 'trough'
    """
    if kind not in RING_KINDS:
        raise ValueError(f"Unknown ring kind '{kind}'. Available: {list(RING_KINDS)}")
    if max_radius is None:
        max_radius = params.max_radius

    lam = params.wavelength
    base = base_radius(source, params)
    if kind == 'trough':
        base -= lam / 2
    return _iter_rings(base, lam, max_radius)


def _iter_rings(base, lam, max_radius):
    m = math.ceil(-base / lam)
    while True:
        r = base + m * lam
        if r > max_radius:
            return
        m += 1
        if r < 0:
            continue
        yield r


def wavefront_rings(source: Source, params: PhysicsParameters,
                    max_radius: float = None) -> Dict[str, List[float]]:
    """Peak and trough radii of one source, as lists keyed by kind."""
    return {kind: list(ring_radii(source, params, max_radius, kind)) for kind in RING_KINDS}


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'RING_KINDS',
    'base_radius',
    'ring_radii',
    'wavefront_rings',
]
