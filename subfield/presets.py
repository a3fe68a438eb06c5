# =============================================================================
# PRESETS: Standard Subwoofer Array Layouts
# =============================================================================
"""
Generators for common subwoofer arrangements.

Each generator takes the current PhysicsParameters (spacing and delays of the
directional arrays depend on the wavelength) and returns a fresh tuple of
Sources. Nothing here touches an existing scene; callers replace their
source list with the result.

Presets:
    broadside: Four subs in a line across the stage, all in phase
    endfire: Four subs in a line pointing into the venue, λ/4 apart,
             delayed so their output adds up in the forward direction
    gradient: Front/rear cardioid pair, rear sub delayed and inverted
    inverted_stack: Three subs with the middle one flipped (cardioid stack)
"""

from typing import Callable, Dict, Tuple

from .sources import PhysicsParameters, Source, generate_id


def _sub(name, x, y, delay=0.0, polarity=False):
    return Source(id=generate_id(), name=name, x=x, y=y, delay=delay, polarity=polarity)


def broadside(params: PhysicsParameters) -> Tuple[Source, ...]:
    return tuple(
        _sub(f"Sub {i + 1}", offset, 0.0)
        for i, offset in enumerate([-1.5, -0.5, 0.5, 1.5])
    )


def endfire(params: PhysicsParameters) -> Tuple[Source, ...]:
    """
    End-fire array along y.

    Sources are λ/4 apart; each is delayed by the travel time across one
    spacing so all four arrive in phase on the +y side.
    """
    c = params.speed_of_sound
    spacing = params.wavelength / 4
    delay_ms = (spacing / c) * 1000
    return tuple(
        _sub(f"EF {i + 1}", 0.0, i * spacing - 1.5 * spacing, delay=i * delay_ms)
        for i in range(4)
    )


def gradient(params: PhysicsParameters) -> Tuple[Source, ...]:
    """
    Gradient (cardioid) pair: the rear sub sits λ/4 behind the front one,
    delayed by the λ/4 travel time and polarity-inverted, cancelling the
    rearward radiation.
    """
    c = params.speed_of_sound
    dist = params.wavelength / 4
    time_ms = (dist / c) * 1000
    return (
        _sub('Front', 0.0, 0.0),
        _sub('Rear', 0.0, -dist, delay=time_ms, polarity=True),
    )


def inverted_stack(params: PhysicsParameters) -> Tuple[Source, ...]:
    return (
        _sub('Sub 1', -0.6, 0.0),
        _sub('Sub 2 (Cardioid)', 0.0, 0.1, polarity=True),
        _sub('Sub 3', 0.6, 0.0),
    )


PRESETS: Dict[str, Callable[[PhysicsParameters], Tuple[Source, ...]]] = {
    'broadside': broadside,
    'endfire': endfire,
    'gradient': gradient,
    'inverted_stack': inverted_stack,
}


def build_preset(name: str, params: PhysicsParameters = None) -> Tuple[Source, ...]:
    """
    Build one of the named preset arrays.

    Args:
        name: One of PRESETS ('broadside', 'endfire', 'gradient', 'inverted_stack')
        params: Physics parameters (default: PhysicsParameters())

    Returns:
        sources: Tuple of newly created Sources

    Raises:
        ValueError: If the preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name](params or PhysicsParameters())


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'PRESETS',
    'build_preset',
    'broadside',
    'endfire',
    'gradient',
    'inverted_stack',
]
