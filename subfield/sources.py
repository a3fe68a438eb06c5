# =============================================================================
# SOURCES: Sources, Groups, Physics Parameters and Store Operations
# =============================================================================
"""
Immutable input records for the field engine, plus the pure functions that
edit collections of them.

The engine never mutates these objects. Every edit returns a new tuple, so a
solve always runs against a frozen snapshot of the scene.

Records:
    Source: One point source (subwoofer) with gain, delay, polarity, mute/solo
    Group: Optional aggregation of sources with its own mute/solo
    PhysicsParameters: Frequency, temperature, venue size, dynamic range

Mute/solo resolution (two stages, shared by every consumer):
    is_solo_active: Is any source or group soloed anywhere?
    is_source_active: Per-source predicate given its group and the solo state
    resolve_active_sources: Apply both stages to a whole scene

Store operations:
    update_sources, translate_sources, add_source, clone_source, remove_sources,
    create_group, update_group, delete_group
"""

import math
import uuid
from dataclasses import dataclass, fields, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_SETTINGS,
    GROUP_COLORS,
    db_to_linear,
    delay_to_phase,
    speed_of_sound,
    wavelength,
    wavenumber,
)


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class Source:
    """A point monopole source placed on the venue plane."""
    id: str
    name: str = ''
    x: float = 0.0           # meters from venue center
    y: float = 0.0           # meters from venue center
    z: float = 0.0           # reserved for 3D, ignored by the solver
    gain: float = 0.0        # dB
    delay: float = 0.0       # milliseconds
    polarity: bool = False   # True = inverted
    mute: bool = False
    solo: bool = False
    group_id: Optional[str] = None

    @property
    def amplitude(self) -> float:
        return db_to_linear(self.gain)

    def phase_offset(self, frequency: float) -> float:
        """Phase of this source's output at ``frequency`` (delay + polarity)."""
        return delay_to_phase(self.delay, frequency, self.polarity)


@dataclass(frozen=True)
class Group:
    """A named set of sources sharing mute/solo switches."""
    id: str
    name: str = ''
    color: str = GROUP_COLORS[0]
    mute: bool = False
    solo: bool = False


@dataclass(frozen=True)
class PhysicsParameters:
    """Global simulation settings for one solve."""
    frequency: float = DEFAULT_SETTINGS['frequency']
    temperature: float = DEFAULT_SETTINGS['temperature']
    venue_width: float = DEFAULT_SETTINGS['venue_width']
    venue_depth: float = DEFAULT_SETTINGS['venue_depth']
    resolution: float = DEFAULT_SETTINGS['resolution']
    dynamic_range: float = DEFAULT_SETTINGS['dynamic_range']

    @property
    def speed_of_sound(self) -> float:
        return speed_of_sound(self.temperature)

    @property
    def wavelength(self) -> float:
        return wavelength(self.frequency, self.speed_of_sound)

    @property
    def wavenumber(self) -> float:
        return wavenumber(self.frequency, self.speed_of_sound)

    @property
    def max_radius(self) -> float:
        """Venue diagonal, the farthest any ring needs to be drawn."""
        return math.sqrt(self.venue_width ** 2 + self.venue_depth ** 2)

    def grid_shape(self) -> Tuple[int, int]:
        """(width, height) in grid cells for the configured resolution."""
        width = max(1, int(round(self.venue_width * self.resolution)))
        height = max(1, int(round(self.venue_depth * self.resolution)))
        return width, height


# =============================================================================
# Mute / Solo Resolution
# =============================================================================

def _group_index(groups: Iterable[Group]) -> Dict[str, Group]:
    return {g.id: g for g in groups}


def is_solo_active(sources: Iterable[Source], groups: Iterable[Group]) -> bool:
    """Stage 1: True if any source or any group is soloed."""
    return any(s.solo for s in sources) or any(g.solo for g in groups)


def is_source_active(source: Source, group: Optional[Group], solo_active: bool) -> bool:
    """
    Stage 2: decide whether one source contributes to the field.

    Args:
        source: The source to test
        group: The source's group, or None if it has none (or it is unknown)
        solo_active: Result of is_solo_active() for the whole scene

    Returns:
        True if the source is neither muted (itself or via its group) nor
        excluded by someone else's solo
    """
    group_mute = group.mute if group is not None else False
    group_solo = group.solo if group is not None else False

    if source.mute or group_mute:
        return False
    if solo_active:
        return source.solo or group_solo
    return True


def is_effectively_muted(source: Source, groups: Iterable[Group]) -> bool:
    """True if the source or its group is muted (solo state not considered)."""
    group = _group_index(groups).get(source.group_id)
    return source.mute or (group.mute if group is not None else False)


def resolve_active_sources(sources: Sequence[Source], groups: Sequence[Group]) -> List[Source]:
    """
    Return the sources that contribute to the field, in input order.

    Args:
        sources: All sources in the scene
        groups: All groups in the scene

    Returns:
        active: List of sources passing the mute/solo resolution
    """
    by_id = _group_index(groups)
    solo_active = is_solo_active(sources, groups)
    return [
        s for s in sources
        if is_source_active(s, by_id.get(s.group_id), solo_active)
    ]


# =============================================================================
# Store Operations
# =============================================================================

_SOURCE_FIELDS = frozenset(f.name for f in fields(Source))
_GROUP_FIELDS = frozenset(f.name for f in fields(Group))


def generate_id() -> str:
    return uuid.uuid4().hex[:9]


def _check_fields(changes, allowed, kind):
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} field(s) {sorted(unknown)}. Available: {sorted(allowed)}")
    if 'id' in changes:
        raise ValueError(f"The {kind} id cannot be changed")


def update_sources(sources: Sequence[Source], ids: Iterable[str], **changes) -> Tuple[Source, ...]:
    """
    Apply the same sparse update to every source whose id is in ``ids``.

    Example:
        sources = update_sources(sources, ['a', 'b'], gain=-3.0, polarity=True)

    Raises:
        ValueError: If ``changes`` names a field Source does not have
    """
    _check_fields(changes, _SOURCE_FIELDS, 'source')
    ids = set(ids)
    return tuple(replace(s, **changes) if s.id in ids else s for s in sources)


def translate_sources(sources: Sequence[Source], ids: Iterable[str], dx: float, dy: float) -> Tuple[Source, ...]:
    """Move the selected sources by (dx, dy) meters."""
    ids = set(ids)
    return tuple(
        replace(s, x=s.x + dx, y=s.y + dy) if s.id in ids else s
        for s in sources
    )


def add_source(sources: Sequence[Source], **values) -> Tuple[Source, ...]:
    """Append a new source at the venue center (or wherever ``values`` says)."""
    values.setdefault('id', generate_id())
    values.setdefault('name', f"Sub {len(sources) + 1}")
    return tuple(sources) + (Source(**values),)


def clone_source(sources: Sequence[Source], source_id: str) -> Tuple[Source, ...]:
    """Duplicate a source, offset by half a meter in x and y."""
    original = next((s for s in sources if s.id == source_id), None)
    if original is None:
        return tuple(sources)
    copy = replace(
        original,
        id=generate_id(),
        name=f"{original.name} (Copy)",
        x=original.x + 0.5,
        y=original.y + 0.5,
    )
    return tuple(sources) + (copy,)


def remove_sources(sources: Sequence[Source], ids: Iterable[str]) -> Tuple[Source, ...]:
    ids = set(ids)
    return tuple(s for s in sources if s.id not in ids)


def create_group(groups: Sequence[Group], sources: Sequence[Source],
                 source_ids: Iterable[str] = ()) -> Tuple[Tuple[Group, ...], Tuple[Source, ...]]:
    """
    Create a new group and assign the given sources to it.

    Groups are named "Group A", "Group B", ... and colored from GROUP_COLORS
    in creation order.

    Returns:
        (groups, sources): The updated collections
    """
    n = len(groups)
    group = Group(
        id=generate_id(),
        name=f"Group {chr(65 + n)}",
        color=GROUP_COLORS[n % len(GROUP_COLORS)],
    )
    source_ids = list(source_ids)
    if source_ids:
        sources = update_sources(sources, source_ids, group_id=group.id)
    return tuple(groups) + (group,), tuple(sources)


def update_group(groups: Sequence[Group], group_id: str, **changes) -> Tuple[Group, ...]:
    _check_fields(changes, _GROUP_FIELDS, 'group')
    return tuple(replace(g, **changes) if g.id == group_id else g for g in groups)


def delete_group(groups: Sequence[Group], sources: Sequence[Source],
                 group_id: str) -> Tuple[Tuple[Group, ...], Tuple[Source, ...]]:
    """Remove a group and unassign its sources."""
    groups = tuple(g for g in groups if g.id != group_id)
    sources = tuple(
        replace(s, group_id=None) if s.group_id == group_id else s
        for s in sources
    )
    return groups, sources


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'Source', 'Group', 'PhysicsParameters',
    'is_solo_active', 'is_source_active', 'is_effectively_muted',
    'resolve_active_sources',
    'generate_id', 'update_sources', 'translate_sources', 'add_source',
    'clone_source', 'remove_sources', 'create_group', 'update_group',
    'delete_group',
]
