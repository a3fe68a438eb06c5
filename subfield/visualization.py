# =============================================================================
# VISUALIZATION: Plotting Functions for Sound Field Inspection
# =============================================================================
"""
Visualization functions for subwoofer array fields.

Main functions:
    visualize_field: Two-panel display (SPL heatmap, phase map) of one scene
    plot_field: One heatmap with venue grid, source markers and wavefront rings
    plot_colormaps: Reference strips of the SPL and phase color scales
    save_rgba: Write an encoded RGBA buffer straight to an image file

All plots use venue coordinates in meters with the origin at the venue
center and y growing downward, matching the pixel buffer layout.
"""

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.cm import ScalarMappable
from matplotlib.colors import LinearSegmentedColormap, Normalize

from .constants import (
    BACKGROUND_RGB,
    DEFAULT_SOURCE_COLOR,
    MODE_PHASE,
    MODE_SPL,
    MUTED_SOURCE_COLOR,
)
from .encoding import heatmap_colors, phase_colors
from .render import render_frame
from .sources import is_effectively_muted
from .wavefronts import ring_radii


# =============================================================================
# Color Schemes
# =============================================================================

SPL_CMAP = LinearSegmentedColormap.from_list(
    'subfield_spl', heatmap_colors(np.linspace(0, 1, 256)) / 255.0
)
PHASE_CMAP = LinearSegmentedColormap.from_list(
    'subfield_phase', phase_colors(np.linspace(-np.pi, np.pi, 256)) / 255.0
)

BACKGROUND_COLOR = '#%02x%02x%02x' % BACKGROUND_RGB
GRID_COLOR = (1.0, 1.0, 1.0, 0.1)
PEAK_RING_COLOR = (1.0, 1.0, 1.0, 0.4)
TROUGH_RING_COLOR = (1.0, 1.0, 1.0, 0.2)


def _venue_limits(params):
    # left, right, bottom, top: y grows downward
    half_w = params.venue_width / 2
    half_d = params.venue_depth / 2
    return [-half_w, half_w, half_d, -half_d]


def _extent(params, width, height):
    """
    imshow extent for a width x height field.

    Cell p is solved at (p - size/2) / size * venue, so each image pixel is
    centered on that point, half a cell up and left of the venue box.
    """
    dx = params.venue_width / width
    dy = params.venue_depth / height
    left, right, bottom, top = _venue_limits(params)
    return [left - dx / 2, right - dx / 2, bottom - dy / 2, top - dy / 2]


def _draw_venue_grid(ax, params):
    """Grid lines every ~1/10 of the venue width (at least 1 m)."""
    spacing = max(1, round(params.venue_width / 10))
    xs = np.arange(-params.venue_width / 2, params.venue_width / 2 + 1e-9, spacing)
    ys = np.arange(-params.venue_depth / 2, params.venue_depth / 2 + 1e-9, spacing)
    for x in xs:
        ax.axvline(x, color=GRID_COLOR, linewidth=1)
    for y in ys:
        ax.axhline(y, color=GRID_COLOR, linewidth=1)
    ax.set_xticks(xs)
    ax.set_yticks(ys)


def _draw_wavefronts(ax, source, params):
    """Solid circles at phase peaks, dashed circles at troughs."""
    for r in ring_radii(source, params, kind='peak'):
        ax.add_patch(patches.Circle(
            (source.x, source.y), r,
            fill=False, edgecolor=PEAK_RING_COLOR, linewidth=1,
        ))
    for r in ring_radii(source, params, kind='trough'):
        ax.add_patch(patches.Circle(
            (source.x, source.y), r,
            fill=False, edgecolor=TROUGH_RING_COLOR, linewidth=1, linestyle=(0, (4, 4)),
        ))


def _draw_sources(ax, sources, groups, selected_ids):
    group_colors = {g.id: g.color for g in groups}

    for s in sources:
        selected = s.id in selected_ids
        if is_effectively_muted(s, groups):
            color = MUTED_SOURCE_COLOR
        else:
            color = group_colors.get(s.group_id, DEFAULT_SOURCE_COLOR)

        # Selection ring
        if selected:
            ax.plot(s.x, s.y, 'o', markersize=16, markerfacecolor='none',
                    markeredgecolor='white', markeredgewidth=2)

        edge = 'white' if selected or s.group_id in group_colors else '#cccccc'
        ax.plot(s.x, s.y, 'o', markersize=10, markerfacecolor=color,
                markeredgecolor=edge, markeredgewidth=1.5)
        ax.annotate(s.name, (s.x, s.y), textcoords='offset points', xytext=(0, 10),
                    ha='center', color='white', fontsize=8)


def _draw_field(ax, frame, sources, groups, params, selected_ids=()):
    """Draw one rendered frame plus overlays onto an axis."""
    ax.set_facecolor(BACKGROUND_COLOR)
    ax.imshow(frame.rgba, extent=_extent(params, frame.field.width, frame.field.height),
              interpolation='nearest')
    _draw_venue_grid(ax, params)

    if frame.mode == MODE_PHASE:
        for s in sources:
            if s.id in selected_ids:
                _draw_wavefronts(ax, s, params)

    _draw_sources(ax, sources, groups, selected_ids)

    limits = _venue_limits(params)
    ax.set_xlim(limits[0], limits[1])
    ax.set_ylim(limits[2], limits[3])
    ax.set_aspect('equal')
    ax.set_xlabel('x (m)')
    ax.set_ylabel('y (m)')


def _add_colorbar(fig, ax, mode, params):
    if mode == MODE_SPL:
        mappable = ScalarMappable(norm=Normalize(-params.dynamic_range, 0), cmap=SPL_CMAP)
        label = 'Level re. max (dB)'
    else:
        mappable = ScalarMappable(norm=Normalize(-180, 180), cmap=PHASE_CMAP)
        label = 'Phase (°)'
    fig.colorbar(mappable, ax=ax, label=label)


def _finish(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close(fig)
    else:
        plt.show()
    return fig


def plot_field(sources, groups, params, width=None, height=None, mode=MODE_SPL,
               selected_ids=(), title=None, save_path=None, config=None):
    """
    Render a scene and plot it with its overlays.

    Args:
        sources, groups: Scene snapshot
        params: PhysicsParameters
        width, height: Grid size (default: params.grid_shape())
        mode: 'SPL' or 'Phase'
        selected_ids: Source ids to highlight (and draw rings for in Phase mode)
        title: Optional plot title
        save_path: If provided, save figure to this path instead of displaying
        config: Optional solver config overrides

    Returns:
        fig: matplotlib Figure object
    """
    if width is None or height is None:
        width, height = params.grid_shape()
    frame = render_frame(sources, groups, params, width, height, mode, config=config)

    fig, ax = plt.subplots(figsize=(8, 8))
    _draw_field(ax, frame, sources, groups, params, selected_ids)
    _add_colorbar(fig, ax, mode, params)
    ax.set_title(title or f"{mode} @ {params.frequency:g} Hz")

    return _finish(fig, save_path)


def visualize_field(sources, groups, params, width=None, height=None,
                    selected_ids=(), title=None, save_path=None, config=None):
    """
    Side-by-side SPL and phase view of one scene.

    Args:
        sources, groups: Scene snapshot
        params: PhysicsParameters
        width, height: Grid size (default: params.grid_shape())
        selected_ids: Source ids whose wavefront rings are drawn on the phase panel
        title: Optional title for the figure
        save_path: If provided, save figure to this path instead of displaying
        config: Optional solver config overrides

    Returns:
        fig: The matplotlib figure object
    """
    if width is None or height is None:
        width, height = params.grid_shape()

    fig, axes = plt.subplots(1, 2, figsize=(16, 7))
    if title:
        fig.suptitle(title, fontsize=14, fontweight='bold')

    # -------------------------------------------------------------------------
    # Panel 1: SPL, Panel 2: Phase
    # -------------------------------------------------------------------------
    for ax, mode in zip(axes, (MODE_SPL, MODE_PHASE)):
        frame = render_frame(sources, groups, params, width, height, mode, config=config)
        _draw_field(ax, frame, sources, groups, params, selected_ids)
        _add_colorbar(fig, ax, mode, params)
        ax.set_title(f"{mode} @ {params.frequency:g} Hz, {params.temperature:g} °C")

    return _finish(fig, save_path)


def plot_colormaps(dynamic_range=36.0, save_path=None):
    """
    Show the SPL and phase color scales as labelled strips.

    Args:
        dynamic_range: dB span of the SPL scale
        save_path: Optional path to save the figure

    Returns:
        fig: matplotlib Figure object
    """
    fig, axes = plt.subplots(2, 1, figsize=(8, 2.5))

    spl = heatmap_colors(np.linspace(0, 1, 512))[np.newaxis, :, :]
    axes[0].imshow(spl, aspect='auto', extent=[-dynamic_range, 0, 0, 1])
    axes[0].set_yticks([])
    axes[0].set_xlabel('Level re. max (dB)')

    phase = phase_colors(np.linspace(-np.pi, np.pi, 512))[np.newaxis, :, :]
    axes[1].imshow(phase, aspect='auto', extent=[-180, 180, 0, 1])
    axes[1].set_yticks([])
    axes[1].set_xlabel('Phase (°)')

    return _finish(fig, save_path)


def save_rgba(rgba, path):
    """Write an encoded (height, width, 4) uint8 buffer to an image file."""
    plt.imsave(path, np.ascontiguousarray(rgba))
    return path


# =============================================================================
# Module-level exports
# =============================================================================
__all__ = [
    'visualize_field',
    'plot_field',
    'plot_colormaps',
    'save_rgba',
    'SPL_CMAP',
    'PHASE_CMAP',
    'BACKGROUND_COLOR',
]
