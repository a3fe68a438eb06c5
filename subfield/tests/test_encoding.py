"""
Unit tests for the SPL / phase colormaps and RGBA encoding.
"""

import numpy as np
import pytest

from subfield import (
    BACKGROUND_RGB, PhysicsParameters, Source,
    encode_field, heatmap_color, heatmap_colors, nearest_cell, phase_color,
    phase_colors, solve_field, spl_intensity,
)


def _channels_close(c1, c2, tol=1):
    return all(abs(int(a) - int(b)) <= tol for a, b in zip(c1, c2))


class TestHeatmap:
    """SPL colormap stops and interpolation."""

    @pytest.mark.parametrize('value, expected', [
        (0.0, (0, 0, 0)),         # black
        (0.2, (0, 0, 255)),       # blue
        (0.4, (0, 255, 255)),     # cyan
        (0.6, (0, 255, 0)),       # green
        (0.8, (255, 255, 0)),     # yellow
        (0.95, (255, 0, 0)),      # red
        (1.0, (255, 255, 255)),   # white
    ])
    def test_stops(self, value, expected):
        assert heatmap_color(value) == expected

    def test_rounds_half_up(self):
        # 0.5 · 255 = 127.5
        assert heatmap_color(0.1) == (0, 0, 128)

    def test_clamped(self):
        assert heatmap_color(-0.5) == (0, 0, 0)
        assert heatmap_color(1.7) == (255, 255, 255)

    def test_segment_interpolation(self):
        # A quarter of the way from green to yellow only red ramps
        assert heatmap_color(0.65) == (64, 255, 0)

    @pytest.mark.parametrize('stop', [0.2, 0.4, 0.6, 0.8, 0.95])
    def test_continuous_at_stops(self, stop):
        eps = 1e-6
        assert _channels_close(heatmap_color(stop - eps), heatmap_color(stop + eps))

    def test_vectorized_matches_scalar(self):
        values = np.linspace(-0.1, 1.1, 37)
        rgb = heatmap_colors(values)
        assert rgb.shape == (37, 3)
        assert rgb.dtype == np.uint8
        for v, color in zip(values, rgb):
            assert tuple(int(c) for c in color) == heatmap_color(v)


class TestPhaseColormap:
    """Cyclic hue wheel."""

    def test_minus_pi_is_red(self):
        assert phase_color(-np.pi) == (255, 0, 0)

    def test_zero_is_cyan(self):
        assert phase_color(0.0) == (0, 255, 255)

    def test_quarter_turns(self):
        assert _channels_close(phase_color(-np.pi / 2), (128, 255, 0))
        assert _channels_close(phase_color(np.pi / 2), (128, 0, 255))

    @pytest.mark.parametrize('theta', [-2.5, -1.0, 0.3, 1.0, 2.9])
    def test_cyclic(self, theta):
        assert _channels_close(phase_color(theta), phase_color(theta + 2 * np.pi))
        assert _channels_close(phase_color(theta), phase_color(theta - 4 * np.pi))

    def test_fully_saturated(self):
        rgb = phase_colors(np.linspace(-np.pi, np.pi, 100)).astype(int)
        # S = V = 1: one channel at 255 and one at 0 for every hue
        assert np.all(rgb.max(axis=1) == 255)
        assert np.all(rgb.min(axis=1) == 0)


class TestSplIntensity:

    def test_maximum_maps_to_one(self):
        assert spl_intensity(np.array([2.0]), 2.0, 36.0)[0] == pytest.approx(1.0)

    def test_dynamic_range_floor_maps_to_zero(self):
        mag = np.array([10 ** (-36 / 20)])
        assert spl_intensity(mag, 1.0, 36.0)[0] == pytest.approx(0.0, abs=1e-12)

    def test_zero_magnitude_is_zero(self):
        assert spl_intensity(np.array([0.0, 1.0]), 1.0, 36.0)[0] == 0.0

    def test_below_range_is_negative(self):
        # Not clamped here; the colormap clamps
        assert spl_intensity(np.array([1e-4]), 1.0, 36.0)[0] < 0


class TestEncodeField:

    @pytest.fixture
    def single(self, params, center_source):
        return solve_field([center_source], [], params, 100, 100)

    def test_buffer_size(self, params, single):
        rgba = encode_field(single, params, 'SPL')
        assert rgba.shape == (100, 100, 4)
        assert rgba.dtype == np.uint8
        assert len(rgba.tobytes()) == 100 * 100 * 4
        assert np.all(rgba[..., 3] == 255)

    @pytest.mark.parametrize('mode', ['SPL', 'Phase'])
    def test_silent_field_is_background(self, params, mode):
        field = solve_field([Source(id='m', mute=True)], [], params, 30, 20)
        rgba = encode_field(field, params, mode)
        assert rgba.shape == (20, 30, 4)
        assert np.all(rgba[..., :3] == BACKGROUND_RGB)
        assert np.all(rgba[..., 3] == 255)

    def test_spl_hottest_cell_is_white(self, params, single):
        rgba = encode_field(single, params, 'SPL')
        assert tuple(rgba[50, 50, :3]) == (255, 255, 255)

    def test_spl_quiet_cells_are_black(self, params, single):
        # Corners are ~14 m away: far more than 36 dB below the 0.1 m peak
        rgba = encode_field(single, params, 'SPL')
        assert tuple(rgba[0, 0, :3]) == (0, 0, 0)

    def test_phase_suppresses_quiet_cells(self, params, single):
        rgba = encode_field(single, params, 'Phase')
        assert tuple(rgba[0, 0, :3]) == BACKGROUND_RGB
        assert tuple(rgba[50, 50, :3]) != BACKGROUND_RGB

    def test_phase_colors_follow_field(self, params, single):
        rgba = encode_field(single, params, 'Phase')
        row, col = nearest_cell(2.0, 1.0, 100, 100, params)
        angle = np.arctan2(single.im[row, col], single.re[row, col])
        assert tuple(int(c) for c in rgba[row, col, :3]) == phase_color(angle)

    def test_wide_dynamic_range_shows_everything(self, center_source):
        wide = PhysicsParameters(dynamic_range=120.0)
        field = solve_field([center_source], [], wide, 50, 50)
        rgba = encode_field(field, wide, 'Phase')
        assert not np.any(np.all(rgba[..., :3] == BACKGROUND_RGB, axis=-1))

    def test_unknown_mode(self, params, single):
        with pytest.raises(ValueError):
            encode_field(single, params, 'Intensity')

    @pytest.mark.parametrize('dynamic_range', [0.0, -12.0, float('nan')])
    def test_non_positive_dynamic_range(self, center_source, dynamic_range):
        flat = PhysicsParameters(dynamic_range=dynamic_range)
        field = solve_field([center_source], [], flat, 10, 10)
        for mode in ('SPL', 'Phase'):
            with pytest.raises(ValueError, match='Dynamic range'):
                encode_field(field, flat, mode)
        with pytest.raises(ValueError):
            spl_intensity(field.mag, field.max_pressure, dynamic_range)
