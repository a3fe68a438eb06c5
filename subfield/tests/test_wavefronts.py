"""
Unit tests for wavefront ring geometry.
"""

import itertools
import math

import numpy as np
import pytest

from subfield import PhysicsParameters, Source, base_radius, ring_radii, wavefront_rings


class TestPeakRings:

    def test_undelayed_source_starts_at_zero(self, params, center_source):
        radii = list(ring_radii(center_source, params, kind='peak'))
        assert radii[0] == 0.0
        assert radii[1] == pytest.approx(params.wavelength)

    def test_constant_spacing(self, params):
        s = Source(id='s', delay=3.7)
        radii = np.array(list(ring_radii(s, params, kind='peak')))
        assert len(radii) > 2
        assert np.all(np.diff(radii) > 0)
        np.testing.assert_allclose(np.diff(radii), params.wavelength)

    @pytest.mark.parametrize('delay, polarity', [(0.0, False), (2.0, False), (5.5, True), (0.0, True), (20.0, False)])
    def test_first_ring_is_smallest_non_negative(self, params, delay, polarity):
        s = Source(id='s', delay=delay, polarity=polarity)
        lam = params.wavelength
        first = next(ring_radii(s, params, kind='peak'))
        expected = base_radius(s, params) % lam
        assert 0 <= first < lam
        assert first == pytest.approx(expected, abs=1e-9) or first == pytest.approx(expected - lam, abs=1e-9)

    def test_delay_moves_rings_inward(self, params):
        # 2 ms at 60 Hz lags 0.12 of a period: first peak at 0.88 λ
        s = Source(id='s', delay=2.0)
        first = next(ring_radii(s, params, kind='peak'))
        assert first == pytest.approx(0.88 * params.wavelength)

    def test_polarity_shifts_half_wavelength(self, params, center_source):
        inverted = Source(id='i', polarity=True)
        first = next(ring_radii(inverted, params, kind='peak'))
        assert first == pytest.approx(params.wavelength / 2)


class TestTroughRings:

    def test_undelayed_source(self, params, center_source):
        radii = list(ring_radii(center_source, params, kind='trough'))
        assert radii[0] == pytest.approx(params.wavelength / 2)
        np.testing.assert_allclose(np.diff(radii), params.wavelength)

    def test_troughs_interleave_peaks(self, params):
        s = Source(id='s', delay=1.3)
        peaks = list(ring_radii(s, params, kind='peak'))
        troughs = list(ring_radii(s, params, kind='trough'))
        merged = sorted([(r, 'peak') for r in peaks] + [(r, 'trough') for r in troughs])
        kinds = [k for _, k in merged]
        assert all(a != b for a, b in zip(kinds, kinds[1:]))

    def test_no_negative_radii(self, params):
        for delay in np.linspace(0, 20, 41):
            s = Source(id='s', delay=float(delay), polarity=bool(int(delay) % 2))
            for kind in ('peak', 'trough'):
                assert all(r >= 0 for r in ring_radii(s, params, kind=kind))


class TestTermination:

    def test_stops_at_venue_diagonal(self, params, center_source):
        radii = list(ring_radii(center_source, params))
        diagonal = math.sqrt(20.0 ** 2 + 20.0 ** 2)
        assert radii[-1] <= diagonal
        assert radii[-1] + params.wavelength > diagonal
        # λ ≈ 5.72 m: 0, λ, 2λ, 3λ, 4λ fit inside 28.3 m
        assert len(radii) == 5

    def test_custom_max_radius(self, params, center_source):
        radii = list(ring_radii(center_source, params, max_radius=10.0))
        assert radii == pytest.approx([0.0, params.wavelength])

    def test_lazy_and_restartable(self, params, center_source):
        endless = ring_radii(center_source, params, max_radius=math.inf)
        head = list(itertools.islice(endless, 100))
        assert len(head) == 100
        again = list(itertools.islice(ring_radii(center_source, params, max_radius=math.inf), 100))
        assert head == again

    def test_empty_when_max_radius_negative(self, params, center_source):
        assert list(ring_radii(center_source, params, max_radius=-1.0)) == []


class TestRingHelpers:

    def test_unknown_kind(self, params, center_source):
        with pytest.raises(ValueError):
            ring_radii(center_source, params, kind='node')

    def test_wavefront_rings(self, params, center_source):
        rings = wavefront_rings(center_source, params, max_radius=11.0)
        assert set(rings) == {'peak', 'trough'}
        assert rings['peak'] == pytest.approx([0.0, params.wavelength])
        assert rings['trough'] == pytest.approx([params.wavelength / 2, 1.5 * params.wavelength])

    def test_wavelength_follows_temperature(self, center_source):
        cold = PhysicsParameters(frequency=50.0, temperature=0.0)
        hot = PhysicsParameters(frequency=50.0, temperature=35.0)
        cold_step = list(ring_radii(center_source, cold))[1]
        hot_step = list(ring_radii(center_source, hot))[1]
        assert cold_step == pytest.approx(331.3 / 50.0)
        assert hot_step > cold_step
