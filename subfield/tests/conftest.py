"""
Shared fixtures for the subfield test suite.
"""

import matplotlib

matplotlib.use('Agg')

import pytest

from subfield import PhysicsParameters, Source


@pytest.fixture
def params():
    """60 Hz, 20 °C, 20 m × 20 m venue."""
    return PhysicsParameters(frequency=60.0, temperature=20.0,
                             venue_width=20.0, venue_depth=20.0, dynamic_range=36.0)


@pytest.fixture
def center_source():
    return Source(id='c', name='Center', x=0.0, y=0.0)


@pytest.fixture
def pair():
    """Two in-phase subs half a meter either side of the center."""
    return (
        Source(id='a', name='Sub 1', x=-0.5, y=0.0),
        Source(id='b', name='Sub 2', x=0.5, y=0.0),
    )
