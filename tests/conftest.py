"""Pytest configuration and shared fixtures."""

import pytest

from fieldops.domain.value_objects.geo_point import GeoPoint


@pytest.fixture
def sample_stops():
    """Three visit sites in visiting order."""
    return [
        GeoPoint(-32.8895, -68.8458),
        GeoPoint(-32.9270, -68.8460),
        GeoPoint(-33.0100, -68.8700),
    ]


@pytest.fixture
def sample_closure_description():
    return "Replaced the compressor seal, unit cooling at 18°C."
