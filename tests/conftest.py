import pytest


@pytest.fixture
def nyc():
    from mapstitch.models import GeoCoord

    return GeoCoord(lat=40.7128, lng=-74.0060)
