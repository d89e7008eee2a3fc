"""Pytest configuration and fixtures."""

from datetime import timedelta

import pytest

from api import create_app
from models import utcnow
from models.zone import Coordinate, ServiceZone
from services.auth_service import AuthService
from services.geocoding import GeocodeResult
from services.refresh_tokens import RefreshTokenStore
from services.zone_index import ZoneIndex


def square(x0, y0, x1, y1):
    return (Coordinate(x0, y0), Coordinate(x0, y1), Coordinate(x1, y1), Coordinate(x1, y0))


TEST_ZONES = [
    ServiceZone(id="center", name="Center", city="Almaty", polygon=square(0, 0, 10, 10)),
    ServiceZone(id="overlap", name="Overlap", city="almaty", polygon=square(5, 5, 15, 15)),
    ServiceZone(id="closed", name="Closed", city="Almaty", polygon=square(20, 20, 30, 30), is_active=False),
    ServiceZone(id="north", name="North", city="Astana", polygon=square(40, 40, 50, 50)),
]


class FakeGeocoder:
    """Stands in for NominatimGeocoder; returns `result` or raises `error`."""

    def __init__(self):
        self.result = GeocodeResult(5.0, 5.0, "Abay Ave 1, Almaty")
        self.results = [self.result]
        self.error = None
        self.calls = []

    def geocode(self, address):
        self.calls.append(address)
        if self.error:
            raise self.error
        return self.result

    def geocode_multiple(self, query):
        self.calls.append(query)
        if self.error:
            raise self.error
        return self.results


class FakeClock:
    def __init__(self):
        self.now = utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def app(geocoder):
    app = create_app("testing", zone_index=ZoneIndex(TEST_ZONES), geocoder=geocoder)
    with app.app_context():
        yield app
        app.extensions["storage"].drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions["storage"]


@pytest.fixture
def signer(app):
    return app.extensions["token_signer"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_store(storage, clock):
    return RefreshTokenStore(storage, lifetime=timedelta(days=7), clock=clock)


@pytest.fixture
def auth_service(storage, signer, token_store):
    return AuthService(storage, signer, token_store)


@pytest.fixture
def registered(auth_service):
    """An account registered through the service; returns its AuthResult."""
    result = auth_service.register("a@b.kz", "secret1", "Aigerim", "Sadykova", "+77010000000")
    assert result.success
    return result
