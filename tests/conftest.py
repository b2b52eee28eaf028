import os

#in-memory database for the flask tests, has to be set before app is imported
os.environ.setdefault("FLASK_SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("FLASK_TESTING", "true")

import pytest


class FakeResponse:
    """Stand-in for requests.Response with just what SunDataClient reads."""

    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self.payload = payload
        self.body_error = body_error

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class StubClient:
    """Records fetch calls and hands back a canned results object or raises."""

    def __init__(self, results=None, error=None):
        self.results = results
        self.error = error
        self.calls = []

    def fetch(self, lat, lng, date=None):
        self.calls.append((lat, lng, date))
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def sample_results():
    return {
        "sunrise": "7:15:18 AM",
        "sunset": "20:30:00 PM",
        "dawn": "6:44:02 AM",
        "dusk": "9:01:40 PM",
        "solar_noon": "1:52:39 PM",
        "day_length": 47820,
        "timezone": "America/New_York",
    }
