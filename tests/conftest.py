"""Pytest configuration and shared fixtures."""

import pytest

from py_wilayah.data.sources import BoundaryUrls

from tests.fakes import DeferredFetcher, RecordingCamera, RecordingView, StaticFetcher
from tests.sample_data import BASE_URL, DISTRICTS_31, PROVINCES, REGENCIES


@pytest.fixture
def boundary_urls():
    return BoundaryUrls(base_url=BASE_URL)


@pytest.fixture
def boundary_data(boundary_urls):
    """URL -> feature collection for a small Jakarta/West Java data set."""
    return {
        boundary_urls.provinces(): PROVINCES,
        boundary_urls.regencies(): REGENCIES,
        boundary_urls.districts("31"): DISTRICTS_31,
    }


@pytest.fixture
def static_fetcher(boundary_data):
    return StaticFetcher(boundary_data)


@pytest.fixture
def deferred_fetcher(boundary_data):
    return DeferredFetcher(boundary_data)


@pytest.fixture
def camera():
    return RecordingCamera()


@pytest.fixture
def view():
    return RecordingView()
