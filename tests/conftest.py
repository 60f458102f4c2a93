import pytest

from src.application.services.query_aggregator import QueryAggregator
from src.domain.entities.catalog import Album, Artist, Track
from tests.fixtures.fakes import FakeCatalog, FakeHistory


@pytest.fixture
def catalog():
    """Configured catalog with no canned documents."""
    return FakeCatalog()


@pytest.fixture
def history():
    """Empty history; tests append entries as needed."""
    return FakeHistory()


@pytest.fixture
def aggregator(catalog, history):
    return QueryAggregator(catalog=catalog, history=history)


@pytest.fixture
def track():
    """Basic track for most tests."""
    return Track(
        id="100",
        title="Test Track",
        artist_id="10",
        artist_name="Test Artist",
        album_id="1000",
        album_title="Test Album",
        duration=200,
    )


@pytest.fixture
def artist():
    return Artist(id="10", name="Test Artist")


@pytest.fixture
def album():
    return Album(id="1000", title="Test Album", artist_id="10", artist_name="Test Artist")
