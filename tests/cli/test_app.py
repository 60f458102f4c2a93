"""Tests for the CLI commands, with the engine replaced by in-memory fakes."""

from attrs import define
import pytest
from typer.testing import CliRunner

from src.application.services.query_aggregator import QueryAggregator
from src.application.use_cases.convert_playlist import ConvertPlaylistUseCase
from src.application.use_cases.resolve_link import ResolveLinkUseCase
from src.domain.entities.catalog import CatalogKind
from src.domain.entities.conversion import SourceTrack
from src.infrastructure.cli import app as cli_app
from tests.fixtures.fakes import (
    FakeCatalog,
    FakeForeignMetadata,
    FakeHistory,
    no_sleep,
    track_doc,
)

runner = CliRunner()


@define(slots=True)
class StubEngine:
    catalog: FakeCatalog
    aggregator: QueryAggregator
    resolver: ResolveLinkUseCase
    converter: ConvertPlaylistUseCase

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


@pytest.fixture
def playlist_source():
    return FakeForeignMetadata()


@pytest.fixture
def engine(playlist_source):
    catalog = FakeCatalog()
    aggregator = QueryAggregator(catalog=catalog, history=FakeHistory())
    return StubEngine(
        catalog=catalog,
        aggregator=aggregator,
        resolver=ResolveLinkUseCase(aggregator=aggregator, catalog=catalog),
        converter=ConvertPlaylistUseCase(
            aggregator=aggregator, source=playlist_source, sleep=no_sleep
        ),
    )


@pytest.fixture(autouse=True)
def patched_cli(monkeypatch, engine):
    monkeypatch.setattr(cli_app, "setup_loguru_logger", lambda verbose=False: None)
    monkeypatch.setattr(cli_app, "create_engine", lambda base_url=None: engine)


class TestCommands:
    def test_version(self):
        result = runner.invoke(cli_app.app, ["version"])

        assert result.exit_code == 0
        assert "Tidefinder" in result.output

    def test_search(self, engine):
        engine.catalog.add("abc", CatalogKind.TRACK, track_doc(1, "Abc", artist="Band"))

        result = runner.invoke(cli_app.app, ["search", "abc"])

        assert result.exit_code == 0
        assert "Abc" in result.output

    def test_search_without_results(self):
        result = runner.invoke(cli_app.app, ["search", "nothing"])

        assert result.exit_code == 0
        assert "No results" in result.output

    def test_unconfigured_catalog_exits_with_error(self, engine):
        engine.catalog.configured = False

        result = runner.invoke(cli_app.app, ["search", "abc"])

        assert result.exit_code == 1
        assert "No catalog endpoint configured" in result.output

    def test_resolve_navigates(self):
        result = runner.invoke(
            cli_app.app, ["resolve", "https://tidal.com/browse/album/55"]
        )

        assert result.exit_code == 0
        assert "55" in result.output

    def test_convert(self, engine, playlist_source):
        playlist_source.playlist = [
            SourceTrack.detect("Abc", artist="Band", duration=200),
            SourceTrack.detect("Missing", artist="Nobody"),
        ]
        engine.catalog.add(
            "Abc Band", CatalogKind.TRACK, track_doc(1, "Abc", artist="Band")
        )

        result = runner.invoke(cli_app.app, ["convert", "pl1", "--limit", "1"])

        assert result.exit_code == 0
        assert playlist_source.requested_playlists == ["pl1"]
        assert "1/1" in result.output

    def test_convert_empty_playlist(self):
        result = runner.invoke(cli_app.app, ["convert", "pl1"])

        assert result.exit_code == 1
        assert "No tracks found" in result.output
