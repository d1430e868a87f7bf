"""
Tests unitaires pour les commandes CLI.

Le container DI est remplace par un mock : les commandes ne touchent
ni la base de donnees ni l'API TMDB.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from seriescache import __version__
from seriescache.core.value_objects import SeasonStatus
from seriescache.main import app
from seriescache.services.scheduler import SweepStats
from seriescache.services.season_refresher import RefreshOutcome
from tests.fixtures.seasons import NOW, make_season

runner = CliRunner()


@pytest.fixture(autouse=True)
def mock_logging():
    """Empeche la CLI d'installer ses sinks loguru pendant les tests."""
    with patch("seriescache.main.configure_logging") as configure_logging:
        yield configure_logging


@pytest.fixture
def mock_container():
    """Mock le Container instancie au niveau du module main."""
    with patch("seriescache.main.container") as container:
        container.config.return_value = MagicMock(
            database_url="sqlite:///test.db",
            tmdb_enabled=True,
            tmdb_language="en-US",
            popularity_threshold=7,
            popularity_window_hours=24,
            scheduler_timezone="UTC",
            log_level="INFO",
        )
        container.tmdb_client.return_value = AsyncMock()
        cache = AsyncMock()
        cache.start = MagicMock()
        container.season_cache.return_value = cache
        container.season_service.return_value = AsyncMock()
        container.season_repository.return_value = MagicMock()
        yield container


class TestCallback:
    """Options globales -v / -q."""

    def test_initializes_database(self, mock_container):
        runner.invoke(app, ["version"])

        mock_container.database.init.assert_called_once()

    @pytest.mark.parametrize(
        "args, level",
        [([], "INFO"), (["-v"], "DEBUG"), (["-vv"], "TRACE"), (["-v", "-q"], "ERROR")],
    )
    def test_console_level_from_options(self, mock_container, mock_logging, args, level):
        result = runner.invoke(app, [*args, "version"])

        assert result.exit_code == 0
        assert mock_logging.call_args.kwargs["log_level"] == level


class TestInfoAndVersion:
    """Commandes d'information."""

    def test_version(self, mock_container):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info_shows_configuration(self, mock_container):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "sqlite:///test.db" in result.output
        assert "24h" in result.output


class TestCheck:
    """Commande check (lecture avec rafraichissement paresseux)."""

    def test_check_displays_season(self, mock_container):
        season = make_season(
            id="1",
            status=SeasonStatus.ONGOING,
            episode_count=8,
            access_count=3,
            last_updated=NOW - timedelta(hours=1),
        )
        mock_container.season_service.return_value.get_season.return_value = season

        result = runner.invoke(app, ["check", "1"])

        assert result.exit_code == 0
        assert "ONGOING" in result.output
        assert "Episodes : 8" in result.output
        mock_container.season_cache.return_value.wait_pending.assert_awaited_once()
        mock_container.tmdb_client.return_value.close.assert_awaited_once()

    def test_check_unknown_season_fails(self, mock_container):
        mock_container.season_service.return_value.get_season.return_value = None

        result = runner.invoke(app, ["check", "999"])

        assert result.exit_code == 1


class TestRefresh:
    """Commande refresh (rafraichissement force)."""

    def test_refresh_success(self, mock_container):
        mock_container.season_repository.return_value.get_by_id.return_value = make_season(id="1")
        cache = mock_container.season_cache.return_value
        cache.refresh_with_outcome.return_value = RefreshOutcome.UPDATED

        result = runner.invoke(app, ["refresh", "1"])

        assert result.exit_code == 0
        assert "updated" in result.output

    def test_refresh_failure_exits_with_error(self, mock_container):
        mock_container.season_repository.return_value.get_by_id.return_value = make_season(
            id="1", tmdb_id=None
        )
        cache = mock_container.season_cache.return_value
        cache.refresh_with_outcome.return_value = RefreshOutcome.MISSING_IDENTIFIER

        result = runner.invoke(app, ["refresh", "1"])

        assert result.exit_code == 1
        assert "missing_identifier" in result.output

    def test_refresh_unknown_season(self, mock_container):
        mock_container.season_repository.return_value.get_by_id.return_value = None

        result = runner.invoke(app, ["refresh", "999"])

        assert result.exit_code == 1
        mock_container.season_cache.return_value.refresh_with_outcome.assert_not_awaited()


class TestSweep:
    """Commande sweep."""

    def test_sweep_active(self, mock_container):
        cache = mock_container.season_cache.return_value
        cache.sweep_active_seasons.return_value = SweepStats(total=3, updated=2, failed=1)

        result = runner.invoke(app, ["sweep", "active"])

        assert result.exit_code == 0
        assert "Rafraichies : 2" in result.output
        cache.sweep_popular_seasons.assert_not_awaited()

    def test_sweep_popular(self, mock_container):
        cache = mock_container.season_cache.return_value
        cache.sweep_popular_seasons.return_value = SweepStats(total=2, promoted=1, skipped=1)

        result = runner.invoke(app, ["sweep", "popular"])

        assert result.exit_code == 0
        assert "Promues : 1" in result.output

    def test_sweep_unknown_target(self, mock_container):
        result = runner.invoke(app, ["sweep", "everything"])

        assert result.exit_code != 0
