"""
Tests pour AccessRecorder : compteur d'acces et promotion par popularite.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects import SeasonStatus
from seriescache.services.access_recorder import AccessRecorder
from seriescache.services.season_refresher import SeasonRefresher
from tests.fixtures.seasons import NOW, InMemorySeasonRepository, make_season


@pytest.fixture
def refresher() -> AsyncMock:
    """Mock de SeasonRefresher."""
    mock = AsyncMock(spec=SeasonRefresher)
    mock.refresh.return_value = True
    return mock


@pytest.fixture
def seeded_repository() -> InMemorySeasonRepository:
    return InMemorySeasonRepository(
        [make_season(status=SeasonStatus.ONGOING, last_updated=NOW - timedelta(hours=2))]
    )


@pytest.fixture
def recorder(seeded_repository, refresher, clock) -> AccessRecorder:
    return AccessRecorder(seeded_repository, refresher, threshold=7, clock=clock)


def promotion_calls(repository: InMemorySeasonRepository) -> list:
    return [changes for _, changes in repository.update_calls if "status" in changes]


class TestRecordAccess:
    """Tests pour record_access()."""

    @pytest.mark.asyncio
    async def test_increments_counter_and_touches_last_accessed(
        self, recorder, seeded_repository
    ):
        await recorder.record_access("1")

        season = seeded_repository.get_by_id("1")
        assert season.access_count == 1
        assert season.last_accessed == NOW

    @pytest.mark.asyncio
    async def test_seven_accesses_do_not_promote(self, recorder, seeded_repository, refresher):
        """Le seuil est strict : 7 acces avec un seuil de 7 ne suffisent pas."""
        for _ in range(7):
            await recorder.record_access("1")
        await recorder.wait_pending()

        season = seeded_repository.get_by_id("1")
        assert season.access_count == 7
        assert season.status == SeasonStatus.ONGOING
        assert promotion_calls(seeded_repository) == []
        refresher.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_eighth_access_promotes_once_and_refreshes_once(
        self, recorder, seeded_repository, refresher
    ):
        for _ in range(8):
            await recorder.record_access("1")
        await recorder.wait_pending()

        season = seeded_repository.get_by_id("1")
        assert season.status == SeasonStatus.SPECIAL_INTEREST
        assert promotion_calls(seeded_repository) == [{"status": SeasonStatus.SPECIAL_INTEREST}]
        refresher.refresh.assert_awaited_once()
        refreshed = refresher.refresh.await_args.args[0]
        assert refreshed.id == "1"
        assert refreshed.status == SeasonStatus.SPECIAL_INTEREST

    @pytest.mark.asyncio
    async def test_further_accesses_do_not_promote_again(
        self, recorder, seeded_repository, refresher
    ):
        for _ in range(12):
            await recorder.record_access("1")
        await recorder.wait_pending()

        assert len(promotion_calls(seeded_repository)) == 1
        assert refresher.refresh.await_count == 1

    @pytest.mark.asyncio
    async def test_listener_notified_on_promotion(self, recorder):
        listener = MagicMock()
        recorder.set_status_listener(listener)

        for _ in range(8):
            await recorder.record_access("1")
        await recorder.wait_pending()

        listener.assert_called_once_with("1", SeasonStatus.SPECIAL_INTEREST)

    @pytest.mark.asyncio
    async def test_custom_threshold(self, seeded_repository, refresher, clock):
        recorder = AccessRecorder(seeded_repository, refresher, threshold=0, clock=clock)

        await recorder.record_access("1")
        await recorder.wait_pending()

        assert seeded_repository.get_by_id("1").status == SeasonStatus.SPECIAL_INTEREST

    @pytest.mark.asyncio
    async def test_unknown_season_is_ignored(self, recorder, refresher):
        await recorder.record_access("999")
        await recorder.wait_pending()

        refresher.refresh.assert_not_awaited()


class TestFailuresAreSwallowed:
    """Les erreurs de stockage ne remontent jamais a l'appelant."""

    @pytest.mark.asyncio
    async def test_increment_failure_is_swallowed(self, refresher, clock):
        repository = MagicMock(spec=ISeasonRepository)
        repository.increment_access_count.side_effect = RuntimeError("database is locked")
        recorder = AccessRecorder(repository, refresher, clock=clock)

        await recorder.record_access("1")

        repository.update.assert_not_called()
        refresher.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_promotion_failure_is_swallowed(self, refresher, clock):
        repository = MagicMock(spec=ISeasonRepository)
        repository.get_by_id.return_value = make_season(
            id="1", status=SeasonStatus.ONGOING, access_count=8
        )
        repository.update.side_effect = RuntimeError("disk full")
        recorder = AccessRecorder(repository, refresher, clock=clock)

        await recorder.record_access("1")
        await recorder.wait_pending()

        refresher.refresh.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_background_refresh_failure_does_not_leak(
        self, recorder, seeded_repository, refresher
    ):
        refresher.refresh.side_effect = RuntimeError("boom")

        for _ in range(8):
            await recorder.record_access("1")
        await recorder.wait_pending()

        assert seeded_repository.get_by_id("1").status == SeasonStatus.SPECIAL_INTEREST
