"""
Tests pour SQLModelSeasonRepository sur une base SQLite en memoire.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from seriescache.core.entities import Episode
from seriescache.core.value_objects import SeasonStatus
from seriescache.infrastructure.persistence.models import SeasonModel
from seriescache.infrastructure.persistence.repositories import SQLModelSeasonRepository
from tests.fixtures.seasons import NOW, make_episode, make_season


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def repo(session) -> SQLModelSeasonRepository:
    return SQLModelSeasonRepository(session)


class TestSaveAndLoad:
    """Conversion entite <-> modele."""

    def test_save_assigns_id_and_round_trips_fields(self, repo):
        season = make_season(
            episodes=[
                make_episode(1, date(2024, 5, 1), plot="Resume", duration=45, poster="/p.jpg"),
                make_episode(2),
            ],
            episode_count=2,
            release_weekday=2,
            next_episode_date=date(2024, 6, 1),
        )

        saved = repo.save(season)
        loaded = repo.get_by_id(saved.id)

        assert saved.id is not None
        assert loaded.series_id == "series-1"
        assert loaded.tmdb_id == 1399
        assert loaded.status == SeasonStatus.COMPLETED
        assert loaded.release_weekday == 2
        assert loaded.next_episode_date == date(2024, 6, 1)
        assert loaded.episodes[0] == Episode(
            id="ep-1",
            episode_number=1,
            title="Episode 1",
            plot="Resume",
            duration_in_minutes=45,
            release_date=date(2024, 5, 1),
            poster="/p.jpg",
        )
        assert loaded.episodes[1].release_date is None

    def test_datetimes_are_returned_in_utc(self, repo):
        paris = timezone(timedelta(hours=2))
        saved = repo.save(make_season(last_updated=datetime(2024, 5, 15, 14, 0, tzinfo=paris)))

        loaded = repo.get_by_id(saved.id)

        assert loaded.last_updated == NOW
        assert loaded.last_updated.tzinfo is not None

    def test_update_with_aware_timestamp_is_persisted(self, repo, session):
        saved = repo.save(make_season(status=SeasonStatus.ONGOING, last_updated=None))

        updated = repo.update(saved.id, last_updated=NOW, status=SeasonStatus.COMPLETED)

        model = session.get(SeasonModel, int(saved.id))
        assert updated.last_updated == NOW
        assert SeasonModel.__table__.c.last_updated.type.timezone is True
        assert model.created_at is not None

    def test_save_existing_series_season_updates_row(self, repo, session):
        first = repo.save(make_season(title="Old"))
        second = repo.save(make_season(title="New"))

        assert second.id == first.id
        assert len(session.exec(select(SeasonModel)).all()) == 1

    def test_get_by_series_and_number(self, repo):
        repo.save(make_season(series_id="got", season_number=1))
        target = repo.save(make_season(series_id="got", season_number=2))

        assert repo.get_by_series_and_number("got", 2).id == target.id
        assert repo.get_by_series_and_number("got", 3) is None

    @pytest.mark.parametrize("season_id", ["999", "not-a-number", None])
    def test_get_unknown_id_returns_none(self, repo, season_id):
        assert repo.get_by_id(season_id) is None


class TestUpdate:
    """Mise a jour partielle."""

    def test_update_changes_only_given_fields(self, repo):
        saved = repo.save(make_season(title="Title", status=SeasonStatus.ONGOING))

        updated = repo.update(saved.id, status=SeasonStatus.SPECIAL_INTEREST)

        assert updated.status == SeasonStatus.SPECIAL_INTEREST
        assert updated.title == "Title"

    def test_update_episodes_is_serialized(self, repo, session):
        saved = repo.save(make_season())

        repo.update(saved.id, episodes=[make_episode(1, date(2024, 1, 2))], episode_count=1)

        model = session.get(SeasonModel, int(saved.id))
        assert model.episodes[0]["release_date"] == "2024-01-02"
        assert model.episode_count == 1

    def test_update_unknown_field_is_rejected(self, repo):
        saved = repo.save(make_season())

        with pytest.raises(ValueError, match="access_count"):
            repo.update(saved.id, access_count=100)

    def test_update_missing_season_returns_none(self, repo):
        assert repo.update("42", title="x") is None


class TestQueries:
    """Requetes par statut et popularite."""

    def test_find_by_status(self, repo):
        repo.save(make_season(season_number=1, status=SeasonStatus.ONGOING))
        repo.save(make_season(season_number=2, status=SeasonStatus.UPCOMING))
        repo.save(make_season(season_number=3, status=SeasonStatus.COMPLETED))
        repo.save(make_season(season_number=4, status=None))

        found = repo.find_by_status([SeasonStatus.ONGOING, SeasonStatus.UPCOMING])

        assert sorted(s.season_number for s in found) == [1, 2]

    def test_find_popular_threshold_is_inclusive(self, repo):
        since = NOW - timedelta(hours=24)
        repo.save(make_season(season_number=1, access_count=7, last_accessed=NOW))
        repo.save(make_season(season_number=2, access_count=6, last_accessed=NOW))
        repo.save(
            make_season(season_number=3, access_count=30, last_accessed=since - timedelta(minutes=1))
        )
        repo.save(make_season(season_number=4, access_count=30, last_accessed=None))

        found = repo.find_popular(since, 7)

        assert [s.season_number for s in found] == [1]


class TestIncrementAccessCount:
    """Increment atomique du compteur d'acces."""

    def test_increment_updates_counter_and_timestamp(self, repo):
        saved = repo.save(make_season(access_count=3))

        repo.increment_access_count(saved.id, NOW)
        repo.increment_access_count(saved.id, NOW + timedelta(minutes=5))

        loaded = repo.get_by_id(saved.id)
        assert loaded.access_count == 5
        assert loaded.last_accessed == NOW + timedelta(minutes=5)

    def test_increment_does_not_touch_other_fields(self, repo):
        saved = repo.save(make_season(title="Kept", status=SeasonStatus.ONGOING))

        repo.increment_access_count(saved.id, NOW)

        loaded = repo.get_by_id(saved.id)
        assert loaded.title == "Kept"
        assert loaded.status == SeasonStatus.ONGOING
