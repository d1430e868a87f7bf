"""
Saisons et episodes de test.

- InMemorySeasonRepository : implementation en memoire de ISeasonRepository
- make_episode / make_season : fabriques avec valeurs par defaut realistes
- NOW : instant de reference des tests
"""

from copy import deepcopy
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from seriescache.core.entities.season import Episode, Season
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.season_status import SeasonStatus

# Instant de reference des tests : mercredi 15 mai 2024, 12:00 UTC
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


class InMemorySeasonRepository(ISeasonRepository):
    """
    Repository en memoire pour les tests de services.

    Retourne des copies des saisons stockees pour se comporter comme
    une vraie persistance (les modifications de l'appelant ne fuient pas).
    """

    def __init__(self, seasons: Iterable[Season] = ()) -> None:
        self._seasons: dict[str, Season] = {}
        self._next_id = 1
        self.update_calls: list[tuple[str, dict[str, Any]]] = []
        for season in seasons:
            self.save(season)

    def get_by_id(self, season_id: str) -> Optional[Season]:
        season = self._seasons.get(str(season_id))
        return deepcopy(season) if season else None

    def get_by_series_and_number(self, series_id: str, season_number: int) -> Optional[Season]:
        for season in self._seasons.values():
            if season.series_id == series_id and season.season_number == season_number:
                return deepcopy(season)
        return None

    def save(self, season: Season) -> Season:
        stored = deepcopy(season)
        if stored.id is None:
            stored.id = str(self._next_id)
            self._next_id += 1
        self._seasons[stored.id] = stored
        return deepcopy(stored)

    def update(self, season_id: str, **changes: Any) -> Optional[Season]:
        unknown = set(changes) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Champs non modifiables: {', '.join(sorted(unknown))}")
        self.update_calls.append((str(season_id), dict(changes)))
        season = self._seasons.get(str(season_id))
        if season is None:
            return None
        for field_name, value in changes.items():
            setattr(season, field_name, deepcopy(value))
        return deepcopy(season)

    def find_by_status(self, statuses: Iterable[SeasonStatus]) -> list[Season]:
        wanted = set(statuses)
        return [deepcopy(s) for s in self._seasons.values() if s.status in wanted]

    def find_popular(self, accessed_since: datetime, threshold: int) -> list[Season]:
        return [
            deepcopy(s)
            for s in self._seasons.values()
            if s.last_accessed is not None
            and s.last_accessed >= accessed_since
            and s.access_count >= threshold
        ]

    def increment_access_count(self, season_id: str, accessed_at: datetime) -> None:
        season = self._seasons.get(str(season_id))
        if season is not None:
            season.access_count += 1
            season.last_accessed = accessed_at

    def delete(self, season_id: str) -> None:
        """Supprime une saison (utilitaire de test)."""
        self._seasons.pop(str(season_id), None)


def make_episode(
    number: int,
    release_date: Optional[date] = None,
    title: str = "",
    plot: str = "",
    duration: int = 0,
    episode_id: Optional[str] = None,
    poster: str = "",
) -> Episode:
    """Construit un episode de test."""
    return Episode(
        id=episode_id or f"ep-{number}",
        episode_number=number,
        title=title or f"Episode {number}",
        plot=plot,
        duration_in_minutes=duration,
        release_date=release_date,
        poster=poster,
    )


def make_season(**overrides: Any) -> Season:
    """Construit une saison de test deja classee et rafraichie."""
    values: dict[str, Any] = {
        "series_id": "series-1",
        "tmdb_id": 1399,
        "season_number": 1,
        "title": "Season 1",
        "status": SeasonStatus.COMPLETED,
        "last_updated": NOW - timedelta(days=1),
    }
    values.update(overrides)
    return Season(**values)


