"""
Service de lecture des saisons avec rafraichissement paresseux.

Chaque lecture passe par le moteur de cache : si les episodes sont
perimes, la saison est rafraichie avant d'etre renvoyee. Un
rafraichissement en echec est traite comme un rafraichissement non du :
la saison en cache est servie telle quelle.
"""

from typing import Optional

from seriescache.core.entities.season import Season
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.services.season_cache import SeasonCacheService


class SeasonService:
    """Lecture des saisons pour la couche applicative."""

    def __init__(self, repository: ISeasonRepository, cache: SeasonCacheService) -> None:
        self._repository = repository
        self._cache = cache

    async def get_season(self, season_id: str) -> Optional[Season]:
        """Retourne une saison a jour par son ID, ou None si inconnue."""
        season = self._repository.get_by_id(season_id)
        if season is None:
            return None
        return await self._serve(season)

    async def get_episodes_by_season_number(
        self,
        series_id: str,
        season_number: int,
    ) -> Optional[Season]:
        """Retourne une saison a jour par serie et numero, ou None si inconnue."""
        season = self._repository.get_by_series_and_number(series_id, season_number)
        if season is None:
            return None
        return await self._serve(season)

    async def _serve(self, season: Season) -> Season:
        if not await self._cache.should_update(season):
            return season
        # should_update peut avoir promu la saison : on rafraichit la version stockee
        current = self._repository.get_by_id(season.id) or season
        if not await self._cache.refresh(current):
            return current
        return self._repository.get_by_id(season.id) or current
