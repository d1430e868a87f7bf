"""
Enregistrement des acces aux saisons et promotion par popularite.

Chaque lecture d'une saison deja classee incremente son compteur d'acces.
Au-dela du seuil de popularite, la saison passe en SPECIAL_INTEREST et un
rafraichissement est lance en tache de fond.

Canal best-effort : toute erreur est journalisee puis ignoree, la lecture
qui a declenche l'enregistrement ne doit jamais echouer a cause de lui.
"""

import asyncio
from typing import Callable, Optional

from loguru import logger

from seriescache.core.entities.season import Season
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.season_status import SeasonStatus
from seriescache.services.season_refresher import SeasonRefresher, StatusListener
from seriescache.utils.timezone import utc_now

DEFAULT_POPULARITY_THRESHOLD = 7


class AccessRecorder:
    """
    Compteur d'acces des saisons avec promotion en SPECIAL_INTEREST.

    Attributes:
        threshold: Nombre d'acces a depasser strictement pour etre promu
    """

    def __init__(
        self,
        repository: ISeasonRepository,
        refresher: SeasonRefresher,
        threshold: int = DEFAULT_POPULARITY_THRESHOLD,
        clock: Callable = utc_now,
    ) -> None:
        self._repository = repository
        self._refresher = refresher
        self.threshold = threshold
        self._clock = clock
        self._background: set[asyncio.Task] = set()
        self._status_listener: Optional[StatusListener] = None

    def set_status_listener(self, listener: Optional[StatusListener]) -> None:
        """Enregistre la fonction appelee apres une promotion."""
        self._status_listener = listener

    async def record_access(self, season_id: str) -> None:
        """
        Enregistre un acces et promeut la saison si elle devient populaire.

        Ne leve jamais d'exception.
        """
        try:
            self._repository.increment_access_count(season_id, self._clock())

            season = self._repository.get_by_id(season_id)
            if season is None:
                return
            if season.access_count <= self.threshold or season.status == SeasonStatus.SPECIAL_INTEREST:
                return

            promoted = self._repository.update(
                season_id, status=SeasonStatus.promote(season.status)
            )
            logger.info(
                f"Saison promue en SPECIAL_INTEREST ({season.access_count} acces)",
                season_id=season_id,
            )
            if self._status_listener is not None:
                self._status_listener(str(season_id), SeasonStatus.SPECIAL_INTEREST)
            if promoted is not None:
                self._spawn_refresh(promoted)
        except Exception as e:
            logger.error(
                "Erreur lors de l'enregistrement de l'acces a la saison",
                season_id=season_id,
                error=str(e),
            )

    def _spawn_refresh(self, season: Season) -> None:
        """Lance le rafraichissement sans l'attendre."""
        task = asyncio.create_task(self._refresher.refresh(season))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def wait_pending(self) -> None:
        """Attend la fin des rafraichissements lances en tache de fond."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
