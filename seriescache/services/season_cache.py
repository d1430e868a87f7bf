"""
Facade du moteur de cache des saisons.

Assemble les composants et resout leurs dependances croisees :

    StalenessEvaluator -> AccessRecorder -> SeasonRefresher
    SeasonRefresher / AccessRecorder --(changement de statut)--> SeasonRefreshScheduler
    SeasonRefreshScheduler -> SeasonRefresher (ticks et balayages)
"""

from datetime import timedelta
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from seriescache.config import Settings
from seriescache.core.entities.season import Season
from seriescache.core.ports.api_clients import IEpisodeProvider
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.cache_policy import DEFAULT_CACHE_POLICIES, CachePolicyTable
from seriescache.services.access_recorder import DEFAULT_POPULARITY_THRESHOLD, AccessRecorder
from seriescache.services.scheduler import SeasonRefreshScheduler, SweepStats
from seriescache.services.season_refresher import (
    DEFAULT_STILL_URL_TEMPLATE,
    RefreshOutcome,
    SeasonRefresher,
)
from seriescache.services.staleness import StalenessEvaluator
from seriescache.utils.timezone import utc_now


class SeasonCacheService:
    """
    Point d'entree unique du moteur de cache des saisons.

    Example:
        cache = SeasonCacheService(repository, tmdb_client)
        cache.start()
        if await cache.should_update(season):
            await cache.refresh(season)
        await cache.stop()
    """

    def __init__(
        self,
        repository: ISeasonRepository,
        provider: IEpisodeProvider,
        policies: CachePolicyTable = DEFAULT_CACHE_POLICIES,
        popularity_threshold: int = DEFAULT_POPULARITY_THRESHOLD,
        popularity_window: timedelta = timedelta(hours=24),
        still_url_template: str = DEFAULT_STILL_URL_TEMPLATE,
        timezone: str = "UTC",
        clock: Callable = utc_now,
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> None:
        self.refresher = SeasonRefresher(
            repository,
            provider,
            still_url_template=still_url_template,
            clock=clock,
        )
        self.scheduler = SeasonRefreshScheduler(
            repository,
            self.refresher,
            policies=policies,
            popularity_threshold=popularity_threshold,
            popularity_window=popularity_window,
            scheduler=scheduler,
            timezone=timezone,
            clock=clock,
        )
        self.recorder = AccessRecorder(
            repository,
            self.refresher,
            threshold=popularity_threshold,
            clock=clock,
        )
        self.evaluator = StalenessEvaluator(self.recorder, policies=policies, clock=clock)

        self.refresher.set_status_listener(self.scheduler.reprovision)
        self.recorder.set_status_listener(self.scheduler.reprovision)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        repository: ISeasonRepository,
        provider: IEpisodeProvider,
    ) -> "SeasonCacheService":
        """Construit le service a partir de la configuration de l'application."""
        return cls(
            repository,
            provider,
            popularity_threshold=settings.popularity_threshold,
            popularity_window=timedelta(hours=settings.popularity_window_hours),
            still_url_template=settings.episode_still_url_template,
            timezone=settings.scheduler_timezone,
        )

    async def should_update(self, season: Season) -> bool:
        """Indique si la saison doit etre rafraichie (enregistre un acces)."""
        return await self.evaluator.should_update(season)

    async def refresh(self, season: Season) -> bool:
        """Rafraichit la saison. Ne leve jamais d'exception."""
        return await self.refresher.refresh(season)

    async def refresh_with_outcome(self, season: Season) -> RefreshOutcome:
        """Rafraichit la saison et retourne le detail du resultat."""
        return await self.refresher.refresh_with_outcome(season)

    async def sweep_active_seasons(self) -> SweepStats:
        """Execute immediatement le balayage hebdomadaire."""
        return await self.scheduler.sweep_active_seasons()

    async def sweep_popular_seasons(self) -> SweepStats:
        """Execute immediatement le balayage de popularite."""
        return await self.scheduler.sweep_popular_seasons()

    async def wait_pending(self) -> None:
        """Attend la fin des rafraichissements declenches par une promotion."""
        await self.recorder.wait_pending()

    def start(self) -> None:
        """Demarre les taches planifiees (necessite une boucle asyncio active)."""
        self.scheduler.start()

    async def stop(self) -> None:
        """Arrete les taches planifiees et attend les rafraichissements en fond."""
        await self.scheduler.stop()
        await self.recorder.wait_pending()
        logger.debug("Moteur de cache arrete")
