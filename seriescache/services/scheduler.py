"""
Planification des rafraichissements de saisons via APScheduler.

Deux familles de taches :
- Une tache recurrente par saison dont la politique a une planification
  (ONGOING : tous les jours, UPCOMING : chaque lundi). Elle est
  (re)creee a chaque changement de statut et s'arrete d'elle-meme quand
  la saison n'existe plus.
- Deux balayages globaux fixes :
    * hebdomadaire (dimanche 00:00) : rafraichit les saisons ONGOING/UPCOMING
    * quotidien (02:00) : promeut les saisons populaires en SPECIAL_INTEREST

Le registre des taches par saison vit en memoire : un redemarrage le vide,
les balayages et les lectures reconstituent ensuite les planifications.
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.cache_policy import (
    DEFAULT_CACHE_POLICIES,
    POPULARITY_SWEEP_SCHEDULE,
    WEEKLY_SWEEP_SCHEDULE,
    CachePolicyTable,
    CalendarExpression,
    FixedInterval,
    Schedule,
)
from seriescache.core.value_objects.season_status import SeasonStatus
from seriescache.services.access_recorder import DEFAULT_POPULARITY_THRESHOLD
from seriescache.services.season_refresher import SeasonRefresher
from seriescache.utils.timezone import utc_now

WEEKLY_SWEEP_JOB_ID = "system_weekly_sweep"
POPULARITY_SWEEP_JOB_ID = "system_popularity_sweep"

# Statuts rafraichis par le balayage hebdomadaire
ACTIVE_STATUSES = (SeasonStatus.ONGOING, SeasonStatus.UPCOMING)


@dataclass
class SweepStats:
    """Statistiques d'un balayage global."""

    total: int = 0
    updated: int = 0
    promoted: int = 0
    skipped: int = 0
    failed: int = 0


def build_trigger(schedule: Schedule, timezone: str = "UTC") -> BaseTrigger:
    """Convertit une planification du domaine en trigger APScheduler."""
    if isinstance(schedule, FixedInterval):
        return IntervalTrigger(seconds=schedule.every.total_seconds(), timezone=timezone)
    if isinstance(schedule, CalendarExpression):
        return CronTrigger.from_crontab(schedule.crontab, timezone=timezone)
    raise TypeError(f"Planification non supportee: {schedule!r}")


class SeasonRefreshScheduler:
    """
    Planificateur des rafraichissements de saisons.

    Example:
        scheduler = SeasonRefreshScheduler(repository, refresher)
        refresher.set_status_listener(scheduler.reprovision)
        scheduler.start()   # dans une boucle asyncio
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        repository: ISeasonRepository,
        refresher: SeasonRefresher,
        policies: CachePolicyTable = DEFAULT_CACHE_POLICIES,
        popularity_threshold: int = DEFAULT_POPULARITY_THRESHOLD,
        popularity_window: timedelta = timedelta(hours=24),
        scheduler: Optional[AsyncIOScheduler] = None,
        timezone: str = "UTC",
        clock: Callable = utc_now,
    ) -> None:
        self._repository = repository
        self._refresher = refresher
        self._policies = policies
        self._popularity_threshold = popularity_threshold
        self._popularity_window = popularity_window
        self._timezone = timezone
        self._scheduler = scheduler or AsyncIOScheduler(timezone=timezone)
        self._clock = clock
        self._jobs: dict[str, Job] = {}
        self._shut_down = False

    @property
    def running(self) -> bool:
        """Indique si le planificateur APScheduler est demarre."""
        return self._scheduler.running

    def start(self) -> None:
        """Enregistre les balayages globaux et demarre le planificateur."""
        if self._shut_down:
            # Un planificateur arrete n'est pas reutilise
            self._scheduler = AsyncIOScheduler(timezone=self._timezone)
            self._shut_down = False
        self._scheduler.add_job(
            self.sweep_active_seasons,
            build_trigger(WEEKLY_SWEEP_SCHEDULE, self._timezone),
            id=WEEKLY_SWEEP_JOB_ID,
            name="Balayage hebdomadaire des saisons actives",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.add_job(
            self.sweep_popular_seasons,
            build_trigger(POPULARITY_SWEEP_SCHEDULE, self._timezone),
            id=POPULARITY_SWEEP_JOB_ID,
            name="Promotion quotidienne des saisons populaires",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info(
            "Planificateur demarre",
            weekly_sweep=WEEKLY_SWEEP_SCHEDULE.crontab,
            popularity_sweep=POPULARITY_SWEEP_SCHEDULE.crontab,
        )

    async def stop(self) -> None:
        """Supprime toutes les taches et arrete le planificateur sans attendre."""
        for season_id in list(self._jobs):
            self.unschedule(season_id)
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            self._shut_down = True
            # AsyncIOScheduler applique l'arret a l'iteration suivante de la boucle
            await asyncio.sleep(0)
        logger.info("Planificateur arrete")

    def scheduled_season_ids(self) -> list[str]:
        """Liste les saisons ayant une tache recurrente."""
        return sorted(self._jobs)

    def get_season_job(self, season_id: str) -> Optional[Job]:
        """Retourne la tache recurrente d'une saison, ou None."""
        return self._jobs.get(str(season_id))

    def reprovision(self, season_id: str, status: SeasonStatus) -> None:
        """
        Recree la tache recurrente d'une saison pour son nouveau statut.

        La tache existante est toujours supprimee. Si la politique du statut
        n'a pas de planification, la saison reste sans tache (rafraichie
        uniquement a la lecture).
        """
        season_id = str(season_id)
        self.unschedule(season_id)

        policy = self._policies.for_status(status)
        if policy.schedule is None:
            logger.debug(f"Aucune planification pour le statut {status.value}", season_id=season_id)
            return

        job = self._scheduler.add_job(
            self.run_season_job,
            build_trigger(policy.schedule, self._timezone),
            id=f"season_{season_id}",
            name=f"Rafraichissement saison {season_id} ({status.value})",
            args=[season_id],
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._jobs[season_id] = job
        logger.debug(f"Tache planifiee pour le statut {status.value}", season_id=season_id)

    def unschedule(self, season_id: str) -> bool:
        """Supprime la tache d'une saison. Retourne True si une tache existait."""
        job = self._jobs.pop(str(season_id), None)
        if job is None:
            return False
        try:
            self._scheduler.remove_job(job.id)
        except JobLookupError:
            logger.debug("Tache deja absente du planificateur", season_id=season_id)
        return True

    async def run_season_job(self, season_id: str) -> None:
        """Execution d'une tache recurrente : rafraichit la saison si elle existe encore."""
        try:
            season = self._repository.get_by_id(season_id)
        except Exception as e:
            logger.error(
                "Erreur lors du chargement de la saison planifiee",
                season_id=season_id,
                error=str(e),
            )
            return

        if season is None:
            logger.info("Saison supprimee, arret de sa tache", season_id=season_id)
            self.unschedule(season_id)
            return

        await self._refresher.refresh(season)

    async def sweep_active_seasons(self) -> SweepStats:
        """Balayage hebdomadaire : rafraichit sequentiellement les saisons ONGOING et UPCOMING."""
        stats = SweepStats()
        try:
            seasons = self._repository.find_by_status(ACTIVE_STATUSES)
        except Exception as e:
            logger.error("Erreur lors du balayage des saisons actives", error=str(e))
            return stats

        stats.total = len(seasons)
        for season in seasons:
            try:
                if await self._refresher.refresh(season):
                    stats.updated += 1
                else:
                    stats.failed += 1
            except Exception as e:
                stats.failed += 1
                logger.error(
                    "Erreur lors du rafraichissement de la saison",
                    season_id=season.id,
                    error=str(e),
                )

        logger.info(
            f"Balayage hebdomadaire termine: {stats.updated}/{stats.total} saison(s) rafraichie(s)",
            failed=stats.failed,
        )
        return stats

    async def sweep_popular_seasons(self) -> SweepStats:
        """Balayage quotidien : promeut les saisons populaires, sans les rafraichir."""
        stats = SweepStats()
        accessed_since = self._clock() - self._popularity_window
        try:
            seasons = self._repository.find_popular(accessed_since, self._popularity_threshold)
        except Exception as e:
            logger.error("Erreur lors du balayage des saisons populaires", error=str(e))
            return stats

        stats.total = len(seasons)
        for season in seasons:
            if season.status == SeasonStatus.SPECIAL_INTEREST:
                stats.skipped += 1
                continue
            try:
                self._repository.update(season.id, status=SeasonStatus.promote(season.status))
                self.reprovision(season.id, SeasonStatus.SPECIAL_INTEREST)
                stats.promoted += 1
            except Exception as e:
                stats.failed += 1
                logger.error(
                    "Erreur lors de la promotion de la saison",
                    season_id=season.id,
                    error=str(e),
                )

        logger.info(
            f"Balayage de popularite termine: {stats.promoted} saison(s) promue(s)",
            skipped=stats.skipped,
            failed=stats.failed,
        )
        return stats
