"""
Service de rafraichissement des episodes d'une saison.

Recupere les episodes depuis le fournisseur, les reconcilie avec ceux
deja en cache, reclasse la saison et persiste le tout en une seule
ecriture. Aucune exception n'est propagee : le resultat est un booleen
(refresh) ou un RefreshOutcome (refresh_with_outcome).

Un meme processus ne rafraichit jamais deux fois la meme saison en
parallele : le second appel (tache planifiee + lecture simultanee par
exemple) est ignore avec le resultat IN_PROGRESS.
"""

import uuid
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Callable, Iterable, Optional

from loguru import logger

from seriescache.core.entities.season import Episode, Season
from seriescache.core.ports.api_clients import IEpisodeProvider, RawEpisode
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.season_status import SeasonStatus
from seriescache.services.lifecycle import (
    classify_season,
    compute_next_episode_date,
    compute_release_weekday,
)
from seriescache.utils.timezone import utc_now

DEFAULT_STILL_URL_TEMPLATE = "https://image.tmdb.org/t/p/w500{path}"

StatusListener = Callable[[str, SeasonStatus], None]


class RefreshOutcome(str, Enum):
    """Resultat d'un rafraichissement de saison."""

    UPDATED = "updated"
    MISSING_IDENTIFIER = "missing_identifier"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PERSISTENCE_FAILURE = "persistence_failure"
    IN_PROGRESS = "in_progress"


def _new_episode_id() -> str:
    return uuid.uuid4().hex


def reconcile_episodes(existing: Iterable[Episode], fresh: Iterable[Episode]) -> list[Episode]:
    """
    Fusionne les episodes frais dans la liste existante, par numero d'episode.

    - Episode connu et inchange : conserve tel quel
    - Episode connu et modifie : remplace, en gardant l'id existant
    - Episode inconnu : ajoute en fin de liste

    Args:
        existing: Episodes deja en cache (ordre conserve)
        fresh: Episodes issus du fournisseur

    Returns:
        Nouvelle liste d'episodes, unique par numero
    """
    merged = list(existing)
    positions = {episode.episode_number: i for i, episode in enumerate(merged)}

    for episode in fresh:
        position = positions.get(episode.episode_number)
        if position is None:
            positions[episode.episode_number] = len(merged)
            merged.append(episode)
            continue

        current = merged[position]
        if episode.differs_from(current):
            merged[position] = replace(episode, id=current.id or episode.id)

    return merged


class SeasonRefresher:
    """
    Service de rafraichissement des saisons depuis le fournisseur d'episodes.

    Example:
        refresher = SeasonRefresher(repository, tmdb_client)
        refresher.set_status_listener(scheduler.reprovision)
        ok = await refresher.refresh(season)
    """

    def __init__(
        self,
        repository: ISeasonRepository,
        provider: IEpisodeProvider,
        still_url_template: str = DEFAULT_STILL_URL_TEMPLATE,
        clock: Callable = utc_now,
        id_factory: Callable[[], str] = _new_episode_id,
    ) -> None:
        self._repository = repository
        self._provider = provider
        self._still_url_template = still_url_template
        self._clock = clock
        self._id_factory = id_factory
        self._status_listener: Optional[StatusListener] = None
        self._in_flight: set[str] = set()

    def set_status_listener(self, listener: Optional[StatusListener]) -> None:
        """Enregistre la fonction appelee quand le statut d'une saison change."""
        self._status_listener = listener

    def is_refreshing(self, season_id: str) -> bool:
        """Indique si un rafraichissement de cette saison est en cours."""
        return str(season_id) in self._in_flight

    async def refresh(self, season: Season) -> bool:
        """
        Rafraichit une saison.

        Returns:
            True si la saison a ete mise a jour, False sinon
        """
        return await self.refresh_with_outcome(season) is RefreshOutcome.UPDATED

    async def refresh_with_outcome(self, season: Season) -> RefreshOutcome:
        """Rafraichit une saison et retourne le detail du resultat."""
        if not season.tmdb_id:
            logger.error(
                "Identifiant TMDB manquant, rafraichissement impossible",
                season_id=season.id,
            )
            return RefreshOutcome.MISSING_IDENTIFIER

        key = str(season.id)
        if self.is_refreshing(key):
            logger.debug("Rafraichissement deja en cours, ignore", season_id=season.id)
            return RefreshOutcome.IN_PROGRESS

        self._in_flight.add(key)
        try:
            return await self._refresh(season)
        finally:
            self._in_flight.discard(key)

    async def _refresh(self, season: Season) -> RefreshOutcome:
        try:
            data = await self._provider.fetch_episodes(season.tmdb_id, season.season_number)
        except Exception as e:
            logger.error(
                "Erreur lors de la recuperation des episodes",
                season_id=season.id,
                error=str(e),
            )
            return RefreshOutcome.PROVIDER_UNAVAILABLE

        if data is None:
            logger.warning("Aucune donnee du fournisseur", season_id=season.id)
            return RefreshOutcome.PROVIDER_UNAVAILABLE

        try:
            fresh = [self._to_episode(raw) for raw in data.episodes]
        except Exception as e:
            logger.error(
                "Donnees du fournisseur inexploitables",
                season_id=season.id,
                error=str(e),
            )
            return RefreshOutcome.PROVIDER_UNAVAILABLE

        try:
            previous_status = self._persisted_status(season)
        except Exception as e:
            logger.error(
                "Erreur lors de la relecture de la saison",
                season_id=season.id,
                error=str(e),
            )
            return RefreshOutcome.PERSISTENCE_FAILURE

        now = self._clock()
        episodes = reconcile_episodes(season.episodes, fresh)
        classified = classify_season(episodes, now)
        new_status = SeasonStatus.after_refresh(previous_status, classified)

        last_updated = now
        if season.last_updated is not None and season.last_updated > now:
            last_updated = season.last_updated

        try:
            updated = self._repository.update(
                season.id,
                episodes=episodes,
                episode_count=len(episodes),
                status=new_status,
                last_updated=last_updated,
                release_weekday=compute_release_weekday(episodes),
                next_episode_date=compute_next_episode_date(episodes, now),
            )
        except Exception as e:
            logger.error(
                "Erreur lors de l'enregistrement de la saison",
                season_id=season.id,
                error=str(e),
            )
            return RefreshOutcome.PERSISTENCE_FAILURE

        if updated is None:
            logger.warning("Saison disparue pendant le rafraichissement", season_id=season.id)
            return RefreshOutcome.PERSISTENCE_FAILURE

        logger.info(
            f"Saison rafraichie: {len(episodes)} episode(s), statut {new_status.value}",
            season_id=season.id,
        )

        if new_status != previous_status and self._status_listener is not None:
            try:
                self._status_listener(str(season.id), new_status)
            except Exception as e:
                logger.error(
                    "Erreur lors de la replanification de la saison",
                    season_id=season.id,
                    error=str(e),
                )

        return RefreshOutcome.UPDATED

    def _persisted_status(self, season: Season) -> Optional[SeasonStatus]:
        """
        Statut actuellement en base.

        La saison recue peut dater d'avant une promotion faite pendant
        l'appel au fournisseur : seul le statut stocke fait foi.
        """
        stored = self._repository.get_by_id(season.id)
        return stored.status if stored is not None else season.status

    def _to_episode(self, raw: RawEpisode) -> Episode:
        """Convertit un episode brut du fournisseur en Episode."""
        return Episode(
            id=self._id_factory(),
            episode_number=raw.episode_index,
            title=raw.name,
            plot=raw.overview or "",
            duration_in_minutes=raw.runtime_minutes or 0,
            release_date=self._parse_air_date(raw.air_date),
            poster=self._still_url_template.format(path=raw.still_path) if raw.still_path else "",
        )

    @staticmethod
    def _parse_air_date(value: Optional[str]) -> Optional[date]:
        """Parse une date ISO YYYY-MM-DD (None si vide ou invalide)."""
        if not value:
            return None
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            logger.debug(f"Date de diffusion invalide ignoree: {value!r}")
            return None
