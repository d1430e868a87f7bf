"""
Classification du cycle de vie d'une saison a partir de ses episodes.

Fonctions pures, sans effet de bord, utilisees par le service de
rafraichissement apres chaque reconciliation des episodes.

Une date de diffusion d est consideree "passee" si d a 00:00 UTC est
strictement anterieure a maintenant, et "future" si d a 00:00 UTC est
strictement posterieure.
"""

from collections import Counter
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from seriescache.core.entities.season import Episode
from seriescache.core.value_objects.season_status import SeasonStatus

# Nombre minimal d'episodes dates pour deduire un jour de diffusion
MIN_DATED_EPISODES_FOR_WEEKDAY = 2


def _release_instant(release_date: date) -> datetime:
    return datetime.combine(release_date, time.min, tzinfo=timezone.utc)


def is_released(episode: Episode, now: datetime) -> bool:
    """Indique si l'episode a une date de diffusion passee."""
    return episode.release_date is not None and _release_instant(episode.release_date) < now


def is_complete(episode: Episode, now: datetime) -> bool:
    """Un episode est complet s'il a une duree, un resume et une date passee."""
    return episode.duration_in_minutes > 0 and bool(episode.plot) and is_released(episode, now)


def classify_season(episodes: Iterable[Episode], now: datetime) -> SeasonStatus:
    """
    Determine le statut d'une saison d'apres ses episodes.

    Args:
        episodes: Episodes reconcilies de la saison
        now: Instant de reference (UTC)

    Returns:
        UPCOMING si aucun episode ou aucun episode diffuse,
        COMPLETED si tous les episodes sont complets,
        ONGOING sinon. Jamais SPECIAL_INTEREST.
    """
    episodes = list(episodes)
    if not episodes:
        return SeasonStatus.UPCOMING

    if all(is_complete(e, now) for e in episodes):
        return SeasonStatus.COMPLETED

    if any(is_released(e, now) for e in episodes):
        return SeasonStatus.ONGOING

    return SeasonStatus.UPCOMING


def compute_release_weekday(episodes: Iterable[Episode]) -> Optional[int]:
    """
    Calcule le jour de diffusion le plus frequent (0 = lundi ... 6 = dimanche).

    En cas d'egalite, le jour de plus petit indice l'emporte.

    Returns:
        Le jour majoritaire, ou None si moins de deux episodes sont dates
    """
    dated = [e.release_date for e in episodes if e.release_date is not None]
    if len(dated) < MIN_DATED_EPISODES_FOR_WEEKDAY:
        return None

    counts = Counter(d.weekday() for d in dated)
    return min(counts, key=lambda weekday: (-counts[weekday], weekday))


def compute_next_episode_date(episodes: Iterable[Episode], now: datetime) -> Optional[date]:
    """Retourne la plus proche date de diffusion future, ou None."""
    future = [
        e.release_date
        for e in episodes
        if e.release_date is not None and _release_instant(e.release_date) > now
    ]
    return min(future, default=None)
