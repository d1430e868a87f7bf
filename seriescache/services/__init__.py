"""
Services applicatifs du moteur de cache des saisons.

- lifecycle : classification du statut d'une saison (fonctions pures)
- staleness : decision de rafraichissement (StalenessEvaluator)
- access_recorder : compteur d'acces et promotion par popularite
- season_refresher : recuperation, reconciliation et persistance des episodes
- scheduler : taches recurrentes par saison et balayages globaux
- season_cache : facade assemblant les composants
- season_service : lecture des saisons avec rafraichissement paresseux
"""

from seriescache.services.access_recorder import AccessRecorder
from seriescache.services.lifecycle import (
    classify_season,
    compute_next_episode_date,
    compute_release_weekday,
)
from seriescache.services.scheduler import SeasonRefreshScheduler, SweepStats
from seriescache.services.season_cache import SeasonCacheService
from seriescache.services.season_refresher import (
    RefreshOutcome,
    SeasonRefresher,
    reconcile_episodes,
)
from seriescache.services.season_service import SeasonService
from seriescache.services.staleness import StalenessEvaluator

__all__ = [
    "AccessRecorder",
    "classify_season",
    "compute_next_episode_date",
    "compute_release_weekday",
    "reconcile_episodes",
    "RefreshOutcome",
    "SeasonCacheService",
    "SeasonRefresher",
    "SeasonRefreshScheduler",
    "SeasonService",
    "StalenessEvaluator",
    "SweepStats",
]
