"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- SeasonStatus : Statut de cycle de vie d'une saison
- UpdateStrategy : Strategie d'evaluation de la fraicheur (passive, aggressive, on_access)
- FixedInterval / CalendarExpression : Planifications recurrentes
- CachePolicy / CachePolicyTable : Politiques de cache par statut
"""

from seriescache.core.value_objects.season_status import SeasonStatus
from seriescache.core.value_objects.cache_policy import (
    DEFAULT_CACHE_POLICIES,
    ON_ACCESS_MIN_INTERVAL,
    POPULARITY_SWEEP_SCHEDULE,
    WEEKLY_SWEEP_SCHEDULE,
    CachePolicy,
    CachePolicyTable,
    CalendarExpression,
    FixedInterval,
    Schedule,
    UpdateStrategy,
)

__all__ = [
    "SeasonStatus",
    "UpdateStrategy",
    "FixedInterval",
    "CalendarExpression",
    "Schedule",
    "CachePolicy",
    "CachePolicyTable",
    "DEFAULT_CACHE_POLICIES",
    "ON_ACCESS_MIN_INTERVAL",
    "WEEKLY_SWEEP_SCHEDULE",
    "POPULARITY_SWEEP_SCHEDULE",
]
