"""
Politiques de cache par statut de saison.

Chaque statut est associe a une duree de vie (TTL), une strategie de mise a
jour et, optionnellement, une planification recurrente :

    COMPLETED         180 jours   passive     -
    ONGOING           1 jour      aggressive  tous les jours a 00:00
    UPCOMING          14 jours    passive     chaque lundi a 00:00
    SPECIAL_INTEREST  12 heures   on_access   -

Les planifications sont un type somme (FixedInterval | CalendarExpression)
pour que le backend de planification reste interchangeable.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from seriescache.core.value_objects.season_status import SeasonStatus


class UpdateStrategy(str, Enum):
    """Strategie d'evaluation de la fraicheur des donnees."""

    PASSIVE = "passive"
    AGGRESSIVE = "aggressive"
    ON_ACCESS = "on_access"


@dataclass(frozen=True)
class FixedInterval:
    """Planification a intervalle fixe (ex: toutes les 6 heures)."""

    every: timedelta

    def __post_init__(self) -> None:
        if self.every <= timedelta(0):
            raise ValueError(f"Intervalle invalide: {self.every}")


@dataclass(frozen=True)
class CalendarExpression:
    """
    Planification calendaire au format crontab a 5 champs.

    Les jours de semaine doivent etre ecrits par leur nom (mon, sun...)
    pour eviter toute ambiguite de numerotation entre backends.
    """

    crontab: str

    def __post_init__(self) -> None:
        if len(self.crontab.split()) != 5:
            raise ValueError(f"Expression crontab invalide: {self.crontab!r}")


Schedule = Union[FixedInterval, CalendarExpression]


@dataclass(frozen=True)
class CachePolicy:
    """
    Politique de cache d'un statut.

    Attributs:
        ttl: Age maximal des donnees avant qu'elles soient perimees
        strategy: Strategie d'evaluation de la fraicheur
        schedule: Planification recurrente du rafraichissement (None = aucune)
    """

    ttl: timedelta
    strategy: UpdateStrategy
    schedule: Optional[Schedule] = None


# Intervalle minimal entre deux rafraichissements d'une saison on_access
ON_ACCESS_MIN_INTERVAL = timedelta(hours=1)

# Balayages globaux (independants des taches par saison)
WEEKLY_SWEEP_SCHEDULE = CalendarExpression("0 0 * * sun")
POPULARITY_SWEEP_SCHEDULE = CalendarExpression("0 2 * * *")


@dataclass(frozen=True)
class CachePolicyTable:
    """
    Table de correspondance statut -> politique de cache.

    Injectee dans les services plutot que codee en dur, ce qui permet
    de la remplacer dans les tests.

    Example:
        table = DEFAULT_CACHE_POLICIES
        policy = table.for_status(SeasonStatus.ONGOING)
        fast = table.with_policy(SeasonStatus.ONGOING, CachePolicy(...))
    """

    policies: Mapping[SeasonStatus, CachePolicy]

    def __post_init__(self) -> None:
        missing = [s.value for s in SeasonStatus if s not in self.policies]
        if missing:
            raise ValueError(f"Politique de cache manquante pour: {', '.join(missing)}")
        object.__setattr__(self, "policies", MappingProxyType(dict(self.policies)))

    def for_status(self, status: SeasonStatus) -> CachePolicy:
        """Retourne la politique associee a un statut."""
        return self.policies[status]

    def with_policy(self, status: SeasonStatus, policy: CachePolicy) -> "CachePolicyTable":
        """Retourne une copie de la table avec la politique d'un statut remplacee."""
        updated = dict(self.policies)
        updated[status] = policy
        return CachePolicyTable(updated)


DEFAULT_CACHE_POLICIES = CachePolicyTable(
    {
        SeasonStatus.COMPLETED: CachePolicy(
            ttl=timedelta(days=180),
            strategy=UpdateStrategy.PASSIVE,
        ),
        SeasonStatus.ONGOING: CachePolicy(
            ttl=timedelta(days=1),
            strategy=UpdateStrategy.AGGRESSIVE,
            schedule=CalendarExpression("0 0 * * *"),
        ),
        SeasonStatus.UPCOMING: CachePolicy(
            ttl=timedelta(days=14),
            strategy=UpdateStrategy.PASSIVE,
            schedule=CalendarExpression("0 0 * * mon"),
        ),
        SeasonStatus.SPECIAL_INTEREST: CachePolicy(
            ttl=timedelta(hours=12),
            strategy=UpdateStrategy.ON_ACCESS,
        ),
    }
)
