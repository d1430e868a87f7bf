"""
Evaluation de la fraicheur des episodes en cache d'une saison.

La decision depend de la strategie associee au statut de la saison :
- on_access : perime apres ON_ACCESS_MIN_INTERVAL (1 heure), quel que soit le TTL
- aggressive : perime le jour de diffusion habituel, ou apres le TTL
- passive : perime apres le TTL
"""

from typing import Callable, Optional

from seriescache.core.entities.season import Season
from seriescache.core.value_objects.cache_policy import (
    DEFAULT_CACHE_POLICIES,
    ON_ACCESS_MIN_INTERVAL,
    CachePolicyTable,
    UpdateStrategy,
)
from seriescache.services.access_recorder import AccessRecorder
from seriescache.utils.timezone import utc_now


class StalenessEvaluator:
    """
    Decide si une saison doit etre rafraichie maintenant.

    Chaque evaluation d'une saison deja classee compte comme un acces
    (voir AccessRecorder). La saison elle-meme n'est jamais modifiee.
    """

    def __init__(
        self,
        recorder: Optional[AccessRecorder] = None,
        policies: CachePolicyTable = DEFAULT_CACHE_POLICIES,
        clock: Callable = utc_now,
    ) -> None:
        self._recorder = recorder
        self._policies = policies
        self._clock = clock

    async def should_update(self, season: Season) -> bool:
        """
        Indique si les episodes de la saison sont perimes.

        Args:
            season: Saison lue depuis le cache

        Returns:
            True si la saison n'a jamais ete rafraichie ou classee,
            ou si ses donnees sont perimees selon sa politique
        """
        if season.last_updated is None or season.status is None:
            return True

        if self._recorder is not None:
            await self._recorder.record_access(season.id)

        policy = self._policies.for_status(season.status)
        now = self._clock()
        data_age = now - season.last_updated

        if policy.strategy == UpdateStrategy.ON_ACCESS:
            return data_age > ON_ACCESS_MIN_INTERVAL

        if policy.strategy == UpdateStrategy.AGGRESSIVE:
            if season.release_weekday is not None and season.release_weekday == now.weekday():
                return True
            return data_age > policy.ttl

        return data_age > policy.ttl
