"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance des saisons.
Les implémentations (adaptateurs) fourniront les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Optional

from seriescache.core.entities.season import Season
from seriescache.core.value_objects.season_status import SeasonStatus


class ISeasonRepository(ABC):
    """
    Interface de stockage des saisons.

    Définit les opérations pour persister et récupérer les entités Season,
    y compris le compteur d'accès utilisé pour la promotion par popularité.
    """

    # Champs modifiables via update()
    UPDATABLE_FIELDS = frozenset({
        "title",
        "episodes",
        "episode_count",
        "status",
        "last_updated",
        "release_weekday",
        "next_episode_date",
    })

    @abstractmethod
    def get_by_id(self, season_id: str) -> Optional[Season]:
        """Récupère une saison par son ID interne."""
        ...

    @abstractmethod
    def get_by_series_and_number(
        self,
        series_id: str,
        season_number: int,
    ) -> Optional[Season]:
        """Récupère une saison par sa série parente et son numéro."""
        ...

    @abstractmethod
    def save(self, season: Season) -> Season:
        """Sauvegarde une saison (insertion ou mise à jour complète)."""
        ...

    @abstractmethod
    def update(self, season_id: str, **changes: Any) -> Optional[Season]:
        """
        Met à jour partiellement une saison en une seule écriture.

        Args :
            season_id : L'ID de la saison
            **changes : Champs à modifier (voir UPDATABLE_FIELDS)

        Retourne :
            La saison mise à jour, ou None si elle n'existe pas

        Lève :
            ValueError : Si un champ n'est pas modifiable
        """
        ...

    @abstractmethod
    def find_by_status(self, statuses: Iterable[SeasonStatus]) -> list[Season]:
        """Liste les saisons dont le statut fait partie de ceux donnés."""
        ...

    @abstractmethod
    def find_popular(self, accessed_since: datetime, threshold: int) -> list[Season]:
        """
        Liste les saisons populaires.

        Args :
            accessed_since : Date minimale du dernier accès
            threshold : Nombre minimal d'accès (inclusif)
        """
        ...

    @abstractmethod
    def increment_access_count(self, season_id: str, accessed_at: datetime) -> None:
        """Incrémente atomiquement le compteur d'accès et la date du dernier accès."""
        ...
