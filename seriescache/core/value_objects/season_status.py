"""
Objet valeur pour le statut de cycle de vie d'une saison.

Le statut gouverne la cadence de rafraichissement des episodes :
- UPCOMING, ONGOING, COMPLETED : derives des episodes par la classification
- SPECIAL_INTEREST : atteint uniquement par promotion (popularite)

Transitions :
    UPCOMING <-> ONGOING -> COMPLETED  (classification)
    * -> SPECIAL_INTEREST              (promotion)
    SPECIAL_INTEREST -> *              (jamais, pas de retrogradation)
"""

from enum import Enum
from typing import Optional


class SeasonStatus(str, Enum):
    """Statut de cycle de vie d'une saison.

    Valeurs:
        UPCOMING: Aucun episode diffuse
        ONGOING: Au moins un episode diffuse, saison incomplete
        COMPLETED: Tous les episodes diffuses avec des donnees completes
        SPECIAL_INTEREST: Saison tres consultee, rafraichie a l'acces
    """

    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    SPECIAL_INTEREST = "SPECIAL_INTEREST"

    @property
    def is_promoted(self) -> bool:
        """Indique si le statut resulte d'une promotion par popularite."""
        return self is SeasonStatus.SPECIAL_INTEREST

    @classmethod
    def promote(cls, current: Optional["SeasonStatus"]) -> "SeasonStatus":
        """Transition de promotion : tout statut devient SPECIAL_INTEREST."""
        return cls.SPECIAL_INTEREST

    @classmethod
    def after_refresh(
        cls,
        current: Optional["SeasonStatus"],
        classified: "SeasonStatus",
    ) -> "SeasonStatus":
        """
        Statut a persister apres un rafraichissement.

        Args:
            current: Statut avant rafraichissement (None si jamais classe)
            classified: Statut derive des episodes par la classification

        Returns:
            Le statut classe, sauf pour une saison promue qui reste promue
        """
        if current is not None and current.is_promoted:
            return current
        return classified
