"""
Entites saison et episode.

Une saison regroupe les episodes d'une serie dont les metadonnees
proviennent d'un fournisseur externe (TMDB) et sont mises en cache
localement selon le statut de cycle de vie de la saison.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from seriescache.core.value_objects.season_status import SeasonStatus


@dataclass
class Episode:
    """
    Episode individuel d'une saison.

    Attributes:
        id: Identifiant interne, conserve lors des reconciliations
        episode_number: Numero de l'episode, unique dans la saison
        title: Titre de l'episode
        plot: Resume (vide si inconnu)
        duration_in_minutes: Duree en minutes (0 si inconnue)
        release_date: Date de diffusion (None si inconnue)
        poster: URL de l'image de l'episode (vide si absente)
    """

    id: Optional[str] = None
    episode_number: int = 0
    title: str = ""
    plot: str = ""
    duration_in_minutes: int = 0
    release_date: Optional[date] = None
    poster: str = ""

    def differs_from(self, other: "Episode") -> bool:
        """Indique si les metadonnees affichees different (l'id est ignore)."""
        return (
            self.duration_in_minutes != other.duration_in_minutes
            or self.plot != other.plot
            or self.poster != other.poster
            or self.release_date != other.release_date
            or self.title != other.title
        )


@dataclass
class Season:
    """
    Saison d'une serie TV avec ses episodes en cache.

    Attributes:
        id: Identifiant interne
        series_id: Reference vers la serie parente
        tmdb_id: ID TMDB de la serie (necessaire au rafraichissement)
        season_number: Numero de la saison dans la serie
        title: Titre de la saison
        episodes: Episodes connus, uniques par numero
        episode_count: Nombre d'episodes
        status: Statut de cycle de vie (None tant que jamais classe)
        last_updated: Date du dernier rafraichissement reussi
        release_weekday: Jour de diffusion habituel (0 = lundi ... 6 = dimanche)
        next_episode_date: Date du prochain episode a venir
        access_count: Nombre de consultations
        last_accessed: Date de la derniere consultation
    """

    id: Optional[str] = None
    series_id: Optional[str] = None
    tmdb_id: Optional[int] = None
    season_number: int = 0
    title: str = ""
    episodes: list[Episode] = field(default_factory=list)
    episode_count: int = 0
    status: Optional[SeasonStatus] = None
    last_updated: Optional[datetime] = None
    release_weekday: Optional[int] = None
    next_episode_date: Optional[date] = None
    access_count: int = 0
    last_accessed: Optional[datetime] = None

