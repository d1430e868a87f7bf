"""
Interfaces ports pour les fournisseurs de metadonnees d'episodes.

Le moteur de cache ne connait le fournisseur externe qu'a travers ce port :
une fonction de recuperation des episodes bruts d'une saison. L'adaptateur
concret (TMDB) vit dans adapters/api/.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class RawEpisode:
    """
    Episode brut tel que renvoye par le fournisseur.

    Attributs :
        episode_index : Numero de l'episode chez le fournisseur
        name : Titre de l'episode
        overview : Resume (optionnel)
        runtime_minutes : Duree en minutes (optionnelle)
        air_date : Date de diffusion au format ISO YYYY-MM-DD (optionnelle)
        still_path : Chemin relatif de l'image de l'episode (optionnel)
    """

    episode_index: int
    name: str
    overview: Optional[str] = None
    runtime_minutes: Optional[int] = None
    air_date: Optional[str] = None
    still_path: Optional[str] = None


@dataclass(frozen=True)
class SeasonEpisodes:
    """Reponse du fournisseur pour une saison."""

    episodes: tuple[RawEpisode, ...] = field(default_factory=tuple)


class IEpisodeProvider(ABC):
    """
    Interface des fournisseurs d'episodes.

    Les implementations peuvent lever des exceptions reseau : l'appelant
    (le service de rafraichissement) les capture et les journalise.
    """

    @abstractmethod
    async def fetch_episodes(
        self,
        external_id: int,
        season_number: int,
    ) -> Optional[SeasonEpisodes]:
        """
        Recupere les episodes d'une saison.

        Args :
            external_id : ID de la serie chez le fournisseur
            season_number : Numero de la saison

        Retourne :
            Les episodes de la saison, ou None si la saison est introuvable
        """
        ...
