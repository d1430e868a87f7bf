"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- ISeasonRepository : Stockage des saisons et de leurs compteurs d'accès

Ports client API : Contrats pour les services externes
- IEpisodeProvider : Récupération des épisodes d'une saison
- RawEpisode / SeasonEpisodes : Données brutes du fournisseur
"""

from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.ports.api_clients import (
    IEpisodeProvider,
    RawEpisode,
    SeasonEpisodes,
)

__all__ = [
    # Repositories
    "ISeasonRepository",
    # Clients API
    "IEpisodeProvider",
    "RawEpisode",
    "SeasonEpisodes",
]
