"""
Clients API externes pour le rafraichissement des episodes.

Ce module fournit les adaptateurs pour communiquer avec les API externes:
- TMDB: The Movie Database pour les episodes des saisons

Infrastructure partagee:
- RateLimitError: Exception pour les erreurs 429
- with_retry / request_with_retry: Backoff exponentiel pour gerer le rate limiting

Les clients implementent IEpisodeProvider defini dans core/ports/api_clients.py.
"""

from seriescache.adapters.api.retry import RateLimitError, request_with_retry, with_retry
from seriescache.adapters.api.tmdb_client import TMDBClient

__all__ = [
    "TMDBClient",
    "RateLimitError",
    "with_retry",
    "request_with_retry",
]
