"""
Mecanisme de retry avec backoff exponentiel pour le fournisseur d'episodes.

Gere automatiquement les erreurs 429 (rate limiting) en relancant
les requetes avec un delai croissant et du jitter aleatoire. Les
rafraichissements planifies tombent souvent a la meme heure (minuit),
d'ou des rafales de requetes vers TMDB.

Usage:
    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur pour relancer sur RateLimitError avec backoff exponentiel.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Convertit le header Retry-After en secondes (None si absent ou date HTTP)."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    max_wait: int = 60,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur 429.

    Les autres statuts sont renvoyes tels quels : c'est a l'appelant de
    decider si un 404 est une absence de donnees ou une erreur.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response (tout statut autre que 429)

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        return response

    return await _do_request()
