"""
Client TMDB pour la recuperation des episodes d'une saison.

Implemente l'interface IEpisodeProvider pour TMDB (The Movie Database).
Pas de cache disque ici : le moteur de rafraichissement a besoin de la
donnee la plus recente a chaque appel, la mise en cache est la saison
persistee elle-meme.

Usage:
    client = TMDBClient(api_key="your_key")
    season = await client.fetch_episodes(1396, 1)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from seriescache.adapters.api.retry import request_with_retry
from seriescache.core.ports.api_clients import IEpisodeProvider, RawEpisode, SeasonEpisodes


class TMDBClient(IEpisodeProvider):
    """
    Client API TMDB pour les episodes de series.

    Implemente IEpisodeProvider avec:
    - Recuperation des episodes d'une saison (/tv/{id}/season/{n})
    - Retry automatique sur rate limiting (429)
    - None si la saison n'existe pas (404)

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3

    Example:
        client = TMDBClient(api_key="xxx", language="fr-FR")
        season = await client.fetch_episodes(1396, 1)
        if season:
            print(len(season.episodes))
        await client.close()
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: Optional[str], language: str = "en-US") -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (API Key v3 ou Read Access Token v4)
            language: Langue des titres et resumes (defaut: en-US)
        """
        self._api_key = api_key
        self._language = language
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer
        """
        if not self._api_key:
            raise ValueError("Cle API TMDB non configuree")

        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key) > 40

            headers = {"Accept": "application/json"}
            params = {}

            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=30.0,
            )
        return self._client

    async def fetch_episodes(
        self,
        external_id: int,
        season_number: int,
    ) -> Optional[SeasonEpisodes]:
        """
        Recupere les episodes d'une saison TMDB.

        Args:
            external_id: ID TMDB de la serie
            season_number: Numero de la saison

        Returns:
            SeasonEpisodes, ou None si la saison est introuvable (404)

        Raises:
            RateLimitError: Si 429 apres epuisement des tentatives
            httpx.HTTPStatusError: Pour les autres erreurs HTTP
        """
        client = self._get_client()
        response = await request_with_retry(
            client,
            "GET",
            f"/tv/{external_id}/season/{season_number}",
            params={"language": self._language},
        )

        if response.status_code == 404:
            logger.debug(
                f"Saison introuvable sur TMDB: {external_id}/S{season_number:02d}"
            )
            return None
        response.raise_for_status()

        data = response.json()
        episodes = tuple(
            self._to_raw_episode(item)
            for item in data.get("episodes") or []
            if item.get("episode_number") is not None
        )
        return SeasonEpisodes(episodes=episodes)

    @staticmethod
    def _to_raw_episode(item: dict[str, Any]) -> RawEpisode:
        """Convertit un episode JSON TMDB en RawEpisode."""
        return RawEpisode(
            episode_index=int(item["episode_number"]),
            name=item.get("name") or "",
            overview=item.get("overview") or None,
            runtime_minutes=item.get("runtime"),
            air_date=item.get("air_date") or None,
            still_path=item.get("still_path") or None,
        )

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a la fin de l'utilisation pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
