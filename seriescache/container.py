"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI :
repository SQLModel, client TMDB et moteur de cache des saisons.
"""

from dependency_injector import containers, providers

from .adapters.api.tmdb_client import TMDBClient
from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import SQLModelSeasonRepository
from .services.season_cache import SeasonCacheService
from .services.season_service import SeasonService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        cache = container.season_cache()
        seasons = container.season_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db, db_url=config.provided.database_url)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Repositories - Factory pour nouvelle instance avec session fraiche
    season_repository = providers.Factory(
        SQLModelSeasonRepository,
        session=session,
    )

    # Client API - Singleton avec api_key depuis config
    # Si api_key est None, fetch_episodes leve ValueError et le
    # rafraichissement se termine en PROVIDER_UNAVAILABLE
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        language=config.provided.tmdb_language,
    )

    # Moteur de cache - Singleton car il porte le planificateur et les taches en cours
    season_cache = providers.Singleton(
        SeasonCacheService.from_settings,
        settings=config,
        repository=season_repository,
        provider=tmdb_client,
    )

    # Lecture des saisons - Factory car depend d'un repository (session fraiche)
    season_service = providers.Factory(
        SeasonService,
        repository=season_repository,
        cache=season_cache,
    )
