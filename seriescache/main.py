"""
Point d'entrée CLI de SeriesCache.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import asyncio
from enum import Enum
from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .config import Settings
from .container import Container
from .core.entities.season import Season
from .logging_config import configure_logging, console_level
from .services.season_refresher import RefreshOutcome

app = typer.Typer(
    name="seriescache",
    help="Moteur de cache et de rafraichissement des episodes de saisons",
)
container = Container()


class SweepTarget(str, Enum):
    """Balayages pouvant etre lances manuellement."""

    ACTIVE = "active"
    POPULAR = "popular"


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def _echo_season(season: Season) -> None:
    status = season.status.value if season.status else "non classee"
    typer.echo(f"Saison {season.id} : {season.title or '-'} (S{season.season_number:02d})")
    typer.echo(f"  Statut : {status}")
    typer.echo(f"  Episodes : {season.episode_count}")
    if season.next_episode_date:
        typer.echo(f"  Prochain episode : {season.next_episode_date.isoformat()}")
    if season.last_updated:
        typer.echo(f"  Derniere mise a jour : {season.last_updated.isoformat()}")
    typer.echo(f"  Acces : {season.access_count}")


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """SeriesCache - cache des episodes de saisons TV."""
    settings = get_config()
    configure_logging(
        log_level=console_level(settings.log_level, verbose, quiet),
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.debug("Démarrage de SeriesCache", version=__version__)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration SeriesCache")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"Langue TMDB : {config.tmdb_language}")
    typer.echo(
        f"Popularité : > {config.popularity_threshold} accès "
        f"sur {config.popularity_window_hours}h"
    )
    typer.echo(f"Fuseau du planificateur : {config.scheduler_timezone}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"SeriesCache v{__version__}")


@app.command()
def check(
    season_id: Annotated[str, typer.Argument(help="ID de la saison")],
) -> None:
    """Lit une saison en la rafraichissant si ses episodes sont perimes."""
    season = asyncio.run(_check_async(season_id))
    if season is None:
        typer.echo(f"Saison introuvable : {season_id}", err=True)
        raise typer.Exit(code=1)
    _echo_season(season)


async def _check_async(season_id: str) -> Season | None:
    cache = container.season_cache()
    try:
        return await container.season_service().get_season(season_id)
    finally:
        await cache.wait_pending()
        await container.tmdb_client().close()


@app.command()
def refresh(
    season_id: Annotated[str, typer.Argument(help="ID de la saison")],
) -> None:
    """Force le rafraichissement d'une saison depuis TMDB."""
    season = container.season_repository().get_by_id(season_id)
    if season is None:
        typer.echo(f"Saison introuvable : {season_id}", err=True)
        raise typer.Exit(code=1)

    outcome = asyncio.run(_refresh_async(season))
    typer.echo(f"Resultat : {outcome.value}")
    if outcome != RefreshOutcome.UPDATED:
        raise typer.Exit(code=1)


async def _refresh_async(season: Season) -> RefreshOutcome:
    try:
        return await container.season_cache().refresh_with_outcome(season)
    finally:
        await container.tmdb_client().close()


@app.command()
def sweep(
    target: Annotated[SweepTarget, typer.Argument(help="Balayage a executer")],
) -> None:
    """Execute immediatement un balayage global."""
    stats = asyncio.run(_sweep_async(target))
    typer.echo(f"Saisons examinees : {stats.total}")
    if target == SweepTarget.ACTIVE:
        typer.echo(f"Rafraichies : {stats.updated}")
        typer.echo(f"Echecs : {stats.failed}")
    else:
        typer.echo(f"Promues : {stats.promoted}")
        typer.echo(f"Deja promues : {stats.skipped}")
        typer.echo(f"Echecs : {stats.failed}")


async def _sweep_async(target: SweepTarget):
    cache = container.season_cache()
    try:
        if target == SweepTarget.ACTIVE:
            return await cache.sweep_active_seasons()
        return await cache.sweep_popular_seasons()
    finally:
        await container.tmdb_client().close()


@app.command()
def run() -> None:
    """Demarre le planificateur et bloque jusqu'a interruption (Ctrl+C)."""
    if not get_config().tmdb_enabled:
        logger.warning("API TMDB non configuree, les rafraichissements echoueront")
    typer.echo("Planificateur demarre (Ctrl+C pour arreter)")
    try:
        asyncio.run(_run_async())
    except KeyboardInterrupt:
        typer.echo("Arret du planificateur")


async def _run_async() -> None:
    cache = container.season_cache()
    cache.start()
    try:
        await asyncio.Event().wait()
    finally:
        await cache.stop()
        await container.tmdb_client().close()


def main() -> None:
    """Point d'entrée de l'application."""
    app()


if __name__ == "__main__":
    main()
