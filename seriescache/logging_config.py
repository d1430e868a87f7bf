"""
Configuration du logging de l'application via loguru.

Deux sorties :
- console (stderr), coloree, niveau reglable par -v / -q
- fichier JSON avec rotation, toujours en DEBUG

APScheduler et httpx journalisent via le module logging standard : leurs
enregistrements sont relayes vers loguru pour n'avoir qu'un seul flux.
Les erreurs capturees par le moteur de cache portent les champs extra
`season_id` et `error`, visibles dans la sortie JSON.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

# Bibliotheques tierces relayees, avec leur niveau minimum
_RELAYED_LOGGERS = {
    "apscheduler": logging.WARNING,
    "httpx": logging.WARNING,
}

_VERBOSITY_LEVELS = ["INFO", "DEBUG", "TRACE"]


class _LoguruRelayHandler(logging.Handler):
    """Handler logging standard qui reemet chaque enregistrement dans loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(
            level, record.getMessage(), source=record.name
        )


def console_level(base_level: str, verbose: int = 0, quiet: bool = False) -> str:
    """
    Calcule le niveau console a partir des options -v / -q.

    Args:
        base_level: Niveau configure (SERIESCACHE_LOG_LEVEL)
        verbose: Nombre de -v (1 = DEBUG, 2+ = TRACE)
        quiet: Mode silencieux (erreurs uniquement), prioritaire sur -v
    """
    if quiet:
        return "ERROR"
    if verbose:
        return _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)]
    return base_level.upper()


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/seriescache.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum pour la console (TRACE, DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level> {extra}"
        ),
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    relay = _LoguruRelayHandler()
    for name, level in _RELAYED_LOGGERS.items():
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [relay]
        stdlib_logger.setLevel(level)
        stdlib_logger.propagate = False

    logger.debug("Logging configuré", log_file=str(log_file), console_level=log_level)
