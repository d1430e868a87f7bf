"""
Engine et sessions SQLModel de SeriesCache.

Le planificateur et les lectures de la CLI accedent a la meme base depuis
plusieurs taches : les connexions SQLite passent en journal WAL avec un
delai d'attente sur verrou, plutot que d'echouer immediatement.

L'URL vient de SERIESCACHE_DATABASE_URL (defaut: sqlite:///seriescache.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine, event
from sqlmodel import Session, SQLModel, create_engine

_SQLITE_FILE_PREFIX = "sqlite:///"
_BUSY_TIMEOUT_MS = 5000

_engine: Optional[Engine] = None


def _sqlite_file(db_url: str) -> Optional[Path]:
    """Chemin du fichier pour une URL SQLite fichier, None sinon (memoire, autre SGBD)."""
    if not db_url.startswith(_SQLITE_FILE_PREFIX):
        return None
    raw = db_url[len(_SQLITE_FILE_PREFIX):]
    if not raw or raw.startswith(":memory:"):
        return None
    return Path(raw)


def _apply_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={_BUSY_TIMEOUT_MS}")
    cursor.close()


def create_db_engine(db_url: str) -> Engine:
    """
    Cree un engine pour l'URL donnee.

    Pour un fichier SQLite, le repertoire parent est cree et les pragmas
    WAL / busy_timeout sont appliques a chaque nouvelle connexion.
    """
    if not db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)

    db_file = _sqlite_file(db_url)
    if db_file is not None:
        db_file.parent.mkdir(exist_ok=True, parents=True)

    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    if db_file is not None:
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine


def get_engine(db_url: Optional[str] = None) -> Engine:
    """
    Retourne l'engine partage, en le creant au premier appel.

    Sans URL explicite, elle est lue dans la configuration de l'application.
    """
    global _engine
    if _engine is None:
        if db_url is None:
            from seriescache.config import Settings

            db_url = Settings().database_url
        _engine = create_db_engine(db_url)
        logger.debug("Engine cree", database_url=db_url)
    return _engine


def reset_engine() -> None:
    """Libere l'engine partage ; le prochain get_engine() en recree un."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation avec next() :
        session = next(get_session())
    """
    with Session(get_engine()) as session:
        yield session


def init_db(db_url: Optional[str] = None) -> None:
    """Cree les tables manquantes. Appelee une fois au demarrage."""
    # Enregistre les modeles dans SQLModel.metadata
    from seriescache.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(get_engine(db_url))
