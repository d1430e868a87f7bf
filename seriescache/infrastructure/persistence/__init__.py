"""
Module de persistance SQLite pour SeriesCache.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine SQLite, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementations des ports repository

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.
"""

from seriescache.infrastructure.persistence.database import (
    create_db_engine,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from seriescache.infrastructure.persistence.models import SeasonModel

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "SeasonModel",
]
