"""
Modeles SQLModel pour la base de donnees SeriesCache.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- seasons: Saisons de series avec leurs episodes en cache

Les episodes sont stockes dans episodes_json (liste de dicts serialisee),
la saison etant toujours lue et ecrite comme un tout.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Index, SQLModel

from seriescache.utils.timezone import utc_now


def _utc_column(index: bool = False) -> Column:
    """Colonne date avec fuseau : les valeurs ecrites sont toujours en UTC."""
    return Column(DateTime(timezone=True), nullable=True, index=index)


class SeasonModel(SQLModel, table=True):
    """
    Modele representant une saison dans la base de donnees.

    Les episodes proviennent de TMDB, le statut et les dates de
    rafraichissement sont maintenus par le moteur de cache.
    """

    __tablename__ = "seasons"
    __table_args__ = (
        Index("ix_seasons_series_season", "series_id", "season_number", unique=True),
    )

    id: int | None = Field(default=None, primary_key=True)
    series_id: str = Field(index=True)
    tmdb_id: int | None = Field(default=None, index=True)
    season_number: int
    title: str = ""
    episodes_json: str | None = None  # JSON: [{"id": ..., "episode_number": 1, ...}]
    episode_count: int = 0
    status: str | None = Field(default=None, index=True)  # Valeur de SeasonStatus
    last_updated: datetime | None = Field(default=None, sa_column=_utc_column())
    release_weekday: int | None = None  # 0 = lundi ... 6 = dimanche
    next_episode_date: date | None = None
    access_count: int = Field(default=0, index=True)
    last_accessed: datetime | None = Field(default=None, sa_column=_utc_column(index=True))
    created_at: datetime | None = Field(default_factory=utc_now, sa_column=_utc_column())

    @property
    def episodes(self) -> list[dict[str, Any]]:
        """Retourne les episodes deserialises."""
        if self.episodes_json:
            return json.loads(self.episodes_json)
        return []

