"""
Implementation SQLModel du repository Season.

Implemente l'interface ISeasonRepository pour la persistance des saisons
dans la base de donnees SQLite via SQLModel.

Les dates sont ecrites en UTC explicite. SQLite ne conserve pas le fuseau :
elles sont relues naives et reconverties en UTC.
"""

import json
from datetime import date, datetime
from typing import Any, Iterable, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from seriescache.core.entities.season import Episode, Season
from seriescache.core.ports.repositories import ISeasonRepository
from seriescache.core.value_objects.season_status import SeasonStatus
from seriescache.infrastructure.persistence.models import SeasonModel
from seriescache.utils.timezone import ensure_utc


def _episode_to_dict(episode: Episode) -> dict[str, Any]:
    return {
        "id": episode.id,
        "episode_number": episode.episode_number,
        "title": episode.title,
        "plot": episode.plot,
        "duration_in_minutes": episode.duration_in_minutes,
        "release_date": episode.release_date.isoformat() if episode.release_date else None,
        "poster": episode.poster,
    }


def _episode_from_dict(data: dict[str, Any]) -> Episode:
    release_date = data.get("release_date")
    return Episode(
        id=data.get("id"),
        episode_number=data["episode_number"],
        title=data.get("title", ""),
        plot=data.get("plot", ""),
        duration_in_minutes=data.get("duration_in_minutes", 0),
        release_date=date.fromisoformat(release_date) if release_date else None,
        poster=data.get("poster", ""),
    )


class SQLModelSeasonRepository(ISeasonRepository):
    """
    Repository SQLModel pour les saisons.

    Implemente ISeasonRepository avec conversion bidirectionnelle
    entre l'entite Season (domaine) et SeasonModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: SeasonModel) -> Season:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele SeasonModel depuis la DB

        Retourne :
            L'entite Season correspondante
        """
        return Season(
            id=str(model.id) if model.id else None,
            series_id=model.series_id,
            tmdb_id=model.tmdb_id,
            season_number=model.season_number,
            title=model.title,
            episodes=[_episode_from_dict(e) for e in model.episodes],
            episode_count=model.episode_count,
            status=SeasonStatus(model.status) if model.status else None,
            last_updated=ensure_utc(model.last_updated),
            release_weekday=model.release_weekday,
            next_episode_date=model.next_episode_date,
            access_count=model.access_count,
            last_accessed=ensure_utc(model.last_accessed),
        )

    def _apply(self, model: SeasonModel, field_name: str, value: Any) -> None:
        """Affecte un champ de l'entite au modele en convertissant son type."""
        if field_name == "episodes":
            model.episodes_json = json.dumps([_episode_to_dict(e) for e in value])
        elif field_name == "status":
            model.status = SeasonStatus(value).value if value is not None else None
        elif field_name in ("last_updated", "last_accessed"):
            setattr(model, field_name, ensure_utc(value))
        else:
            setattr(model, field_name, value)

    def _get_model(self, season_id: str) -> Optional[SeasonModel]:
        try:
            model_id = int(season_id)
        except (TypeError, ValueError):
            return None
        return self._session.get(SeasonModel, model_id)

    def get_by_id(self, season_id: str) -> Optional[Season]:
        """Recupere une saison par son ID interne."""
        model = self._get_model(season_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_series_and_number(
        self,
        series_id: str,
        season_number: int,
    ) -> Optional[Season]:
        """Recupere une saison par sa serie parente et son numero."""
        statement = select(SeasonModel).where(
            SeasonModel.series_id == series_id,
            SeasonModel.season_number == season_number,
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def save(self, season: Season) -> Season:
        """Sauvegarde une saison (insertion ou mise a jour)."""
        # Verifier si la saison existe deja (par ID ou serie + numero)
        existing = None
        if season.id:
            existing = self._get_model(season.id)
        elif season.series_id is not None:
            statement = select(SeasonModel).where(
                SeasonModel.series_id == season.series_id,
                SeasonModel.season_number == season.season_number,
            )
            existing = self._session.exec(statement).first()

        model = existing or SeasonModel(
            series_id=season.series_id or "",
            season_number=season.season_number,
        )
        model.series_id = season.series_id or ""
        model.tmdb_id = season.tmdb_id
        model.season_number = season.season_number
        model.access_count = season.access_count
        for field_name in (*self.UPDATABLE_FIELDS, "last_accessed"):
            self._apply(model, field_name, getattr(season, field_name))

        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def update(self, season_id: str, **changes: Any) -> Optional[Season]:
        """Met a jour partiellement une saison en une seule transaction."""
        unknown = set(changes) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Champs non modifiables: {', '.join(sorted(unknown))}")

        model = self._get_model(season_id)
        if model is None:
            return None

        for field_name, value in changes.items():
            self._apply(model, field_name, value)

        self._session.add(model)
        try:
            self._session.commit()
        except Exception:
            # Ecriture unique : rien n'est applique en cas d'echec
            self._session.rollback()
            raise
        self._session.refresh(model)
        return self._to_entity(model)

    def find_by_status(self, statuses: Iterable[SeasonStatus]) -> list[Season]:
        """Liste les saisons dont le statut fait partie de ceux donnes."""
        values = [SeasonStatus(s).value for s in statuses]
        statement = select(SeasonModel).where(SeasonModel.status.in_(values))
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def find_popular(self, accessed_since: datetime, threshold: int) -> list[Season]:
        """Liste les saisons consultees depuis accessed_since au moins threshold fois."""
        statement = select(SeasonModel).where(
            SeasonModel.last_accessed >= ensure_utc(accessed_since),
            SeasonModel.access_count >= threshold,
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def increment_access_count(self, season_id: str, accessed_at: datetime) -> None:
        """
        Incremente le compteur d'acces en une seule requete UPDATE.

        L'increment est fait par la base (access_count = access_count + 1),
        sans lecture prealable.
        """
        statement = (
            update(SeasonModel)
            .where(SeasonModel.id == int(season_id))
            .values(
                access_count=SeasonModel.access_count + 1,
                last_accessed=ensure_utc(accessed_at),
            )
        )
        try:
            self._session.connection().execute(statement)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
