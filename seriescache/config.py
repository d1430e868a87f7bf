"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe SERIESCACHE_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est optionnelle - le rafraichissement réel est désactivé si non fournie.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de seriescache/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe SERIESCACHE_.
    Exemple : SERIESCACHE_POPULARITY_THRESHOLD=10
    """

    model_config = SettingsConfigDict(
        env_prefix="SERIESCACHE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///seriescache.db")

    # Fournisseur d'épisodes (OPTIONNEL - rafraichissement désactivé si non défini)
    tmdb_api_key: Optional[str] = Field(default=None)
    tmdb_language: str = Field(default="en-US")
    episode_still_url_template: str = Field(
        default="https://image.tmdb.org/t/p/w500{path}"
    )

    # Popularité : promotion en SPECIAL_INTEREST au-delà du seuil
    popularity_threshold: int = Field(default=7, ge=0)
    popularity_window_hours: int = Field(default=24, ge=1)

    # Planification
    scheduler_timezone: str = Field(default="UTC")

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/seriescache.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("episode_still_url_template")
    @classmethod
    def check_still_template(cls, v: str) -> str:
        """Vérifie que le gabarit contient le marqueur {path}."""
        if "{path}" not in v:
            raise ValueError("episode_still_url_template doit contenir {path}")
        return v

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return self.tmdb_api_key is not None
