"""
Fixtures pytest partagees pour les tests SeriesCache.

Ce module contient les fixtures communes utilisees dans les tests:
- Repository en memoire implementant ISeasonRepository
- Horloge figee et fabriques de saisons/episodes
- Mock du fournisseur d'episodes
- Settings de test avec chemins temporaires
"""

from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from seriescache.config import Settings
from seriescache.core.ports.api_clients import IEpisodeProvider
from tests.fixtures.seasons import NOW, InMemorySeasonRepository


@pytest.fixture
def now() -> datetime:
    """Instant de reference (UTC)."""
    return NOW


@pytest.fixture
def clock():
    """Horloge figee sur NOW."""
    return lambda: NOW


@pytest.fixture
def repository() -> InMemorySeasonRepository:
    """Repository en memoire vide."""
    return InMemorySeasonRepository()


@pytest.fixture
def mock_provider() -> AsyncMock:
    """
    Mock de IEpisodeProvider pour les tests.

    Retourne None par defaut (saison introuvable).
    Configurer fetch_episodes dans chaque test.
    """
    provider = AsyncMock(spec=IEpisodeProvider)
    provider.fetch_episodes.return_value = None
    return provider


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings de test avec base et logs temporaires."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        tmdb_api_key="test_api_key",
        log_file=tmp_path / "logs" / "test.log",
    )
