"""
Utilitaires de gestion des dates en UTC.

Toutes les dates manipulees par le moteur de cache sont en UTC explicite
(timezone-aware), y compris celles relues depuis SQLite.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Retourne l'instant courant en UTC (remplace datetime.utcnow())."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Garantit une date UTC explicite.

    Une date naive est supposee deja en UTC ; une date avec fuseau est convertie.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
