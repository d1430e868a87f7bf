"""
Utilitaires pour SeriesCache.

Ce module contient les fonctions utilitaires partagees.
"""

from seriescache.utils.timezone import ensure_utc, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
]
