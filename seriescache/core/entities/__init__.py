"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.

Exports:
- Season: A season of a TV series with its cached episodes
- Episode: Individual episode of a season
"""

from seriescache.core.entities.season import Episode, Season

__all__ = [
    "Season",
    "Episode",
]
