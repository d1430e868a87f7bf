"""SeriesCache - moteur de rafraichissement du cache des saisons de series."""

__version__ = "0.1.0"
