"""Developer signal scoring for public source-hosting profiles."""

__version__ = "0.3.0"
