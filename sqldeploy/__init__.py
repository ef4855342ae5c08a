"""Execute changed SQL files against a data warehouse from CI."""

__version__ = "0.1.0"
