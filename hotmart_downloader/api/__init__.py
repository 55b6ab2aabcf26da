"""API layer for the Hotmart player content endpoint."""

from .player_api import PlayerAPI

__all__ = ["PlayerAPI"]
