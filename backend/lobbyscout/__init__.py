"""Lobby scout: Riot API access layer and player insights engine."""

__version__ = "1.0.0"
