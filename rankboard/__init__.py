"""Ranked, filterable, cached account leaderboard API."""

__version__ = "0.1.0"
