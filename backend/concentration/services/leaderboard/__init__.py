"""Leaderboard records, the local JSON cache and the remote HTTP client."""

from .records import ScoreRecord, sort_scores
from .cache import LocalLeaderboardCache
from .client import RemoteLeaderboardClient, LeaderboardUnavailable

__all__ = [
    'ScoreRecord',
    'sort_scores',
    'LocalLeaderboardCache',
    'RemoteLeaderboardClient',
    'LeaderboardUnavailable',
]
