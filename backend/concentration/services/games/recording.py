import logging
from typing import List

from concentration.constants import DEFAULT_PLAYER_NAME, LOCAL_LEADERBOARD_SIZE
from concentration.services.leaderboard import (
    LeaderboardUnavailable,
    LocalLeaderboardCache,
    RemoteLeaderboardClient,
    ScoreRecord,
)
from concentration.services.leaderboard.records import now_iso

logger = logging.getLogger(__name__)


class ScoreRecorder:
    """Records a finished session and loads the leaderboard to display.

    The remote submit is attempted first; the local cache is written once
    whatever the remote outcome. The displayed board comes from the remote
    service, or from the local cache when the service is unavailable.
    """

    def __init__(self, client: RemoteLeaderboardClient, cache: LocalLeaderboardCache):
        self.client = client
        self.cache = cache

    def build_score(self, session) -> ScoreRecord:
        return ScoreRecord(
            name=session.name or DEFAULT_PLAYER_NAME,
            seconds=session.seconds,
            moves=session.moves,
            difficulty=session.difficulty,
            date=now_iso(),
        )

    def record(self, session) -> List[ScoreRecord]:
        generation = session.generation
        score = self.build_score(session)
        try:
            self.client.submit(score)
            logger.info("[score-submit] game=%s seconds=%s moves=%s", session.code, score.seconds, score.moves)
        except LeaderboardUnavailable as exc:
            logger.warning("[score-fallback] game=%s remote submit failed: %s", session.code, exc)
        try:
            self.cache.save(score)
        except OSError as exc:
            logger.warning("[cache-write-failed] game=%s error=%s", session.code, exc)

        board = self.leaderboard(score.difficulty)
        if not session.publish_result(generation, score, board):
            logger.info("[score-stale] game=%s restarted while recording", session.code)
        return board

    def leaderboard(self, difficulty: str) -> List[ScoreRecord]:
        try:
            return self.client.fetch(difficulty, limit=LOCAL_LEADERBOARD_SIZE)
        except LeaderboardUnavailable as exc:
            logger.warning("[leaderboard-fallback] difficulty=%s error=%s", difficulty, exc)
            return self.cache.load()
