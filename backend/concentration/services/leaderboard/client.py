import logging
from typing import List, Optional

import requests

from .records import ScoreRecord

logger = logging.getLogger(__name__)


class LeaderboardUnavailable(Exception):
    """The remote leaderboard could not be reached or answered badly."""


class RemoteLeaderboardClient:
    """HTTP client for the leaderboard service.

    Args:
        base_url: Service root, e.g. ``http://localhost:4000``.
        timeout:  Request timeout in seconds; ``None`` keeps the transport default.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit(self, score: ScoreRecord) -> requests.Response:
        """POST a score.

        Only transport failures raise; the response status is not inspected.
        """
        try:
            return self.session.post(f'{self.base_url}/api/scores', json=score.submission(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise LeaderboardUnavailable(str(exc)) from exc

    def fetch(self, difficulty: Optional[str] = None, limit: int = 20) -> List[ScoreRecord]:
        params = {'limit': limit}
        if difficulty:
            params['difficulty'] = difficulty
        try:
            resp = self.session.get(f'{self.base_url}/api/leaderboard', params=params, timeout=self.timeout)
            resp.raise_for_status()
            rows = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise LeaderboardUnavailable(str(exc)) from exc
        if not isinstance(rows, list):
            raise LeaderboardUnavailable('unexpected leaderboard payload')
        scores = [ScoreRecord.from_dict(row) for row in rows]
        return [s for s in scores if s is not None]
