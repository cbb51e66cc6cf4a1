import json
import logging
import os
import threading
from typing import List

from concentration.constants import LEADERBOARD_STORAGE_KEY, LOCAL_LEADERBOARD_SIZE
from .records import ScoreRecord, sort_scores

logger = logging.getLogger(__name__)


class LocalLeaderboardCache:
    """Size-capped leaderboard persisted as one keyed entry in a JSON file.

    Anything unreadable (missing file, invalid JSON, wrong shapes) loads as an
    empty leaderboard; malformed rows are skipped.
    """

    def __init__(self, path: str, key: str = LEADERBOARD_STORAGE_KEY, size: int = LOCAL_LEADERBOARD_SIZE):
        self.path = path
        self.key = key
        self.size = size
        self._lock = threading.Lock()

    def _read_store(self) -> dict:
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                store = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("[cache-corrupt] path=%s error=%s", self.path, exc)
            return {}
        return store if isinstance(store, dict) else {}

    def _write_store(self, store: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f'{self.path}.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as fh:
            json.dump(store, fh, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def load(self) -> List[ScoreRecord]:
        with self._lock:
            return self._load()

    def _load(self) -> List[ScoreRecord]:
        rows = self._read_store().get(self.key)
        if not isinstance(rows, list):
            return []
        scores = []
        for row in rows:
            score = ScoreRecord.from_dict(row)
            if score is not None:
                scores.append(score)
        return scores

    def save(self, score: ScoreRecord) -> List[ScoreRecord]:
        """Insert a score, keep the best ``size`` entries, return the board."""
        with self._lock:
            board = sort_scores(self._load() + [score])[:self.size]
            store = self._read_store()
            store[self.key] = [s.to_dict() for s in board]
            self._write_store(store)
            return board

    def clear(self) -> None:
        with self._lock:
            store = self._read_store()
            if self.key not in store:
                return
            del store[self.key]
            self._write_store(store)
