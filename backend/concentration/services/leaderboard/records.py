import numbers
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class ScoreRecord:
    """A completed game result. Created once, never mutated."""

    name: str
    seconds: int
    moves: int
    difficulty: str
    date: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['ScoreRecord']:
        """Parse a cached or remote row; returns None when the row is malformed.

        Remote rows carry ``created_at`` where cached rows carry ``date``.
        """
        if not isinstance(data, dict):
            return None
        name = data.get('name')
        seconds = data.get('seconds')
        moves = data.get('moves')
        difficulty = data.get('difficulty')
        date = data.get('date') or data.get('created_at') or ''
        if not isinstance(name, str) or not isinstance(difficulty, str) or not isinstance(date, str):
            return None
        for value in (seconds, moves):
            if not isinstance(value, numbers.Real) or isinstance(value, bool):
                return None
        return cls(name=name, seconds=seconds, moves=moves, difficulty=difficulty, date=date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'seconds': self.seconds,
            'moves': self.moves,
            'difficulty': self.difficulty,
            'date': self.date,
        }

    def submission(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'seconds': self.seconds,
            'moves': self.moves,
            'difficulty': self.difficulty,
        }


def sort_scores(scores: Iterable[ScoreRecord]) -> List[ScoreRecord]:
    """Fastest first; fewer moves wins a tie."""
    return sorted(scores, key=lambda s: (s.seconds, s.moves))
