from concentration import db
from datetime import datetime, timedelta, timezone
import math
import numbers

SECONDS_MAX = 86400
MOVES_MAX = 10000
RECENT_WINDOW = timedelta(hours=24)
DEFAULT_LIMIT = 20


class InvalidScore(ValueError):
    """Raised when a submitted score fails validation. Nothing is written."""


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp(value):
    """ISO-8601 UTC with millisecond precision, e.g. 2025-08-27T10:00:00.000Z"""
    if value is None:
        return None
    return value.isoformat(timespec='milliseconds') + 'Z'


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, nullable=False)
    seconds = db.Column(db.Integer, nullable=False)
    moves = db.Column(db.Integer, nullable=False)
    difficulty = db.Column(db.Text, nullable=False, index=True)
    # Naive UTC
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self, include_id=True):
        data = {
            'name': self.name,
            'seconds': self.seconds,
            'moves': self.moves,
            'difficulty': self.difficulty,
            'created_at': format_timestamp(self.created_at),
        }
        if include_id:
            data = {'id': self.id, **data}
        return data

    @classmethod
    def validate(cls, data):
        """Check a submission payload, returning the cleaned fields.

        Raises InvalidScore('Invalid payload') for missing or wrong-typed
        fields and InvalidScore('Invalid values') for out-of-range numbers.
        """
        data = data if isinstance(data, dict) else {}
        name = data.get('name')
        seconds = data.get('seconds')
        moves = data.get('moves')
        difficulty = data.get('difficulty')
        if not name or not isinstance(name, str) or not _is_number(seconds) or not _is_number(moves) \
                or not difficulty or not isinstance(difficulty, str):
            raise InvalidScore('Invalid payload')
        if seconds < 0 or seconds > SECONDS_MAX or moves < 0 or moves > MOVES_MAX:
            raise InvalidScore('Invalid values')
        return {
            'name': name,
            'seconds': int(round(seconds)),
            'moves': int(round(moves)),
            'difficulty': difficulty,
        }

    @classmethod
    def submit(cls, data):
        """Validate and append a score row. Returns the stored record."""
        fields = cls.validate(data)
        score = cls(**fields)
        db.session.add(score)
        db.session.commit()
        return score

    @classmethod
    def recent(cls, difficulty=None, limit=DEFAULT_LIMIT, now=None):
        """Scores from the last 24 hours, fastest first, fewest moves on ties."""
        since = (now or utcnow()) - RECENT_WINDOW
        query = cls.query.filter(cls.created_at >= since)
        if difficulty:
            query = query.filter(cls.difficulty == difficulty)
        return query.order_by(cls.seconds.asc(), cls.moves.asc(), cls.id.asc()).limit(limit).all()
