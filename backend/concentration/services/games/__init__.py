"""Game domain services: deck, state machine, timers and score recording.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .deck import Card, Glyph, ImageReference, generate_deck
from .engine import GameSession, UnknownCard, UnknownDifficulty, star_rating
from .recording import ScoreRecorder
from .timers import BackgroundScheduler, ManualScheduler, create_scheduler

__all__ = [
    'Card',
    'Glyph',
    'ImageReference',
    'generate_deck',
    'GameSession',
    'UnknownCard',
    'UnknownDifficulty',
    'star_rating',
    'ScoreRecorder',
    'BackgroundScheduler',
    'ManualScheduler',
    'create_scheduler',
]
