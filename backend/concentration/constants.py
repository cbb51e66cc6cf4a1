"""Game presets and fixed pools."""

DIFFICULTY_PAIRS = {
    'easy': 8,
    'medium': 12,
    'hard': 18,
}
DIFFICULTIES = list(DIFFICULTY_PAIRS)
DEFAULT_DIFFICULTY = 'medium'
DEFAULT_PLAYER_NAME = 'Player'

GLYPH_POOL = [
    '🍎', '🍌', '🍇', '🍓', '🥑', '🍒', '🍋', '🍉', '🥕', '🍆', '🍍', '🥥', '🥝', '🌽',
    '🥦', '🍑', '🍐', '🍊', '🍔', '🍕', '🍩', '🍪', '🍫', '🍿', '🍰', '🍯', '🧀', '🥨',
]

# Local leaderboard cache
LEADERBOARD_STORAGE_KEY = 'concentration_game_leaderboard_v1'
LOCAL_LEADERBOARD_SIZE = 20
