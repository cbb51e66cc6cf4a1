import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///leaderboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Leaderboard server listen port
    PORT = int(os.environ.get('PORT', '4000'))
    # Remote leaderboard base URL used by the score recorder
    LEADERBOARD_URL = os.environ.get('LEADERBOARD_URL') or 'http://localhost:4000'
    # Optional timeout for remote leaderboard calls (sec). Unset means transport default.
    LEADERBOARD_TIMEOUT_SEC = float(os.environ['LEADERBOARD_TIMEOUT_SEC']) if os.environ.get('LEADERBOARD_TIMEOUT_SEC') else None
    # Local leaderboard cache file (single keyed entry)
    LEADERBOARD_CACHE_PATH = os.environ.get('LEADERBOARD_CACHE_PATH') or 'leaderboard_cache.json'
    # Flip resolution delays (ms)
    FLIP_MATCH_DELAY_MS = int(os.environ.get('FLIP_MATCH_DELAY_MS', '600'))
    FLIP_MISMATCH_DELAY_MS = int(os.environ.get('FLIP_MISMATCH_DELAY_MS', '800'))
    # Comma separated list of allowed origins; '*' allows any caller
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
