from flask import Blueprint, jsonify, request, current_app
from concentration.models import Score, InvalidScore, DEFAULT_LIMIT

leaderboard = Blueprint('leaderboard', __name__)


def _parse_limit(raw):
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return limit if limit > 0 else DEFAULT_LIMIT


@leaderboard.route('/scores', methods=['POST'])
def submit_score():
    """
    Stores a finished game's score and returns the stored record.
    """
    data = request.get_json(silent=True) or {}
    try:
        score = Score.submit(data)
    except InvalidScore as exc:
        return jsonify({'error': str(exc)}), 400
    current_app.logger.info(
        f"[score-stored] id={score.id} difficulty={score.difficulty} seconds={score.seconds} moves={score.moves}"
    )
    return jsonify(score.to_dict()), 201


@leaderboard.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    """
    Returns scores from the last 24 hours, fastest first.
    """
    difficulty = request.args.get('difficulty') or None
    limit = _parse_limit(request.args.get('limit'))
    rows = Score.recent(difficulty=difficulty, limit=limit)
    return jsonify([row.to_dict(include_id=False) for row in rows])
