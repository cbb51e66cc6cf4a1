from flask import Blueprint, jsonify, request, current_app, abort
from concentration import socketio
from concentration.constants import DEFAULT_DIFFICULTY, DEFAULT_PLAYER_NAME, DIFFICULTIES
from concentration.services.games import GameSession, UnknownCard
from typing import Dict
import random
import string
import threading

games = Blueprint('games', __name__)

# Live sessions keyed by game code (process-wide, in memory)
_sessions: Dict[str, GameSession] = {}
_sessions_lock = threading.Lock()


def generate_game_code(length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _sessions:
            return code


def _emit_state(session: GameSession) -> None:
    socketio.emit('state_update', {'game_code': session.code}, to=f"game:{session.code}", namespace='/ws')


def _record_completion(app, session: GameSession) -> None:
    app.logger.info(f"[complete] game={session.code} seconds={session.seconds} moves={session.moves}")
    app.extensions['concentration.recorder'].record(session)
    _emit_state(session)


def _get_session_or_404(game_code: str) -> GameSession:
    session = _sessions.get(game_code.upper())
    if session is None:
        abort(404)
    return session


def _error(message, status=400):
    return jsonify({'error': message}), status


@games.route('', methods=['POST'])
def create_session():
    """
    Starts a new game session for the requested difficulty.
    """
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty') or DEFAULT_DIFFICULTY
    name = data.get('name') or DEFAULT_PLAYER_NAME
    if difficulty not in DIFFICULTIES:
        return _error(f"Difficulty must be one of {', '.join(DIFFICULTIES)}")

    app = current_app._get_current_object()
    with _sessions_lock:
        code = generate_game_code()
        session = GameSession(
            code,
            app.extensions['concentration.scheduler'],
            difficulty=difficulty,
            name=name,
            on_change=_emit_state,
            on_complete=lambda s: _record_completion(app, s),
            match_delay=app.config.get('FLIP_MATCH_DELAY_MS', 600) / 1000.0,
            mismatch_delay=app.config.get('FLIP_MISMATCH_DELAY_MS', 800) / 1000.0,
        )
        session.leaderboard = app.extensions['concentration.cache'].load()
        _sessions[code] = session
    app.logger.info(f"[session-create] game={code} difficulty={difficulty} pairs={session.pairs}")
    return jsonify(session.to_dict()), 201


@games.route('/local-leaderboard', methods=['GET'])
def get_local_leaderboard():
    cache = current_app.extensions['concentration.cache']
    return jsonify([s.to_dict() for s in cache.load()])


@games.route('/local-leaderboard', methods=['DELETE'])
def clear_local_leaderboard():
    current_app.extensions['concentration.cache'].clear()
    current_app.logger.info("[cache-clear] local leaderboard cleared")
    return jsonify([])


@games.route('/<string:game_code>', methods=['GET'])
def get_session_state(game_code):
    return jsonify(_get_session_or_404(game_code).to_dict())


@games.route('/<string:game_code>', methods=['PATCH'])
def update_session(game_code):
    """
    Updates the player name and/or difficulty. A difficulty change restarts the game.
    """
    session = _get_session_or_404(game_code)
    data = request.get_json(silent=True) or {}
    difficulty = data.get('difficulty')
    if difficulty is not None and difficulty not in DIFFICULTIES:
        return _error(f"Difficulty must be one of {', '.join(DIFFICULTIES)}")
    if 'name' in data:
        name = data.get('name')
        if not isinstance(name, str):
            return _error('Name must be a string')
        session.set_name(name)
    if difficulty is not None and difficulty != session.difficulty:
        session.set_difficulty(difficulty)
        current_app.logger.info(f"[difficulty] game={session.code} difficulty={difficulty} pairs={session.pairs}")
    return jsonify(session.to_dict())


@games.route('/<string:game_code>', methods=['DELETE'])
def discard_session(game_code):
    session = _get_session_or_404(game_code)
    with _sessions_lock:
        _sessions.pop(session.code, None)
    session.close()
    socketio.emit('session_ended', {'game_code': session.code}, to=f"game:{session.code}", namespace='/ws')
    return jsonify({'message': f'Game {session.code} discarded'})


@games.route('/<string:game_code>/flip', methods=['POST'])
def flip_card(game_code):
    session = _get_session_or_404(game_code)
    data = request.get_json(silent=True) or {}
    card_id = data.get('card_id')
    if not card_id:
        return _error('card_id is required')
    try:
        applied = session.flip(card_id)
    except UnknownCard:
        return _error('Unknown card')
    current_app.logger.debug(f"[flip] game={session.code} card={card_id} applied={applied}")
    payload = session.to_dict()
    payload['applied'] = applied
    return jsonify(payload)


@games.route('/<string:game_code>/focus', methods=['POST'])
def move_focus(game_code):
    """
    Moves keyboard focus by `step` cards; `flip: true` flips the focused card.
    """
    session = _get_session_or_404(game_code)
    data = request.get_json(silent=True) or {}
    if data.get('flip'):
        session.flip_focused()
        return jsonify(session.to_dict())
    try:
        step = int(data.get('step', 1))
    except (TypeError, ValueError):
        return _error('step must be an integer')
    session.move_focus(step)
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/toggle', methods=['POST'])
def toggle_running(game_code):
    session = _get_session_or_404(game_code)
    session.toggle_running()
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/restart', methods=['POST'])
def restart_session(game_code):
    session = _get_session_or_404(game_code)
    session.restart()
    current_app.logger.info(f"[restart] game={session.code} pairs={session.pairs}")
    return jsonify(session.to_dict())


@games.route('/<string:game_code>/leaderboard', methods=['GET'])
def get_session_leaderboard(game_code):
    session = _get_session_or_404(game_code)
    return jsonify([s.to_dict() for s in session.leaderboard])
