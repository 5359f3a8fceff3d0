from flask import Blueprint, jsonify, request, current_app
from mathsprint import socketio
from mathsprint.game import GameMode
from mathsprint.services.scores.store import get_score_store


scores = Blueprint('scores', __name__)


def _emit_score_saved(record) -> None:
    payload = record.to_dict()
    socketio.emit('score_saved', payload, to='leaderboard', namespace='/ws')
    socketio.emit('score_saved', payload, to=f"leaderboard:{record.game_mode}", namespace='/ws')


@scores.route('/scores', methods=['POST'])
def save_score():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    # ValidationError / InternalError become JSON in the app's error handlers
    record = get_score_store().save(data.get('playerName'), data.get('score'), data.get('gameMode'))
    try:
        _emit_score_saved(record)
    except Exception as exc:
        current_app.logger.warning(f"[score-broadcast-failed] id={record.id} error={exc}")
    return jsonify(record.to_dict())


@scores.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    game_mode = request.args.get('gameMode') or None
    records = get_score_store().get_leaderboard(game_mode)
    return jsonify([r.to_dict() for r in records])


@scores.route('/best-score', methods=['GET'])
def get_best_score():
    player_name = request.args.get('playerName')
    game_mode = request.args.get('gameMode')
    if not all([player_name, game_mode]):
        return jsonify({'error': 'playerName and gameMode are required'}), 400
    best = get_score_store().get_player_best_score(player_name, game_mode)
    return jsonify({'bestScore': best})


@scores.route('/modes', methods=['GET'])
def list_modes():
    cfg = current_app.config
    return jsonify({
        'modes': [m.to_dict() for m in GameMode],
        'durationSec': int(cfg.get('GAME_DURATION_SEC', 180)),
        'feedbackDelaySec': int(cfg.get('FEEDBACK_DELAY_SEC', 2)),
        'correctPoints': int(cfg.get('CORRECT_POINTS', 20)),
    })
