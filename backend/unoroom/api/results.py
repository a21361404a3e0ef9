from flask import Blueprint, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from unoroom import db
from unoroom.models import GameResult, GameResultPlayer

results = Blueprint('results', __name__)


@results.route('/leaderboard', methods=['GET'])
def leaderboard():
    """Players ranked by games won across all stored results."""
    limit = int(current_app.config.get('LEADERBOARD_LIMIT', 10))
    wins = db.func.sum(
        db.case((GameResultPlayer.player_id == GameResult.winner_id, 1), else_=0)
    ).label('wins')
    games_played = db.func.count(GameResultPlayer.id).label('games_played')
    try:
        rows = (
            db.session.query(GameResultPlayer.player_name, wins, games_played)
            .join(GameResult, GameResultPlayer.result_id == GameResult.id)
            .group_by(GameResultPlayer.player_name)
            .order_by(wins.desc(), games_played.asc(), GameResultPlayer.player_name.asc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        current_app.logger.exception("[leaderboard-failed]")
        return jsonify({'error': str(exc)}), 500

    return jsonify([
        {'playerName': name, 'wins': int(w or 0), 'gamesPlayed': int(played)}
        for name, w, played in rows
    ])


@results.route('/results/<string:room_id>', methods=['GET'])
def room_results(room_id):
    found = (
        GameResult.query.filter_by(room_id=room_id.upper())
        .order_by(GameResult.finished_at.desc(), GameResult.id.desc())
        .all()
    )
    return jsonify([r.to_dict() for r in found])
