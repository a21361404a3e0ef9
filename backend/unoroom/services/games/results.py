from sqlalchemy.exc import SQLAlchemyError

from unoroom import db, socketio
from unoroom.models import GameResult


def save_game_result(app, summary) -> None:
    """Persist a finished-game summary. Failures are logged, never raised."""
    with app.app_context():
        try:
            result = GameResult.from_summary(summary)
            db.session.add(result)
            db.session.commit()
            app.logger.info(f"[result-saved] room={summary['roomId']} winner={summary.get('winner')} id={result.id}")
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception(f"[result-failed] room={summary.get('roomId')}")


def record_game_result(app, summary) -> None:
    """Hand a summary to the result store without blocking gameplay.

    Runs inline under TESTING so tests can read the row back.
    """
    if app.config.get('TESTING') and not app.config.get('RESULTS_ASYNC_IN_TESTS'):
        save_game_result(app, summary)
    else:
        socketio.start_background_task(save_game_result, app, summary)
