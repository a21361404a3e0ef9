from unoroom import db
import json
import time


class GameResult(db.Model):
    __tablename__ = 'game_result'
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(16), nullable=False, index=True)
    winner_id = db.Column(db.String(64), nullable=True)
    winner_name = db.Column(db.String(64), nullable=True)
    total_turns = db.Column(db.Integer, default=0, nullable=False)
    played_cards = db.Column(db.Text, nullable=True)  # JSON-encoded list of cards
    finished_at = db.Column(db.Float, default=time.time, nullable=False)
    players = db.relationship('GameResultPlayer', back_populates='result', cascade='all, delete-orphan',
                              order_by='GameResultPlayer.position')

    @classmethod
    def from_summary(cls, summary):
        result = cls(
            room_id=summary['roomId'],
            winner_id=summary.get('winner'),
            winner_name=summary.get('winnerName'),
            total_turns=int(summary.get('totalTurns') or 0),
            played_cards=json.dumps(summary.get('playedCards') or []),
        )
        for p in summary.get('players', []):
            result.players.append(GameResultPlayer(
                player_id=p['playerId'],
                player_name=p['playerName'],
                position=p['position'],
            ))
        return result

    def to_dict(self):
        return {
            'id': self.id,
            'roomId': self.room_id,
            'players': [p.to_dict() for p in self.players],
            'winner': self.winner_id,
            'winnerName': self.winner_name,
            'totalTurns': self.total_turns,
            'playedCards': json.loads(self.played_cards) if self.played_cards else [],
            'finishedAt': self.finished_at,
        }


class GameResultPlayer(db.Model):
    __tablename__ = 'game_result_player'
    id = db.Column(db.Integer, primary_key=True)
    result_id = db.Column(db.Integer, db.ForeignKey('game_result.id'), nullable=False, index=True)
    player_id = db.Column(db.String(64), nullable=False)
    player_name = db.Column(db.String(64), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    result = db.relationship('GameResult', back_populates='players')

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'playerName': self.player_name,
            'position': self.position,
        }
