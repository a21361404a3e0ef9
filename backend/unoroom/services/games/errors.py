"""Recoverable game errors.

Each one is reported to the session that caused it as an ``error``
event and never changes room or game state.
"""


class GameError(Exception):
    message = 'Game error'

    def __init__(self, message=None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidRequest(GameError):
    message = 'Invalid request'


class RoomNotFound(GameError):
    message = 'Room not found'


class RoomAlreadyExists(GameError):
    message = 'Room already exists'


class RoomFull(GameError):
    message = 'Room is full'


class GameInProgress(GameError):
    message = 'Game already in progress'


class InsufficientPlayers(GameError):
    message = 'Need at least 2 players to start'


class InvalidPlay(GameError):
    message = 'Invalid card'


class UnknownPlayer(GameError):
    message = 'You are not part of this room'
