"""Process-wide room registry.

Two locks are involved. Each Room has its own reentrant lock that
serializes every change to its roster and game. The registry lock only
guards the room map and the session index. A room lock may be held while
taking the registry lock, never the other way round.
"""

import random
import string
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from .engine import HAND_SIZE, UnoGame
from .errors import (
    GameInProgress,
    InsufficientPlayers,
    RoomAlreadyExists,
    RoomFull,
    RoomNotFound,
    UnknownPlayer,
)


class RosterEntry(NamedTuple):
    id: str
    name: str


class Room:
    def __init__(self, room_id: str):
        self.id = room_id
        self.players: List[RosterEntry] = []
        self.game: Optional[UnoGame] = None
        self.lock = threading.RLock()
        self.closed = False

    @property
    def game_in_progress(self) -> bool:
        return self.game is not None and self.game.started and self.game.winner is None

    def has_player(self, session_id: str) -> bool:
        return any(p.id == session_id for p in self.players)

    def players_payload(self):
        return [{'id': p.id, 'name': p.name, 'position': idx} for idx, p in enumerate(self.players)]


def generate_room_code(length=6):
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


def normalize_room_id(room_id: Optional[str]) -> str:
    return (room_id or '').strip().upper()


class RoomRegistry:
    def __init__(self, min_players=2, max_players=4, hand_size=HAND_SIZE, code_length=6):
        self.min_players = min_players
        self.max_players = max_players
        self.hand_size = hand_size
        self.code_length = code_length
        self._rooms: Dict[str, Room] = {}
        self._session_rooms: Dict[str, str] = {}
        self._lock = threading.Lock()

    def init_app(self, app) -> None:
        """Pick up limits from the app config and start with no rooms."""
        self.min_players = int(app.config.get('MIN_PLAYERS', 2))
        self.max_players = int(app.config.get('MAX_PLAYERS', 4))
        self.hand_size = int(app.config.get('HAND_SIZE', HAND_SIZE))
        self.code_length = int(app.config.get('ROOM_CODE_LENGTH', 6))
        self.clear()

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()
            self._session_rooms.clear()

    def active_room_count(self) -> int:
        with self._lock:
            return len(self._rooms)

    def get_room(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(normalize_room_id(room_id))
        if room is None:
            raise RoomNotFound()
        return room

    def room_for_session(self, session_id: str) -> Optional[Room]:
        with self._lock:
            room_id = self._session_rooms.get(session_id)
            return self._rooms.get(room_id) if room_id else None

    @contextmanager
    def locked(self, room_id: str) -> Iterator[Room]:
        """Hold the room's lock for the duration of the block."""
        room = self.get_room(room_id)
        with room.lock:
            if room.closed:
                raise RoomNotFound()
            yield room

    @contextmanager
    def locked_for_session(self, session_id: str) -> Iterator[Room]:
        room = self.room_for_session(session_id)
        if room is None:
            raise UnknownPlayer('You are not in a room')
        with room.lock:
            if room.closed or not room.has_player(session_id):
                raise UnknownPlayer('You are not in a room')
            yield room

    def create_room(self, session_id: str, player_name: str, room_id: Optional[str] = None) -> Room:
        """Seat the session in a new room; a blank ``room_id`` gets a generated code."""
        code = normalize_room_id(room_id)
        with self._lock:
            if code:
                if code in self._rooms:
                    raise RoomAlreadyExists()
            else:
                code = generate_room_code(self.code_length)
                while code in self._rooms:
                    code = generate_room_code(self.code_length)
            room = Room(code)
            room.players.append(RosterEntry(session_id, player_name))
            self._rooms[code] = room
            self._session_rooms[session_id] = code
        return room

    def join_room(self, room_id: str, session_id: str, player_name: str) -> Room:
        with self.locked(room_id) as room:
            if room.has_player(session_id):
                return room
            if len(room.players) >= self.max_players:
                raise RoomFull()
            if room.game_in_progress:
                raise GameInProgress()
            room.players.append(RosterEntry(session_id, player_name))
            with self._lock:
                self._session_rooms[session_id] = room.id
            return room

    def remove_player(self, session_id: str, room: Optional[Room] = None) -> Optional[Tuple[Room, bool]]:
        """Take the session out of ``room`` (default: the room it is in).

        Returns ``(room, destroyed)`` or None when the session was not
        seated there. A live game keeps its seats; only the roster
        shrinks.
        """
        if room is None:
            room = self.room_for_session(session_id)
        if room is None:
            return None
        with room.lock:
            if room.closed or not room.has_player(session_id):
                return None
            room.players = [p for p in room.players if p.id != session_id]
            destroyed = not room.players
            with self._lock:
                if self._session_rooms.get(session_id) == room.id:
                    del self._session_rooms[session_id]
                if destroyed:
                    room.closed = True
                    self._rooms.pop(room.id, None)
            return room, destroyed

    def start_game(self, room_id: str, deck=None, rng=None) -> UnoGame:
        with self.locked(room_id) as room:
            if room.game_in_progress:
                raise InsufficientPlayers('Game already started')
            if len(room.players) < self.min_players:
                raise InsufficientPlayers(f'Need at least {self.min_players} players to start')
            game = UnoGame(room.id, room.players, deck=deck, rng=rng, hand_size=self.hand_size)
            game.start()
            room.game = game
            return game

    def finish_game(self, room_id: str) -> Optional[UnoGame]:
        """Detach a finished game so the room can start a fresh one."""
        with self.locked(room_id) as room:
            game, room.game = room.game, None
            return game
