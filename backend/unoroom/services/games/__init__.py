"""Game domain services: cards, rules engine, room registry, results.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .cards import Card, build_standard_deck, shuffle
from .engine import PlayResult, UnoGame
from .errors import GameError
from .registry import Room, RoomRegistry
