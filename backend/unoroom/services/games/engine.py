"""Rules engine for one game in one room.

The engine owns the deck, the discard pile, every hand, the turn pointer
and the play direction. It performs no I/O and no locking: callers must
hold the owning room's lock around every call, because a draw may
reshuffle and a start deals many cards.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .cards import COLORS, KIND_NUMBER, Card, build_standard_deck, shuffle
from .errors import GameError, InvalidPlay, InvalidRequest, UnknownPlayer

HAND_SIZE = 7


@dataclass
class Seat:
    id: str
    name: str
    position: int
    hand: List[Card] = field(default_factory=list)

    def to_dict(self, include_hand: bool = False):
        data = {
            'id': self.id,
            'name': self.name,
            'cardCount': len(self.hand),
            'position': self.position,
        }
        if include_hand:
            data['hand'] = [card.to_dict() for card in self.hand]
        return data


@dataclass
class PlayResult:
    success: bool
    card: Optional[Card] = None
    winner: Optional[str] = None
    error: Optional[GameError] = None


class UnoGame:
    """A single game. Discard it once a winner is set."""

    def __init__(
        self,
        room_id: str,
        roster: Iterable[Tuple[str, str]],
        deck: Optional[List[Card]] = None,
        rng: Optional[random.Random] = None,
        hand_size: int = HAND_SIZE,
    ):
        self.room_id = room_id
        self.players = [
            Seat(id=player_id, name=name, position=idx)
            for idx, (player_id, name) in enumerate(roster)
        ]
        self._rng = rng or random.Random()
        if deck is None:
            deck = build_standard_deck()
            shuffle(deck, self._rng)
        # The end of the list is the top of the deck
        self.deck: List[Card] = list(deck)
        self.discard_pile: List[Card] = []
        # Wild cards drawn while seeding the discard pile; out of play
        self.set_aside: List[Card] = []
        self.played_cards: List[Card] = []
        self.hand_size = hand_size
        self.current_player_index = 0
        self.direction = 1
        self.current_color: Optional[str] = None
        self.started = False
        self.winner: Optional[str] = None
        self.turns_taken = 0

    @property
    def current_player(self) -> Seat:
        return self.players[self.current_player_index]

    @property
    def top_card(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None

    def get_player(self, player_id: str) -> Optional[Seat]:
        for seat in self.players:
            if seat.id == player_id:
                return seat
        return None

    def card_total(self) -> int:
        return len(self.deck) + len(self.discard_pile) + sum(len(s.hand) for s in self.players)

    def start(self) -> None:
        self.deal_initial_hands()
        self.started = True

    def deal_initial_hands(self) -> None:
        """Deal every hand, then reveal the first non-wild card.

        Raises InvalidRequest when the deck cannot cover the deal; the
        game must then be thrown away.
        """
        needed = self.hand_size * len(self.players) + 1
        if len(self.deck) < needed:
            raise InvalidRequest(
                f'Not enough cards to deal {self.hand_size} to {len(self.players)} players')
        for seat in self.players:
            for _ in range(self.hand_size):
                seat.hand.append(self.deck.pop())

        first_card = self.deck.pop()
        while first_card.is_wild:
            self.set_aside.append(first_card)
            if not self.deck:
                raise InvalidRequest('No card left to start the discard pile')
            first_card = self.deck.pop()
        self.discard_pile.append(first_card)
        self.current_color = first_card.color

    def _reshuffle(self) -> None:
        """Move everything under the top discard back into the deck."""
        if len(self.discard_pile) < 2:
            return
        top_card = self.discard_pile.pop()
        self.deck = self.discard_pile
        self.discard_pile = [top_card]
        shuffle(self.deck, self._rng)

    def draw(self, player_id: str) -> Optional[Card]:
        """Move the top deck card into the player's hand.

        Returns None for an unknown player, or when neither the deck nor
        the discard history has a card left to give.
        """
        seat = self.get_player(player_id)
        if seat is None:
            return None
        if not self.deck:
            self._reshuffle()
        if not self.deck:
            return None
        card = self.deck.pop()
        seat.hand.append(card)
        return card

    def _force_draw(self, count: int) -> None:
        target = self.current_player.id
        for _ in range(count):
            self.draw(target)

    def can_play(self, card: Card, player_id: str) -> bool:
        if self.current_player.id != player_id:
            return False
        if card.is_wild:
            return True
        return card.color == self.current_color or card.value == self.top_card.value

    def _turn_error(self, player_id: str) -> Optional[GameError]:
        if self.get_player(player_id) is None:
            return UnknownPlayer('You are not a player in this game')
        if not self.started:
            return InvalidPlay('Game has not started')
        if self.winner is not None:
            return InvalidPlay('Game is over')
        if self.current_player.id != player_id:
            return InvalidPlay('Not your turn')
        return None

    def play(self, player_id: str, hand_index, chosen_color: Optional[str] = None) -> PlayResult:
        """Play a card from the player's hand.

        A rejected play leaves every piece of state untouched. A play that
        empties the hand wins immediately: no effect, no turn advance.
        """
        error = self._turn_error(player_id)
        if error is not None:
            return PlayResult(success=False, error=error)

        seat = self.get_player(player_id)
        if isinstance(hand_index, bool) or not isinstance(hand_index, int) \
                or not 0 <= hand_index < len(seat.hand):
            return PlayResult(success=False, error=InvalidPlay())

        card = seat.hand[hand_index]
        if not self.can_play(card, player_id):
            return PlayResult(success=False, error=InvalidPlay())
        if card.is_wild and chosen_color is not None and chosen_color not in COLORS:
            return PlayResult(success=False, error=InvalidPlay(f'Unknown color: {chosen_color}'))

        del seat.hand[hand_index]
        self.discard_pile.append(card)
        self.played_cards.append(card)
        self.turns_taken += 1

        if card.is_wild:
            self.current_color = chosen_color or COLORS[0]
        else:
            self.current_color = card.color

        if not seat.hand:
            self.winner = player_id
            return PlayResult(success=True, card=card, winner=player_id)

        _EFFECTS[_effect_tag(card)](self)
        self.advance_turn()
        return PlayResult(success=True, card=card)

    def take_draw_turn(self, player_id: str) -> PlayResult:
        """Draw one card as the current player's whole turn."""
        error = self._turn_error(player_id)
        if error is not None:
            return PlayResult(success=False, error=error)
        card = self.draw(player_id)
        self.turns_taken += 1
        self.advance_turn()
        return PlayResult(success=True, card=card)

    def advance_turn(self) -> None:
        count = len(self.players)
        self.current_player_index = (self.current_player_index + self.direction + count) % count

    def project_state(self, for_player_id: Optional[str] = None):
        """Snapshot safe to send to ``for_player_id``.

        Only that player's hand is included; everyone else is a count.
        """
        top_card = self.top_card
        return {
            'roomId': self.room_id,
            'players': [seat.to_dict(include_hand=seat.id == for_player_id) for seat in self.players],
            'topCard': top_card.to_dict() if top_card else None,
            'currentColor': self.current_color,
            'currentPlayerIndex': self.current_player_index,
            'currentPlayerId': self.current_player.id,
            'deckCount': len(self.deck),
            'direction': self.direction,
            'gameStarted': self.started,
            'winner': self.winner,
        }

    def summary(self):
        winner = self.get_player(self.winner) if self.winner else None
        return {
            'roomId': self.room_id,
            'players': [
                {'playerId': s.id, 'playerName': s.name, 'position': s.position}
                for s in self.players
            ],
            'winner': self.winner,
            'winnerName': winner.name if winner else None,
            'totalTurns': self.turns_taken,
            'playedCards': [card.to_dict() for card in self.played_cards],
        }


def _effect_tag(card: Card) -> str:
    return 'number' if card.kind == KIND_NUMBER else card.value


def _no_effect(game: UnoGame) -> None:
    pass


def _skip(game: UnoGame) -> None:
    game.advance_turn()


def _reverse(game: UnoGame) -> None:
    game.direction *= -1
    if len(game.players) == 2:
        game.advance_turn()


def _draw_two(game: UnoGame) -> None:
    game.advance_turn()
    game._force_draw(2)


def _wild_draw_four(game: UnoGame) -> None:
    game.advance_turn()
    game._force_draw(4)


# One resolver per card tag; every play is followed by one more advance.
_EFFECTS: Dict[str, Callable[[UnoGame], None]] = {
    'number': _no_effect,
    'skip': _skip,
    'reverse': _reverse,
    'draw2': _draw_two,
    'wild': _no_effect,
    'wild-draw4': _wild_draw_four,
}
