"""Card values and the standard 108-card deck."""

import random
from dataclasses import dataclass
from typing import List, Optional

COLORS = ('red', 'blue', 'green', 'yellow')
WILD = 'wild'

NUMBER_VALUES = tuple(str(n) for n in range(10))
SPECIAL_VALUES = ('skip', 'reverse', 'draw2')
WILD_VALUES = ('wild', 'wild-draw4')

KIND_NUMBER = 'number'
KIND_SPECIAL = 'special'
KIND_WILD = 'wild'


@dataclass(frozen=True)
class Card:
    color: str
    value: str
    kind: str

    @property
    def is_wild(self) -> bool:
        return self.kind == KIND_WILD

    def to_dict(self):
        return {'color': self.color, 'value': self.value, 'type': self.kind}

    def __str__(self) -> str:
        if self.is_wild:
            return self.value
        return f"{self.color} {self.value}"


def build_standard_deck() -> List[Card]:
    """Return the 108 cards in a fixed order.

    Per color: one "0", two each of 1-9, two each of skip/reverse/draw2.
    Then four wild and four wild-draw4.
    """
    deck: List[Card] = []
    for color in COLORS:
        deck.append(Card(color, '0', KIND_NUMBER))
        for value in NUMBER_VALUES[1:]:
            deck.append(Card(color, value, KIND_NUMBER))
            deck.append(Card(color, value, KIND_NUMBER))
        for value in SPECIAL_VALUES:
            deck.append(Card(color, value, KIND_SPECIAL))
            deck.append(Card(color, value, KIND_SPECIAL))
    for _ in range(4):
        deck.append(Card(WILD, 'wild', KIND_WILD))
        deck.append(Card(WILD, 'wild-draw4', KIND_WILD))
    return deck


def shuffle(deck: List[Card], rng: Optional[random.Random] = None) -> None:
    # random.shuffle is an in-place Fisher-Yates permutation
    (rng or random).shuffle(deck)
