import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Union

from concentration.constants import GLYPH_POOL


@dataclass(frozen=True)
class Glyph:
    symbol: str

    def to_dict(self):
        return {'type': 'glyph', 'value': self.symbol}


@dataclass(frozen=True)
class ImageReference:
    url: str

    def to_dict(self):
        return {'type': 'image', 'value': self.url}


CardContent = Union[Glyph, ImageReference]


@dataclass(frozen=True)
class Card:
    id: str
    pair_id: str
    content: CardContent
    matched: bool = False

    def mark_matched(self) -> 'Card':
        return replace(self, matched=True)

    def to_dict(self, reveal: bool = False):
        return {
            'id': self.id,
            'pair_id': self.pair_id if reveal else None,
            'content': self.content.to_dict() if reveal else None,
            'matched': self.matched,
        }


def generate_deck(pairs: int, pool: Sequence[CardContent] = None, rng: Optional[random.Random] = None) -> List[Card]:
    """Build a shuffled deck of ``2 * pairs`` cards.

    ``pairs`` distinct contents are drawn without replacement from ``pool``
    (glyphs by default). Each yields two cards sharing a pair id, and the
    full deck is shuffled uniformly.
    """
    rng = rng or random
    if pool is None:
        pool = [Glyph(symbol) for symbol in GLYPH_POOL]
    if pairs < 1 or pairs > len(pool):
        raise ValueError(f'pairs must be between 1 and {len(pool)}, got {pairs}')

    drawn = rng.sample(list(pool), pairs)
    deck: List[Card] = []
    for idx, content in enumerate(drawn):
        pair_id = f'p{idx}'
        deck.append(Card(id=pair_id + 'a', pair_id=pair_id, content=content))
        deck.append(Card(id=pair_id + 'b', pair_id=pair_id, content=content))
    rng.shuffle(deck)
    return deck
