"""Deck engine: canonical deck, question-seeded shuffle and slice draw."""
import hashlib
import random
from typing import List, Optional, Tuple

from webtarot.domain.card import Card, canonical_arcana

MAX_SHUFFLES = 7033
MAX_DRAWS = 13
DECK_SIZE = 78
SLICE_COUNT = 3
# Largest count draw() accepts: the deck minus two minimum-size slices.
MAX_DRAW_COUNT = DECK_SIZE - 2 * MAX_DRAWS


def question_hash(question: str) -> int:
    """Stable (process-independent) 64-bit hash of the question text."""
    digest = hashlib.sha256(question.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class Deck:
    """
    An ordered 78-card deck.

    Created fresh for each reading and discarded after the draw.

    Usage:
        deck = Deck.build()
        shuffled_times = deck.shuffle("Will I get the job?")
        cards = deck.draw(3)
    """

    def __init__(self, cards: List[Card], rng: Optional[random.Random] = None):
        self.cards = cards
        self._rng = rng or random.Random(random.SystemRandom().getrandbits(64))

    @classmethod
    def build(cls, rng: Optional[random.Random] = None) -> "Deck":
        """Create a deck in canonical order with every card upright."""
        return cls([Card(arcana) for arcana in canonical_arcana()], rng=rng)

    def shuffle(self, question: str) -> int:
        """
        Shuffle the deck a question-dependent number of times.

        The count mixes a stable hash of the question with a random 32-bit
        value. Each round permutes the whole deck and re-flips every card.

        Args:
            question: The question being asked

        Returns:
            Number of shuffle rounds performed (0 to MAX_SHUFFLES - 1)
        """
        question_component = question_hash(question) % MAX_SHUFFLES
        random_component = self._rng.getrandbits(32) % MAX_SHUFFLES
        shuffles = (question_component + random_component) % MAX_SHUFFLES

        arcana = [card.arcana for card in self.cards]
        flips = None
        for _ in range(shuffles):
            self._rng.shuffle(arcana)
            # one bit per position; each round overwrites the previous flips
            flips = self._rng.getrandbits(len(arcana))
        if flips is not None:
            self.cards = [
                Card(a, bool(flips >> i & 1)) for i, a in enumerate(arcana)
            ]
        return shuffles

    def slices(self) -> List[List[Card]]:
        """Cut the deck into three contiguous slices of at least MAX_DRAWS cards."""
        second, third = self._cut_points()
        return [
            self.cards[:second],
            self.cards[second:third],
            self.cards[third:],
        ]

    def _cut_points(self) -> Tuple[int, int]:
        size = len(self.cards)
        second = self._rng.randint(MAX_DRAWS, size - 2 * MAX_DRAWS)
        third = self._rng.randint(second + MAX_DRAWS, size - MAX_DRAWS)
        return second, third

    def draw(self, count: int) -> List[Card]:
        """
        Draw ``count`` distinct cards from one randomly chosen slice.

        Positions are picked without replacement and returned in the order
        they appear in the slice. The deck itself is not modified.

        Args:
            count: Number of cards, 0 to MAX_DRAW_COUNT

        Returns:
            Drawn cards

        Raises:
            ValueError: If count is negative or above MAX_DRAW_COUNT
        """
        if count < 0 or count > MAX_DRAW_COUNT:
            raise ValueError(f"count must be between 0 and {MAX_DRAW_COUNT}")
        if count == 0:
            return []

        candidates = [s for s in self.slices() if len(s) >= count]
        if not candidates:
            candidates = [self.cards]
        chosen = candidates[self._rng.randrange(len(candidates))]

        positions = sorted(self._rng.sample(range(len(chosen)), count))
        return [chosen[i] for i in positions]
