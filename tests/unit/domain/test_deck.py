"""Tests for the deck engine."""
import random
import time

import pytest

from webtarot.domain.card import Card, canonical_arcana
from webtarot.domain.deck import (
    DECK_SIZE,
    MAX_DRAW_COUNT,
    MAX_DRAWS,
    MAX_SHUFFLES,
    Deck,
    question_hash,
)


class TestDeckBuild:
    """Tests for Deck.build()."""

    def test_build_has_78_unique_upright_cards(self):
        """A fresh deck holds every arcana once, all upright, in canonical order."""
        deck = Deck.build()

        assert len(deck.cards) == DECK_SIZE
        assert [c.arcana for c in deck.cards] == canonical_arcana()
        assert all(not c.flipped for c in deck.cards)

    def test_canonical_order_starts_with_majors(self):
        """Majors come first, then the minor suits."""
        arcana = canonical_arcana()

        assert all(a.is_major for a in arcana[:22])
        assert not any(a.is_major for a in arcana[22:])
        assert len(set(arcana)) == DECK_SIZE


class TestQuestionHash:
    """Tests for question_hash()."""

    def test_hash_is_stable(self):
        """Same question gives the same hash across calls."""
        assert question_hash("Will it rain?") == question_hash("Will it rain?")

    def test_hash_differs_between_questions(self):
        assert question_hash("Will it rain?") != question_hash("Will it shine?")

    def test_hash_fits_64_bits(self):
        assert 0 <= question_hash("anything") < 2 ** 64


class TestDeckShuffle:
    """Tests for Deck.shuffle()."""

    def test_shuffle_count_below_max(self):
        """Shuffle count is in [0, MAX_SHUFFLES)."""
        for seed in range(20):
            deck = Deck.build(rng=random.Random(seed))
            assert 0 <= deck.shuffle("question") < MAX_SHUFFLES

    def test_shuffle_preserves_card_set(self):
        """Shuffling permutes and flips but never adds or removes arcana."""
        deck = Deck.build(rng=random.Random(42))
        deck.shuffle("Is this a permutation?")

        assert len(deck.cards) == DECK_SIZE
        assert sorted(canonical_arcana().index(c.arcana) for c in deck.cards) == list(
            range(DECK_SIZE)
        )

    def test_shuffle_is_reproducible_with_seeded_rng(self):
        """Same seed and question give the same deck."""
        first = Deck.build(rng=random.Random(7))
        second = Deck.build(rng=random.Random(7))

        assert first.shuffle("q") == second.shuffle("q")
        assert first.cards == second.cards

    def test_shuffle_flips_some_cards(self):
        """After many rounds some cards come out reversed."""
        rng = random.Random(3)
        deck = Deck.build(rng=rng)
        while deck.shuffle("flip me") == 0:
            deck = Deck.build(rng=rng)

        assert any(c.flipped for c in deck.cards)

    def test_zero_shuffles_leaves_deck_untouched(self):
        """A zero shuffle count performs no rounds."""
        rng = random.Random(0)
        deck = Deck.build(rng=rng)
        target = question_hash("q") % MAX_SHUFFLES
        # Random component that cancels the question component
        rng.getrandbits = lambda bits: (MAX_SHUFFLES - target) % MAX_SHUFFLES

        assert deck.shuffle("q") == 0
        assert [c.arcana for c in deck.cards] == canonical_arcana()

    def test_longest_shuffle_is_fast(self):
        """The maximum round count finishes well within a request budget."""
        target = question_hash("slow") % MAX_SHUFFLES

        class MaxRoundsRandom(random.Random):
            def getrandbits(self, k):
                if k == 32:
                    return (MAX_SHUFFLES - 1 - target) % MAX_SHUFFLES
                return super().getrandbits(k)

        deck = Deck.build(rng=MaxRoundsRandom(11))

        started = time.monotonic()
        assert deck.shuffle("slow") == MAX_SHUFFLES - 1
        assert time.monotonic() - started < 1.2
        assert len(set(c.arcana for c in deck.cards)) == DECK_SIZE

    def test_default_rng_is_seeded_once(self):
        """Unseeded decks use a PRNG seeded from the OS, not os.urandom per call."""
        deck = Deck.build()

        assert type(deck._rng) is random.Random


class TestDeckDraw:
    """Tests for Deck.draw()."""

    @pytest.mark.parametrize("count", [1, 3, MAX_DRAWS])
    def test_draw_returns_distinct_cards(self, count):
        """Drawn cards are distinct and come from the deck."""
        deck = Deck.build(rng=random.Random(count))
        deck.shuffle("q")

        cards = deck.draw(count)

        assert len(cards) == count
        assert len({c.arcana for c in cards}) == count
        assert all(c in deck.cards for c in cards)

    def test_draw_does_not_modify_deck(self):
        deck = Deck.build(rng=random.Random(1))
        before = list(deck.cards)

        deck.draw(5)

        assert deck.cards == before

    def test_draw_keeps_deck_order(self):
        """Drawn cards keep their relative order within the deck."""
        deck = Deck.build(rng=random.Random(11))
        deck.shuffle("order")

        cards = deck.draw(MAX_DRAWS)
        positions = [deck.cards.index(c) for c in cards]

        assert positions == sorted(positions)

    def test_draw_zero_returns_empty(self):
        assert Deck.build().draw(0) == []

    def test_draw_more_than_slice_falls_back_to_whole_deck(self):
        """Counts larger than every slice are drawn from the whole deck."""
        deck = Deck.build(rng=random.Random(5))

        cards = deck.draw(MAX_DRAW_COUNT)

        assert len(cards) == MAX_DRAW_COUNT
        assert len(set(cards)) == MAX_DRAW_COUNT

    @pytest.mark.parametrize("count", [-1, MAX_DRAW_COUNT + 1])
    def test_draw_rejects_out_of_range(self, count):
        with pytest.raises(ValueError):
            Deck.build().draw(count)


class TestDeckSlices:
    """Tests for Deck.slices()."""

    def test_slices_cover_deck_with_minimum_size(self):
        """Three contiguous slices of at least MAX_DRAWS cards cover the deck."""
        for seed in range(50):
            deck = Deck.build(rng=random.Random(seed))
            slices = deck.slices()

            assert len(slices) == 3
            assert all(len(s) >= MAX_DRAWS for s in slices)
            assert [c for s in slices for c in s] == deck.cards


def test_card_equality_includes_orientation():
    """Upright and reversed copies of an arcana are different cards."""
    arcana = canonical_arcana()[0]
    assert Card(arcana) != Card(arcana, flipped=True)
