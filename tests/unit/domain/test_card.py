"""Tests for Card and Arcana value objects."""
import pytest

from webtarot.domain.card import Arcana, Card
from webtarot.models.enums import MajorArcana, Rank, Suit


class TestArcana:
    """Tests for Arcana."""

    def test_major_arcana(self):
        arcana = Arcana.of_major(MajorArcana.FOOL)
        assert arcana.is_major
        assert arcana.to_dict() == {"major": {"name": "fool"}}

    def test_minor_arcana(self):
        arcana = Arcana.of_minor(Rank.ACE, Suit.CUPS)
        assert not arcana.is_major
        assert arcana.to_dict() == {"minor": {"rank": "ace", "suit": "cups"}}

    def test_rejects_both_major_and_minor(self):
        with pytest.raises(ValueError):
            Arcana(major=MajorArcana.FOOL, rank=Rank.ACE, suit=Suit.CUPS)

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            Arcana()

    def test_from_dict_parses_major(self):
        arcana = Arcana.from_dict({"major": {"name": "highPriestess"}})
        assert arcana == Arcana.of_major(MajorArcana.HIGH_PRIESTESS)

    @pytest.mark.parametrize(
        "payload",
        [
            {"major": {"name": "notACard"}},
            {"minor": {"rank": "ace"}},
            {"minor": {"rank": "eleven", "suit": "cups"}},
            {"other": {}},
            "fool",
        ],
    )
    def test_from_dict_rejects_unknown(self, payload):
        with pytest.raises(ValueError):
            Arcana.from_dict(payload)


class TestCardDescribe:
    """Tests for localized card names."""

    def test_describe_major_in_english(self):
        assert Card(Arcana.of_major(MajorArcana.FOOL)).describe("en") == "The Fool"

    def test_describe_minor_in_portuguese(self):
        card = Card(Arcana.of_minor(Rank.ACE, Suit.CUPS))
        assert card.describe("pt") == "Ás de Copas"

    def test_describe_flipped_adds_suffix(self):
        card = Card(Arcana.of_minor(Rank.ACE, Suit.CUPS), flipped=True)
        assert card.describe("en") == "Ace of Cups (reversed)"


class TestCardWireForm:
    """Tests for Card.to_dict() / Card.from_dict()."""

    def test_to_dict(self):
        card = Card(Arcana.of_major(MajorArcana.WORLD), flipped=True)
        assert card.to_dict() == {"arcana": {"major": {"name": "world"}}, "flipped": True}

    def test_from_dict_defaults_to_upright(self):
        card = Card.from_dict({"arcana": {"minor": {"rank": "king", "suit": "wands"}}})
        assert card == Card(Arcana.of_minor(Rank.KING, Suit.WANDS))

    def test_from_dict_rejects_non_bool_flipped(self):
        with pytest.raises(ValueError):
            Card.from_dict({"arcana": {"major": {"name": "fool"}}, "flipped": "yes"})
