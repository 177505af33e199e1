"""Card and Arcana value objects."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from webtarot.i18n import translate
from webtarot.models.enums import MajorArcana, Rank, Suit


@dataclass(frozen=True)
class Arcana:
    """
    One of the 78 card identities.

    Either a major arcana (``major`` set) or a minor arcana (``rank`` and
    ``suit`` set), never both.
    """

    major: Optional[MajorArcana] = None
    rank: Optional[Rank] = None
    suit: Optional[Suit] = None

    def __post_init__(self):
        is_minor = self.rank is not None and self.suit is not None
        if (self.major is not None) == is_minor:
            raise ValueError("Arcana must be either major or minor")
        if self.major is not None and (self.rank is not None or self.suit is not None):
            raise ValueError("Major arcana cannot have rank or suit")

    @classmethod
    def of_major(cls, name: MajorArcana) -> "Arcana":
        return cls(major=name)

    @classmethod
    def of_minor(cls, rank: Rank, suit: Suit) -> "Arcana":
        return cls(rank=rank, suit=suit)

    @property
    def is_major(self) -> bool:
        return self.major is not None

    def describe(self, locale: str) -> str:
        """Localized display name, e.g. "The Fool" or "Ace of Cups"."""
        if self.is_major:
            return translate(f"card.major.{self.major.value}", locale)
        return translate(
            "card.minor_format",
            locale,
            rank=translate(f"card.rank.{self.rank.value}", locale),
            suit=translate(f"card.suit.{self.suit.value}", locale),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.is_major:
            return {"major": {"name": self.major.value}}
        return {"minor": {"rank": self.rank.value, "suit": self.suit.value}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Arcana":
        """
        Parse the tagged wire form.

        Raises:
            ValueError: If the payload is not a known arcana
        """
        if not isinstance(data, dict):
            raise ValueError("arcana must be an object")
        if "major" in data:
            major = data["major"] or {}
            return cls.of_major(MajorArcana(major.get("name")))
        if "minor" in data:
            minor = data["minor"] or {}
            return cls.of_minor(Rank(minor.get("rank")), Suit(minor.get("suit")))
        raise ValueError("arcana must be 'major' or 'minor'")


def canonical_arcana() -> List[Arcana]:
    """All 78 arcana: majors in order, then each suit's ranks ace to king."""
    arcana = [Arcana.of_major(name) for name in MajorArcana]
    for suit in Suit:
        for rank in Rank:
            arcana.append(Arcana.of_minor(rank, suit))
    return arcana


@dataclass(frozen=True)
class Card:
    """A drawn card: an arcana and whether it came out reversed."""

    arcana: Arcana
    flipped: bool = False

    def describe(self, locale: str) -> str:
        name = self.arcana.describe(locale)
        if self.flipped:
            return name + translate("card.flipped_suffix", locale)
        return name

    def to_dict(self) -> Dict[str, Any]:
        return {"arcana": self.arcana.to_dict(), "flipped": self.flipped}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        if not isinstance(data, dict):
            raise ValueError("card must be an object")
        flipped = data.get("flipped", False)
        if not isinstance(flipped, bool):
            raise ValueError("flipped must be a boolean")
        return cls(arcana=Arcana.from_dict(data.get("arcana")), flipped=flipped)
