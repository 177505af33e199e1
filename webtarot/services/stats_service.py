"""Aggregate draw statistics over all readings."""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from webtarot.domain.card import Arcana, canonical_arcana
from webtarot.domain.reading import Reading


@dataclass
class ArcanaStats:
    """Draw counts for one arcana."""

    arcana: Arcana
    drawn_flipped_count: int = 0
    drawn_count: int = 0
    total_count: int = 0
    percent_flipped: float = 0.0
    percent_drawn: float = 0.0
    percent_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arcana": self.arcana.to_dict(),
            "drawnFlippedCount": self.drawn_flipped_count,
            "drawnCount": self.drawn_count,
            "totalCount": self.total_count,
            "percentFlipped": self.percent_flipped,
            "percentDrawn": self.percent_drawn,
            "percentTotal": self.percent_total,
        }


@dataclass
class Stats:
    """Totals plus per-arcana breakdown."""

    total_readings: int = 0
    total_cards_drawn: int = 0
    arcana_stats: List[ArcanaStats] = field(default_factory=list)
    never_drawn: List[Arcana] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalReadings": self.total_readings,
            "totalCardsDrawn": self.total_cards_drawn,
            "arcanaStats": [s.to_dict() for s in self.arcana_stats],
            "neverDrawn": [a.to_dict() for a in self.never_drawn],
        }


def calculate_stats(readings: Iterable[Reading]) -> Stats:
    """
    Count how often each arcana came up, upright and reversed.

    ``drawn_count`` counts upright draws only; percentages are fractions
    (0 to 1) of the arcana's own total, and of all cards for
    ``percent_total``.

    Args:
        readings: Readings to aggregate

    Returns:
        Stats with arcana ordered by total count, most drawn first
    """
    readings = list(readings)
    order = {arcana: index for index, arcana in enumerate(canonical_arcana())}
    by_arcana: Dict[Arcana, ArcanaStats] = {}

    total_cards = 0
    for reading in readings:
        for card in reading.cards:
            total_cards += 1
            stats = by_arcana.setdefault(card.arcana, ArcanaStats(card.arcana))
            stats.total_count += 1
            if card.flipped:
                stats.drawn_flipped_count += 1
            else:
                stats.drawn_count += 1

    for stats in by_arcana.values():
        stats.percent_flipped = stats.drawn_flipped_count / stats.total_count
        stats.percent_drawn = stats.drawn_count / stats.total_count
        stats.percent_total = stats.total_count / total_cards

    return Stats(
        total_readings=len(readings),
        total_cards_drawn=total_cards,
        arcana_stats=sorted(
            by_arcana.values(),
            key=lambda s: (-s.total_count, order.get(s.arcana, len(order))),
        ),
        never_drawn=[a for a in canonical_arcana() if a not in by_arcana],
    )


class StatsService:
    """Statistics over every non-deleted reading."""

    def __init__(self, interpretation_service):
        self._interpretations = interpretation_service

    def get_stats(self) -> Stats:
        interpretations = self._interpretations.get_all_interpretations()
        return calculate_stats(i.reading for i in interpretations)
