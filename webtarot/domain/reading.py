"""Reading value object and its construction from a fresh deck."""
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID, uuid4

from webtarot.domain.card import Card
from webtarot.domain.deck import Deck
from webtarot.domain.user import CurrentUser
from webtarot.models.enums import InterpretationBackend


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps coming back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Reading:
    """
    One tarot draw.

    Immutable; the only field that ever changes after creation is
    ``user_id``, through ``with_owner``.
    """

    id: UUID
    created_at: datetime
    question: str
    shuffled_times: int
    cards: List[Card] = field(default_factory=list)
    user_id: Optional[UUID] = None
    user_name: str = ""
    user_self_description: str = ""
    context: str = ""
    backend: Optional[InterpretationBackend] = None

    def with_owner(self, user_id: UUID) -> "Reading":
        return replace(self, user_id=user_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "createdAt": self.created_at.isoformat(),
            "question": self.question,
            "shuffledTimes": self.shuffled_times,
            "cards": [card.to_dict() for card in self.cards],
            "userId": str(self.user_id) if self.user_id else None,
            "userName": self.user_name,
            "userSelfDescription": self.user_self_description,
            "context": self.context,
            "backend": self.backend.value if self.backend else None,
        }


def perform_reading(
    question: str,
    card_count: int,
    context: str,
    backend: Optional[InterpretationBackend],
    user: CurrentUser,
    rng: Optional[random.Random] = None,
) -> Reading:
    """
    Shuffle a fresh deck for the question and draw ``card_count`` cards.

    Args:
        question: The question asked
        card_count: Number of cards to draw
        context: Free-form context supplied with the question
        backend: Requested interpretation provider, None for the default
        user: Identity the reading belongs to

    Returns:
        New Reading owned by ``user``
    """
    deck = Deck.build(rng=rng)
    shuffled_times = deck.shuffle(question)
    cards = deck.draw(card_count)
    return Reading(
        id=uuid4(),
        created_at=utcnow(),
        question=question,
        shuffled_times=shuffled_times,
        cards=cards,
        user_id=user.id,
        user_name=user.name or "",
        user_self_description=user.self_description or "",
        context=context or "",
        backend=backend,
    )


def reading_from_cards(
    question: str,
    cards: Sequence[Card],
    context: str,
    user: CurrentUser,
) -> Reading:
    """Build a reading for cards the client already drew (no shuffle)."""
    return Reading(
        id=uuid4(),
        created_at=utcnow(),
        question=question,
        shuffled_times=0,
        cards=list(cards),
        user_id=user.id,
        user_name=user.name or "",
        user_self_description=user.self_description or "",
        context=context or "",
    )
