"""Persisted reading with its interpretation state."""
from datetime import datetime, timezone
from typing import Optional
from webtarot.extensions import db
from webtarot.domain.card import Card
from webtarot.domain.interpretation import Done, Failed, Interpretation, Pending
from webtarot.domain.reading import Reading, as_utc
from webtarot.models.enums import InterpretationBackend, InterpretationStatus


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ReadingRecord(db.Model):
    """
    One row per reading.

    Holds the immutable draw plus the current interpretation state. The
    owner column is nullable: a reading created without an owner can be
    claimed later by the first user who fetches it.
    """

    __tablename__ = "reading"

    id = db.Column(db.Uuid(as_uuid=True), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, index=True)
    question = db.Column(db.Text, nullable=False)
    context = db.Column(db.Text, nullable=False, default="")
    cards = db.Column(db.JSON, nullable=False)
    shuffled_times = db.Column(db.Integer, nullable=False, default=0)
    backend = db.Column(db.Enum(InterpretationBackend), nullable=True)

    user_id = db.Column(db.Uuid(as_uuid=True), nullable=True, index=True)
    user_name = db.Column(db.String(255), nullable=False, default="")
    user_self_description = db.Column(db.Text, nullable=False, default="")

    interpretation_status = db.Column(
        db.Enum(InterpretationStatus),
        nullable=False,
        default=InterpretationStatus.PENDING,
        index=True,
    )
    interpretation_text = db.Column(db.Text, nullable=False, default="")
    interpretation_error = db.Column(db.Text, nullable=False, default="")
    interpretation_done_at = db.Column(db.DateTime, nullable=True)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def to_reading(self) -> Reading:
        return Reading(
            id=self.id,
            created_at=as_utc(self.created_at),
            question=self.question,
            shuffled_times=self.shuffled_times,
            cards=[Card.from_dict(card) for card in self.cards or []],
            user_id=self.user_id,
            user_name=self.user_name or "",
            user_self_description=self.user_self_description or "",
            context=self.context or "",
            backend=self.backend,
        )

    def to_interpretation(self) -> Interpretation:
        reading = self.to_reading()
        if self.interpretation_status == InterpretationStatus.DONE:
            return Done(
                reading,
                self.interpretation_text,
                as_utc(self.interpretation_done_at or self.created_at),
            )
        if self.interpretation_status == InterpretationStatus.FAILED:
            return Failed(reading, self.interpretation_error)
        return Pending(reading)

    @classmethod
    def from_interpretation(cls, interpretation: Interpretation) -> "ReadingRecord":
        reading = interpretation.reading
        record = cls(
            id=reading.id,
            created_at=to_naive_utc(reading.created_at),
            question=reading.question,
            cards=[card.to_dict() for card in reading.cards],
            shuffled_times=reading.shuffled_times,
            context=reading.context,
            backend=reading.backend,
            user_id=reading.user_id,
            user_name=reading.user_name,
            user_self_description=reading.user_self_description,
        )
        record.apply(interpretation)
        return record

    def apply(self, interpretation: Interpretation) -> None:
        """
        Copy the interpretation state onto this row.

        Only the interpretation columns are written. Ownership changes go
        through dedicated UPDATEs in ReadingRepository, so a late state
        update never reverts a claim made in the meantime.
        """
        self.interpretation_status = interpretation.status
        if isinstance(interpretation, Done):
            self.interpretation_text = interpretation.text
            self.interpretation_error = ""
            self.interpretation_done_at = to_naive_utc(interpretation.completed_at)
        elif isinstance(interpretation, Failed):
            self.interpretation_text = ""
            self.interpretation_error = interpretation.error
            self.interpretation_done_at = None
        else:
            self.interpretation_text = ""
            self.interpretation_error = ""
            self.interpretation_done_at = None

    def __repr__(self) -> str:
        return (
            f"<ReadingRecord(id={self.id}, "
            f"status={self.interpretation_status.value if self.interpretation_status else None})>"
        )
