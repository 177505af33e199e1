"""Reading repository: persisted interpretation state."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from webtarot.domain.interpretation import Interpretation, InvalidTransition
from webtarot.domain.reading import utcnow
from webtarot.models.reading import ReadingRecord, to_naive_utc
from webtarot.repositories.base import BaseRepository
from webtarot.utils.transaction import translate_db_errors, transactional


class ReadingRepository(BaseRepository[ReadingRecord]):
    """
    Repository for readings and their interpretation state.

    Works in domain Interpretation values; rows never leave this class.
    Soft-deleted readings are invisible to every lookup.
    """

    def __init__(self, session):
        super().__init__(session=session, model=ReadingRecord)

    def _live(self):
        return self._session.query(ReadingRecord).filter(
            ReadingRecord.deleted_at.is_(None)
        )

    @transactional("insert reading")
    def insert(self, interpretation: Interpretation) -> Interpretation:
        """Persist a new reading in its initial state."""
        self._session.add(ReadingRecord.from_interpretation(interpretation))
        return interpretation

    def update(self, interpretation: Interpretation) -> Optional[Interpretation]:
        """
        Replace the stored state of an existing reading.

        Args:
            interpretation: New state, keyed by its reading id

        Returns:
            State as stored after the update, None if the reading is gone

        Raises:
            InvalidTransition: If a finished reading would change status
        """
        with translate_db_errors("load reading for update"):
            record = self._session.get(ReadingRecord, interpretation.id)
        if record is None:
            return None
        stored = record.to_interpretation()
        if stored.is_terminal and stored.status != interpretation.status:
            raise InvalidTransition(
                f"Reading {interpretation.id} is already {stored.status.value}"
            )
        self._apply_and_commit(record, interpretation)
        return record.to_interpretation()

    @transactional("update reading")
    def _apply_and_commit(
        self, record: ReadingRecord, interpretation: Interpretation
    ) -> ReadingRecord:
        record.apply(interpretation)
        return record

    def get(self, reading_id: UUID) -> Optional[Interpretation]:
        """Find a live reading by id."""
        with translate_db_errors("find reading"):
            record = self._live().filter(ReadingRecord.id == reading_id).first()
        return record.to_interpretation() if record else None

    @transactional("claim reading")
    def claim_unowned(self, reading_id: UUID, user_id: UUID) -> int:
        """
        Set the owner of a reading that has none.

        The ownership check is part of the UPDATE, so of two concurrent
        claims only the first one matches a row.

        Returns:
            Number of rows updated (0 or 1)
        """
        return (
            self._session.query(ReadingRecord)
            .filter(
                ReadingRecord.id == reading_id,
                ReadingRecord.user_id.is_(None),
            )
            .update({"user_id": user_id}, synchronize_session=False)
        )

    @transactional("reassign readings")
    def reassign_owner(self, from_user_id: UUID, to_user_id: UUID) -> int:
        """
        Move every reading owned by one id to another.

        Returns:
            Number of readings reassigned
        """
        return (
            self._session.query(ReadingRecord)
            .filter(ReadingRecord.user_id == from_user_id)
            .update({"user_id": to_user_id}, synchronize_session=False)
        )

    def find_by_owner(
        self,
        user_id: UUID,
        before: Optional[datetime] = None,
        limit: int = 30,
    ) -> List[Interpretation]:
        """
        Page through a user's readings, newest first.

        Args:
            user_id: Owner
            before: Only readings created strictly before this instant
            limit: Maximum number of readings

        Returns:
            Interpretations ordered by created_at descending
        """
        query = self._live().filter(ReadingRecord.user_id == user_id)
        if before is not None:
            query = query.filter(ReadingRecord.created_at < to_naive_utc(before))
        with translate_db_errors("list readings by owner"):
            records = (
                query.order_by(ReadingRecord.created_at.desc())
                .limit(limit)
                .all()
            )
        return [record.to_interpretation() for record in records]

    @transactional("soft delete reading")
    def soft_delete(self, reading_id: UUID, owner_id: UUID) -> bool:
        """
        Mark a reading deleted if ``owner_id`` owns it.

        Returns:
            True if a reading was deleted, False otherwise
        """
        count = (
            self._live()
            .filter(
                ReadingRecord.id == reading_id,
                ReadingRecord.user_id == owner_id,
            )
            .update({"deleted_at": to_naive_utc(utcnow())}, synchronize_session=False)
        )
        return count > 0

    def list_all_non_deleted(self) -> List[Interpretation]:
        """Every live reading. Linear in the table size."""
        with translate_db_errors("list readings"):
            records = self._live().all()
        return [record.to_interpretation() for record in records]
