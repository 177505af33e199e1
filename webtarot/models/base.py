"""Base model with UUID primary key and timestamps."""
from datetime import datetime, timezone
from uuid import uuid4
from webtarot.extensions import db


def naive_utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(db.Model):
    """
    Abstract base for UUID-keyed tables.

    Timestamps are stored as naive UTC.
    """

    __abstract__ = True

    id = db.Column(db.Uuid(as_uuid=True), primary_key=True, default=uuid4)
    created_at = db.Column(db.DateTime, nullable=False, default=naive_utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=naive_utcnow,
        onupdate=naive_utcnow,
    )
