"""User account and access token models."""
from datetime import datetime
from webtarot.extensions import db
from webtarot.models.base import BaseModel
from webtarot.domain.user import AccessTokenInfo, AuthenticatedUser
from webtarot.domain.reading import as_utc


class User(BaseModel):
    """
    Registered account.

    The id is the anonymous UUID the client used before signing up, so
    readings created anonymously keep pointing at the same owner.
    """

    __tablename__ = "user"

    email = db.Column(
        db.String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False, default="")
    self_description = db.Column(db.Text, nullable=False, default="")

    access_tokens = db.relationship(
        "AccessToken",
        backref="user",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def to_identity(self, token: "AccessToken") -> AuthenticatedUser:
        """Build the request identity for this account and token."""
        return AuthenticatedUser(
            id=self.id,
            created_at=as_utc(self.created_at),
            updated_at=as_utc(self.updated_at),
            email=self.email,
            name=self.name or "",
            self_description=self.self_description or "",
            access_token=token.to_info(),
        )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class AccessToken(db.Model):
    """Opaque bearer token ("at-<uuid4>") issued on signup and login."""

    __tablename__ = "access_token"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(
        db.Uuid(as_uuid=True),
        db.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    last_user_ip = db.Column(db.String(64), nullable=False, default="")
    last_user_agent = db.Column(db.String(512), nullable=False, default="")

    def to_info(self) -> AccessTokenInfo:
        return AccessTokenInfo(
            id=self.id,
            created_at=as_utc(self.created_at),
            last_user_ip=self.last_user_ip or "",
            last_user_agent=self.last_user_agent or "",
        )

    def __repr__(self) -> str:
        return f"<AccessToken(id={self.id}, user_id={self.user_id})>"
