"""User and access token repositories."""
from typing import Optional
from uuid import UUID
from webtarot.models.user import AccessToken, User
from webtarot.repositories.base import BaseRepository
from webtarot.utils.transaction import translate_db_errors, transactional


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self, session):
        super().__init__(session=session, model=User)

    def find_by_email(self, email: str) -> Optional[User]:
        """Find user by email address."""
        with translate_db_errors("find user by email"):
            return self._session.query(User).filter(User.email == email).first()

    def exists(self, user_id: UUID) -> bool:
        """Check whether an account with this id exists."""
        with translate_db_errors("check user id"):
            return self._session.query(User.id).filter(User.id == user_id).first() is not None

    @transactional("create user")
    def create_with_token(self, user: User, token: AccessToken) -> AccessToken:
        """
        Insert a new account together with its first access token.

        Raises:
            AlreadyExists: If the id or email is already taken
        """
        self._session.add(user)
        self._session.flush()
        token.user_id = user.id
        self._session.add(token)
        return token

    @transactional("update user")
    def update_profile(self, user: User, name: str, self_description: str) -> User:
        """Change the display name and self-description."""
        user.name = name
        user.self_description = self_description
        return user


class AccessTokenRepository(BaseRepository[AccessToken]):
    """Repository for access token operations."""

    def __init__(self, session):
        super().__init__(session=session, model=AccessToken)

    def find_by_token(self, token: str) -> Optional[AccessToken]:
        """Find an access token by its secret string."""
        with translate_db_errors("find access token"):
            return (
                self._session.query(AccessToken)
                .filter(AccessToken.token == token)
                .first()
            )

    @transactional("record token use")
    def touch(self, token: AccessToken, ip: str, user_agent: str) -> AccessToken:
        """Record the client address and agent of the latest use."""
        token.last_user_ip = ip
        token.last_user_agent = user_agent
        return token
