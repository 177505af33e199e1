"""User profile service."""
from webtarot.domain.user import AuthenticatedUser, CurrentUser
from webtarot.errors import Forbidden, NotFound
from webtarot.repositories.user_repository import AccessTokenRepository, UserRepository


class UserService:
    """Profile changes for authenticated users."""

    def __init__(self, user_repository: UserRepository, token_repository: AccessTokenRepository):
        self._users = user_repository
        self._tokens = token_repository

    def update_profile(
        self, current: CurrentUser, name: str, self_description: str
    ) -> AuthenticatedUser:
        """
        Change name and self-description of the caller's account.

        Readings created afterwards carry the new values; existing readings
        keep the ones they were created with.

        Raises:
            Forbidden: If the caller is anonymous
            NotFound: If the account disappeared
        """
        if not current.is_authenticated:
            raise Forbidden("anonymous users have no profile")

        user = self._users.find_by_id(current.id)
        if user is None:
            raise NotFound("user")
        token = self._tokens.find_by_id(current.access_token.id)
        if token is None:
            raise NotFound("access token")

        self._users.update_profile(user, name, self_description)
        return user.to_identity(token)
