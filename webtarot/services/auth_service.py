"""Identity resolution, signup and login."""
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4

import bcrypt

from webtarot.domain.user import AnonymousUser, AuthenticatedUser, CurrentUser
from webtarot.errors import Forbidden, Unauthorized, ValidateError, AlreadyExists
from webtarot.models.user import AccessToken, User
from webtarot.repositories.user_repository import AccessTokenRepository, UserRepository
from webtarot.services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "at-"
BEARER_PREFIX = "Bearer "


@dataclass
class AuthResult:
    """Issued access token and the identity it belongs to."""
    access_token: str
    user: AuthenticatedUser

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "user": self.user.to_dict()}


def new_token_string() -> str:
    return f"{TOKEN_PREFIX}{uuid4()}"


class AuthService:
    """
    Authentication business logic.

    A request is either anonymous (client-held UUID in ``x-user-uuid``)
    or authenticated (``Authorization: Bearer at-<uuid>``). Signing up
    turns the anonymous id into the account id; logging in moves the
    anonymous id's readings to the account.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_repository: AccessTokenRepository,
        interpretation_service,
        activity_logger: ActivityLogger,
    ):
        self._users = user_repository
        self._tokens = token_repository
        self._interpretations = interpretation_service
        self._activity = activity_logger

    def resolve(
        self,
        anonymous_id: Optional[str],
        authorization: Optional[str],
        ip: str,
        user_agent: str,
    ) -> CurrentUser:
        """
        Resolve the identity of a request.

        Args:
            anonymous_id: Raw anonymous UUID header value
            authorization: Raw Authorization header value
            ip: Client address
            user_agent: Client user agent

        Returns:
            AnonymousUser or AuthenticatedUser

        Raises:
            ValidateError: If the anonymous id is not a UUID
            Unauthorized: If the identity is missing, unknown or conflicting
        """
        if anonymous_id:
            try:
                user_id = UUID(anonymous_id.strip())
            except ValueError:
                raise ValidateError("invalid anonymous user id")
            if self._users.exists(user_id):
                # Stale client identity: this id already signed up.
                self._activity.log_security_event(
                    "anonymous_id_conflict", user_id=str(user_id), ip_address=ip
                )
                raise Unauthorized("anonymous id belongs to an account")
            return AnonymousUser(id=user_id)

        if authorization and authorization.startswith(BEARER_PREFIX):
            token_string = authorization[len(BEARER_PREFIX):].strip()
            if not token_string.startswith(TOKEN_PREFIX):
                raise Unauthorized("malformed access token")
            token = self._tokens.find_by_token(token_string)
            if token is None:
                raise Unauthorized("unknown access token")
            user = self._users.find_by_id(token.user_id)
            if user is None:
                raise Unauthorized("access token without user")
            self._tokens.touch(token, ip, user_agent)
            return user.to_identity(token)

        raise Unauthorized("no identity")

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def signup(
        self,
        current: CurrentUser,
        email: str,
        name: str,
        password: str,
        self_description: str,
        ip: str,
        user_agent: str,
    ) -> AuthResult:
        """
        Create an account whose id is the caller's anonymous id.

        Raises:
            Forbidden: If the caller is already authenticated
            AlreadyExists: If the email is taken
        """
        if current.is_authenticated:
            raise Forbidden("already authenticated")

        email = email.strip().lower()
        if self._users.find_by_email(email) is not None:
            raise AlreadyExists("email already registered")

        user = User(
            id=current.id,
            email=email,
            password_hash=self.hash_password(password),
            name=name,
            self_description=self_description,
        )
        token = AccessToken(
            token=new_token_string(),
            last_user_ip=ip,
            last_user_agent=user_agent,
        )
        self._users.create_with_token(user, token)
        self._activity.log("user_signed_up", user_id=str(user.id))
        return AuthResult(access_token=token.token, user=user.to_identity(token))

    def login(
        self,
        current: CurrentUser,
        email: str,
        password: str,
        ip: str,
        user_agent: str,
    ) -> AuthResult:
        """
        Issue a token for valid credentials and adopt the caller's readings.

        The anonymous id's readings are reassigned before the token is
        returned; if that fails the whole login fails.

        Raises:
            Forbidden: If already authenticated or the credentials are wrong
            InternalError: If the readings could not be reassigned
        """
        if current.is_authenticated:
            raise Forbidden("already authenticated")

        user = self._users.find_by_email(email.strip().lower())
        if user is None or not self.verify_password(password, user.password_hash):
            self._activity.log_security_event(
                "login_failed", ip_address=ip, details={"email": email}
            )
            raise Forbidden("invalid credentials")

        token = self._tokens.save(
            AccessToken(
                token=new_token_string(),
                user_id=user.id,
                last_user_ip=ip,
                last_user_agent=user_agent,
            )
        )
        self._interpretations.reassign_from_anon_to_user(current.id, user.id)
        self._activity.log("user_logged_in", user_id=str(user.id))
        return AuthResult(access_token=token.token, user=user.to_identity(token))
