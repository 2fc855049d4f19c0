"""
Request authentication.

A deployment runs in exactly one auth mode, chosen at startup:

- ``session``: the user signs in with Google and is identified by a signed
  session cookie.
- ``passphrase``: every request carries a shared passphrase header and acts
  as the single configured owner account.

Both modes implement ``Authenticator.authenticate`` so the rest of the app
only ever asks for "the current user".
"""

from abc import ABC, abstractmethod
import hmac
import logging

from fastapi import Request
from sqlalchemy.orm import Session

from calendar_backend.core.config import Settings, AUTH_MODE_SESSION, AUTH_MODE_PASSPHRASE
from calendar_backend.core.exceptions import AuthenticationException, ConfigurationException, DuplicateException
from calendar_backend.models.user import User
from calendar_backend.repositories.user_repository import UserRepository

logger = logging.getLogger('CORE_SECURITY')


class Authenticator(ABC):
    """Resolves the user behind a request or rejects it."""

    mode: str

    @abstractmethod
    def authenticate(self, request: Request, db: Session) -> User:
        """
        Return the authenticated user.

        Raises:
            AuthenticationException: If the request carries no valid credential
        """


class SessionAuthenticator(Authenticator):
    """Signed-cookie sessions established by the Google login."""

    mode = AUTH_MODE_SESSION
    SESSION_USER_KEY = "user_id"

    def authenticate(self, request: Request, db: Session) -> User:
        user_id = request.session.get(self.SESSION_USER_KEY)
        if user_id is None:
            raise AuthenticationException("Unauthorized: not logged in")

        user = UserRepository(db).get(user_id)
        if user is None:
            logger.warning(f"Session refers to missing user {user_id}; clearing session")
            request.session.clear()
            raise AuthenticationException("Unauthorized: user no longer exists")
        return user

    def login(self, request: Request, user: User) -> None:
        request.session.pop("oauth_state", None)
        request.session.pop("oauth_code_verifier", None)
        request.session[self.SESSION_USER_KEY] = user.id

    def logout(self, request: Request) -> None:
        request.session.clear()


class PassphraseAuthenticator(Authenticator):
    """Shared static passphrase in the ``x-app-password`` header."""

    mode = AUTH_MODE_PASSPHRASE
    HEADER = "x-app-password"

    def __init__(self, password: str, owner_email: str):
        self._password = password
        self.owner_email = owner_email

    def authenticate(self, request: Request, db: Session) -> User:
        supplied = request.headers.get(self.HEADER, "")
        if not hmac.compare_digest(supplied.encode(), self._password.encode()):
            raise AuthenticationException("Unauthorized: Invalid App Password")
        return self._owner(db)

    def _owner(self, db: Session) -> User:
        users = UserRepository(db)
        google_id = f"passphrase:{self.owner_email}"
        user = users.get_by_google_id(google_id)
        if user is not None:
            return user

        try:
            user = users.create_user({"google_id": google_id, "email": self.owner_email})
            logger.info(f"Created passphrase owner account {self.owner_email}")
            return user
        except DuplicateException:
            # Another request created it first
            return users.get_by_google_id(google_id)


def build_authenticator(settings: Settings) -> Authenticator:
    """
    Select the authenticator for this deployment.

    Raises:
        ConfigurationException: If the mode is unknown or lacks its secrets
    """
    settings.validate_for_mode()

    if settings.auth_mode == AUTH_MODE_PASSPHRASE:
        return PassphraseAuthenticator(settings.app_password, settings.owner_email)
    if settings.auth_mode == AUTH_MODE_SESSION:
        return SessionAuthenticator()
    raise ConfigurationException(f"Unknown AUTH_MODE '{settings.auth_mode}'")
