"""
Google OAuth2 sign-in helper.

Wraps the authorization-code flow used by the session login:
- building the consent URL (offline access so Google issues a refresh token)
- exchanging the callback code for tokens
- verifying the ID token to obtain the account profile
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from calendar_backend.core.config import Settings, GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI, GOOGLE_SCOPES
from calendar_backend.core.exceptions import GoogleOAuthException

logger = logging.getLogger(__name__)


@dataclass
class GoogleProfile:
    """Identity returned by a successful Google sign-in."""

    google_id: str
    email: str
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    refresh_token: Optional[str] = None


class GoogleOAuthClient:
    """Google sign-in for one deployment's OAuth client."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _flow(self, state: Optional[str] = None) -> Flow:
        return Flow.from_client_config(
            {
                "web": {
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                    "auth_uri": GOOGLE_AUTH_URI,
                    "token_uri": GOOGLE_TOKEN_URI,
                }
            },
            scopes=GOOGLE_SCOPES,
            redirect_uri=self.settings.google_redirect_uri,
            state=state,
        )

    def authorization_url(self) -> Tuple[str, str, Optional[str]]:
        """
        Build the Google consent URL.

        Returns:
            (url, state, code_verifier); the caller keeps state and verifier
            in the session for the callback
        """
        flow = self._flow()
        url, state = flow.authorization_url(
            access_type="offline",
            prompt="consent",
        )
        return url, state, getattr(flow, "code_verifier", None)

    def exchange_code(self, code: str, state: str, code_verifier: Optional[str] = None) -> GoogleProfile:
        """
        Exchange the callback code and read the signed-in account.

        Raises:
            GoogleOAuthException: If the exchange or ID token verification fails
        """
        flow = self._flow(state=state)
        if code_verifier:
            flow.code_verifier = code_verifier

        try:
            flow.fetch_token(code=code)
            credentials = flow.credentials
            claims = id_token.verify_oauth2_token(
                credentials.id_token,
                GoogleAuthRequest(),
                self.settings.google_client_id,
            )
        except (OAuth2Error, GoogleAuthError, ValueError, Warning) as e:
            # oauthlib raises Warning when the granted scopes differ from the requested ones
            logger.error(f"Google token exchange failed: {e}")
            raise GoogleOAuthException(str(e)) from e

        if not claims.get("email"):
            raise GoogleOAuthException("Google account has no email address")

        return GoogleProfile(
            google_id=claims["sub"],
            email=claims["email"],
            display_name=claims.get("name"),
            avatar=claims.get("picture"),
            refresh_token=credentials.refresh_token,
        )
