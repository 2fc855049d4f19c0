"""
Google Sign-In API

Session-mode only: these routes are not mounted in passphrase deployments.
"""

import hmac
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
import logging

from calendar_backend.core.config import Settings
from calendar_backend.core.dependencies import (
    get_app_settings,
    get_authenticator,
    get_current_user,
    get_identity_service,
    get_oauth_client,
)
from calendar_backend.core.exceptions import AuthenticationException
from calendar_backend.core.security import SessionAuthenticator
from calendar_backend.integrations.google_oauth import GoogleOAuthClient
from calendar_backend.models.user import User
from calendar_backend.schemas.common import MessageResponse
from calendar_backend.schemas.user import UserResponse
from calendar_backend.services.identity_service import IdentityService

logger = logging.getLogger("AUTH_API")

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)

OAUTH_STATE_KEY = "oauth_state"
OAUTH_VERIFIER_KEY = "oauth_code_verifier"


@router.get("/google")
def google_login(request: Request, oauth: GoogleOAuthClient = Depends(get_oauth_client)):
    """Start the Google consent flow."""
    url, state, code_verifier = oauth.authorization_url()
    request.session[OAUTH_STATE_KEY] = state
    if code_verifier:
        request.session[OAUTH_VERIFIER_KEY] = code_verifier
    return RedirectResponse(url)


@router.get("/google/callback")
def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
    identity: IdentityService = Depends(get_identity_service),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
    settings: Settings = Depends(get_app_settings),
):
    """Finish the Google consent flow and open a session."""
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    code_verifier = request.session.pop(OAUTH_VERIFIER_KEY, None)

    if error:
        raise AuthenticationException(f"Google sign-in failed: {error}")
    if not expected_state or not state or not hmac.compare_digest(state, expected_state):
        raise AuthenticationException("Invalid OAuth state. Please try again.")
    if not code:
        raise AuthenticationException("Missing OAuth code.")

    profile = oauth.exchange_code(code, state, code_verifier)
    user = identity.login(profile)
    authenticator.login(request, user)

    logger.info(f"User {user.id} logged in")
    return RedirectResponse(settings.post_login_redirect, status_code=302)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.get("/logout", response_model=MessageResponse)
def logout(request: Request, authenticator: SessionAuthenticator = Depends(get_authenticator)):
    authenticator.logout(request)
    return MessageResponse(message="Logged out")
