#!/usr/bin/env python3
"""
Google Refresh Token Helper

Prints a Google consent URL, reads back the authorization code and prints the
refresh token to put in .env as GOOGLE_REFRESH_TOKEN. Passphrase deployments
use that token to reach the calendar since nobody signs in.

Usage:
    python scripts/get_refresh_token.py [--redirect-uri URI]

Requires GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET in the environment or .env.
"""

import argparse
import logging
import sys

from dotenv import load_dotenv
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from calendar_backend.core.config import Settings, GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# Redirect URI that displays the code for easy copying
OAUTH_PLAYGROUND = "https://developers.google.com/oauthplayground"
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]


def main() -> int:
    parser = argparse.ArgumentParser(description="Obtain a Google Calendar refresh token")
    parser.add_argument("--redirect-uri", default=OAUTH_PLAYGROUND,
                        help=f"Redirect URI registered for the client (default: {OAUTH_PLAYGROUND})")
    args = parser.parse_args()

    load_dotenv()
    settings = Settings()
    if not settings.google_client_id or not settings.google_client_secret:
        logger.error("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set")
        return 1

    flow = Flow.from_client_config(
        {
            "web": {
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
            }
        },
        scopes=CALENDAR_SCOPES,
        redirect_uri=args.redirect_uri,
    )
    # offline + consent forces Google to issue a refresh token
    url, _ = flow.authorization_url(access_type="offline", prompt="consent")

    print("Authorize this app by visiting this url:")
    print(url)
    print("\n-----------------------------------\n")
    code = input("Enter the code from that page here: ").strip()

    try:
        flow.fetch_token(code=code)
    except OAuth2Error as e:
        logger.error(f"Error retrieving access token: {e}")
        return 1

    refresh_token = flow.credentials.refresh_token
    if not refresh_token:
        logger.error("Google did not return a refresh token; revoke the app's access and try again")
        return 1

    print("\n--- SUCCESS! COPY THIS TO .env ---\n")
    print(f"GOOGLE_REFRESH_TOKEN={refresh_token}")
    print("\n(The access token is not needed; it is refreshed automatically)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
