"""Google sign-in: ID token verification and the OAuth authorization-code flow."""

import logging
from urllib.parse import urlencode

import requests
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from domain.model.errors import ExternalIdentityError
from domain.model.identity import ExternalIdentity

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
OAUTH_SCOPE = "openid email profile"


class GoogleIdentityProvider:
    """Verifies Google identities against the configured client.

    The ID-token flow only needs the client id. The redirect flow also needs
    the client secret and the callback URL registered with Google.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        clock_skew_in_seconds: int = 60,
        timeout: float = 10,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.clock_skew_in_seconds = clock_skew_in_seconds
        self.timeout = timeout

    def verify(self, credential: str) -> ExternalIdentity:
        if not self.client_id:
            raise ExternalIdentityError("GOOGLE_CLIENT_ID not configured")

        try:
            idinfo = id_token.verify_oauth2_token(
                credential,
                google_requests.Request(),
                self.client_id,
                clock_skew_in_seconds=self.clock_skew_in_seconds,
            )
        except ValueError as e:
            # Provider details stay in the logs only
            logger.warning("Google ID token rejected", extra={"error": str(e)})
            raise ExternalIdentityError("Invalid Google ID token") from e

        email = idinfo.get("email")
        if not email:
            raise ExternalIdentityError("Google token missing email")

        return ExternalIdentity(
            email=email,
            name=idinfo.get("name") or email,
            external_id=idinfo["sub"],
            photo_url=idinfo.get("picture"),
        )

    # ── authorization-code flow ──────────────────────────────

    def _require_oauth_config(self):
        if not (self.client_id and self.client_secret and self.redirect_uri):
            raise ExternalIdentityError("Google OAuth not configured")

    def authorization_url(self, state: str) -> str:
        """URL of Google's consent page; Google redirects back with code and state."""
        self._require_oauth_config()
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": OAUTH_SCOPE,
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> ExternalIdentity:
        """Trade an authorization code for tokens and verify the returned ID token."""
        self._require_oauth_config()
        try:
            response = requests.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            tokens = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Google code exchange failed", extra={"error": str(e)[:200]})
            raise ExternalIdentityError("Google code exchange failed") from e

        credential = tokens.get("id_token")
        if not credential:
            raise ExternalIdentityError("Google token response missing id_token")
        return self.verify(credential)
