"""In-memory IdentityProvider for testing."""

from urllib.parse import urlencode

from domain.model.errors import ExternalIdentityError
from domain.model.identity import ExternalIdentity

AUTHORIZE_URL = "https://accounts.example.com/o/oauth2/auth"


class FakeIdentityProvider:
    def __init__(
        self,
        identities: dict[str, ExternalIdentity] | None = None,
        codes: dict[str, ExternalIdentity] | None = None,
    ):
        self.identities: dict[str, ExternalIdentity] = dict(identities or {})
        self.codes: dict[str, ExternalIdentity] = dict(codes or {})

    def verify(self, credential: str) -> ExternalIdentity:
        identity = self.identities.get(credential)
        if identity is None:
            raise ExternalIdentityError("Invalid Google ID token")
        return identity

    def authorization_url(self, state: str) -> str:
        return f"{AUTHORIZE_URL}?{urlencode({'state': state})}"

    def exchange_code(self, code: str) -> ExternalIdentity:
        identity = self.codes.get(code)
        if identity is None:
            raise ExternalIdentityError("Google code exchange failed")
        return identity
