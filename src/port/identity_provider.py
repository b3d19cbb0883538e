from typing import Protocol

from domain.model.identity import ExternalIdentity


class IdentityProvider(Protocol):
    """External identity provider (Google)."""

    def verify(self, credential: str) -> ExternalIdentity:
        """Verify an opaque credential.

        Raise ExternalIdentityError when the provider rejects it.
        """
        ...

    def authorization_url(self, state: str) -> str:
        """URL that starts the browser sign-in flow, carrying state back to the callback."""
        ...

    def exchange_code(self, code: str) -> ExternalIdentity:
        """Resolve the authorization code returned to the callback.

        Raise ExternalIdentityError when the exchange or verification fails.
        """
        ...
