from typing import Protocol


class PasswordHasher(Protocol):
    """One-way password digest with a verify operation."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, digest: str) -> bool: ...
