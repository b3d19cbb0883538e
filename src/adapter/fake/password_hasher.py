"""Deterministic PasswordHasher for testing. Records every verify call."""


class FakePasswordHasher:
    PREFIX = 'hashed:'

    def __init__(self):
        self.verify_calls: list[tuple[str, str]] = []

    def hash(self, plaintext: str) -> str:
        return f"{self.PREFIX}{plaintext}"

    def verify(self, plaintext: str, digest: str) -> bool:
        self.verify_calls.append((plaintext, digest))
        return digest == f"{self.PREFIX}{plaintext}"
