"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class StoreError(DomainError):
    """Raised by a user store that cannot complete a read or write."""

    pass


class UsernameExhaustedError(DomainError):
    """Raised when no free username could be found for a new user."""

    def __init__(self, base: str, attempts: int):
        self.base = base
        self.attempts = attempts
        super().__init__(
            f"No free username derived from '{base}' after {attempts} attempts"
        )


class SignInRefusedError(DomainError):
    """Raised when sign-in reconciliation refuses an identity."""

    def __init__(self, provider: str, email: str | None):
        self.provider = provider
        self.email = email
        super().__init__(f"Sign-in refused for {email or '<no email>'} via {provider}")
