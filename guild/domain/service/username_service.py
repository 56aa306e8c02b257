"""Username generation domain service."""

import re
import secrets
import unicodedata

import logfire

from guild.domain.error import UsernameExhaustedError
from guild.domain.repository import UserRepository
from guild.domain.value import FederatedIdentity, Username

from .base import Service

MIN_LENGTH = 3
MAX_BASE_LENGTH = 20
FALLBACK_USERNAME = "user"


class UsernameService(Service):
    """Derives usernames from provider profiles and keeps them unique."""

    def __init__(self, user_repository: UserRepository, max_attempts: int = 10) -> None:
        """Initialize username service.

        Args:
            user_repository: User repository used for uniqueness checks
            max_attempts: Suffixed candidates tried before giving up
        """
        self.user_repository = user_repository
        self.max_attempts = max_attempts

    @staticmethod
    def generate(identity: FederatedIdentity) -> Username:
        """Derive a candidate username from profile data.

        Uses the display name, then the e-mail local part, then a fixed
        fallback. The result is ASCII-folded, lower-cased and reduced to
        letters, digits and single underscores.

        Args:
            identity: Identity asserted by the provider

        Returns:
            Candidate username (not yet checked for uniqueness)
        """
        sources = [identity.name]
        if identity.email:
            sources.append(identity.email.split("@", 1)[0])

        for source in sources:
            candidate = _slugify(source or "")
            if candidate:
                return Username(candidate.ljust(MIN_LENGTH, "0"))

        return Username(FALLBACK_USERNAME)

    async def ensure_unique(self, candidate: Username) -> Username:
        """Return `candidate` or a suffixed variant that is not taken yet.

        Args:
            candidate: Username produced by `generate`

        Returns:
            A username no existing user holds

        Raises:
            UsernameExhaustedError: If every attempt collided
        """
        with logfire.span("username_service.ensure_unique", candidate=candidate.root):
            if not await self.user_repository.find_by_username(candidate):
                return candidate

            for attempt in range(1, self.max_attempts + 1):
                suffixed = Username(f"{candidate.root}{secrets.randbelow(10000):04d}")
                if not await self.user_repository.find_by_username(suffixed):
                    logfire.info(
                        "Username suffixed",
                        candidate=candidate.root,
                        username=suffixed.root,
                        attempt=attempt,
                    )
                    return suffixed

            logfire.error(
                "Username attempts exhausted",
                candidate=candidate.root,
                attempts=self.max_attempts,
            )
            raise UsernameExhaustedError(candidate.root, self.max_attempts)


def _slugify(value: str) -> str:
    folded = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "_", folded.lower())
    slug = re.sub(r"_+", "_", slug).strip("_")
    return slug[:MAX_BASE_LENGTH].rstrip("_")
