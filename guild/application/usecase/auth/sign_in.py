"""Sign-in reconciliation use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from guild.config import Settings
from guild.domain.error import StoreError
from guild.domain.service import UsernameService, UserService
from guild.domain.service.reconcile import build_new_user, reconcile, was_promoted
from guild.domain.value import RECONCILED_PROVIDERS, FederatedIdentity


class SignInRequest(BaseModel):
    """Identity asserted by a provider callback."""

    identity: FederatedIdentity


class SignInResponse(BaseModel):
    """Outcome of sign-in reconciliation.

    `identity.user_id` holds the internal user id when the provider was
    reconciled and the sign-in allowed.
    """

    allowed: bool
    identity: FederatedIdentity
    is_new_user: bool = False


class SignInUseCase:
    """Maps a federated identity onto the local user record.

    Only Discord and Google identities are reconciled; anything else is
    allowed through untouched. Lookup is by lower-cased e-mail, so every
    provider account sharing an address lands on the same user.
    """

    def __init__(
        self,
        user_service: UserService,
        username_service: UsernameService,
        settings: Settings,
    ) -> None:
        """Initialize sign-in use case.

        Args:
            user_service: User domain service
            username_service: Username generation service
            settings: Application settings
        """
        self.user_service = user_service
        self.username_service = username_service
        self.settings = settings

    async def execute(self, request: SignInRequest) -> SignInResponse:
        """Execute sign-in reconciliation.

        Steps:
        1. Pass through identities from providers we do not reconcile
        2. Look the user up by lower-cased e-mail
        3. If absent: generate a unique username and insert a new record
        4. If present: apply allow-list promotion, refresh last login, save
        5. Write the internal id back onto the identity

        Store failures, unreachable database included, are logged and
        reported as a refusal. Running out of
        usernames is not a store failure and propagates.

        Args:
            request: Sign-in request with the provider identity

        Returns:
            Sign-in outcome
        """
        identity = request.identity

        if identity.provider not in RECONCILED_PROVIDERS:
            logfire.info("Sign-in passed through", provider=identity.provider)
            return SignInResponse(allowed=True, identity=identity)

        if not identity.email:
            logfire.warn(
                "Sign-in refused - provider returned no email",
                provider=identity.provider,
                provider_account_id=identity.provider_account_id,
            )
            return SignInResponse(allowed=False, identity=identity)

        with logfire.span(
            "sign_in", email=identity.email, provider=identity.provider
        ):
            try:
                return await self._reconcile(identity)
            except (SQLAlchemyError, StoreError, OSError) as e:
                # OSError: the driver could not reach the database
                logfire.error(
                    "Sign in error",
                    email=identity.email,
                    provider=identity.provider,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return SignInResponse(allowed=False, identity=identity)

    async def _reconcile(self, identity: FederatedIdentity) -> SignInResponse:
        admin_emails = self.settings.auth.admin_emails
        now = datetime.now(timezone.utc)

        existing = await self.user_service.get_user_by_email(identity.email)

        if existing is None:
            candidate = self.username_service.generate(identity)
            username = await self.username_service.ensure_unique(candidate)

            user = build_new_user(identity, username, admin_emails, now)
            saved = await self.user_service.save(user)

            logfire.info(
                "Created new user",
                email=saved.email,
                user_id=str(saved.id),
                username=saved.username.root,
                rank=saved.rank.value,
            )
            self._log_signed_in(identity)
            return SignInResponse(
                allowed=True,
                identity=identity.model_copy(update={"user_id": saved.id}),
                is_new_user=True,
            )

        updated, needs_save = reconcile(existing, identity, admin_emails, now)

        if was_promoted(existing, updated):
            logfire.info(
                "Auto-promoted user to admin",
                email=existing.email,
                user_id=str(existing.id),
            )

        if needs_save:
            await self.user_service.save(updated)

        self._log_signed_in(identity)
        return SignInResponse(
            allowed=True,
            identity=identity.model_copy(update={"user_id": existing.id}),
        )

    @staticmethod
    def _log_signed_in(identity: FederatedIdentity) -> None:
        logfire.info("User signed in", email=identity.email, provider=identity.provider)
