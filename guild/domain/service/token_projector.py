"""Session token projection domain service.

Keeps the session token in step with the user record while bounding store
access to two moments: first issuance after sign-in, and an explicit
refresh trigger. Every other request reuses the token as-is.
"""

from typing import Any
from uuid import UUID

import logfire

from guild.domain.model import Session, SessionToken, UserSnapshot
from guild.domain.value import FederatedIdentity, ProviderAccount, Role, SessionTrigger, UserId

from .base import Service
from .user_service import UserService


class TokenProjector(Service):
    """Copies user snapshots into tokens and tokens into sessions."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize token projector.

        Args:
            user_service: User domain service used for snapshot reads
        """
        self.user_service = user_service

    async def on_jwt(
        self,
        token: SessionToken,
        identity: FederatedIdentity | None = None,
        account: ProviderAccount | None = None,
        trigger: SessionTrigger | None = None,
        session_data: dict[str, Any] | None = None,
    ) -> SessionToken:
        """Compute the token to sign for this request.

        Args:
            token: Current token (empty on first issuance)
            identity: Reconciled identity, only present at sign-in
            account: Provider account, only present at sign-in
            trigger: Why the token is being recomputed
            session_data: Partial token fields sent with an update trigger

        Returns:
            Token to sign
        """
        if identity is not None and account is not None:
            token = await self._project_initial(token, identity)

        if trigger == SessionTrigger.UPDATE:
            token = await self._refresh(token, session_data)

        return token

    def on_session(self, session: Session, token: SessionToken) -> Session:
        """Copy token fields into the outward session. No store access.

        Args:
            session: Session being returned to the client
            token: Verified token for this request

        Returns:
            Session whose user mirrors the token
        """
        user = session.user.model_copy(
            update={
                "id": token.id,
                "display_name": token.display_name,
                "username": token.username,
                "image": token.image,
                "rank": token.rank,
                "roles": list(token.roles),
                "is_banned": token.is_banned,
            }
        )
        return session.model_copy(update={"user": user})

    @staticmethod
    def redirect(url: str, base_url: str) -> str:
        """Post sign-in redirect target.

        Always the base URL for now, whatever the flow asked for.
        """
        return base_url

    async def _project_initial(
        self, token: SessionToken, identity: FederatedIdentity
    ) -> SessionToken:
        if identity.user_id is None:
            logfire.info(
                "Identity not reconciled, token left unprojected",
                provider=identity.provider,
            )
            return token

        with logfire.span("token_projector.initial", user_id=str(identity.user_id)):
            snapshot = await self.user_service.get_snapshot(identity.user_id)
            if not snapshot:
                return token
            return token.merge({"id": str(identity.user_id), **_snapshot_fields(snapshot)})

    async def _refresh(
        self, token: SessionToken, session_data: dict[str, Any] | None
    ) -> SessionToken:
        with logfire.span("token_projector.refresh", user_id=token.id):
            user_id = _parse_user_id(token.id)
            if user_id is not None:
                snapshot = await self.user_service.get_snapshot(user_id)
                if snapshot:
                    token = token.merge(_snapshot_fields(snapshot))

            if session_data is not None:
                token = token.merge(session_data)
                logfire.info(
                    "Session data merged into token",
                    user_id=token.id,
                    keys=sorted(session_data),
                )

            return token


def _snapshot_fields(snapshot: UserSnapshot) -> dict[str, Any]:
    roles = [role.value for role in snapshot.roles] or [Role.USER.value]
    return {
        "display_name": snapshot.display_name,
        "username": snapshot.username.root,
        "image": snapshot.image,
        "rank": snapshot.rank.value,
        "roles": roles,
        "is_banned": snapshot.is_banned,
    }


def _parse_user_id(value: str | None) -> UserId | None:
    if not value:
        return None
    try:
        return UserId(UUID(value))
    except ValueError:
        logfire.warn("Token carries a malformed user id", user_id=value)
        return None
