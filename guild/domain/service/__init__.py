"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Service
from .session_token_service import SessionTokenService
from .token_projector import TokenProjector
from .user_service import UserService
from .username_service import UsernameService

__all__ = [
    "AuthService",
    "OAuthClient",
    "Service",
    "SessionTokenService",
    "TokenProjector",
    "UserService",
    "UsernameService",
]
