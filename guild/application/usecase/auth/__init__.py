"""Authentication use cases."""

from .get_session import GetSessionUseCase
from .login import LoginUseCase
from .sign_in import SignInUseCase
from .update_session import UpdateSessionUseCase

__all__ = [
    "GetSessionUseCase",
    "LoginUseCase",
    "SignInUseCase",
    "UpdateSessionUseCase",
]
