"""Integration test for LoginUseCase with a real database.

This test demonstrates:
1. Using real PostgreSQL (point DATABASE__URL at a migrated database)
2. Mocked OAuth providers feeding the full sign-in flow
3. Using the test harness with unmocked persistence
"""

import os

from dishka import AsyncContainer
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from guild.adapter.discord import MockDiscordOAuthClient
from guild.application.usecase.auth.login import LoginRequest, LoginUseCase
from guild.config import AuthSettings, Settings
from guild.domain.repository import UserRepository
from guild.domain.service import SessionTokenService
from guild.domain.value import AuthProvider, Rank, Role
from tests.conftest import ADMIN_EMAIL, make_identity
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"), reason="DATABASE__URL is not set"
)

# Database comes from the environment, the allow-list is fixed
integration_env = create_env_fixture(
    unmock={"persistence"},
    settings=Settings(
        environment="test",
        auth=AuthSettings(
            jwt_secret="test-secret-key-with-enough-length-for-hs256",
            admin_email_1=ADMIN_EMAIL,
        ),
    ),
)


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Clean database before each test."""
    session = await integration_env.get(AsyncSession)

    await session.execute(text("TRUNCATE TABLE users CASCADE"))
    await session.commit()

    yield


class TestLoginIntegration:
    """Integration tests for login flow with real database."""

    @pytest.mark.asyncio
    async def test_first_sign_in_creates_user(self, integration_env: AsyncContainer):
        """A first Discord sign-in creates one user and a matching token."""
        login_use_case = await integration_env.get(LoginUseCase)
        user_repo = await integration_env.get(UserRepository)
        token_service = await integration_env.get(SessionTokenService)

        response = await login_use_case.execute(
            LoginRequest(provider=AuthProvider.DISCORD, code="oauth_123", state="s")
        )

        user = await user_repo.find_by_email("mock@discord.test")
        assert user is not None
        assert response.is_new_user is True
        assert response.user_id == str(user.id)
        assert user.rank == Rank.RECRUIT
        assert user.roles == [Role.USER]

        token = token_service.decode(response.token)
        assert token.username == user.username.root
        assert token.roles == ["user"]

    @pytest.mark.asyncio
    async def test_repeat_admin_sign_in_keeps_single_admin_role(
        self, integration_env: AsyncContainer
    ):
        login_use_case = await integration_env.get(LoginUseCase)
        user_repo = await integration_env.get(UserRepository)
        discord = await integration_env.get(MockDiscordOAuthClient)
        discord.register(
            "admin",
            make_identity(email=ADMIN_EMAIL, provider=AuthProvider.DISCORD.value),
        )

        for _ in range(2):
            await login_use_case.execute(
                LoginRequest(provider=AuthProvider.DISCORD, code="admin", state="s")
            )

        user = await user_repo.find_by_email(ADMIN_EMAIL)
        assert user.rank == Rank.ELITE
        assert user.roles == [Role.USER, Role.ADMIN]
