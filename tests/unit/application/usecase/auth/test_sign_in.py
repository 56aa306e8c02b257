"""Unit tests for SignInUseCase."""

from dishka import AsyncContainer
import pytest
from sqlalchemy.exc import OperationalError

from guild.application.usecase.auth.sign_in import SignInRequest, SignInUseCase
from guild.domain.error import StoreError, UsernameExhaustedError
from guild.domain.service import UsernameService, UserService
from guild.domain.value import AuthProvider, Rank, Role
from guild.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import ADMIN_EMAIL, make_identity, make_settings, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture(settings=make_settings(ADMIN_EMAIL))


class UnavailableUserRepository(InMemoryUserRepository):
    """Store whose reads fail like a dropped database connection."""

    async def find_by_email(self, email):
        raise OperationalError("SELECT users", {}, ConnectionError("connection refused"))


class UnreachableUserRepository(InMemoryUserRepository):
    """Store whose driver cannot open a connection."""

    async def find_by_email(self, email):
        raise ConnectionRefusedError(111, "Connect call failed")


class RacingUserRepository(InMemoryUserRepository):
    """Store where a concurrent request inserts the e-mail after our lookup."""

    async def find_by_email(self, email):
        return None


class CrowdedUserRepository(InMemoryUserRepository):
    """Store in which every username is taken."""

    async def find_by_username(self, username):
        return make_user(username=username.root)


def _use_case(repo: InMemoryUserRepository, max_attempts: int = 10) -> SignInUseCase:
    return SignInUseCase(
        user_service=UserService(repo),
        username_service=UsernameService(repo, max_attempts=max_attempts),
        settings=make_settings(ADMIN_EMAIL),
    )


class TestFirstSignIn:
    """First sign-in for an unseen e-mail."""

    @pytest.mark.asyncio
    async def test_admin_via_discord_becomes_elite_admin(self, unit_env: AsyncContainer):
        """admin@x.com via Discord: one record, elite, {user, admin}."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)

        result = await use_case.execute(
            SignInRequest(
                identity=make_identity(
                    email="Admin@X.com", provider=AuthProvider.DISCORD.value
                )
            )
        )

        assert result.allowed is True
        assert result.is_new_user is True
        users = repo.all()
        assert len(users) == 1
        user = users[0]
        assert user.email == ADMIN_EMAIL
        assert user.rank == Rank.ELITE
        assert set(user.roles) == {Role.USER, Role.ADMIN}
        assert result.identity.user_id == user.id

    @pytest.mark.asyncio
    async def test_user_via_google_becomes_recruit(self, unit_env: AsyncContainer):
        """user@x.com via Google: one record, recruit, {user}."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)

        result = await use_case.execute(
            SignInRequest(identity=make_identity(email="user@x.com", name="Grace Hopper"))
        )

        assert result.allowed is True
        user = repo.all()[0]
        assert user.rank == Rank.RECRUIT
        assert user.roles == [Role.USER]
        assert user.username.root == "grace_hopper"
        assert user.level == 1
        assert user.badges == []
        assert user.stats.contribution_points == 0
        assert user.vr_headset is None
        assert user.last_login_at is not None

    @pytest.mark.asyncio
    async def test_taken_username_gets_suffix(self, unit_env: AsyncContainer):
        """A second person with the same name gets a distinct username."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)
        await repo.save(make_user(email="first@x.com", username="grace_hopper"))

        await use_case.execute(
            SignInRequest(identity=make_identity(email="second@x.com", name="Grace Hopper"))
        )

        second = await repo.find_by_email("second@x.com")
        assert second.username.root.startswith("grace_hopper")
        assert second.username.root != "grace_hopper"


class TestRepeatSignIn:
    """Sign-ins for an e-mail that already has a record."""

    @pytest.mark.asyncio
    async def test_other_provider_same_email_reuses_record(self, unit_env: AsyncContainer):
        """Discord and Google accounts sharing an e-mail map to one user."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)

        first = await use_case.execute(
            SignInRequest(identity=make_identity(provider=AuthProvider.GOOGLE.value))
        )
        second = await use_case.execute(
            SignInRequest(
                identity=make_identity(
                    email="USER@x.com",
                    provider=AuthProvider.DISCORD.value,
                    provider_account_id="discord-1",
                )
            )
        )

        assert len(repo.all()) == 1
        assert second.is_new_user is False
        assert second.identity.user_id == first.identity.user_id

    @pytest.mark.asyncio
    async def test_allow_listed_existing_user_promoted_with_one_save(
        self, unit_env: AsyncContainer
    ):
        """An existing non-admin later allow-listed gains admin in a single save."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)
        existing = make_user(email=ADMIN_EMAIL, username="early_bird")
        await repo.save(existing)
        saves_before = repo.save_count

        result = await use_case.execute(
            SignInRequest(identity=make_identity(email=ADMIN_EMAIL))
        )

        assert result.allowed is True
        assert repo.save_count - saves_before == 1
        user = await repo.find_by_id(existing.id)
        assert user.roles == [Role.USER, Role.ADMIN]
        assert user.rank == Rank.ELITE
        assert user.last_login_at is not None
        assert user.last_login_at != existing.last_login_at

    @pytest.mark.asyncio
    async def test_double_sign_in_keeps_single_admin_role(self, unit_env: AsyncContainer):
        """Signing in twice with an allow-listed e-mail never duplicates admin."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)

        for _ in range(2):
            await use_case.execute(SignInRequest(identity=make_identity(email=ADMIN_EMAIL)))

        user = repo.all()[0]
        assert user.roles.count(Role.ADMIN) == 1

    @pytest.mark.asyncio
    async def test_roles_and_rank_never_regress(self, unit_env: AsyncContainer):
        """A non-listed admin keeps admin and elite on re-sign-in."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)
        existing = make_user(
            email="veteran@x.com", rank=Rank.ELITE, roles=[Role.USER, Role.ADMIN]
        )
        await repo.save(existing)

        await use_case.execute(SignInRequest(identity=make_identity(email="veteran@x.com")))

        user = await repo.find_by_id(existing.id)
        assert user.rank == Rank.ELITE
        assert user.roles == [Role.USER, Role.ADMIN]


class TestUnreconciledAndFailures:
    """Pass-through, refusals and errors."""

    @pytest.mark.asyncio
    async def test_other_provider_passes_through(self, unit_env: AsyncContainer):
        """Identities from providers we do not reconcile skip the store."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)
        identity = make_identity(provider="github")

        result = await use_case.execute(SignInRequest(identity=identity))

        assert result.allowed is True
        assert result.identity == identity
        assert result.identity.user_id is None
        assert repo.save_count == 0

    @pytest.mark.asyncio
    async def test_missing_email_is_refused(self, unit_env: AsyncContainer):
        """A reconciled provider without e-mail cannot be keyed."""
        use_case = await unit_env.get(SignInUseCase)
        repo = await unit_env.get(InMemoryUserRepository)

        result = await use_case.execute(SignInRequest(identity=make_identity(email=None)))

        assert result.allowed is False
        assert repo.all() == []

    @pytest.mark.asyncio
    async def test_store_failure_refuses_sign_in(self):
        """Database errors are reported as a refusal, not raised."""
        result = await _use_case(UnavailableUserRepository()).execute(
            SignInRequest(identity=make_identity())
        )

        assert result.allowed is False
        assert result.identity.user_id is None

    @pytest.mark.asyncio
    async def test_unreachable_store_refuses_sign_in(self):
        result = await _use_case(UnreachableUserRepository()).execute(
            SignInRequest(identity=make_identity())
        )

        assert result.allowed is False
        assert result.identity.user_id is None

    @pytest.mark.asyncio
    async def test_concurrent_insert_refuses_losing_sign_in(self):
        """The losing insert of a same-e-mail race is refused; one record remains."""
        repo = RacingUserRepository()
        await repo.save(make_user(email="user@x.com", username="winner"))

        result = await _use_case(repo).execute(SignInRequest(identity=make_identity()))

        assert result.allowed is False
        assert len(repo.all()) == 1

    @pytest.mark.asyncio
    async def test_username_exhaustion_propagates(self):
        """Running out of usernames is fatal for the attempt."""
        with pytest.raises(UsernameExhaustedError):
            await _use_case(CrowdedUserRepository(), max_attempts=2).execute(
                SignInRequest(identity=make_identity())
            )

    @pytest.mark.asyncio
    async def test_store_error_on_save_refuses_sign_in(self):
        """StoreError from the repository is handled like a database error."""

        class FailingSaveRepository(InMemoryUserRepository):
            async def save(self, user):
                raise StoreError("disk full")

        result = await _use_case(FailingSaveRepository()).execute(
            SignInRequest(identity=make_identity())
        )

        assert result.allowed is False
