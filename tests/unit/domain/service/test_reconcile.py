"""Unit tests for sign-in reconciliation policy."""

from datetime import datetime, timezone

import pytest

from guild.domain.model import ContributionStats, Preferences
from guild.domain.service.reconcile import (
    build_new_user,
    is_privileged,
    reconcile,
    was_promoted,
)
from guild.domain.value import AuthProvider, Rank, Role, Username
from tests.conftest import ADMIN_EMAIL, make_identity, make_user

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class TestIsPrivileged:
    """Tests for is_privileged()."""

    def test_matches_case_insensitively(self):
        """Allow-list matching should ignore case on both sides."""
        assert is_privileged("Admin@X.com", ["admin@x.com"])
        assert is_privileged("admin@x.com", ["ADMIN@X.COM"])

    def test_rejects_unlisted_email(self):
        """Addresses not on the list are not privileged."""
        assert not is_privileged("user@x.com", [ADMIN_EMAIL])

    def test_ignores_blank_entries(self):
        """Unset allow-list slots must not match anything."""
        assert not is_privileged("", ["", "  "])
        assert not is_privileged(" ", [""])

    def test_missing_email_is_not_privileged(self):
        """An identity without e-mail is never privileged."""
        assert not is_privileged(None, [ADMIN_EMAIL])

    def test_empty_allow_list(self):
        """No allow-list means nobody is privileged."""
        assert not is_privileged(ADMIN_EMAIL, [])


class TestBuildNewUser:
    """Tests for build_new_user()."""

    def test_allow_listed_user_starts_as_elite_admin(self):
        """admin@x.com signing in via Discord the first time becomes elite admin."""
        identity = make_identity(email=ADMIN_EMAIL, provider=AuthProvider.DISCORD.value)

        user = build_new_user(identity, Username("admin"), [ADMIN_EMAIL], NOW)

        assert user.rank == Rank.ELITE
        assert set(user.roles) == {Role.USER, Role.ADMIN}

    def test_regular_user_starts_as_recruit(self):
        """user@x.com signing in via Google the first time becomes a recruit."""
        identity = make_identity(email="user@x.com", provider=AuthProvider.GOOGLE.value)

        user = build_new_user(identity, Username("user"), [ADMIN_EMAIL], NOW)

        assert user.rank == Rank.RECRUIT
        assert user.roles == [Role.USER]

    def test_defaults_and_profile_fields(self):
        """New records take profile data from the identity and default the rest."""
        identity = make_identity(email="Mixed.Case@Example.COM", name="Ada")

        user = build_new_user(identity, Username("ada"), [], NOW)

        assert user.email == "mixed.case@example.com"
        assert user.display_name == "Ada"
        assert user.username == Username("ada")
        assert user.image == identity.image
        assert user.vr_headset is None
        assert user.level == 1
        assert user.badges == []
        assert user.stats == ContributionStats()
        assert user.stats.contribution_points == 0
        assert user.preferences == Preferences()
        assert user.preferences.email_notifications is False
        assert user.preferences.public_profile is True
        assert user.preferences.show_contributions is True
        assert user.is_active is True
        assert user.is_banned is False
        assert user.last_login_at == NOW
        assert user.created_at == NOW

    def test_requires_email(self):
        """A record cannot be keyed without an e-mail."""
        with pytest.raises(ValueError):
            build_new_user(make_identity(email=None), Username("nobody"), [], NOW)


class TestReconcile:
    """Tests for reconcile()."""

    def test_promotes_newly_allow_listed_user(self):
        """An existing non-admin on the allow-list gains admin and elite."""
        existing = make_user(email=ADMIN_EMAIL)

        updated, needs_save = reconcile(
            existing, make_identity(email=ADMIN_EMAIL), [ADMIN_EMAIL], NOW
        )

        assert updated.roles == [Role.USER, Role.ADMIN]
        assert updated.rank == Rank.ELITE
        assert updated.last_login_at == NOW
        assert needs_save is True
        assert was_promoted(existing, updated)

    def test_does_not_duplicate_admin_role(self):
        """An admin signing in again keeps a single admin role."""
        existing = make_user(
            email=ADMIN_EMAIL, rank=Rank.ELITE, roles=[Role.USER, Role.ADMIN]
        )

        updated, _ = reconcile(existing, make_identity(email=ADMIN_EMAIL), [ADMIN_EMAIL], NOW)

        assert updated.roles.count(Role.ADMIN) == 1
        assert not was_promoted(existing, updated)

    def test_never_revokes_admin(self):
        """Dropping off the allow-list does not demote anyone."""
        existing = make_user(
            email="former@x.com", rank=Rank.ELITE, roles=[Role.USER, Role.ADMIN]
        )

        updated, _ = reconcile(existing, make_identity(email="former@x.com"), [], NOW)

        assert updated.roles == [Role.USER, Role.ADMIN]
        assert updated.rank == Rank.ELITE

    def test_regular_sign_in_only_refreshes_timestamps(self):
        """A non-privileged sign-in touches nothing but the timestamps."""
        existing = make_user(email="user@x.com")

        updated, needs_save = reconcile(
            existing, make_identity(email="user@x.com"), [ADMIN_EMAIL], NOW
        )

        assert updated.roles == existing.roles
        assert updated.rank == existing.rank
        assert updated.last_login_at == NOW
        assert updated.updated_at == NOW
        assert updated.created_at == existing.created_at
        assert needs_save is True

    def test_keeps_identity_of_record(self):
        """Reconciliation never changes the id, e-mail or username."""
        existing = make_user(email=ADMIN_EMAIL, username="keeper")

        updated, _ = reconcile(existing, make_identity(email=ADMIN_EMAIL), [ADMIN_EMAIL], NOW)

        assert updated.id == existing.id
        assert updated.email == existing.email
        assert updated.username == existing.username
