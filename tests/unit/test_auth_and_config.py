"""
Unit tests for session identity, settings and store selection.
"""

import sys
import pytest

from barkbuddy import config
from barkbuddy.utils import profile_store
from barkbuddy.utils.auth import CurrentUser, SessionIdentity


class TestSessionIdentity:
    """Signed-in user tracking."""

    def test_sign_in_and_out(self):
        identity = SessionIdentity()
        assert identity.current_user() is None

        user = identity.sign_in("kim@example.com", uid="u1")
        assert identity.current_user() == user
        assert user.email == "kim@example.com"

        identity.sign_out()
        assert identity.current_user() is None

    def test_initial_user(self):
        identity = SessionIdentity(CurrentUser(email="kim@example.com"))
        assert identity.current_user().email == "kim@example.com"


class TestSettings:
    """Settings loaded from the environment."""

    def test_defaults(self, monkeypatch):
        for name in ("FIRESTORE_COLLECTION_OWNERS", "PROFILE_OPTIMISTIC_CONCURRENCY", "MOCK_APIS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = config.Settings(_env_file=None)

        assert settings.firestore_collection_owners == "owners"
        assert settings.firestore_collection_walkers == "walkers"
        assert settings.profile_optimistic_concurrency is False
        assert settings.mock_apis is False
        assert settings.log_level == "INFO"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FIRESTORE_COLLECTION_OWNERS", "users")
        monkeypatch.setenv("PROFILE_OPTIMISTIC_CONCURRENCY", "true")

        settings = config.Settings(_env_file=None)

        assert settings.firestore_collection_owners == "users"
        assert settings.profile_optimistic_concurrency is True


class TestGetProfileStore:
    """Store selection."""

    @pytest.fixture(autouse=True)
    def reset_store(self, monkeypatch):
        monkeypatch.setattr(profile_store, "_store", None)

    def test_mock_apis_uses_in_memory_store(self, monkeypatch):
        monkeypatch.setattr(profile_store.settings, "mock_apis", True)

        store = profile_store.get_profile_store()

        assert isinstance(store, profile_store.InMemoryProfileStore)
        assert profile_store.get_profile_store() is store

    def test_default_is_firestore(self, monkeypatch):
        monkeypatch.setattr(profile_store.settings, "mock_apis", False)

        store = profile_store.get_profile_store()

        assert isinstance(store, profile_store.FirestoreProfileStore)


class TestConfigureLogging:
    """Log sink setup."""

    def test_level_applied(self, capsys):
        from loguru import logger

        config.configure_logging("WARNING")
        try:
            logger.info("hidden")
            logger.warning("shown")
            err = capsys.readouterr().err
        finally:
            logger.remove()
            logger.add(sys.stderr)

        assert "shown" in err
        assert "hidden" not in err
