"""Engine and session helpers (inventory_kernel/db/engine.py)."""

import pytest
from sqlalchemy import text

from inventory_kernel.db import engine as db_engine_module
from inventory_kernel.db.engine import (
    get_engine,
    get_session_factory,
    is_postgres,
    session_scope,
)
from inventory_kernel.models.asset import AssetModel
from tests.conftest import get_database_url


class TestEngineAccess:
    def test_engine_matches_configured_url(self, db_engine):
        assert get_engine() is db_engine
        assert is_postgres() is get_database_url().startswith("postgresql")

    def test_sessions_keep_state_after_commit(self, db_engine):
        assert get_session_factory().kw["expire_on_commit"] is False

    def test_uninitialized_access_fails(self, db_engine, monkeypatch):
        monkeypatch.setattr(db_engine_module, "_engine", None)
        monkeypatch.setattr(db_engine_module, "_SessionFactory", None)
        with pytest.raises(RuntimeError, match="init_engine_from_url"):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session_factory()
        assert is_postgres() is False


class TestSessionScope:
    def test_yields_working_session(self, session):
        with session_scope() as scoped:
            assert scoped.execute(text("SELECT 1")).scalar() == 1

    def test_error_rolls_back_and_propagates(self, session, captured_logs):
        with pytest.raises(ValueError):
            with session_scope() as scoped:
                scoped.add(AssetModel(type="consumable", name="Stapler"))
                scoped.flush()
                raise ValueError("abort")

        assert session.query(AssetModel).count() == 0
        assert any(r["message"] == "session_scope_rolled_back" for r in captured_logs())
