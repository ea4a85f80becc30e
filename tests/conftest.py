"""Shared pytest fixtures for store tests."""

from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.clock import FixedClock
from app.core.database.engine import build_engine, build_sessionmaker, init_db
from app.core.database.session import SessionScope
from app.features.policies.store import PolicyStore
from app.features.policies.team_policies import TeamPolicyStore
from app.features.teams.models import Team


FROZEN_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture()
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite database with all tables created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'rbac.sqlite'}", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def sessions(engine: AsyncEngine) -> SessionScope:
    return SessionScope(build_sessionmaker(engine))


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(FROZEN_AT)


@pytest.fixture()
def policy_store(sessions: SessionScope, clock: FixedClock) -> PolicyStore:
    return PolicyStore(sessions, clock)


@pytest.fixture()
def team_policy_store(sessions: SessionScope, clock: FixedClock) -> TeamPolicyStore:
    return TeamPolicyStore(sessions, clock)


@pytest.fixture()
def make_team(sessions: SessionScope, clock: FixedClock) -> Callable[..., Awaitable[str]]:
    """Insert a team row directly; teams are owned by another subsystem."""

    async def _make_team(org_id: str, team_id: str | None = None, name: str = "team") -> str:
        async with sessions.transaction("seed team") as session:
            team = Team(org_id=org_id, name=name)
            if team_id is not None:
                team.id = team_id
            team.stamp(clock.now())
            session.add(team)
            await session.flush()
            return team.id

    return _make_team
