"""
Existence checks run before team policy assignments change.

Both checks require exactly one matching row. No row, or more than one,
raises the matching NotFound error, so a True return never needs checking.
"""
from sqlalchemy import and_, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.policies.exceptions import PolicyNotFoundError, TeamNotFoundError
from app.features.policies.models import Policy
from app.features.teams.models import Team
from app.utils import get_logger


log = get_logger(__name__)


async def team_exists(session: AsyncSession, org_id: str, team_id: str) -> bool:
    """
    Check that a team exists in an organization.
    
    Raises:
        TeamNotFoundError: zero or several rows match
    """
    stmt = select(literal(1)).select_from(Team).where(
        and_(Team.org_id == org_id, Team.id == team_id)
    )
    rows = (await session.execute(stmt)).all()
    if len(rows) != 1:
        log.debug("Team %s not found in org %s (%d rows)", team_id, org_id, len(rows))
        raise TeamNotFoundError(team_id, org_id)
    return True


async def policy_exists(session: AsyncSession, org_id: str, policy_id: str) -> bool:
    """
    Check that a policy exists in an organization.
    
    Raises:
        PolicyNotFoundError: zero or several rows match
    """
    stmt = select(literal(1)).select_from(Policy).where(
        and_(Policy.org_id == org_id, Policy.id == policy_id)
    )
    rows = (await session.execute(stmt)).all()
    if len(rows) != 1:
        log.debug("Policy %s not found in org %s (%d rows)", policy_id, org_id, len(rows))
        raise PolicyNotFoundError(policy_id, org_id)
    return True
