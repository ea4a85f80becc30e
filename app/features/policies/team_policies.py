"""
Team policy assignments.

A team can hold a policy at most once per organization, and only when
both the team and the policy exist in that organization.
"""
from typing import List
from sqlalchemy import and_, delete, literal, select
from sqlalchemy.exc import IntegrityError

from app.core.clock import Clock, SystemClock
from app.core.database.errors import violates_constraint
from app.core.database.session import SessionScope
from app.features.policies.exceptions import TeamPolicyAlreadyAddedError, TeamPolicyNotFoundError
from app.features.policies.existence import policy_exists, team_exists
from app.features.policies.models import Policy, TeamPolicy
from app.features.policies.schemas import (
    AddTeamPolicyCommand,
    GetTeamPoliciesQuery,
    PolicyDetail,
    RemoveTeamPolicyCommand,
)
from app.utils import get_logger


log = get_logger(__name__)


class TeamPolicyStore:
    """Adds, removes and lists the policies assigned to teams."""

    def __init__(self, sessions: SessionScope, clock: Clock | None = None):
        self._sessions = sessions
        self._clock = clock or SystemClock()

    async def list_team_policies(self, query: GetTeamPoliciesQuery) -> List[PolicyDetail]:
        """Return summaries of the policies assigned to a team. Permissions are not loaded."""
        async with self._sessions.read(f"list policies of team {query.team_id} in org {query.org_id}") as session:
            stmt = (
                select(Policy)
                .join(
                    TeamPolicy,
                    and_(
                        TeamPolicy.policy_id == Policy.id,
                        TeamPolicy.team_id == query.team_id,
                        TeamPolicy.org_id == query.org_id,
                    ),
                )
                .where(Policy.org_id == query.org_id)
                .order_by(Policy.id)
            )
            result = await session.execute(stmt)
            policies = [PolicyDetail.model_validate(p) for p in result.scalars().all()]

        log.debug("Team %s in org %s has %d policies", query.team_id, query.org_id, len(policies))
        return policies

    async def add_team_policy(self, cmd: AddTeamPolicyCommand) -> None:
        """
        Assign a policy to a team.

        Checks run in this order, so the first failing one decides the error:
        duplicate assignment, missing team, missing policy.

        Raises:
            TeamPolicyAlreadyAddedError: the team already holds the policy
            TeamNotFoundError: the team does not exist in the org
            PolicyNotFoundError: the policy does not exist in the org
        """
        context = f"add policy {cmd.policy_id} to team {cmd.team_id} in org {cmd.org_id}"
        async with self._sessions.transaction(context) as session:
            stmt = select(literal(1)).select_from(TeamPolicy).where(
                and_(
                    TeamPolicy.org_id == cmd.org_id,
                    TeamPolicy.team_id == cmd.team_id,
                    TeamPolicy.policy_id == cmd.policy_id,
                )
            )
            if (await session.execute(stmt)).first() is not None:
                log.info("Policy %s already assigned to team %s in org %s", cmd.policy_id, cmd.team_id, cmd.org_id)
                raise TeamPolicyAlreadyAddedError(cmd.org_id, cmd.team_id, cmd.policy_id)

            await team_exists(session, cmd.org_id, cmd.team_id)
            await policy_exists(session, cmd.org_id, cmd.policy_id)

            team_policy = TeamPolicy(org_id=cmd.org_id, team_id=cmd.team_id, policy_id=cmd.policy_id)
            team_policy.stamp(self._clock.now())
            session.add(team_policy)
            try:
                await session.flush()
            except IntegrityError as exc:
                if not violates_constraint(
                    exc,
                    "uq_team_policies_org_team_policy",
                    "team_policies.org_id", "team_policies.team_id", "team_policies.policy_id",
                ):
                    raise
                # Lost a race with a concurrent add of the same assignment
                log.warning("Concurrent assignment of policy %s to team %s in org %s", cmd.policy_id, cmd.team_id, cmd.org_id)
                raise TeamPolicyAlreadyAddedError(cmd.org_id, cmd.team_id, cmd.policy_id) from exc

        log.info("Assigned policy %s to team %s in org %s", cmd.policy_id, cmd.team_id, cmd.org_id)

    async def remove_team_policy(self, cmd: RemoveTeamPolicyCommand) -> None:
        """
        Unassign a policy from a team.

        Unlike policy and permission deletes, removing an assignment that
        does not exist is an error.

        Raises:
            TeamNotFoundError: the team does not exist in the org
            PolicyNotFoundError: the policy does not exist in the org
            TeamPolicyNotFoundError: the team does not hold the policy
        """
        context = f"remove policy {cmd.policy_id} from team {cmd.team_id} in org {cmd.org_id}"
        async with self._sessions.transaction(context) as session:
            await team_exists(session, cmd.org_id, cmd.team_id)
            await policy_exists(session, cmd.org_id, cmd.policy_id)

            result = await session.execute(
                delete(TeamPolicy).where(
                    and_(
                        TeamPolicy.org_id == cmd.org_id,
                        TeamPolicy.team_id == cmd.team_id,
                        TeamPolicy.policy_id == cmd.policy_id,
                    )
                )
            )
            if result.rowcount == 0:
                log.info("Policy %s is not assigned to team %s in org %s", cmd.policy_id, cmd.team_id, cmd.org_id)
                raise TeamPolicyNotFoundError(cmd.org_id, cmd.team_id, cmd.policy_id)

        log.info("Removed policy %s from team %s in org %s", cmd.policy_id, cmd.team_id, cmd.org_id)
