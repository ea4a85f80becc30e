"""
Policy and permission persistence.

Reads run in a plain session, every write in its own transaction.
Deleting a policy also deletes the permissions it owns and every team
assignment pointing at it.
"""
from typing import List
from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, SystemClock
from app.core.database.errors import violates_constraint
from app.core.database.session import SessionScope
from app.features.policies.exceptions import PolicyNameTakenError, PolicyNotFoundError
from app.features.policies.existence import policy_exists
from app.features.policies.models import Permission, Policy, TeamPolicy
from app.features.policies.schemas import (
    CreatePermissionCommand,
    CreatePolicyCommand,
    DeletePermissionCommand,
    DeletePolicyCommand,
    GetPolicyPermissionsQuery,
    GetPolicyQuery,
    ListPoliciesQuery,
    PermissionResponse,
    PolicyDetail,
    PolicyResponse,
)
from app.utils import get_logger


log = get_logger(__name__)


class PolicyStore:
    """
    CRUD for policies and the permissions they own.

    Usage:
        store = PolicyStore(SessionScope())
        policy = await store.create_policy(CreatePolicyCommand(org_id="1", name="viewer"))
    """

    def __init__(self, sessions: SessionScope, clock: Clock | None = None):
        self._sessions = sessions
        self._clock = clock or SystemClock()

    # ========================================================================
    # Policies
    # ========================================================================

    async def list_policies(self, query: ListPoliciesQuery) -> List[PolicyResponse]:
        """Return every policy of the organization, oldest first."""
        async with self._sessions.read(f"list policies of org {query.org_id}") as session:
            stmt = select(Policy).where(Policy.org_id == query.org_id).order_by(Policy.id)
            result = await session.execute(stmt)
            policies = [PolicyResponse.model_validate(p) for p in result.scalars().all()]

        log.debug("Listed %d policies for org %s", len(policies), query.org_id)
        return policies

    async def get_policy(self, query: GetPolicyQuery) -> PolicyDetail:
        """
        Return a policy with all of its permissions.

        Raises:
            PolicyNotFoundError: no policy with this id in the org
        """
        async with self._sessions.read(f"get policy {query.policy_id} of org {query.org_id}") as session:
            policy = await _get_policy_by_id(session, query.policy_id, query.org_id)
            permissions = await _get_policy_permissions(session, query.policy_id)

        detail = PolicyDetail.model_validate(policy)
        return detail.model_copy(update={"permissions": permissions})

    async def create_policy(self, cmd: CreatePolicyCommand) -> PolicyResponse:
        """
        Insert a new policy together with the permissions listed in the command.

        Raises:
            PolicyNameTakenError: the org already has a policy with this name
            StorageError: any other insert failure; nothing is written
        """
        async with self._sessions.transaction(f"create policy '{cmd.name}' in org {cmd.org_id}") as session:
            now = self._clock.now()
            policy = Policy(org_id=cmd.org_id, name=cmd.name, description=cmd.description)
            policy.stamp(now)
            session.add(policy)
            try:
                await session.flush()
            except IntegrityError as exc:
                if violates_constraint(exc, "uq_policies_org_id_name", "policies.org_id", "policies.name"):
                    log.info("Policy name '%s' already taken in org %s", cmd.name, cmd.org_id)
                    raise PolicyNameTakenError(cmd.name, cmd.org_id) from exc
                raise

            for grant in cmd.permissions:
                permission = Permission(
                    org_id=cmd.org_id,
                    policy_id=policy.id,
                    resource=grant.resource,
                    resource_type=grant.resource_type,
                    action=grant.action,
                )
                permission.stamp(now)
                session.add(permission)
            await session.flush()
            response = PolicyResponse.model_validate(policy)

        log.info(
            "Created policy %s ('%s') in org %s with %d permissions",
            response.id, response.name, response.org_id, len(cmd.permissions)
        )
        return response

    async def delete_policy(self, cmd: DeletePolicyCommand) -> None:
        """
        Delete a policy, its permissions and its team assignments.

        Deleting a policy that does not exist is a no-op.
        """
        async with self._sessions.transaction(f"delete policy {cmd.policy_id} of org {cmd.org_id}") as session:
            result = await session.execute(
                delete(Policy).where(and_(Policy.id == cmd.policy_id, Policy.org_id == cmd.org_id))
            )
            deleted = result.rowcount
            result = await session.execute(
                delete(Permission).where(
                    and_(Permission.policy_id == cmd.policy_id, Permission.org_id == cmd.org_id)
                )
            )
            permissions = result.rowcount
            result = await session.execute(
                delete(TeamPolicy).where(
                    and_(TeamPolicy.policy_id == cmd.policy_id, TeamPolicy.org_id == cmd.org_id)
                )
            )
            links = result.rowcount

        if deleted:
            log.info(
                "Deleted policy %s of org %s with %d permissions and %d team assignments",
                cmd.policy_id, cmd.org_id, permissions, links
            )
        else:
            log.debug("Policy %s of org %s already absent", cmd.policy_id, cmd.org_id)

    # ========================================================================
    # Permissions
    # ========================================================================

    async def get_policy_permissions(self, query: GetPolicyPermissionsQuery) -> List[PermissionResponse]:
        """Return every permission of a policy. The lookup is not org-scoped."""
        async with self._sessions.read(f"get permissions of policy {query.policy_id}") as session:
            return await _get_policy_permissions(session, query.policy_id)

    async def create_permission(self, cmd: CreatePermissionCommand) -> PermissionResponse:
        """
        Attach a new permission to a policy.

        Raises:
            PolicyNotFoundError: the policy does not exist in the org
        """
        context = f"create permission {cmd.action} on {cmd.resource} for policy {cmd.policy_id} of org {cmd.org_id}"
        async with self._sessions.transaction(context) as session:
            await policy_exists(session, cmd.org_id, cmd.policy_id)

            permission = Permission(
                org_id=cmd.org_id,
                policy_id=cmd.policy_id,
                resource=cmd.resource,
                resource_type=cmd.resource_type,
                action=cmd.action,
            )
            permission.stamp(self._clock.now())
            session.add(permission)
            await session.flush()
            response = PermissionResponse.model_validate(permission)

        log.info("Created permission %s (%s on %s) for policy %s", response.id, response.action, response.resource, response.policy_id)
        return response

    async def delete_permission(self, cmd: DeletePermissionCommand) -> None:
        """Delete a permission. Deleting a missing permission is a no-op."""
        async with self._sessions.transaction(f"delete permission {cmd.permission_id} of org {cmd.org_id}") as session:
            result = await session.execute(
                delete(Permission).where(
                    and_(Permission.id == cmd.permission_id, Permission.org_id == cmd.org_id)
                )
            )
            deleted = result.rowcount

        if deleted:
            log.info("Deleted permission %s of org %s", cmd.permission_id, cmd.org_id)
        else:
            log.debug("Permission %s of org %s already absent", cmd.permission_id, cmd.org_id)


# ============================================================================
# Shared queries
# ============================================================================

async def _get_policy_by_id(session: AsyncSession, policy_id: str, org_id: str) -> Policy:
    stmt = select(Policy).where(and_(Policy.id == policy_id, Policy.org_id == org_id))
    result = await session.execute(stmt)
    policy = result.scalar_one_or_none()
    if policy is None:
        raise PolicyNotFoundError(policy_id, org_id)
    return policy


async def _get_policy_permissions(session: AsyncSession, policy_id: str) -> List[PermissionResponse]:
    stmt = select(Permission).where(Permission.policy_id == policy_id).order_by(Permission.id)
    result = await session.execute(stmt)
    return [PermissionResponse.model_validate(p) for p in result.scalars().all()]
