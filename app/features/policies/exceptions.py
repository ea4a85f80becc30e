"""
Error kinds raised by the policy stores.

Callers can catch the broad kinds (NotFoundError, AlreadyExistsError)
or the specific subclasses. StorageError is raised by the session scope
for unclassified database failures and is re-exported here.
"""
from app.core.database.errors import StorageError

__all__ = [
    "RBACError",
    "NotFoundError",
    "PolicyNotFoundError",
    "TeamNotFoundError",
    "TeamPolicyNotFoundError",
    "AlreadyExistsError",
    "PolicyNameTakenError",
    "TeamPolicyAlreadyAddedError",
    "StorageError",
]


class RBACError(Exception):
    """Base class for every policy store error."""


# ============================================================================
# Not found
# ============================================================================

class NotFoundError(RBACError):
    """A scoped lookup matched no row where exactly one was required."""


class PolicyNotFoundError(NotFoundError):
    def __init__(self, policy_id: str, org_id: str):
        self.policy_id = policy_id
        self.org_id = org_id
        super().__init__(f"policy '{policy_id}' not found in org '{org_id}'")


class TeamNotFoundError(NotFoundError):
    def __init__(self, team_id: str, org_id: str):
        self.team_id = team_id
        self.org_id = org_id
        super().__init__(f"team '{team_id}' not found in org '{org_id}'")


class TeamPolicyNotFoundError(NotFoundError):
    """The team is not linked to the policy."""

    def __init__(self, org_id: str, team_id: str, policy_id: str):
        self.org_id = org_id
        self.team_id = team_id
        self.policy_id = policy_id
        super().__init__(f"policy '{policy_id}' is not assigned to team '{team_id}' in org '{org_id}'")


# ============================================================================
# Already exists
# ============================================================================

class AlreadyExistsError(RBACError):
    """A uniqueness rule would be broken."""


class PolicyNameTakenError(AlreadyExistsError):
    def __init__(self, name: str, org_id: str):
        self.name = name
        self.org_id = org_id
        super().__init__(f"policy with the name '{name}' already exists in org '{org_id}'")


class TeamPolicyAlreadyAddedError(AlreadyExistsError):
    def __init__(self, org_id: str, team_id: str, policy_id: str):
        self.org_id = org_id
        self.team_id = team_id
        self.policy_id = policy_id
        super().__init__(f"policy '{policy_id}' is already assigned to team '{team_id}' in org '{org_id}'")

