"""
Pydantic schemas for policy management.

Command and query objects passed into the stores, and the result
objects they return.
"""
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, ConfigDict, field_validator


class _Scoped(BaseModel):
    """Every command and query is bound to one organization."""
    org_id: str = Field(..., min_length=1, max_length=26, description="Organization ID")

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Policy Queries and Commands
# ============================================================================

class ListPoliciesQuery(_Scoped):
    """List every policy of an organization."""


class GetPolicyQuery(_Scoped):
    """Fetch one policy with its permissions."""
    policy_id: str = Field(..., min_length=1, max_length=26)


class GetPolicyPermissionsQuery(BaseModel):
    """Fetch the permissions of a policy. Not org-scoped."""
    policy_id: str = Field(..., min_length=1, max_length=26)

    model_config = ConfigDict(frozen=True)


class PermissionGrant(BaseModel):
    """One (resource, resource_type, action) grant, stored exactly as given."""
    resource: str = Field(..., min_length=1, max_length=190, description="Resource (e.g., 'dashboards:uid:abc')")
    resource_type: str = Field(..., min_length=1, max_length=100, description="Resource type (e.g., 'dashboards')")
    action: str = Field(..., min_length=1, max_length=100, description="Action (e.g., 'dashboards:read')")

    model_config = ConfigDict(frozen=True)


class CreatePolicyCommand(_Scoped):
    """
    Create a new policy.
    
    Permissions listed here are created in the same transaction as the
    policy, so either all of them exist afterwards or none do.
    """
    name: str = Field(..., min_length=1, max_length=190, description="Policy name, unique within the org")
    description: str = Field("", max_length=1000, description="Policy description")
    permissions: List[PermissionGrant] = Field(default_factory=list, description="Grants created with the policy")

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Reject names made only of whitespace. The name is kept as given."""
        if not v.strip():
            raise ValueError('Policy name must not be blank')
        return v


class DeletePolicyCommand(_Scoped):
    """Delete a policy along with its permissions and team assignments."""
    policy_id: str = Field(..., min_length=1, max_length=26)


# ============================================================================
# Permission Commands
# ============================================================================

class CreatePermissionCommand(_Scoped, PermissionGrant):
    """Attach a new grant to an existing policy."""
    policy_id: str = Field(..., min_length=1, max_length=26)


class DeletePermissionCommand(_Scoped):
    """Delete one permission."""
    permission_id: str = Field(..., min_length=1, max_length=26)


# ============================================================================
# Team Policy Queries and Commands
# ============================================================================

class GetTeamPoliciesQuery(_Scoped):
    """List the policies assigned to a team."""
    team_id: str = Field(..., min_length=1, max_length=26)


class AddTeamPolicyCommand(_Scoped):
    """Assign a policy to a team."""
    team_id: str = Field(..., min_length=1, max_length=26)
    policy_id: str = Field(..., min_length=1, max_length=26)


class RemoveTeamPolicyCommand(_Scoped):
    """Unassign a policy from a team."""
    team_id: str = Field(..., min_length=1, max_length=26)
    policy_id: str = Field(..., min_length=1, max_length=26)


# ============================================================================
# Results
# ============================================================================

class PermissionResponse(BaseModel):
    """Schema for permission response."""
    id: str
    policy_id: str
    org_id: str
    resource: str
    resource_type: str
    action: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class PolicyResponse(BaseModel):
    """Schema for policy response."""
    id: str
    org_id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class PolicyDetail(PolicyResponse):
    """
    Policy with its permissions.
    
    Team policy listings return summaries, where permissions stay empty.
    """
    permissions: List[PermissionResponse] = []
    
    model_config = ConfigDict(from_attributes=True)
