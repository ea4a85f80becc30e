"""
Policy, Permission and TeamPolicy models for organization-scoped RBAC.

- A Policy is a named bundle of permissions, unique by name inside an org.
- A Permission is one (resource, resource_type, action) grant owned by a policy.
- A TeamPolicy links a team to a policy inside an org.

References between these tables are checked by the stores, not by
database foreign keys.
"""
from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, UlidPrimaryKeyMixin


class Policy(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """
    Named set of permissions inside an organization.
    
    Examples: viewer, editor, billing_admin
    """
    __tablename__ = "policies"
    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_policies_org_id_name"),
    )
    
    org_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(190), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    
    def __repr__(self) -> str:
        return f"<Policy(id={self.id}, name={self.name!r}, org_id={self.org_id})>"


class Permission(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """
    Single grant belonging to a policy.
    
    Examples:
    - resource="dashboards:*", resource_type="dashboards", action="read"
    - resource="folders:uid:general", resource_type="folders", action="write"
    """
    __tablename__ = "policy_permissions"
    
    policy_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    org_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    resource: Mapped[str] = mapped_column(String(190), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(100), nullable=False)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    
    def __repr__(self) -> str:
        return (
            f"<Permission(id={self.id}, policy_id={self.policy_id}, "
            f"resource={self.resource}, action={self.action})>"
        )


class TeamPolicy(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """Assignment of a policy to a team. At most one per (org, team, policy)."""
    __tablename__ = "team_policies"
    __table_args__ = (
        UniqueConstraint("org_id", "team_id", "policy_id", name="uq_team_policies_org_team_policy"),
    )
    
    org_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    team_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    policy_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    
    def __repr__(self) -> str:
        return f"<TeamPolicy(org_id={self.org_id}, team_id={self.team_id}, policy_id={self.policy_id})>"
