"""
Seed script to populate the default policies of an organization.

Run this script after database initialization to create:
- Default policies (viewer, editor, admin)
- Their permissions

Each policy is created together with its permissions in one transaction.
Policies whose name is already taken in the org are left untouched,
so the script can be run repeatedly, including after a failed run.

Usage:
    python -m scripts.seed_policies <org_id>
"""
import argparse
import asyncio

from app.core import config
from app.core.database.engine import init_db
from app.core.database.session import SessionScope
from app.features.policies.exceptions import PolicyNameTakenError
from app.features.policies.schemas import CreatePolicyCommand, PermissionGrant
from app.features.policies.store import PolicyStore
from app.utils import configure_logging, get_logger


log = get_logger(__name__)


# (resource, resource_type, action)
DEFAULT_POLICIES = {
    "viewer": {
        "description": "Read-only access to dashboards and folders",
        "permissions": [
            ("dashboards:*", "dashboards", "read"),
            ("folders:*", "folders", "read"),
        ]
    },
    "editor": {
        "description": "Create and edit dashboards and folders",
        "permissions": [
            ("dashboards:*", "dashboards", "read"),
            ("dashboards:*", "dashboards", "write"),
            ("dashboards:*", "dashboards", "create"),
            ("folders:*", "folders", "read"),
            ("folders:*", "folders", "write"),
        ]
    },
    "admin": {
        "description": "Full access including teams and policies",
        "permissions": [
            ("dashboards:*", "dashboards", "read"),
            ("dashboards:*", "dashboards", "write"),
            ("dashboards:*", "dashboards", "create"),
            ("dashboards:*", "dashboards", "delete"),
            ("folders:*", "folders", "read"),
            ("folders:*", "folders", "write"),
            ("folders:*", "folders", "delete"),
            ("teams:*", "teams", "read"),
            ("teams:*", "teams", "write"),
            ("policies:*", "policies", "read"),
            ("policies:*", "policies", "write"),
        ]
    },
}


async def seed_policies(store: PolicyStore, org_id: str) -> dict[str, str]:
    """
    Create the default policies of an organization.
    
    Args:
        store: Policy store to write through
        org_id: Organization to seed
    
    Returns:
        Dictionary mapping newly created policy names to their IDs
    """
    log.info(f"Creating default policies for org {org_id}...")
    created = {}
    
    for name, policy_config in DEFAULT_POLICIES.items():
        grants = [
            PermissionGrant(resource=resource, resource_type=resource_type, action=action)
            for resource, resource_type, action in policy_config["permissions"]
        ]
        try:
            policy = await store.create_policy(
                CreatePolicyCommand(
                    org_id=org_id,
                    name=name,
                    description=policy_config["description"],
                    permissions=grants,
                )
            )
        except PolicyNameTakenError:
            log.debug(f"Policy '{name}' already exists, skipping")
            continue
        
        created[name] = policy.id
        log.info(f"Created policy '{name}' with {len(policy_config['permissions'])} permissions")
    
    log.info(f"Created {len(created)} policies")
    return created


async def main(org_id: str):
    await init_db()
    await seed_policies(PolicyStore(SessionScope()), org_id)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed default policies for an organization")
    parser.add_argument("org_id", help="Organization ID")
    args = parser.parse_args()
    
    configure_logging(config.LOG_LEVEL)
    asyncio.run(main(args.org_id))
