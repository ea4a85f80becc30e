"""
Policy management feature module.

Stores organization-scoped policies, the permissions each policy grants,
and the assignment of policies to teams.
"""
