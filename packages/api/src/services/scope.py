# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that each resource service
applies the same rules. The owner column differs per resource and per side
(``InvestorQuery.investor_id`` for investors, ``InvestorQuery.founder_id``
for founders, ``CallRequest.requester_id`` ...), so callers pass it in.
"""

from sqlalchemy import false

from ..schemas.auth import DataScope


def apply_data_scope(stmt, scope: DataScope, owner_column):
    """Apply data scope filtering to a SQLAlchemy query.

    Args:
        stmt: A SQLAlchemy select statement.
        scope: The caller's DataScope.
        owner_column: Column holding the owning user's id.

    Returns:
        The filtered statement. Full-access scopes are returned unchanged;
        a scope with neither flag matches nothing.
    """
    if scope.full_access:
        return stmt
    if scope.own_data_only and scope.user_id is not None:
        return stmt.where(owner_column == scope.user_id)
    return stmt.where(false())
