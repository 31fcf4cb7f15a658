"""
Admin audit trail.

Admin writes record who did what in the ``audit_logs`` table. The audit row
is secondary to the change itself, so a failed write is rolled back and
logged while the request still succeeds.
"""

from typing import Any, Dict, Optional

from qwiksale.core.database.repositories import SqlRepoBundle
from qwiksale.core.logging_config import get_logger

logger = get_logger(__name__)


async def record_audit(
    repos: SqlRepoBundle,
    action: str,
    actor: Optional[str],
    target: Optional[str],
    meta: Dict[str, Any],
) -> bool:
    """
    Write an audit row without failing the caller.

    Args:
        repos: Repository bundle of the current request
        action: Audit action name, e.g. ``SERVICE_FEATURE_TOGGLE``
        actor: Id of the admin performing the change
        target: Id of the user the change concerns
        meta: Extra details stored as JSON

    Returns:
        True when the row was written
    """
    try:
        await repos.audit_logs.record(action, actor_user_id=actor, target_user_id=target, meta=meta)
    except Exception as e:
        await repos.session.rollback()
        logger.warning(f"Could not write audit log {action} for {target}: {e}")
        return False
    return True
