"""
Permission bypass for automated contexts.

Scheduled task runners and administrative command lines must be able to
index and delete documents without passing user permission checks.
"""

from functools import partial
from typing import Any

from ..models.config import ProcessContext
from .hooks import PermissionBypassFilter


def bypass_permission_checks_for_machines(
    bypass: bool,
    entity_id: Any,
    indexable_slug: str,
    context: ProcessContext
) -> bool:
    """
    Decide whether permission checks should be skipped.

    Args:
        bypass: The current filtered value
        entity_id: Id of the object being checked
        indexable_slug: Slug of the indexable
        context: Flags of the running process

    Returns:
        True in a scheduled task or admin CLI context, otherwise ``bypass``
    """
    if context.is_scheduled_task:
        return True

    if context.is_admin_cli:
        return True

    return bypass


def machine_bypass_filter(context: ProcessContext) -> PermissionBypassFilter:
    """Bind the policy to a process context for registration on SyncHooks"""
    return partial(bypass_permission_checks_for_machines, context=context)
