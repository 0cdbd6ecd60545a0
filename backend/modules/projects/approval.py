"""
Project approval state machine.

Every state-changing operation on a project is an ApprovalAction. Applying
an action sets the resulting status (and approval metadata) on the project
and produces the ApprovalRecord that must be persisted together with it.

    create  -> pending
    update  -> pending   (from any status; approval metadata cleared)
    approve -> approved  (from any status)
    reject  -> rejected  (from any status)
    delete  -> no project remains
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from .exceptions import InvalidDecisionError
from .models import (
    ApprovalAction,
    ApprovalInfo,
    ApprovalRecord,
    Project,
    ProjectStatus,
)

TARGET_STATUS: dict[ApprovalAction, Optional[ProjectStatus]] = {
    ApprovalAction.CREATE: ProjectStatus.PENDING,
    ApprovalAction.UPDATE: ProjectStatus.PENDING,
    ApprovalAction.APPROVE: ProjectStatus.APPROVED,
    ApprovalAction.REJECT: ProjectStatus.REJECTED,
    ApprovalAction.DELETE: None,
}

DEFAULT_COMMENTS: dict[ApprovalAction, str] = {
    ApprovalAction.CREATE: "Project created",
    ApprovalAction.UPDATE: "Project updated",
    ApprovalAction.DELETE: "Project deleted",
}

_DECISIONS: dict[str, ApprovalAction] = {
    ProjectStatus.APPROVED.value: ApprovalAction.APPROVE,
    ProjectStatus.REJECTED.value: ApprovalAction.REJECT,
}


def parse_decision(decision: str) -> ApprovalAction:
    """Map an admin decision ('approved' / 'rejected') to its action."""
    action = _DECISIONS.get((decision or "").strip().lower())
    if action is None:
        raise InvalidDecisionError(decision)
    return action


def apply_action(
    project: Project,
    action: ApprovalAction,
    operator: str,
    comments: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ApprovalRecord:
    """
    Transition ``project`` in place and return the audit record for it.

    For DELETE the project is left untouched; the record carries the
    status it had when it was removed.
    """
    now = now or datetime.now(timezone.utc)
    previous = None if action == ApprovalAction.CREATE else project.status
    target = TARGET_STATUS[action]

    if target is not None:
        project.status = target
        project.updated_at = now
        project.stats.updated_at = now

    if action in (ApprovalAction.APPROVE, ApprovalAction.REJECT):
        project.approval_info = ApprovalInfo(
            approver=operator,
            approved_at=now,
            comments=comments,
        )
    elif target == ProjectStatus.PENDING:
        project.approval_info = None

    return ApprovalRecord(
        id=str(uuid.uuid4()),
        project_id=project.id,
        action=action,
        operator=operator,
        previous_status=previous,
        new_status=target,
        comments=comments if comments is not None else DEFAULT_COMMENTS.get(action),
        created_at=now,
    )
