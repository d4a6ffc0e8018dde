"""Approval state machine.

Pure transition rules for the chart moderation lifecycle:

    draft ──submit──▶ pending ──approve──▶ approved
                       │  ▲
          request_changes  resubmit
                       ▼  │
                     draft / rejected ◀──reject── pending

`approved` is never reachable from `rejected` without passing through
`pending` again.
"""

from chart_registry.schemas.charts import ApprovalAction, ApprovalStatus

TRANSITIONS: dict[ApprovalStatus, list[ApprovalStatus]] = {
    ApprovalStatus.DRAFT: [ApprovalStatus.PENDING],
    ApprovalStatus.PENDING: [ApprovalStatus.APPROVED, ApprovalStatus.REJECTED, ApprovalStatus.DRAFT],
    ApprovalStatus.REJECTED: [ApprovalStatus.PENDING],
    ApprovalStatus.APPROVED: [],
}

ACTION_TARGETS: dict[ApprovalAction, ApprovalStatus] = {
    ApprovalAction.APPROVE: ApprovalStatus.APPROVED,
    ApprovalAction.REJECT: ApprovalStatus.REJECTED,
    ApprovalAction.REQUEST_CHANGES: ApprovalStatus.DRAFT,
}


def initial_status(request_approval: bool) -> ApprovalStatus:
    return ApprovalStatus.PENDING if request_approval else ApprovalStatus.APPROVED


def can_transition(current: ApprovalStatus, target: ApprovalStatus) -> bool:
    return target in TRANSITIONS.get(current, [])


def target_for(action: ApprovalAction) -> ApprovalStatus:
    return ACTION_TARGETS[action]


def is_valid_walk(states: list[ApprovalStatus]) -> bool:
    """True if every consecutive pair in states is an allowed transition."""
    return all(can_transition(a, b) for a, b in zip(states, states[1:]))
