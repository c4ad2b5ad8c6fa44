"""
Order status state machine and role permissions.

    DRAFT --submit--> PENDING_APPROVAL --approve--> APPROVED --start--> IN_PROGRESS --complete--> COMPLETED
                                       \\-reject--> REJECTED

Every function takes the acting user explicitly and returns an updated copy
of the order, or raises PermissionDenied / InvalidTransition / OrderLocked.
Nothing here touches storage.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from errors import InvalidTransition, OrderLocked, PermissionDenied
from schemas import Approval, Order, OrderStatus, Role, normalize_role


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: Role

    def __post_init__(self):
        object.__setattr__(self, "role", normalize_role(self.role))


MUTABLE_STATUSES = frozenset({OrderStatus.DRAFT, OrderStatus.PENDING_APPROVAL})
STRICT_MUTABLE_STATUSES = frozenset({OrderStatus.DRAFT})
PROGRESS_STATUSES = frozenset({
    OrderStatus.DRAFT,
    OrderStatus.PENDING_APPROVAL,
    OrderStatus.APPROVED,
    OrderStatus.IN_PROGRESS,
})

CREATOR_ROLES = frozenset({Role.ADMIN, Role.INPUTER})
DECIDER_ROLES = frozenset({Role.ADMIN, Role.APPROVER})
DELETER_ROLES = frozenset({Role.ADMIN, Role.INPUTER, Role.APPROVER})

STATUS_LABELS = {
    OrderStatus.DRAFT: "Draft",
    OrderStatus.PENDING_APPROVAL: "Menunggu Persetujuan",
    OrderStatus.APPROVED: "Disetujui",
    OrderStatus.IN_PROGRESS: "Dalam Proses",
    OrderStatus.COMPLETED: "Selesai",
    OrderStatus.REJECTED: "Ditolak",
}


def status_label(status: OrderStatus) -> str:
    return STATUS_LABELS.get(status, str(status))


def is_owner(order: Order, actor: Actor) -> bool:
    return order.created_by == actor.user_id


def can_create(actor: Actor) -> bool:
    return actor.role in CREATOR_ROLES


def can_decide(actor: Actor) -> bool:
    return actor.role in DECIDER_ROLES


def is_mutable(order: Order, strict: bool = False) -> bool:
    allowed = STRICT_MUTABLE_STATUSES if strict else MUTABLE_STATUSES
    return order.status in allowed


def can_edit(order: Order, actor: Actor, strict: bool = False) -> bool:
    try:
        check_edit(order, actor, strict=strict)
    except (PermissionDenied, OrderLocked):
        return False
    return True


def check_create(actor: Actor) -> None:
    if not can_create(actor):
        raise PermissionDenied("Insufficient permissions")


def check_edit(order: Order, actor: Actor, strict: bool = False) -> None:
    """Editing requires ADMIN or the INPUTER who created the order, on a mutable order."""
    if actor.role == Role.APPROVER:
        raise PermissionDenied("Approvers cannot edit orders")
    if actor.role != Role.ADMIN and not is_owner(order, actor):
        raise PermissionDenied("Only the creator or an admin can edit this order")
    if not is_mutable(order, strict=strict):
        raise OrderLocked(f"Order is {order.status.value} and can no longer be edited")


def check_delete(order: Order, actor: Actor, enforce_lock: bool = True) -> None:
    if actor.role not in DELETER_ROLES:
        raise PermissionDenied(f"Role {actor.role.value} cannot delete orders")
    if enforce_lock and not is_mutable(order):
        raise OrderLocked(f"Order is {order.status.value} and can no longer be deleted")


def check_progress(order: Order, actor: Actor) -> None:
    if actor.role != Role.ADMIN and not is_owner(order, actor):
        raise PermissionDenied("Only the creator or an admin can record progress")
    if order.status not in PROGRESS_STATUSES:
        raise OrderLocked(f"Progress cannot be recorded on a {order.status.value} order")


def check_share(order: Order, actor: Actor) -> None:
    if actor.role != Role.ADMIN and not is_owner(order, actor):
        raise PermissionDenied("Only the creator or an admin can share this order")


def _require_status(order: Order, expected: OrderStatus, action: str) -> None:
    if order.status != expected:
        raise InvalidTransition(
            f"Cannot {action} an order in status {order.status.value} (expected {expected.value})"
        )


def submit(order: Order, actor: Actor, now: datetime) -> Order:
    if not is_owner(order, actor):
        raise PermissionDenied("Only the creator can submit this order for approval")
    _require_status(order, OrderStatus.DRAFT, "submit")
    return order.model_copy(update={
        "status": OrderStatus.PENDING_APPROVAL,
        "submitted_at": now,
        "updated_at": now,
    })


def _decide(order: Order, actor: Actor, decision: OrderStatus, now: datetime, note: Optional[str]) -> Order:
    if not can_decide(actor):
        raise PermissionDenied("Only approvers or admins can approve or reject orders")
    action = "approve" if decision == OrderStatus.APPROVED else "reject"
    _require_status(order, OrderStatus.PENDING_APPROVAL, action)

    stamp = "approved_at" if decision == OrderStatus.APPROVED else "rejected_at"
    record = Approval(approver_id=actor.user_id, status=decision, note=note, decided_at=now)
    return order.model_copy(update={
        "status": decision,
        stamp: now,
        "updated_at": now,
        "approvals": [*order.approvals, record],
    })


def approve(order: Order, actor: Actor, now: datetime, note: Optional[str] = None) -> Order:
    return _decide(order, actor, OrderStatus.APPROVED, now, note)


def reject(order: Order, actor: Actor, now: datetime, note: Optional[str] = None) -> Order:
    return _decide(order, actor, OrderStatus.REJECTED, now, note)


def start_production(order: Order, actor: Actor, now: datetime) -> Order:
    if not can_decide(actor):
        raise PermissionDenied("Only approvers or admins can start production")
    _require_status(order, OrderStatus.APPROVED, "start")
    return order.model_copy(update={
        "status": OrderStatus.IN_PROGRESS,
        "started_at": now,
        "updated_at": now,
    })


def complete(order: Order, actor: Actor, now: datetime) -> Order:
    if not can_decide(actor):
        raise PermissionDenied("Only approvers or admins can complete orders")
    _require_status(order, OrderStatus.IN_PROGRESS, "complete")
    return order.model_copy(update={
        "status": OrderStatus.COMPLETED,
        "completed_at": now,
        "updated_at": now,
    })
