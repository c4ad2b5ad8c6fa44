from datetime import datetime, timezone

import pytest

import lifecycle
from errors import InvalidTransition, OrderLocked, PermissionDenied
from lifecycle import Actor
from schemas import Order, OrderStatus, Role

NOW = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)

CREATOR = Actor("u-input", Role.INPUTER)
OTHER_INPUTER = Actor("u-other", Role.INPUTER)
ADMIN = Actor("u-admin", Role.ADMIN)
APPROVER = Actor("u-approver", Role.APPROVER)


def order(status=OrderStatus.DRAFT):
    return Order(title="Kartu nama", created_by=CREATOR.user_id, status=status)


def test_actor_normalizes_legacy_role_names():
    assert Actor("x", "INPUT_STAFF").role == Role.INPUTER
    assert Actor("x", "approval_staff").role == Role.APPROVER


def test_create_permission():
    assert lifecycle.can_create(CREATOR)
    assert lifecycle.can_create(ADMIN)
    assert not lifecycle.can_create(APPROVER)
    with pytest.raises(PermissionDenied):
        lifecycle.check_create(APPROVER)


def test_creator_submits_draft():
    submitted = lifecycle.submit(order(), CREATOR, NOW)
    assert submitted.status == OrderStatus.PENDING_APPROVAL
    assert submitted.submitted_at == NOW


@pytest.mark.parametrize("actor", [OTHER_INPUTER, ADMIN, APPROVER])
def test_only_creator_can_submit(actor):
    draft = order()
    with pytest.raises(PermissionDenied):
        lifecycle.submit(draft, actor, NOW)
    assert draft.status == OrderStatus.DRAFT


def test_submit_requires_draft():
    with pytest.raises(InvalidTransition):
        lifecycle.submit(order(OrderStatus.PENDING_APPROVAL), CREATOR, NOW)


@pytest.mark.parametrize("actor", [ADMIN, APPROVER])
def test_deciders_can_approve_and_reject(actor):
    approved = lifecycle.approve(order(OrderStatus.PENDING_APPROVAL), actor, NOW, note="ok")
    assert approved.status == OrderStatus.APPROVED
    assert approved.approved_at == NOW
    assert approved.approvals[-1].approver_id == actor.user_id
    assert approved.approvals[-1].note == "ok"

    rejected = lifecycle.reject(order(OrderStatus.PENDING_APPROVAL), actor, NOW)
    assert rejected.status == OrderStatus.REJECTED
    assert rejected.rejected_at == NOW
    assert rejected.approved_at is None


def test_inputer_cannot_approve_own_order():
    pending = lifecycle.submit(order(), CREATOR, NOW)
    with pytest.raises(PermissionDenied):
        lifecycle.approve(pending, CREATOR, NOW)
    with pytest.raises(PermissionDenied):
        lifecycle.reject(pending, CREATOR, NOW)
    assert pending.status == OrderStatus.PENDING_APPROVAL
    assert pending.approvals == []


@pytest.mark.parametrize("status", [OrderStatus.DRAFT, OrderStatus.APPROVED, OrderStatus.REJECTED])
def test_decisions_need_pending_order(status):
    with pytest.raises(InvalidTransition):
        lifecycle.approve(order(status), APPROVER, NOW)


def test_production_extension():
    started = lifecycle.start_production(order(OrderStatus.APPROVED), ADMIN, NOW)
    assert started.status == OrderStatus.IN_PROGRESS
    done = lifecycle.complete(started, APPROVER, NOW)
    assert done.status == OrderStatus.COMPLETED
    with pytest.raises(PermissionDenied):
        lifecycle.start_production(order(OrderStatus.APPROVED), CREATOR, NOW)
    with pytest.raises(InvalidTransition):
        lifecycle.complete(order(OrderStatus.APPROVED), ADMIN, NOW)


def test_edit_rules():
    lifecycle.check_edit(order(), CREATOR)
    lifecycle.check_edit(order(OrderStatus.PENDING_APPROVAL), CREATOR)
    lifecycle.check_edit(order(), ADMIN)

    with pytest.raises(PermissionDenied):
        lifecycle.check_edit(order(), OTHER_INPUTER)
    with pytest.raises(PermissionDenied):
        lifecycle.check_edit(order(), APPROVER)
    with pytest.raises(OrderLocked):
        lifecycle.check_edit(order(OrderStatus.PENDING_APPROVAL), CREATOR, strict=True)


@pytest.mark.parametrize("status", [OrderStatus.APPROVED, OrderStatus.REJECTED, OrderStatus.COMPLETED])
def test_closed_orders_are_locked_even_for_admin(status):
    assert not lifecycle.can_edit(order(status), ADMIN)
    with pytest.raises(OrderLocked):
        lifecycle.check_edit(order(status), ADMIN)


def test_delete_rules():
    for actor in (ADMIN, CREATOR, APPROVER):
        lifecycle.check_delete(order(), actor)
    with pytest.raises(OrderLocked):
        lifecycle.check_delete(order(OrderStatus.APPROVED), ADMIN)
    lifecycle.check_delete(order(OrderStatus.APPROVED), APPROVER, enforce_lock=False)


def test_progress_and_share_rules():
    lifecycle.check_progress(order(OrderStatus.APPROVED), CREATOR)
    with pytest.raises(OrderLocked):
        lifecycle.check_progress(order(OrderStatus.REJECTED), CREATOR)
    with pytest.raises(PermissionDenied):
        lifecycle.check_progress(order(), APPROVER)

    lifecycle.check_share(order(), ADMIN)
    with pytest.raises(PermissionDenied):
        lifecycle.check_share(order(), OTHER_INPUTER)


def test_status_label():
    assert lifecycle.status_label(OrderStatus.PENDING_APPROVAL) == "Menunggu Persetujuan"
    assert Order(title="x", created_by="u", status="pending").status == OrderStatus.PENDING_APPROVAL
