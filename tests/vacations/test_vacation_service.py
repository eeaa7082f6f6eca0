from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from vacation_system.core.enums import ActionOutcome, NotificationType, VacationStatus
from vacation_system.core.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    SchedulingConflictError,
    ValidationError,
)
from vacation_system.vacations.events import NotificationDispatcher
from vacation_system.vacations.service import VacationService

ADMIN = 100


def test_end_to_end_allowance_scenario(store, service):
    store.add_user(1, 10)

    first = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    assert store.get(first).status == VacationStatus.PENDING

    with pytest.raises(SchedulingConflictError) as exc_info:
        service.create_request(user_id=1, start_date=date(2024, 7, 3), end_date=date(2024, 7, 10))
    assert exc_info.value.status == VacationStatus.PENDING

    second = service.create_request(user_id=1, start_date=date(2024, 8, 1), end_date=date(2024, 8, 8))

    result = service.approve_request(request_id=first, admin_id=ADMIN, is_admin=True)
    assert result.outcome == ActionOutcome.ACTIONED
    assert result.days_deducted == 5
    assert store.days_left(1) == 5
    assert service.get_remaining_balance(user_id=1, year=2024).remaining_days == 5

    with pytest.raises(InsufficientBalanceError) as exc_info:
        service.approve_request(request_id=second, admin_id=ADMIN, is_admin=True)
    assert exc_info.value.available == 5
    assert exc_info.value.requested == 8
    assert store.get(second).status == VacationStatus.PENDING
    assert store.days_left(1) == 5


def test_create_persists_pending_with_clock_time(store, service, now):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2), notes="  beach  ")

    req = store.get(rid)
    assert req.status == VacationStatus.PENDING
    assert req.requested_at == now
    assert req.notes == "beach"
    assert req.approved_by is None and req.actioned_at is None


def test_create_rejects_reversed_range(store, service):
    store.add_user(1, 10)
    with pytest.raises(InvalidRangeError):
        service.create_request(user_id=1, start_date=date(2024, 7, 5), end_date=date(2024, 7, 1))


def test_create_rejects_range_without_working_days(store, service):
    store.add_user(1, 10)
    with pytest.raises(InvalidRangeError):
        service.create_request(user_id=1, start_date=date(2024, 7, 6), end_date=date(2024, 7, 7))


def test_create_rejects_when_balance_too_small(store, service):
    store.add_user(1, 3)
    with pytest.raises(InsufficientBalanceError) as exc_info:
        service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    assert exc_info.value.requested == 5
    assert not store.requests


def test_create_reports_days_left_after_approvals(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)
    assert store.days_left(1) == 5

    with pytest.raises(InsufficientBalanceError) as exc_info:
        service.create_request(user_id=1, start_date=date(2024, 9, 2), end_date=date(2024, 9, 9))
    err = exc_info.value
    assert (err.available, err.requested, err.already_approved) == (5, 8, 5)
    assert "Available: 5" in str(err)


def test_create_rejects_huge_range_on_balance(store, service):
    store.add_user(1, 22)
    with pytest.raises(InsufficientBalanceError):
        service.create_request(user_id=1, start_date=date(1, 1, 1), end_date=date(9999, 12, 31))
    assert not store.requests


def test_create_rejects_non_text_notes(store, service):
    store.add_user(1, 10)
    with pytest.raises(ValidationError):
        service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2), notes=42)


def test_create_for_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.create_request(user_id=42, start_date=date(2024, 7, 1), end_date=date(2024, 7, 1))


def test_rejected_request_frees_dates(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    service.reject_request(request_id=rid, admin_id=ADMIN, is_admin=True)

    again = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    assert again != rid


def test_reject_never_touches_balance_and_is_final(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))

    rejected = service.reject_request(request_id=rid, admin_id=ADMIN, admin_notes="team is short", is_admin=True)
    assert rejected.outcome == ActionOutcome.ACTIONED
    assert rejected.days_deducted == 0
    assert store.days_left(1) == 10

    retry = service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)
    assert retry.outcome == ActionOutcome.ALREADY_ACTIONED
    assert not retry.changed
    assert retry.event is None
    assert retry.request.status == VacationStatus.REJECTED
    assert store.days_left(1) == 10


def test_second_approval_is_a_no_op(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3))

    service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)
    replay = service.approve_request(request_id=rid, admin_id=ADMIN + 1, is_admin=True)

    assert replay.outcome == ActionOutcome.ALREADY_ACTIONED
    assert store.days_left(1) == 7
    assert store.get(rid).approved_by == ADMIN


def test_action_sets_audit_fields(store, service, now):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3), notes="mine")

    result = service.approve_request(request_id=rid, admin_id=ADMIN, admin_notes="enjoy", is_admin=True)

    stored = store.get(rid)
    assert stored == result.request
    assert stored.status == VacationStatus.APPROVED
    assert stored.approved_by == ADMIN
    assert stored.actioned_at == now
    assert stored.notes == "enjoy"


def test_action_without_admin_notes_keeps_requester_notes(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3), notes="mine")
    service.reject_request(request_id=rid, admin_id=ADMIN, is_admin=True)
    assert store.get(rid).notes == "mine"


def test_non_admin_cannot_action(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3))
    with pytest.raises(AuthorizationError):
        service.approve_request(request_id=rid, admin_id=1, is_admin=False)
    assert store.get(rid).status == VacationStatus.PENDING


def test_cannot_set_status_back_to_pending(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3))
    with pytest.raises(InvalidTransitionError):
        service.action_request(request_id=rid, admin_id=ADMIN, target_status="PENDING", is_admin=True)


def test_unknown_target_status(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3))
    with pytest.raises(ValidationError):
        service.action_request(request_id=rid, admin_id=ADMIN, target_status="MAYBE", is_admin=True)


def test_target_status_accepts_lowercase_tokens(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 3))
    result = service.action_request(request_id=rid, admin_id=ADMIN, target_status="approved", is_admin=True)
    assert result.request.status == VacationStatus.APPROVED


def test_action_on_missing_request(service):
    with pytest.raises(NotFoundError):
        service.approve_request(request_id=999, admin_id=ADMIN, is_admin=True)


def test_lost_compare_and_set_rolls_back_deduction(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))

    def other_admin_wins(request_id):
        store.requests[request_id] = replace(store.requests[request_id], status=VacationStatus.REJECTED)

    store.after_read = other_admin_wins
    result = service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)

    assert result.outcome == ActionOutcome.ALREADY_ACTIONED
    assert result.request.status == VacationStatus.REJECTED
    assert store.days_left(1) == 10
    assert store.rollbacks == 1


def test_events_emitted_for_each_transition(store, service, sink):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)
    service.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)

    assert [e.kind for e in sink.events] == [NotificationType.VACATION_REQUESTED, NotificationType.VACATION_APPROVED]
    approved = sink.events[1]
    assert approved.request_id == rid
    assert approved.user_id == 1
    assert approved.old_status == VacationStatus.PENDING
    assert approved.new_status == VacationStatus.APPROVED
    assert approved.actioned_by == ADMIN


def test_failing_notification_never_undoes_the_action(store, sink, now):
    class BrokenSink:
        def publish(self, event):
            raise RuntimeError("smtp down")

    svc = VacationService(store, store, notifier=NotificationDispatcher([BrokenSink(), sink]), clock=lambda: now)
    store.add_user(1, 10)
    rid = svc.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2))

    result = svc.approve_request(request_id=rid, admin_id=ADMIN, is_admin=True)

    assert result.changed
    assert store.get(rid).status == VacationStatus.APPROVED
    assert len(sink.events) == 2


def test_requests_for_user_filtered_by_year(store, service):
    store.add_user(1, 30)
    store.add_request(user_id=1, start_date=date(2023, 12, 28), end_date=date(2024, 1, 3))
    store.add_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))
    store.add_request(user_id=1, start_date=date(2025, 2, 3), end_date=date(2025, 2, 4))
    store.add_request(user_id=2, start_date=date(2024, 7, 1), end_date=date(2024, 7, 5))

    assert len(service.get_requests_for_user(user_id=1)) == 3
    in_2024 = service.get_requests_for_user(user_id=1, year=2024)
    assert [r.start_date for r in in_2024] == [date(2024, 7, 1), date(2023, 12, 28)]


def test_remaining_balance_defaults_to_clock_year(store, service):
    store.add_user(1, 12)
    summary = service.get_remaining_balance(user_id=1)
    assert summary.year == 2024
    assert summary.remaining_days == 12


def test_get_request_visible_to_owner_and_admin_only(store, service):
    store.add_user(1, 10)
    rid = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2))

    assert service.get_request(request_id=rid, user_id=1, is_admin=False).request_id == rid
    assert service.get_request(request_id=rid, user_id=ADMIN, is_admin=True).request_id == rid
    with pytest.raises(AuthorizationError):
        service.get_request(request_id=rid, user_id=2, is_admin=False)


def test_pending_queue_for_admins(store, service):
    store.add_user(1, 10)
    store.add_user(2, 10)
    a = service.create_request(user_id=1, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2))
    b = service.create_request(user_id=2, start_date=date(2024, 7, 1), end_date=date(2024, 7, 2))
    service.reject_request(request_id=a, admin_id=ADMIN, is_admin=True)

    assert [r.request_id for r in service.list_pending_requests(is_admin=True)] == [b]
    assert service.list_pending_requests(is_admin=True, user_ids=[1]) == []
    with pytest.raises(AuthorizationError):
        service.list_pending_requests(is_admin=False)
