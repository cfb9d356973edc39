import pytest

from config import TransitionPolicy
from api.app.domain import (
    ACTIVE_STATUSES,
    OrderStatus,
    can_transition,
    is_active,
    parse_status,
)

P = OrderStatus.PENDING
PR = OrderStatus.PREPARING
R = OrderStatus.READY
C = OrderStatus.COMPLETED
X = OrderStatus.CANCELLED


def test_parse_status_accepts_only_the_five_values():
    assert parse_status("ready") is R
    assert parse_status("done") is None
    assert parse_status(None) is None


def test_active_statuses_occupy_a_table():
    assert ACTIVE_STATUSES == {P, PR, R}
    assert is_active("pending")
    assert not is_active("completed")
    assert not is_active("cancelled")
    assert not is_active("bogus")


@pytest.mark.parametrize(
    "src,dst,allowed",
    [(P, PR, True), (PR, R, True), (R, C, True), (P, X, True),
     (P, R, False), (PR, X, False), (R, P, False), (C, P, False), (X, P, False)],
)
def test_forward_only_follows_pipeline(src, dst, allowed):
    assert can_transition(src, dst, TransitionPolicy.FORWARD_ONLY) is allowed


def test_terminal_locked_allows_shortcuts_but_never_reopens():
    policy = TransitionPolicy.TERMINAL_LOCKED
    assert can_transition(P, C, policy)
    assert can_transition(R, P, policy)
    assert not can_transition(C, P, policy)
    assert not can_transition(X, PR, policy)
    assert not can_transition(C, X, policy)


def test_permissive_allows_anything():
    assert can_transition(C, P, TransitionPolicy.PERMISSIVE)
    assert can_transition(X, R, TransitionPolicy.PERMISSIVE)


def test_default_policy_is_terminal_locked():
    assert can_transition(P, C)
    assert not can_transition(C, P)
