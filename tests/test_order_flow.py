# tests/test_order_flow.py
import pytest

from schemas import AssemblyStatus, OrderStatus
from services.order_flow import can_transition_assembly, can_transition_order

S = OrderStatus


@pytest.mark.parametrize(
    "current,target",
    [
        (S.pending, S.paid),
        (S.pending, S.processing),  # ข้ามขั้นได้
        (S.paid, S.completed),
        (S.processing, S.completed),
        (S.pending, S.failed),
        (S.processing, S.cancelled),
        (S.paid, S.paid),
    ],
)
def test_allowed_order_transitions(current, target):
    assert can_transition_order(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (S.paid, S.pending),
        (S.completed, S.processing),
        (S.completed, S.cancelled),
        (S.failed, S.pending),
        (S.cancelled, S.paid),
    ],
)
def test_rejected_order_transitions(current, target):
    assert not can_transition_order(current, target)


def test_assembly_transitions():
    A = AssemblyStatus
    assert can_transition_assembly(None, A.scheduled)
    assert not can_transition_assembly(None, A.completed)
    assert can_transition_assembly(A.scheduled, A.scheduled)
    assert can_transition_assembly(A.scheduled, A.completed)
    assert not can_transition_assembly(A.completed, A.scheduled)
