import re
from datetime import datetime, timezone

import pytest

from orderflow.core.errors import BusinessRuleViolation
from orderflow.services.order_status import ORDER_TRANSITIONS, can_transition, ensure_transition
from orderflow.services.orders import generate_order_number


@pytest.mark.parametrize(
    "current,target",
    [
        ("draft", "pending"),
        ("pending", "draft"),
        ("confirmed", "in_production"),
        ("ready", "completed"),
        ("delivered", "completed"),
        ("in_production", "cancelled"),
    ],
)
def test_allowed_transitions(current, target) -> None:
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("draft", "completed"),
        ("completed", "draft"),
        ("cancelled", "pending"),
        ("delivered", "cancelled"),
        ("pending", "ready"),
    ],
)
def test_rejected_transitions(current, target) -> None:
    with pytest.raises(BusinessRuleViolation) as exc:
        ensure_transition(current, target)
    assert exc.value.message == f"Invalid status transition from {current} to {target}"
    assert exc.value.status_code == 400


def test_every_status_may_stay_put() -> None:
    assert all(can_transition(s, s) for s in ORDER_TRANSITIONS)


def test_terminal_states() -> None:
    assert ORDER_TRANSITIONS["completed"] == frozenset()
    assert ORDER_TRANSITIONS["cancelled"] == frozenset()


def test_order_number_format() -> None:
    number = generate_order_number(datetime(2026, 3, 14, 23, 59, tzinfo=timezone.utc))
    assert re.fullmatch(r"ORD-20260314-[0-9A-F]{8}", number)
