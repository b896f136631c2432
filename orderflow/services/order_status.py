"""Order lifecycle transitions."""
from __future__ import annotations

from typing import Dict, FrozenSet

from orderflow.core.errors import BusinessRuleViolation

ORDER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "draft": frozenset({"pending", "cancelled"}),
    "pending": frozenset({"draft", "confirmed", "cancelled"}),
    "confirmed": frozenset({"in_production", "ready", "cancelled"}),
    "in_production": frozenset({"ready", "cancelled"}),
    "ready": frozenset({"delivered", "completed", "cancelled"}),
    "delivered": frozenset({"completed"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}

# Orders in these states are kept for the books.
UNDELETABLE_STATUSES = frozenset({"completed", "delivered"})


def can_transition(current: str, target: str) -> bool:
    if current == target:
        return True
    return target in ORDER_TRANSITIONS.get(current, frozenset())


# PUBLIC_INTERFACE
def ensure_transition(current: str, target: str) -> None:
    """Raise BusinessRuleViolation unless current -> target is an allowed edge."""
    if not can_transition(current, target):
        raise BusinessRuleViolation(f"Invalid status transition from {current} to {target}")
