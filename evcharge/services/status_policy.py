"""
Charger status policy.

The only legal charger status changes are listed in ALLOWED_TRANSITIONS. The
machine has no terminal state, but a charger that is OUT_OF_SERVICE must be
restored to AVAILABLE before it can charge again.
"""
from datetime import datetime
from typing import Dict, FrozenSet

from ..core.errors import BusinessError, ErrorCode
from ..models.charger import Charger, ChargerStatus

ALLOWED_TRANSITIONS: Dict[ChargerStatus, FrozenSet[ChargerStatus]] = {
    ChargerStatus.AVAILABLE: frozenset({ChargerStatus.CHARGING, ChargerStatus.OUT_OF_SERVICE}),
    ChargerStatus.CHARGING: frozenset({ChargerStatus.AVAILABLE, ChargerStatus.OUT_OF_SERVICE}),
    ChargerStatus.OUT_OF_SERVICE: frozenset({ChargerStatus.AVAILABLE}),
}


def allowed_targets(current: ChargerStatus) -> FrozenSet[ChargerStatus]:
    return ALLOWED_TRANSITIONS.get(current, frozenset())


def can_transition(current: ChargerStatus, target: ChargerStatus) -> bool:
    return target in allowed_targets(current)


def apply_transition(charger: Charger, target: ChargerStatus) -> None:
    """
    Move a charger to a new status.

    Raises:
        BusinessError(INVALID_STATUS_TRANSITION): If the edge is not allowed
    """
    if not can_transition(charger.status, target):
        raise BusinessError(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Cannot change charger status from {charger.status.value} to {target.value}",
        )
    charger.status = target
    charger.last_status_changed_at = datetime.utcnow()
