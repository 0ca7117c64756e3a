from datetime import datetime
from typing import Any, Optional

from ..database.models import VerificationStatus

# pending is the only state with outgoing edges
ALLOWED_TRANSITIONS = {
    VerificationStatus.PENDING: {
        VerificationStatus.APPROVED,
        VerificationStatus.REJECTED,
        VerificationStatus.AUTO_APPROVED,
    },
}

VERIFIED_STATUSES = {VerificationStatus.APPROVED, VerificationStatus.AUTO_APPROVED}


class InvalidTransitionError(ValueError):
    def __init__(self, current: VerificationStatus, target: VerificationStatus):
        super().__init__(f"Cannot change verification status from {current.value} to {target.value}.")
        self.current = current
        self.target = target


def can_transition(current: str, target: str) -> bool:
    return VerificationStatus(target) in ALLOWED_TRANSITIONS.get(VerificationStatus(current), set())


def can_edit(catch: Any) -> bool:
    """A catch can be edited until a verification decision is recorded."""
    return VerificationStatus(catch.verification_status) == VerificationStatus.PENDING


def is_verified(catch: Any) -> bool:
    return VerificationStatus(catch.verification_status) in VERIFIED_STATUSES


def transition(
    catch: Any,
    target: VerificationStatus,
    *,
    verifier_id: Any = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """Record a verification decision on a catch, or raise InvalidTransitionError."""
    current = VerificationStatus(catch.verification_status)
    target = VerificationStatus(target)
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)

    catch.verification_status = target.value
    catch.verified_by = verifier_id
    catch.verified_at = now or datetime.utcnow()
    if notes is not None:
        catch.verification_notes = notes
