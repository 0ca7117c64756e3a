"""Tests for the catch verification state machine."""

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from anidex.database.models import VerificationStatus
from anidex.services.verification import (
    InvalidTransitionError,
    can_edit,
    can_transition,
    is_verified,
    transition,
)

TERMINAL = [VerificationStatus.APPROVED, VerificationStatus.REJECTED, VerificationStatus.AUTO_APPROVED]


def _catch(status: VerificationStatus = VerificationStatus.PENDING) -> SimpleNamespace:
    return SimpleNamespace(
        verification_status=status.value,
        verified_by=None,
        verified_at=None,
        verification_notes=None,
    )


class TestTransitions:
    """Test which status changes are allowed."""

    @pytest.mark.parametrize("target", TERMINAL)
    def test_pending_can_move_to_any_decision(self, target: VerificationStatus) -> None:
        assert can_transition(VerificationStatus.PENDING, target)

    @pytest.mark.parametrize("current", TERMINAL)
    @pytest.mark.parametrize("target", list(VerificationStatus))
    def test_decisions_are_final(self, current: VerificationStatus, target: VerificationStatus) -> None:
        assert not can_transition(current, target)

    def test_pending_to_pending_is_not_a_transition(self) -> None:
        assert not can_transition("pending", "pending")

    def test_accepts_plain_strings(self) -> None:
        assert can_transition("pending", "approved")


class TestTransition:
    """Test recording a decision on a catch."""

    def test_records_verifier_and_time(self) -> None:
        catch = _catch()
        now = datetime(2024, 7, 1, 9, 30)

        transition(catch, VerificationStatus.APPROVED, verifier_id="mod-1", notes="Clear photo", now=now)

        assert catch.verification_status == "approved"
        assert catch.verified_by == "mod-1"
        assert catch.verified_at == now
        assert catch.verification_notes == "Clear photo"

    def test_notes_untouched_when_not_given(self) -> None:
        catch = _catch()
        catch.verification_notes = "earlier"
        transition(catch, VerificationStatus.REJECTED, now=datetime(2024, 7, 1))
        assert catch.verification_notes == "earlier"

    def test_rejects_change_after_decision(self) -> None:
        catch = _catch(VerificationStatus.REJECTED)

        with pytest.raises(InvalidTransitionError) as exc_info:
            transition(catch, VerificationStatus.APPROVED)

        assert exc_info.value.current == VerificationStatus.REJECTED
        assert exc_info.value.target == VerificationStatus.APPROVED
        assert "from rejected to approved" in str(exc_info.value)
        assert catch.verification_status == "rejected"


class TestEditability:
    """Test which catches the owner may still change."""

    def test_pending_is_editable(self) -> None:
        assert can_edit(_catch())
        assert not is_verified(_catch())

    @pytest.mark.parametrize("status", TERMINAL)
    def test_decided_is_not_editable(self, status: VerificationStatus) -> None:
        assert not can_edit(_catch(status))

    def test_verified_statuses(self) -> None:
        assert is_verified(_catch(VerificationStatus.APPROVED))
        assert is_verified(_catch(VerificationStatus.AUTO_APPROVED))
        assert not is_verified(_catch(VerificationStatus.REJECTED))
