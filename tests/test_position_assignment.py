"""Tests for single-submission position assignment and displacement."""

from __future__ import annotations

import pytest

from app.models.member import OrgRole
from app.models.submission import Submission, SubmissionStatus
from app.services.errors import (
    EXCHANGE_RATE_FAILURE_MESSAGE,
    ExchangeRateUnavailableError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from app.services.position_assignment import (
    INVALID_AMOUNT,
    INVALID_POSITION,
    assign_position,
    build_position_message,
    winning_amount_for_position,
)
from tests.helpers import (
    FakeGateway,
    capability_for,
    make_bounty,
    make_organization,
    make_submission,
    make_user,
)


@pytest.fixture
def bounty(db):
    org = make_organization(db)
    return make_bounty(db, org, winnings={"1": 1000, "2": 500}, token="DOT")


@pytest.fixture
def alice(db):
    return make_user(db, "alice", email="alice@example.com")


@pytest.fixture
def bob(db):
    return make_user(db, "bob", email="bob@example.com")


def _winner_fields(s: Submission) -> tuple:
    return (s.position, s.winning_amount, s.winning_amount_usd, s.is_winner, s.winner_user_id)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestBuildPositionMessage:
    def test_cleared(self):
        assert build_position_message(None, False) == "Position cleared successfully"

    def test_assigned(self):
        assert build_position_message(1, False) == "Position 1 assigned successfully"

    def test_reassigned(self):
        assert build_position_message(2, True) == "Position 2 reassigned successfully"


class TestWinningAmountForPosition:
    def test_returns_float_amount(self):
        assert winning_amount_for_position({"1": 1000, "2": 500}, 2) == 500.0

    def test_accepts_fractional_amount(self):
        assert winning_amount_for_position({"1": 12.5}, 1) == 12.5

    def test_missing_key(self):
        with pytest.raises(InvalidInputError) as exc_info:
            winning_amount_for_position({"1": 1000}, 3)
        assert exc_info.value.error == INVALID_POSITION

    def test_no_winnings_table(self):
        with pytest.raises(InvalidInputError) as exc_info:
            winning_amount_for_position(None, 1)
        assert exc_info.value.error == INVALID_POSITION

    @pytest.mark.parametrize("value", [0, -5, "100", None, True])
    def test_rejects_non_positive_or_non_numeric(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            winning_amount_for_position({"1": value}, 1)
        assert exc_info.value.error == INVALID_AMOUNT


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


class TestAssignPosition:
    def test_fresh_assignment(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)

        result = assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 1)

        db.refresh(s)
        assert s.position == 1
        assert s.winning_amount == 1000
        assert s.winning_amount_usd == 7000
        assert s.is_winner is True
        assert s.winner_user_id == alice.id
        assert s.status == SubmissionStatus.SUBMITTED
        assert result.displaced is False
        assert result.message == "Position 1 assigned successfully"
        assert gateway.calls == [["DOT"]]

    def test_displacement(self, db, bounty, alice, bob, gateway):
        holder = make_submission(db, bounty, alice, position=1, amount=1000, amount_usd=7000)
        challenger = make_submission(db, bounty, bob)

        result = assign_position(
            db, capability_for(bounty), gateway, bounty.id, challenger.id, 1
        )

        db.refresh(holder)
        db.refresh(challenger)
        assert _winner_fields(holder) == (None, None, None, False, None)
        assert holder.status == SubmissionStatus.SUBMITTED
        assert challenger.position == 1
        assert challenger.is_winner is True
        assert challenger.winning_amount_usd == 7000
        assert result.displaced is True
        assert result.displaced_submission_id == holder.id
        assert result.message == "Position 1 reassigned successfully"

    def test_displaced_status_is_untouched(self, db, bounty, alice, bob, gateway):
        """A holder in any status is displaced; its lifecycle status stays."""
        holder = make_submission(
            db, bounty, alice, status=SubmissionStatus.SPAM, position=2, amount=500
        )
        challenger = make_submission(db, bounty, bob)

        assign_position(db, capability_for(bounty), gateway, bounty.id, challenger.id, 2)

        db.refresh(holder)
        assert holder.position is None
        assert holder.is_winner is False
        assert holder.status == SubmissionStatus.SPAM

    def test_move_to_another_position(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice, position=1, amount=1000, amount_usd=7000)

        result = assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 2)

        db.refresh(s)
        assert s.position == 2
        assert s.winning_amount == 500
        assert s.winning_amount_usd == 3500
        assert result.displaced is False

    def test_reassigning_same_position_is_idempotent(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)
        cap = capability_for(bounty)

        assign_position(db, cap, gateway, bounty.id, s.id, 1)
        db.refresh(s)
        first = _winner_fields(s)
        result = assign_position(db, cap, gateway, bounty.id, s.id, 1)
        db.refresh(s)

        assert _winner_fields(s) == first
        assert result.displaced is False

    def test_clear_position(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice, position=1, amount=1000, amount_usd=7000)

        result = assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, None)

        db.refresh(s)
        assert _winner_fields(s) == (None, None, None, False, None)
        assert result.message == "Position cleared successfully"
        assert gateway.calls == []

    def test_clear_is_idempotent(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)
        cap = capability_for(bounty)

        assign_position(db, cap, gateway, bounty.id, s.id, None)
        assign_position(db, cap, gateway, bounty.id, s.id, None)

        db.refresh(s)
        assert _winner_fields(s) == (None, None, None, False, None)

    def test_assign_then_clear_restores_state(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)
        db.refresh(s)
        before = _winner_fields(s)
        cap = capability_for(bounty)

        assign_position(db, cap, gateway, bounty.id, s.id, 1)
        assign_position(db, cap, gateway, bounty.id, s.id, None)

        db.refresh(s)
        assert _winner_fields(s) == before

    def test_curator_may_assign(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)
        cap = capability_for(bounty, role=None, is_curator=True)

        assign_position(db, cap, gateway, bounty.id, s.id, 1)

        db.refresh(s)
        assert s.position == 1


class TestAssignPositionRejections:
    def test_plain_member_is_forbidden(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)

        with pytest.raises(ForbiddenError) as exc_info:
            assign_position(
                db, capability_for(bounty, role=OrgRole.MEMBER), gateway, bounty.id, s.id, 1
            )

        assert exc_info.value.error == "You don't have permission to assign positions"
        db.refresh(s)
        assert s.position is None

    def test_unknown_bounty(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)

        with pytest.raises(NotFoundError) as exc_info:
            assign_position(db, capability_for(bounty), gateway, bounty.id + 99, s.id, 1)

        assert exc_info.value.error == "Bounty not found"

    def test_submission_from_other_bounty(self, db, bounty, alice, gateway):
        other = make_bounty(db, make_organization(db, "Other"), title="Other bounty")
        s = make_submission(db, other, alice)

        with pytest.raises(NotFoundError) as exc_info:
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 1)

        assert exc_info.value.error == "Submission not found"

    @pytest.mark.parametrize(
        "status",
        [SubmissionStatus.APPROVED, SubmissionStatus.SPAM, SubmissionStatus.REJECTED],
    )
    def test_submission_not_submitted(self, db, bounty, alice, gateway, status):
        s = make_submission(db, bounty, alice, status=status)

        with pytest.raises(NotFoundError):
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 1)
        with pytest.raises(NotFoundError):
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, None)

    def test_position_outside_winnings(self, db, bounty, alice, gateway):
        s = make_submission(db, bounty, alice)

        with pytest.raises(InvalidInputError) as exc_info:
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 3)

        assert exc_info.value.error == INVALID_POSITION
        assert gateway.calls == []
        db.refresh(s)
        assert s.position is None

    def test_zero_prize_for_position(self, db, alice, gateway):
        bounty = make_bounty(db, make_organization(db), winnings={"1": 1000, "2": 0})
        s = make_submission(db, bounty, alice)

        with pytest.raises(InvalidInputError) as exc_info:
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 2)

        assert exc_info.value.error == INVALID_AMOUNT


class TestAssignPositionExchangeRateFailures:
    def test_bounty_without_token_never_calls_gateway(self, db, alice, gateway):
        bounty = make_bounty(db, make_organization(db), token=None)
        s = make_submission(db, bounty, alice)

        with pytest.raises(ExchangeRateUnavailableError) as exc_info:
            assign_position(db, capability_for(bounty), gateway, bounty.id, s.id, 1)

        assert exc_info.value.status_code == 500
        assert exc_info.value.error == EXCHANGE_RATE_FAILURE_MESSAGE
        assert gateway.calls == []
        db.refresh(s)
        assert s.position is None

    @pytest.mark.parametrize("rates", [{}, {"DOT": 0.0}, {"DOT": -1.5}])
    def test_missing_or_non_positive_rate(self, db, bounty, alice, rates):
        s = make_submission(db, bounty, alice)

        with pytest.raises(ExchangeRateUnavailableError):
            assign_position(db, capability_for(bounty), FakeGateway(rates), bounty.id, s.id, 1)

        db.refresh(s)
        assert s.position is None
        assert s.is_winner is False

    def test_gateway_failure_rolls_back_displacement(self, db, bounty, alice, bob):
        holder = make_submission(db, bounty, alice, position=1, amount=1000, amount_usd=7000)
        challenger = make_submission(db, bounty, bob)
        failing = FakeGateway(error=ConnectionError("quotes API down"))

        with pytest.raises(ExchangeRateUnavailableError):
            assign_position(db, capability_for(bounty), failing, bounty.id, challenger.id, 1)

        db.refresh(holder)
        db.refresh(challenger)
        assert _winner_fields(holder) == (1, 1000, 7000, True, alice.id)
        assert _winner_fields(challenger) == (None, None, None, False, None)
