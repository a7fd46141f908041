"""Tests for batch winner announcement."""

from __future__ import annotations

import pytest

from app.models.bounty import BountyStatus
from app.models.member import OrgRole
from app.models.submission import SubmissionStatus
from app.schemas.winners import WinnerInput
from app.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from app.services.winner_announcement import announce_winners
from tests.helpers import (
    capability_for,
    make_bounty,
    make_organization,
    make_submission,
    make_user,
)


def _slate(*entries: tuple[int, int, float]) -> list[WinnerInput]:
    return [
        WinnerInput(submission_id=sid, position=pos, amount=amount)
        for sid, pos, amount in entries
    ]


@pytest.fixture
def org(db):
    return make_organization(db)


@pytest.fixture
def bounty(db, org):
    return make_bounty(db, org, winnings={"1": 1000, "2": 500})


@pytest.fixture
def users(db):
    return [make_user(db, name) for name in ("ana", "ben", "cy")]


class TestAnnounceWinners:
    def test_replaces_previous_winner_set(self, db, bounty, users):
        """Old winners are cleared and the new slate applied; bounty completes."""
        s1 = make_submission(
            db, bounty, users[0], status=SubmissionStatus.APPROVED,
            position=1, amount=1000, amount_usd=7000,
        )
        s2 = make_submission(db, bounty, users[1], status=SubmissionStatus.APPROVED)
        s3 = make_submission(db, bounty, users[2], status=SubmissionStatus.APPROVED)

        result = announce_winners(
            db, capability_for(bounty), bounty.id, _slate((s2.id, 1, 1000), (s3.id, 2, 500))
        )

        for s in (s1, s2, s3):
            db.refresh(s)
        assert s1.position is None
        assert s1.is_winner is False
        assert s1.winning_amount is None
        assert s1.winning_amount_usd is None
        assert (s2.position, s2.winning_amount, s2.is_winner) == (1, 1000, True)
        assert (s3.position, s3.winning_amount, s3.is_winner) == (2, 500, True)
        assert s2.winner_user_id == users[1].id
        assert s2.status == SubmissionStatus.APPROVED
        assert s2.reviewed_at is not None
        assert result.status == BountyStatus.COMPLETED
        assert result.winners_announced_at is not None

    def test_disjoint_slate_clears_both_prior_winners(self, db, bounty, users):
        extra = make_user(db, "dee")
        old1 = make_submission(
            db, bounty, users[0], status=SubmissionStatus.APPROVED, position=1, amount=1000
        )
        old2 = make_submission(
            db, bounty, users[1], status=SubmissionStatus.APPROVED, position=2, amount=500
        )
        new1 = make_submission(db, bounty, users[2], status=SubmissionStatus.APPROVED)
        new2 = make_submission(db, bounty, extra, status=SubmissionStatus.APPROVED)

        announce_winners(
            db, capability_for(bounty), bounty.id, _slate((new1.id, 1, 1000), (new2.id, 2, 500))
        )

        for s in (old1, old2, new1, new2):
            db.refresh(s)
        assert [(s.position, s.is_winner) for s in (old1, old2)] == [(None, False)] * 2
        assert [(s.position, s.winning_amount) for s in (new1, new2)] == [(1, 1000), (2, 500)]
        db.refresh(bounty)
        assert bounty.status == BountyStatus.COMPLETED

    def test_announcement_does_not_compute_usd(self, db, bounty, users):
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        announce_winners(db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1500)))

        db.refresh(s)
        assert s.winning_amount == 1500
        assert s.winning_amount_usd is None

    def test_reviewing_bounty_can_be_announced(self, db, org, users):
        bounty = make_bounty(db, org, status=BountyStatus.REVIEWING)
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        result = announce_winners(db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1500)))

        assert result.status == BountyStatus.COMPLETED

    def test_amount_used_when_no_winnings_table(self, db, org, users):
        bounty = make_bounty(db, org, winnings=None, amount=800)
        s1 = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)
        s2 = make_submission(db, bounty, users[1], status=SubmissionStatus.APPROVED)

        result = announce_winners(
            db, capability_for(bounty), bounty.id, _slate((s1.id, 1, 600), (s2.id, 2, 200))
        )

        assert result.status == BountyStatus.COMPLETED

    def test_null_prize_tier_counts_as_zero(self, db, org, users):
        bounty = make_bounty(db, org, winnings={"1": 1000, "2": None})
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        result = announce_winners(db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1000)))

        db.refresh(s)
        assert s.position == 1
        assert s.winning_amount == 1000
        assert result.status == BountyStatus.COMPLETED

    def test_total_within_tolerance(self, db, bounty, users):
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        announce_winners(
            db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1499.995)), epsilon=0.01
        )

        db.refresh(s)
        assert s.position == 1

    def test_curator_may_announce(self, db, bounty, users):
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)
        cap = capability_for(bounty, role=None, is_curator=True)

        result = announce_winners(db, cap, bounty.id, _slate((s.id, 1, 1500)))

        assert result.status == BountyStatus.COMPLETED


class TestAnnounceWinnersRejections:
    def test_sum_mismatch_changes_nothing(self, db, bounty, users):
        s1 = make_submission(
            db, bounty, users[0], status=SubmissionStatus.APPROVED, position=1, amount=1000
        )
        s2 = make_submission(db, bounty, users[1], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(
                db, capability_for(bounty), bounty.id, _slate((s2.id, 1, 1000), (s1.id, 2, 400))
            )

        assert exc_info.value.error == "Total winner amounts must match the bounty prize pool"
        assert exc_info.value.details["requestedTotal"] == 1400
        assert exc_info.value.details["prizePool"] == 1500
        db.refresh(s1)
        db.refresh(bounty)
        assert s1.position == 1
        assert s1.is_winner is True
        assert bounty.status == BountyStatus.OPEN

    def test_malformed_prize_schedule(self, db, org, users):
        bounty = make_bounty(db, org, winnings={"1": 1000, "2": "tbd"})
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1000)))

        assert exc_info.value.details == {"field": "winnings", "position": "2", "value": "tbd"}
        db.refresh(s)
        db.refresh(bounty)
        assert s.position is None
        assert bounty.status == BountyStatus.OPEN

    def test_non_approved_submission(self, db, bounty, users):
        ok = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)
        pending = make_submission(db, bounty, users[1], status=SubmissionStatus.SUBMITTED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(
                db, capability_for(bounty), bounty.id, _slate((ok.id, 1, 1000), (pending.id, 2, 500))
            )

        assert exc_info.value.error == (
            "One or more submissions are invalid or not in approved status"
        )
        assert exc_info.value.details["invalidSubmissionIds"] == [pending.id]

    def test_submission_from_other_bounty(self, db, org, bounty, users):
        other = make_bounty(db, org, title="Other")
        foreign = make_submission(db, other, users[0], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError):
            announce_winners(db, capability_for(bounty), bounty.id, _slate((foreign.id, 1, 1500)))

    @pytest.mark.parametrize(
        "status", [BountyStatus.COMPLETED, BountyStatus.CLOSED, BountyStatus.CANCELLED]
    )
    def test_bounty_not_announceable(self, db, org, users, status):
        bounty = make_bounty(db, org, status=status)
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1500)))

        assert exc_info.value.error == (
            "Cannot announce winners for a bounty that is not open or under review"
        )

    def test_duplicate_submission(self, db, bounty, users):
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(
                db, capability_for(bounty), bounty.id, _slate((s.id, 1, 1000), (s.id, 2, 500))
            )

        assert exc_info.value.details["reason"] == "duplicate_submission"

    def test_duplicate_position(self, db, bounty, users):
        s1 = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)
        s2 = make_submission(db, bounty, users[1], status=SubmissionStatus.APPROVED)

        with pytest.raises(InvalidInputError) as exc_info:
            announce_winners(
                db, capability_for(bounty), bounty.id, _slate((s1.id, 1, 750), (s2.id, 1, 750))
            )

        assert exc_info.value.details["reason"] == "duplicate_position"

    def test_unknown_bounty(self, db, bounty, users):
        with pytest.raises(NotFoundError):
            announce_winners(db, capability_for(bounty), bounty.id + 42, _slate((1, 1, 1500)))

    def test_plain_member_is_forbidden(self, db, bounty, users):
        s = make_submission(db, bounty, users[0], status=SubmissionStatus.APPROVED)

        with pytest.raises(ForbiddenError) as exc_info:
            announce_winners(
                db, capability_for(bounty, role=OrgRole.MEMBER), bounty.id, _slate((s.id, 1, 1500))
            )

        assert exc_info.value.error == (
            "You do not have permission to announce winners for this bounty"
        )
