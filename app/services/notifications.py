"""Post-commit notification dispatch.

Payloads are built while the DB session is still open and dispatched after
the response via BackgroundTasks. Dispatch never raises: a failed send is
logged and the already-committed operation stands.
"""

from __future__ import annotations

import logging

from app.models.bounty import Bounty
from app.models.payment import Payment
from app.models.submission import Submission
from app.services.email_service import (
    PaymentNotification,
    Recipient,
    WinnerNotification,
    send_payment_confirmation_email,
    send_winner_email,
)

logger = logging.getLogger(__name__)

DEFAULT_TOKEN = "USDT"


def _format_amount(amount: float | None) -> str:
    if amount is None:
        return "0"
    return f"{amount:,.8f}".rstrip("0").rstrip(".")


def build_winner_notifications(
    bounty: Bounty, winners: list[Submission]
) -> list[WinnerNotification]:
    """One notification per winner whose submitter has an email address."""
    notifications: list[WinnerNotification] = []
    for submission in winners:
        submitter = submission.submitter
        if submitter is None or not submitter.email:
            continue
        notifications.append(
            WinnerNotification(
                recipient=Recipient(
                    email=submitter.email,
                    first_name=submitter.first_name,
                    username=submitter.username,
                ),
                bounty_id=bounty.id,
                bounty_title=bounty.title,
                organization_name=bounty.organization.name,
                submission_id=submission.id,
                position=submission.position or 1,
                prize_amount=_format_amount(submission.winning_amount),
                token=bounty.token or DEFAULT_TOKEN,
            )
        )
    return notifications


def build_payment_notification(payment: Payment, bounty: Bounty) -> PaymentNotification | None:
    submitter = payment.submission.submitter
    if submitter is None or not submitter.email:
        return None
    return PaymentNotification(
        recipient=Recipient(
            email=submitter.email,
            first_name=submitter.first_name,
            username=submitter.username,
        ),
        bounty_id=bounty.id,
        bounty_title=bounty.title,
        organization_name=bounty.organization.name,
        amount=_format_amount(payment.amount),
        token=payment.token,
        transaction_id=payment.extrinsic_hash,
    )


def dispatch_winner_notifications(notifications: list[WinnerNotification]) -> int:
    """Send every winner email; return how many were delivered."""
    sent = 0
    for notification in notifications:
        try:
            if send_winner_email(notification):
                sent += 1
        except Exception:
            logger.exception(
                "winner_notification_failed: bounty=%s submission=%s",
                notification.bounty_id,
                notification.submission_id,
            )
    logger.info("winner_notifications_dispatched: sent=%d total=%d", sent, len(notifications))
    return sent


def dispatch_payment_notification(notification: PaymentNotification) -> bool:
    try:
        return send_payment_confirmation_email(notification)
    except Exception:
        logger.exception("payment_notification_failed: bounty=%s", notification.bounty_id)
        return False
