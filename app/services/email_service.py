"""Email delivery for winner and payout notifications."""

from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    email: str
    first_name: str | None = None
    username: str | None = None

    @property
    def display_name(self) -> str:
        return self.first_name or self.username or "there"


@dataclass(frozen=True)
class WinnerNotification:
    """Payload for one winner email, detached from the DB session."""

    recipient: Recipient
    bounty_id: int
    bounty_title: str
    organization_name: str
    submission_id: int
    position: int
    prize_amount: str
    token: str


@dataclass(frozen=True)
class PaymentNotification:
    """Payload for one payout confirmation email."""

    recipient: Recipient
    bounty_id: int
    bounty_title: str
    organization_name: str
    amount: str
    token: str
    transaction_id: str


def _ordinal(position: int) -> str:
    if 10 <= position % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
    return f"{position}{suffix}"


def _build_winner_text(n: WinnerNotification, base_url: str) -> str:
    lines = [
        f"Hi {n.recipient.display_name},",
        "",
        f"Congratulations! Your submission to \"{n.bounty_title}\" by "
        f"{n.organization_name} won {_ordinal(n.position)} place.",
        f"  Prize: {n.prize_amount} {n.token}",
        "",
        f"View the bounty: {base_url}/bounties/{n.bounty_id}",
    ]
    return "\n".join(lines)


def _build_winner_html(n: WinnerNotification, base_url: str) -> str:
    title = html.escape(n.bounty_title)
    org = html.escape(n.organization_name)
    return (
        "<html><body>"
        f"<p>Hi {html.escape(n.recipient.display_name)},</p>"
        f"<h2>Congratulations, you placed {_ordinal(n.position)}!</h2>"
        f"<p>Your submission to <strong>{title}</strong> by {org} was selected as a winner.</p>"
        f"<p><strong>Prize:</strong> {html.escape(n.prize_amount)} {html.escape(n.token)}</p>"
        f'<p><a href="{base_url}/bounties/{n.bounty_id}">View the bounty</a></p>'
        "</body></html>"
    )


def _build_payment_text(n: PaymentNotification) -> str:
    lines = [
        f"Hi {n.recipient.display_name},",
        "",
        f"{n.organization_name} sent your prize for \"{n.bounty_title}\".",
        f"  Amount: {n.amount} {n.token}",
        f"  Transaction: {n.transaction_id}",
    ]
    return "\n".join(lines)


def _build_payment_html(n: PaymentNotification) -> str:
    return (
        "<html><body>"
        f"<p>Hi {html.escape(n.recipient.display_name)},</p>"
        f"<p>{html.escape(n.organization_name)} sent your prize for "
        f"<strong>{html.escape(n.bounty_title)}</strong>.</p>"
        f"<p><strong>Amount:</strong> {html.escape(n.amount)} {html.escape(n.token)}<br>"
        f"<strong>Transaction:</strong> <code>{html.escape(n.transaction_id)}</code></p>"
        "</body></html>"
    )


def _send_email(
    recipient: str,
    subject: str,
    text_body: str,
    html_body: str,
    settings,
) -> bool:
    """Send a multipart email. Returns True on success, False on any failure."""
    if not recipient:
        logger.warning("email_send_skipped: no recipient")
        return False

    if not getattr(settings, "notifications_enabled", True):
        logger.info("email_send_skipped: notifications disabled")
        return False

    smtp_host = getattr(settings, "smtp_host", "")
    if not smtp_host:
        logger.warning("email_send_skipped: SMTP host not configured")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = getattr(settings, "smtp_from", "")
    msg["To"] = recipient
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(smtp_host, getattr(settings, "smtp_port", 587)) as server:
            server.starttls()
            smtp_user = getattr(settings, "smtp_user", "")
            smtp_password = getattr(settings, "smtp_password", "")
            if smtp_user:
                server.login(smtp_user, smtp_password)
            server.sendmail(msg["From"], [recipient], msg.as_string())
        logger.info("email_sent: recipient=%s subject=%s", recipient, subject)
        return True
    except smtplib.SMTPAuthenticationError:
        logger.error("email_auth_failed: could not authenticate with SMTP server")
        return False
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email_send_failed: %s", exc)
        return False


def send_winner_email(notification: WinnerNotification, settings=None) -> bool:
    """Tell a submitter they won a position. Returns True on success."""
    if settings is None:
        settings = get_settings()
    base_url = getattr(settings, "app_base_url", "")
    subject = f"You won {_ordinal(notification.position)} place in {notification.bounty_title}"
    return _send_email(
        notification.recipient.email,
        subject,
        _build_winner_text(notification, base_url),
        _build_winner_html(notification, base_url),
        settings,
    )


def send_payment_confirmation_email(notification: PaymentNotification, settings=None) -> bool:
    """Tell a winner their prize was paid. Returns True on success."""
    if settings is None:
        settings = get_settings()
    subject = f"Payment sent for {notification.bounty_title}"
    return _send_email(
        notification.recipient.email,
        subject,
        _build_payment_text(notification),
        _build_payment_html(notification),
        settings,
    )
