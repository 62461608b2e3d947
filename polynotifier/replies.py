"""Input checks and reply texts for the bot's one-shot commands."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Union

from polynotifier.rules import AlertType

FEEDBACK_PREFIX = "/feedback"
FEEDBACK_MAX_BYTES = 1000
FEEDBACK_INTERVAL = timedelta(hours=1)

FEEDBACK_USAGE = (
    "Usage: /feedback <your message>\n\n"
    "Example: /feedback I'd love to see Bitcoin markets!"
)
FEEDBACK_TOO_LONG = "Feedback is too long. Please keep it under 1000 characters."
TIMEZONE_USAGE = (
    "Usage: /timezone America/New_York\n"
    "Provide a valid IANA timezone name."
)
TIMEZONE_INVALID = "Invalid timezone string."
PRICE_UNAVAILABLE = "N/A"

_FORBIDDEN_TZ_CHARS = frozenset(";'\"\\")


class FeedbackError(ValueError):
    """The feedback text cannot be accepted.

    The message is the reply to send back to the user.
    """


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def feedback_body(text: Optional[str]) -> str:
    """Return the feedback message that follows ``/feedback``.

    Raises FeedbackError when the message is empty or longer than
    1000 bytes of UTF-8.
    """
    text = text or ""
    body = text[len(FEEDBACK_PREFIX):].strip() if text.startswith(FEEDBACK_PREFIX) else ""
    if not body:
        raise FeedbackError(FEEDBACK_USAGE)
    if len(body.encode("utf-8")) > FEEDBACK_MAX_BYTES:
        raise FeedbackError(FEEDBACK_TOO_LONG)
    return body


def validate_timezone(tz: Optional[str]) -> str:
    """Return the trimmed timezone name.

    Raises ValueError, whose message is the reply to send, when the name is
    empty or holds quoting or separator characters.
    """
    tz = (tz or "").strip()
    if not tz:
        raise ValueError(TIMEZONE_USAGE)
    if any(ch in _FORBIDDEN_TZ_CHARS for ch in tz):
        raise ValueError(TIMEZONE_INVALID)
    return tz


def feedback_wait_minutes(
    last: Optional[datetime], now: Optional[datetime] = None
) -> Optional[int]:
    """Minutes until feedback may be sent again, or None if it may be now.

    Feedback is limited to once per hour; times are naive UTC.
    """
    if last is None:
        return None
    if now is None:
        now = _utcnow()
    remaining = FEEDBACK_INTERVAL - (now - last)
    if remaining <= timedelta(0):
        return None
    return remaining // timedelta(minutes=1) + 1


def subscription_label(question: str, outcome_index: int) -> str:
    """Label of a subscription in selection keyboards."""
    return f"{question} (outcome {outcome_index})"


def format_price(price: Union[float, Decimal, None]) -> str:
    """Render a 0–1 price as a percentage with one decimal, or ``N/A``."""
    if price is None:
        return PRICE_UNAVAILABLE
    if isinstance(price, Decimal):
        return f"{price * 100:.1f}%"
    return f"{float(price) * 100.0:.1f}%"


def format_alert_line(alert_type: Union[str, AlertType], threshold: float) -> str:
    """One line describing an alert in the subscription list."""
    name = alert_type.value if isinstance(alert_type, AlertType) else alert_type
    return f"   Alert: {name} {float(threshold) * 100.0:.0f}%"


def welcome_message(first_name: str, tier: str, used: int, maximum: int) -> str:
    """Greeting sent in reply to ``/start``."""
    greeting = f"Welcome, {first_name}" if first_name else "Welcome"
    return (
        f"{greeting}! I'm the Poly-Notifier bot.\n\n"
        "I can notify you about price movements on Polymarket.\n\n"
        "Your account:\n"
        f"Tier: {tier}\n"
        f"Subscription slots: {used}/{maximum}\n\n"
        "Use /help to see all commands."
    )