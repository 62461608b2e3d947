from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from polynotifier.replies import (
    FEEDBACK_TOO_LONG,
    FEEDBACK_USAGE,
    TIMEZONE_INVALID,
    TIMEZONE_USAGE,
    FeedbackError,
    feedback_body,
    feedback_wait_minutes,
    format_alert_line,
    format_price,
    subscription_label,
    validate_timezone,
    welcome_message,
)
from polynotifier.rules import AlertType

NOW = datetime(2024, 5, 1, 12, 0, 0)


def test_feedback_body_strips_command_and_whitespace():
    assert feedback_body("/feedback   more markets please  ") == "more markets please"


@pytest.mark.parametrize("text", ["/feedback", "/feedback    ", "", None, "hello"])
def test_feedback_body_empty_gives_usage(text):
    with pytest.raises(FeedbackError) as info:
        feedback_body(text)
    assert str(info.value) == FEEDBACK_USAGE


def test_feedback_body_accepts_exactly_limit():
    body = "a" * 1000
    assert feedback_body("/feedback " + body) == body


def test_feedback_body_too_long():
    with pytest.raises(FeedbackError) as info:
        feedback_body("/feedback " + "a" * 1001)
    assert str(info.value) == FEEDBACK_TOO_LONG


def test_feedback_body_length_counts_utf8_bytes():
    with pytest.raises(FeedbackError) as info:
        feedback_body("/feedback " + "é" * 501)
    assert str(info.value) == FEEDBACK_TOO_LONG


def test_validate_timezone_trims():
    assert validate_timezone("  America/New_York ") == "America/New_York"


@pytest.mark.parametrize("tz", ["", "   ", None])
def test_validate_timezone_empty(tz):
    with pytest.raises(ValueError) as info:
        validate_timezone(tz)
    assert str(info.value) == TIMEZONE_USAGE


@pytest.mark.parametrize("tz", ["UTC;", "Europe'Paris", 'a"b', "a\\b"])
def test_validate_timezone_rejects_forbidden_characters(tz):
    with pytest.raises(ValueError) as info:
        validate_timezone(tz)
    assert str(info.value) == TIMEZONE_INVALID


def test_feedback_wait_none_without_previous():
    assert feedback_wait_minutes(None, NOW) is None


def test_feedback_wait_none_after_an_hour():
    assert feedback_wait_minutes(NOW - timedelta(hours=1), NOW) is None
    assert feedback_wait_minutes(NOW - timedelta(hours=2), NOW) is None


def test_feedback_wait_just_sent():
    assert feedback_wait_minutes(NOW, NOW) == 61


def test_feedback_wait_half_hour():
    assert feedback_wait_minutes(NOW - timedelta(minutes=30), NOW) == 31


@pytest.mark.parametrize("seconds", [1, 59, 600, 1799, 3599])
def test_feedback_wait_within_bounds(seconds):
    minutes = feedback_wait_minutes(NOW - timedelta(seconds=seconds), NOW)
    assert 1 <= minutes <= 61


def test_feedback_wait_decreases_over_time():
    earlier = feedback_wait_minutes(NOW - timedelta(minutes=10), NOW)
    later = feedback_wait_minutes(NOW - timedelta(minutes=40), NOW)
    assert earlier > later


def test_subscription_label():
    assert subscription_label("Will X happen?", 1) == "Will X happen? (outcome 1)"


def test_format_price_none():
    assert format_price(None) == "N/A"


def test_format_price_float():
    assert format_price(0.5) == "50.0%"


def test_format_price_decimal_matches_float():
    assert format_price(Decimal("0.25")) == format_price(0.25)


def test_format_price_has_one_decimal():
    text = format_price(0.123456)
    assert text.endswith("%")
    assert len(text[:-1].split(".")[1]) == 1


@pytest.mark.parametrize("alert_type", ["above", AlertType.CROSS])
def test_format_alert_line_structure(alert_type):
    name = alert_type.value if isinstance(alert_type, AlertType) else alert_type
    line = format_alert_line(alert_type, 0.7)
    prefix = f"   Alert: {name} "
    assert line.startswith(prefix)
    assert line.endswith("%")
    assert line[len(prefix):-1].isdigit()


def test_format_alert_line_enum_and_string_agree():
    assert format_alert_line(AlertType.BELOW, 0.3) == format_alert_line("below", 0.3)


def test_welcome_message_with_name():
    text = welcome_message("Alice", "free", 2, 3)
    assert text.startswith("Welcome, Alice! I'm the Poly-Notifier bot.")
    assert "Tier: free\n" in text
    assert "Subscription slots: 2/3\n" in text
    assert text.endswith("Use /help to see all commands.")


def test_welcome_message_without_name():
    text = welcome_message("", "premium", 0, 10)
    assert text.startswith("Welcome! I'm the Poly-Notifier bot.")
    assert "Tier: premium\n" in text
    assert "Subscription slots: 0/10\n" in text