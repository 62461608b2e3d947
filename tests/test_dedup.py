from datetime import datetime, timedelta, timezone
from decimal import Decimal

from polynotifier.dedup import AlertDedup
from polynotifier.rules import AlertRule, AlertType


class TickingClock:
    """Clock that advances one microsecond on every reading."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        self.now += timedelta(microseconds=1)
        return self.now


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def test_new_alert_can_always_fire():
    dedup = AlertDedup()
    assert dedup.can_fire(1, 60) is True


def test_after_mark_fired_alert_is_in_cooldown():
    dedup = AlertDedup()
    dedup.mark_fired(1)
    assert dedup.can_fire(1, 60) is False


def test_zero_cooldown_always_allows_fire():
    dedup = AlertDedup(clock=TickingClock(datetime(2024, 1, 1)))
    dedup.mark_fired(1)
    assert dedup.can_fire(1, 0) is True


def test_cooldown_expires_after_window():
    clock = TickingClock(datetime(2024, 1, 1, 12, 0))
    dedup = AlertDedup(clock=clock)
    dedup.mark_fired(5)
    clock.now += timedelta(minutes=59)
    assert dedup.can_fire(5, 60) is False
    clock.now += timedelta(minutes=2)
    assert dedup.can_fire(5, 60) is True


def test_other_alerts_unaffected():
    dedup = AlertDedup()
    dedup.mark_fired(1)
    assert dedup.can_fire(2, 60) is True


def make_rule(alert_id, last):
    return AlertRule(
        alert_id=alert_id,
        subscription_id=1,
        user_telegram_id=1,
        bot_id="bot",
        token_id="tok",
        outcome_index=0,
        market_question="Q?",
        alert_type=AlertType.ABOVE,
        threshold=Decimal("0.5"),
        cooldown_minutes=60,
        last_triggered_at=last,
    )


def test_load_from_alerts_populates_past_triggers():
    past = utcnow() - timedelta(minutes=30)
    dedup = AlertDedup()
    dedup.load_from_alerts([make_rule(7, past)])
    assert dedup.can_fire(7, 60) is False
    assert dedup.can_fire(7, 29) is True


def test_load_from_alerts_skips_rules_without_trigger():
    dedup = AlertDedup()
    dedup.load_from_alerts([make_rule(8, None)])
    assert dedup.can_fire(8, 60) is True