"""Cooldown-based alert deduplication."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable

from polynotifier.rules import AlertRule


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AlertDedup:
    """Tracks when each alert last fired so ticks within a cooldown are dropped.

    Timestamps are naive UTC datetimes. Safe to share between threads.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._last_triggered: Dict[int, datetime] = {}
        self._lock = threading.Lock()

    def can_fire(self, alert_id: int, cooldown_minutes: int) -> bool:
        """Return True when the alert is outside its cooldown window."""
        with self._lock:
            last = self._last_triggered.get(alert_id)
        if last is None:
            return True
        return self._clock() - last > timedelta(minutes=cooldown_minutes)

    def mark_fired(self, alert_id: int) -> None:
        """Record the current time as the alert's last firing."""
        now = self._clock()
        with self._lock:
            self._last_triggered[alert_id] = now

    def load_from_alerts(self, alerts: Iterable[AlertRule]) -> None:
        """Seed last-fired times from rules that carry a recorded trigger."""
        with self._lock:
            for alert in alerts:
                if alert.last_triggered_at is not None:
                    self._last_triggered[alert.alert_id] = alert.last_triggered_at