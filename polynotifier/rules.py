"""Price-based alert rules and their evaluation."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


class AlertType(str, enum.Enum):
    """Condition under which an alert fires."""

    ABOVE = "above"
    BELOW = "below"
    CROSS = "cross"


@dataclass
class AlertRule:
    """Denormalised in-memory view of an active alert, ready for evaluation.

    The fields come from the alert joined with its subscription, market and
    user.
    """

    alert_id: int
    subscription_id: int
    user_telegram_id: int
    bot_id: str
    token_id: str
    outcome_index: int
    market_question: str
    alert_type: AlertType
    threshold: Decimal
    cooldown_minutes: int
    last_triggered_at: Optional[datetime] = None

    def evaluate(
        self, current_price: Decimal, previous_price: Optional[Decimal] = None
    ) -> bool:
        """Return True when the alert should fire for this price tick.

        A cross fires when the price moves from one side of the threshold to
        the other; without a previous price it never fires.
        """
        threshold = self.threshold
        if self.alert_type is AlertType.ABOVE:
            return current_price >= threshold
        if self.alert_type is AlertType.BELOW:
            return current_price <= threshold
        if previous_price is None:
            return False
        upward = previous_price < threshold <= current_price
        downward = previous_price > threshold >= current_price
        return upward or downward