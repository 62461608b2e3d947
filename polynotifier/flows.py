"""Input parsing and reply texts for the subscribe and alert dialogue flows."""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence, Tuple, Union

from polynotifier.rules import AlertType

THRESHOLD_OUT_OF_RANGE = "Threshold must be between 0 and 100. Try again:"
THRESHOLD_INVALID = "Invalid number. Please enter a value like 70:"

_ALERT_TYPE_PREFIX = "alert_type:"
_INTEGER = re.compile(r"[+-]?[0-9]+")

_PROMPTS = {
    AlertType.ABOVE: "Enter the price threshold (0–100%). Alert fires when price rises ABOVE it:",
    AlertType.BELOW: "Enter the price threshold (0–100%). Alert fires when price falls BELOW it:",
    AlertType.CROSS: "Enter the price threshold (0–100%). Alert fires when price CROSSES it:",
}


class ThresholdError(ValueError):
    """The threshold text is not a number between 0 and 100.

    The message is the reply to send back to the user.
    """


def _type_name(alert_type: Union[str, AlertType]) -> str:
    return AlertType(alert_type).value


def parse_threshold(text: str) -> Tuple[float, float]:
    """Parse a percentage between 0 and 100.

    Returns ``(percent, fraction)`` where the fraction is the percentage
    divided by 100. Raises ThresholdError otherwise.
    """
    text = text.strip()
    if "_" in text:
        raise ThresholdError(THRESHOLD_INVALID)
    try:
        pct = float(text)
    except ValueError:
        raise ThresholdError(THRESHOLD_INVALID) from None
    if math.isnan(pct) or not 0.0 <= pct <= 100.0:
        raise ThresholdError(THRESHOLD_OUT_OF_RANGE)
    return pct, pct / 100.0


def parse_index_callback(data: Optional[str], prefix: str) -> Optional[int]:
    """Return the integer after ``prefix`` in callback data, or None."""
    if data is None or not data.startswith(prefix):
        return None
    rest = data[len(prefix):]
    if not _INTEGER.fullmatch(rest):
        return None
    return int(rest)


def parse_alert_type_callback(data: Optional[str]) -> Optional[AlertType]:
    """Return the alert type named by ``alert_type:{type}`` data, or None."""
    if data is None or not data.startswith(_ALERT_TYPE_PREFIX):
        return None
    name = data[len(_ALERT_TYPE_PREFIX):]
    try:
        return AlertType(name)
    except ValueError:
        return None


def alert_threshold_prompt(alert_type: Union[str, AlertType]) -> str:
    """The prompt asking for a threshold for the given alert type."""
    return _PROMPTS[AlertType(alert_type)]


def outcome_label(outcomes: Sequence[str], index: int) -> str:
    """The outcome's name, or ``Outcome {index}`` when it is unknown."""
    if 0 <= index < len(outcomes):
        return outcomes[index]
    return f"Outcome {index}"


def should_update_existing_alert(tier: str, alert_count: int) -> bool:
    """Free users who already have an alert replace it instead of adding one."""
    return tier == "free" and alert_count > 0


def subscribed_message(
    question: str, outcome: str, alert_type: Union[str, AlertType], pct: float
) -> str:
    """Reply after a subscription and its alert were created."""
    return (
        "Subscribed with alert!\n"
        f"Market: {question}\n"
        f"Outcome: {outcome}\n"
        f"Alert: {_type_name(alert_type)} {pct:.0f}%"
    )


def alert_created_message(question: str, alert_type: Union[str, AlertType], pct: float) -> str:
    """Reply after a new alert was added to a subscription."""
    return (
        "Alert created!\n"
        f"Market: {question}\n"
        f"Type: {_type_name(alert_type)}\n"
        f"Threshold: {pct:.0f}%"
    )


def alert_updated_message(question: str, alert_type: Union[str, AlertType], pct: float) -> str:
    """Reply after an existing alert was changed."""
    return (
        "Alert updated!\n"
        f"Market: {question}\n"
        f"Type: {_type_name(alert_type)}\n"
        f"Threshold: {pct:.0f}%"
    )