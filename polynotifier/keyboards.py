"""Inline keyboard builders for bot messages.

A keyboard is a list of rows, each a list of buttons. Pressing a button
delivers its ``data`` string back to the bot as a callback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from polynotifier.dialogues import MarketOption

MAX_LABEL_LEN = 40
ELLIPSIS = "…"


@dataclass(frozen=True)
class Button:
    """An inline button with its visible label and callback data."""

    label: str
    data: str


Keyboard = List[List[Button]]


def truncate(label: str) -> str:
    """Shorten a label to at most MAX_LABEL_LEN characters with an ellipsis."""
    if len(label) <= MAX_LABEL_LEN:
        return label
    return label[: MAX_LABEL_LEN - 1] + ELLIPSIS


def market_list_keyboard(markets: Sequence[MarketOption]) -> Keyboard:
    """One row per market; data ``market:{index}``."""
    return [
        [Button(truncate(market.question), f"market:{i}")]
        for i, market in enumerate(markets)
    ]


def outcome_keyboard(outcomes: Iterable[str]) -> Keyboard:
    """One row per outcome; data ``outcome:{index}``."""
    return [[Button(label, f"outcome:{i}")] for i, label in enumerate(outcomes)]


def alert_type_keyboard() -> Keyboard:
    """A single row with the three alert types; data ``alert_type:{type}``."""
    return [
        [
            Button("Above threshold", "alert_type:above"),
            Button("Below threshold", "alert_type:below"),
            Button("Cross threshold", "alert_type:cross"),
        ]
    ]


def subscription_list_keyboard(subscriptions: Iterable[Tuple[int, str]]) -> Keyboard:
    """One row per ``(id, label)`` subscription; data ``sub:{id}``."""
    return [[Button(truncate(label), f"sub:{sub_id}")] for sub_id, label in subscriptions]


def unsubscribe_keyboard(subscriptions: Iterable[Tuple[int, str]]) -> Keyboard:
    """One row per ``(id, label)`` subscription; data ``unsub:{id}``."""
    return [[Button(truncate(label), f"unsub:{sub_id}")] for sub_id, label in subscriptions]


def confirm_keyboard() -> Keyboard:
    """Yes/No row; data ``confirm:yes`` or ``confirm:no``."""
    return [[Button("Yes", "confirm:yes"), Button("No", "confirm:no")]]