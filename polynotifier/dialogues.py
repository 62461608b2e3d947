"""Per-chat conversation state for the multi-step bot flows."""

from __future__ import annotations

import enum
import re
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class MarketOption:
    """A market offered to the user during market search."""

    condition_id: str
    question: str
    outcomes: Tuple[str, ...] = ()
    token_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcomes", tuple(self.outcomes))
        object.__setattr__(self, "token_ids", tuple(self.token_ids))


class DialogueStep(str, enum.Enum):
    """Every step a conversation may be at."""

    IDLE = "idle"
    # Subscribe flow: URL -> market -> outcome -> alert type -> threshold.
    AWAITING_URL = "awaiting_url"
    AWAITING_MARKET_SELECTION = "awaiting_market_selection"
    AWAITING_OUTCOME_SELECTION = "awaiting_outcome_selection"
    AWAITING_SUBSCRIBE_ALERT_TYPE = "awaiting_subscribe_alert_type"
    AWAITING_SUBSCRIBE_ALERT_THRESHOLD = "awaiting_subscribe_alert_threshold"
    # Alert flow: subscription -> alert type -> threshold.
    AWAITING_ALERT_SUBSCRIPTION = "awaiting_alert_subscription"
    AWAITING_ALERT_TYPE = "awaiting_alert_type"
    AWAITING_ALERT_THRESHOLD = "awaiting_alert_threshold"


_MARKET = ("condition_id", "question", "outcomes", "token_ids")

_REQUIRED: Dict[DialogueStep, Tuple[str, ...]] = {
    DialogueStep.IDLE: (),
    DialogueStep.AWAITING_URL: (),
    DialogueStep.AWAITING_MARKET_SELECTION: ("markets",),
    DialogueStep.AWAITING_OUTCOME_SELECTION: _MARKET,
    DialogueStep.AWAITING_SUBSCRIBE_ALERT_TYPE: _MARKET + ("outcome_index",),
    DialogueStep.AWAITING_SUBSCRIBE_ALERT_THRESHOLD: _MARKET
    + ("outcome_index", "alert_type"),
    DialogueStep.AWAITING_ALERT_SUBSCRIPTION: (),
    DialogueStep.AWAITING_ALERT_TYPE: ("subscription_id", "question"),
    DialogueStep.AWAITING_ALERT_THRESHOLD: ("subscription_id", "question", "alert_type"),
}


@dataclass(frozen=True)
class DialogueState:
    """The step a conversation is at together with the data gathered so far.

    Raises ValueError if a field the step needs is missing.
    """

    step: DialogueStep = DialogueStep.IDLE
    markets: Optional[Tuple[MarketOption, ...]] = None
    condition_id: Optional[str] = None
    question: Optional[str] = None
    outcomes: Optional[Tuple[str, ...]] = None
    token_ids: Optional[Tuple[str, ...]] = None
    outcome_index: Optional[int] = None
    alert_type: Optional[str] = None
    subscription_id: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "step", DialogueStep(self.step))
        for name in ("markets", "outcomes", "token_ids"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(value))
        missing = [name for name in _REQUIRED[self.step] if getattr(self, name) is None]
        if missing:
            raise ValueError(
                f"step {self.step.value} requires: {', '.join(missing)}"
            )

    @property
    def is_idle(self) -> bool:
        return self.step is DialogueStep.IDLE


class DialogueStorage:
    """In-memory per-chat dialogue state; a fresh chat is idle.

    State is deliberately not persisted, so a restart resets every flow.
    """

    def __init__(self) -> None:
        self._states: Dict[int, DialogueState] = {}
        self._lock = threading.Lock()

    def get(self, chat_id: int) -> DialogueState:
        """Current state of the chat, idle if none is stored."""
        with self._lock:
            return self._states.get(chat_id, DialogueState())

    def update(self, chat_id: int, state: DialogueState) -> None:
        """Store a new state for the chat."""
        with self._lock:
            if state.is_idle:
                self._states.pop(chat_id, None)
            else:
                self._states[chat_id] = state

    def reset(self, chat_id: int) -> None:
        """Return the chat to the idle state."""
        with self._lock:
            self._states.pop(chat_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


_EVENT_MARKER = "/event/"
_SEGMENT_END = re.compile(r"[/?#]")


def extract_slug_from_url(text: str) -> Optional[str]:
    """Return the event slug of a Polymarket event URL, or None.

    Accepts ``https://polymarket.com/event/{slug}``, with an optional market
    segment, query or fragment after it, and the scheme-less form.
    """
    text = text.strip()
    idx = text.find(_EVENT_MARKER)
    if idx < 0:
        return None
    after = text[idx + len(_EVENT_MARKER):]
    slug = _SEGMENT_END.split(after, maxsplit=1)[0]
    return slug or None


def market_options(markets: Sequence[MarketOption], limit: int = 10) -> Tuple[MarketOption, ...]:
    """The first ``limit`` search results offered to the user."""
    return tuple(markets[:limit])