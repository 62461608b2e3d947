"""Routing of incoming bot updates to the handler that deals with them."""

from __future__ import annotations

import enum
from typing import Dict, Optional, Union

from polynotifier.commands import Command, ParsedCommand
from polynotifier.dialogues import DialogueState, DialogueStep
from polynotifier.flows import parse_index_callback

UNSUBSCRIBE_PREFIX = "unsub:"

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class Route(str, enum.Enum):
    """The handler an update is delivered to."""

    # Commands.
    START = "start"
    HELP = "help"
    LIST = "list"
    PRICES = "prices"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    ALERT = "alert"
    FEEDBACK = "feedback"
    TIMEZONE = "timezone"
    # Plain messages inside a dialogue.
    URL_INPUT = "url_input"
    SUBSCRIBE_ALERT_THRESHOLD = "subscribe_alert_threshold"
    ALERT_THRESHOLD = "alert_threshold"
    # Callback queries inside a dialogue.
    MARKET_SELECTION = "market_selection"
    OUTCOME_SELECTION = "outcome_selection"
    SUBSCRIBE_ALERT_TYPE = "subscribe_alert_type"
    ALERT_SUBSCRIPTION = "alert_subscription"
    ALERT_TYPE = "alert_type"
    # One-shot callback queries outside a dialogue.
    CALLBACK_UNSUBSCRIBE = "callback_unsubscribe"
    ACKNOWLEDGE = "acknowledge"


_COMMAND_ROUTES: Dict[Command, Route] = {
    Command.START: Route.START,
    Command.HELP: Route.HELP,
    Command.LIST: Route.LIST,
    Command.PRICES: Route.PRICES,
    Command.SUBSCRIBE: Route.SUBSCRIBE,
    Command.UNSUBSCRIBE: Route.UNSUBSCRIBE,
    Command.ALERT: Route.ALERT,
    Command.FEEDBACK: Route.FEEDBACK,
    Command.TIMEZONE: Route.TIMEZONE,
}

_MESSAGE_ROUTES: Dict[DialogueStep, Route] = {
    DialogueStep.AWAITING_URL: Route.URL_INPUT,
    DialogueStep.AWAITING_SUBSCRIBE_ALERT_THRESHOLD: Route.SUBSCRIBE_ALERT_THRESHOLD,
    DialogueStep.AWAITING_ALERT_THRESHOLD: Route.ALERT_THRESHOLD,
}

_CALLBACK_ROUTES: Dict[DialogueStep, Route] = {
    DialogueStep.AWAITING_MARKET_SELECTION: Route.MARKET_SELECTION,
    DialogueStep.AWAITING_OUTCOME_SELECTION: Route.OUTCOME_SELECTION,
    DialogueStep.AWAITING_SUBSCRIBE_ALERT_TYPE: Route.SUBSCRIBE_ALERT_TYPE,
    DialogueStep.AWAITING_ALERT_SUBSCRIPTION: Route.ALERT_SUBSCRIPTION,
    DialogueStep.AWAITING_ALERT_TYPE: Route.ALERT_TYPE,
}


def parse_unsubscribe_callback(data: Optional[str]) -> Optional[int]:
    """Return the subscription id of ``unsub:{id}`` data, or None."""
    sub_id = parse_index_callback(data, UNSUBSCRIBE_PREFIX)
    if sub_id is None or not _I64_MIN <= sub_id <= _I64_MAX:
        return None
    return sub_id


def route_command(command: Union[Command, ParsedCommand, str]) -> Route:
    """The handler for a parsed command; commands win over any dialogue step."""
    if isinstance(command, ParsedCommand):
        command = command.command
    return _COMMAND_ROUTES[Command(command)]


def route_message(state: DialogueState) -> Optional[Route]:
    """The handler for a plain text message, or None if it is dropped."""
    return _MESSAGE_ROUTES.get(state.step)


def route_callback(state: DialogueState, data: Optional[str]) -> Route:
    """The handler for a callback query.

    A dialogue waiting for a selection takes the callback whatever its data;
    otherwise ``unsub:{id}`` removes a subscription and anything else is only
    acknowledged.
    """
    route = _CALLBACK_ROUTES.get(state.step)
    if route is not None:
        return route
    if parse_unsubscribe_callback(data) is not None:
        return Route.CALLBACK_UNSUBSCRIBE
    return Route.ACKNOWLEDGE