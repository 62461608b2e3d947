# polynotifier

Building blocks for a service that watches prediction-market prices and
tells chat users when their alerts fire.

## What is in the package

| Module | What it holds |
|--------|---------------|
| `polynotifier.rules` | `AlertType` (`above`, `below`, `cross`) and `AlertRule` with `evaluate(current_price, previous_price=None)` |
| `polynotifier.dedup` | `AlertDedup`, per-alert cooldown tracking |
| `polynotifier.auth` | `extract_bearer_token`, `check_authorization` and `AuthError` |
| `polynotifier.admin` | `AdminStore` (SQLite queries) and `create_app`, the Flask admin API |
| `polynotifier.commands` | `Command`, `ParsedCommand`, `parse_command`, `descriptions`, `bot_commands` |
| `polynotifier.dialogues` | `DialogueStep`, `DialogueState`, `DialogueStorage`, `MarketOption`, `extract_slug_from_url`, `market_options` |
| `polynotifier.keyboards` | `Button` and the inline keyboard builders |
| `polynotifier.flows` | threshold and callback parsing, prompts and replies of the subscribe and alert flows |
| `polynotifier.replies` | feedback and timezone checks and the replies of one-shot commands |
| `polynotifier.dispatch` | `Route` and the functions that pick the handler for an update |

## Alert rules

`AlertRule.evaluate` decides whether an alert fires for a price tick.
*Above* fires at or above the threshold and *below* fires at or below it.
*Cross* fires only when the price moves from one side of the threshold to the
other. It needs a previous price and never fires without one.

```python
from decimal import Decimal
from polynotifier.rules import AlertRule, AlertType

rule = AlertRule(
    alert_id=1, subscription_id=10, user_telegram_id=999, bot_id="main",
    token_id="0xabc", outcome_index=0, market_question="Will X happen?",
    alert_type=AlertType.CROSS, threshold=Decimal("0.50"), cooldown_minutes=60,
)
rule.evaluate(Decimal("0.55"), Decimal("0.45"))  # True: upward cross
rule.evaluate(Decimal("0.55"))                    # False: no previous price
```

## Cooldowns

`AlertDedup` remembers when each alert last fired, using naive UTC times. An
alert may fire again only once more than `cooldown_minutes` have passed.
`load_from_alerts` seeds it from rules that carry `last_triggered_at`, so
cooldowns survive a restart. You can pass a clock for testing:

```python
from datetime import datetime, timedelta
from polynotifier.dedup import AlertDedup

now = datetime(2024, 1, 1, 12, 0)
dedup = AlertDedup(clock=lambda: now)
assert dedup.can_fire(42, 60)       # never fired: allowed
dedup.mark_fired(42)
assert not dedup.can_fire(42, 60)   # inside the 60-minute window
now += timedelta(minutes=61)
assert dedup.can_fire(42, 60)
```

## Admin API

`create_app(database, admin_password)` builds a Flask application over an
SQLite database. The database is given as a file path or an open
`sqlite3.Connection`. Every request must carry
`Authorization: Bearer <password>`. A missing or wrong token gets HTTP 401
with an empty body.

| Method | Path                               | Purpose                                  |
|--------|------------------------------------|------------------------------------------|
| GET    | `/admin/users`                     | Users with their active subscription counts |
| PUT    | `/admin/users/<telegram_id>/tier`  | Body `{"tier": ...}`: `free`, `premium` or `unlimited`, any case |
| PUT    | `/admin/users/<telegram_id>/limit` | Body `{"max_subscriptions": ...}`: a non-negative integer |
| GET    | `/admin/feedback`                  | User feedback, newest first              |
| GET    | `/admin/stats`                     | System-wide counts                       |

Errors come with a JSON body `{"error": "..."}`:

- an unknown user gives 404;
- an invalid value gives 422;
- a body that is not JSON gives 415 or 400;
- a database error gives 500.

The same operations are available without HTTP through `AdminStore`. It
raises `NotFoundError`, `InvalidValueError` or `AdminError`.

```python
from polynotifier.admin import create_app

admin_password = "password"
app = create_app("notifier.db", admin_password)

client = app.test_client()
response = client.get("/admin/stats", headers={"Authorization": "Bearer password"})
print(response.status_code, response.get_json())
```

The application expects these tables to exist already:

- `users`
- `subscriptions`
- `alerts`
- `markets`
- `feedback`
- `notification_log`

## Chat-bot model

- `parse_command("/timezone Europe/Berlin", "mybot")` returns
  `ParsedCommand(Command.TIMEZONE, "Europe/Berlin")`. It raises `ValueError`
  for text that is not a command, an unknown command, or one addressed to
  another bot. `descriptions()` gives the help text, and `bot_commands()`
  gives `(name, description)` pairs.
- `DialogueStorage` keeps each chat's `DialogueState` in memory. A fresh or
  reset chat is idle. A `DialogueState` raises `ValueError` if it lacks a
  field its step needs.
- `extract_slug_from_url("https://polymarket.com/event/some-event/some-market")`
  returns `'some-event'`. For text without `/event/` it returns `None`.
- The keyboard builders return rows of `Button(label, data)`. Callback data
  takes one of these forms:
  - `market:{i}`
  - `outcome:{i}`
  - `alert_type:{type}`
  - `sub:{id}`
  - `unsub:{id}`
  - `confirm:yes` or `confirm:no`

  Long labels are cut to 40 characters with `…`.
- `parse_threshold("70")` returns `(70.0, 0.7)`. It raises `ThresholdError`,
  whose message is the reply for the user. In `flows` and `replies` the
  other helpers build the texts the bot sends.
- In `dispatch`, `route_command`, `route_message` and `route_callback` map a
  command, or a dialogue state plus callback data, to a `Route`:

  ```python
  from polynotifier.dialogues import DialogueState, DialogueStep
  from polynotifier.dispatch import Route, route_callback, route_message

  route_message(DialogueState(DialogueStep.AWAITING_URL))  # Route.URL_INPUT
  route_callback(DialogueState(), "unsub:7")              # Route.CALLBACK_UNSUBSCRIBE
  ```

## What the package does not do

It has no command-line entry point. It does not:

- connect to a chat platform;
- fetch market data or prices;
- send notifications;
- create the database schema.

These pieces give the rules, state, texts and routing. A program that runs
the bot and the price monitor has to supply the network side itself.

## Running the tests

Install the `test` extra, which pulls in pytest, and run `pytest`. The tests
live in `tests/`.