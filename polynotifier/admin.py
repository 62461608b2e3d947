"""Admin HTTP API: user management and aggregate statistics over SQLite."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Union

from flask import Flask, Response, jsonify, request

from polynotifier.auth import AuthError, check_authorization

logger = logging.getLogger(__name__)

VALID_TIERS = ("free", "premium", "unlimited")
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class AdminError(Exception):
    """Base error of the admin API; maps to HTTP 500."""

    status_code = 500


class NotFoundError(AdminError):
    """The target user does not exist; maps to HTTP 404."""

    status_code = 404


class InvalidValueError(AdminError):
    """A supplied value is not acceptable; maps to HTTP 422."""

    status_code = 422


class _BadRequest(AdminError):
    status_code = 400


class _UnsupportedMediaType(AdminError):
    status_code = 415


@dataclass(frozen=True)
class UserListEntry:
    """A registered user with the number of active subscriptions."""

    id: int
    telegram_id: int
    bot_id: str
    username: Optional[str]
    tier: str
    max_subscriptions: int
    timezone: str
    subscription_count: int


@dataclass(frozen=True)
class FeedbackListEntry:
    """A feedback message together with its author."""

    id: int
    user_id: int
    telegram_id: int
    username: Optional[str]
    message: str
    created_at: str


@dataclass(frozen=True)
class Stats:
    """System-wide aggregate counts."""

    total_users: int
    active_subscriptions: int
    active_alerts: int
    active_markets: int
    notifications_today: int


def _utcnow_text() -> str:
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.isoformat(sep=" ")


_LIST_USERS_SQL = """
    SELECT
        u.id,
        u.telegram_id,
        u.bot_id,
        u.username,
        u.tier,
        u.max_subscriptions,
        u.timezone,
        COUNT(s.id) AS subscription_count
    FROM users u
    LEFT JOIN subscriptions s
           ON s.user_id = u.id AND s.is_active = 1
    GROUP BY u.id
    ORDER BY u.id
"""

_LIST_FEEDBACK_SQL = """
    SELECT
        f.id,
        f.user_id,
        u.telegram_id,
        u.username,
        f.message,
        strftime('%Y-%m-%dT%H:%M:%SZ', f.created_at) AS created_at
    FROM feedback f
    JOIN users u ON u.id = f.user_id
    ORDER BY f.created_at DESC
"""

_STATS_SQL = (
    ("total_users", "SELECT COUNT(*) FROM users"),
    ("active_subscriptions", "SELECT COUNT(*) FROM subscriptions WHERE is_active = 1"),
    (
        "active_alerts",
        "SELECT COUNT(*) FROM alerts a "
        "JOIN subscriptions s ON s.id = a.subscription_id "
        "WHERE s.is_active = 1",
    ),
    ("active_markets", "SELECT COUNT(*) FROM markets WHERE is_active = 1"),
    (
        "notifications_today",
        "SELECT COUNT(*) FROM notification_log WHERE created_at >= date('now')",
    ),
)


class AdminStore:
    """Database operations behind the admin endpoints.

    ``database`` is a path to an SQLite file or an open connection.
    """

    def __init__(self, database: Union[str, "os.PathLike[str]", sqlite3.Connection]) -> None:
        if isinstance(database, sqlite3.Connection):
            self._conn = database
            self._owns_connection = False
        else:
            self._conn = sqlite3.connect(os.fspath(database), check_same_thread=False)
            self._owns_connection = True
        self._lock = threading.Lock()

    def close(self) -> None:
        """Close the connection if this store opened it."""
        if self._owns_connection:
            self._conn.close()

    def __enter__(self) -> "AdminStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                logger.error("database error in admin handler: %s", exc)
                raise AdminError("internal database error") from exc

    def update_tier(self, telegram_id: int, tier: str) -> str:
        """Set a user's tier and return the normalised tier name."""
        tier = tier.lower()
        if tier not in VALID_TIERS:
            raise InvalidValueError(
                f"invalid tier {json.dumps(tier)}; must be one of: free, premium, unlimited"
            )
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE users SET tier = ?, updated_at = ? WHERE telegram_id = ?",
                (tier, _utcnow_text(), telegram_id),
            )
            affected = cursor.rowcount
        if affected == 0:
            raise NotFoundError(f"user with telegram_id {telegram_id} not found")
        return tier

    def update_limit(self, telegram_id: int, max_subscriptions: int) -> int:
        """Set a user's subscription cap and return it."""
        if max_subscriptions < 0:
            raise InvalidValueError("max_subscriptions must be non-negative")
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE users SET max_subscriptions = ?, updated_at = ? WHERE telegram_id = ?",
                (max_subscriptions, _utcnow_text(), telegram_id),
            )
            affected = cursor.rowcount
        if affected == 0:
            raise NotFoundError(f"user with telegram_id {telegram_id} not found")
        return max_subscriptions

    def list_users(self) -> List[UserListEntry]:
        """All users ordered by id, with active subscription counts."""
        with self._transaction() as conn:
            rows = conn.execute(_LIST_USERS_SQL).fetchall()
        return [UserListEntry(*row) for row in rows]

    def list_feedback(self) -> List[FeedbackListEntry]:
        """All feedback, newest first."""
        with self._transaction() as conn:
            rows = conn.execute(_LIST_FEEDBACK_SQL).fetchall()
        return [FeedbackListEntry(*row) for row in rows]

    def get_stats(self) -> Stats:
        """Aggregate system statistics."""
        counts = {}
        with self._transaction() as conn:
            for name, sql in _STATS_SQL:
                counts[name] = conn.execute(sql).fetchone()[0]
        return Stats(**counts)


def _json_body() -> dict:
    if not request.is_json:
        raise _UnsupportedMediaType("expected request with Content-Type: application/json")
    body = request.get_json(silent=True)
    if body is None:
        raise _BadRequest("failed to parse the request body as JSON")
    if not isinstance(body, dict):
        raise InvalidValueError("request body must be a JSON object")
    return body


def create_app(
    database: Union[str, "os.PathLike[str]", sqlite3.Connection], admin_password: str
) -> Flask:
    """Build the admin Flask application with Bearer authentication on every route."""
    app = Flask(__name__)
    store = AdminStore(database)
    app.extensions["polynotifier_admin_store"] = store

    @app.before_request
    def _authenticate() -> Optional[Response]:
        try:
            check_authorization(request.headers.get("Authorization"), admin_password)
        except AuthError:
            return Response(status=401)
        return None

    @app.errorhandler(AdminError)
    def _admin_error(exc: AdminError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.put("/admin/users/<int(signed=True):telegram_id>/tier")
    def update_tier(telegram_id: int):
        tier = _json_body().get("tier")
        if not isinstance(tier, str):
            raise InvalidValueError("field 'tier' must be a string")
        tier = store.update_tier(telegram_id, tier)
        return jsonify({"telegram_id": telegram_id, "tier": tier})

    @app.put("/admin/users/<int(signed=True):telegram_id>/limit")
    def update_limit(telegram_id: int):
        value = _json_body().get("max_subscriptions")
        if (
            not isinstance(value, int)
            or isinstance(value, bool)
            or not _I32_MIN <= value <= _I32_MAX
        ):
            raise InvalidValueError("field 'max_subscriptions' must be a 32-bit integer")
        value = store.update_limit(telegram_id, value)
        return jsonify({"telegram_id": telegram_id, "max_subscriptions": value})

    @app.get("/admin/users")
    def list_users():
        return jsonify([asdict(entry) for entry in store.list_users()])

    @app.get("/admin/feedback")
    def list_feedback():
        return jsonify([asdict(entry) for entry in store.list_feedback()])

    @app.get("/admin/stats")
    def get_stats():
        return jsonify(asdict(store.get_stats()))

    return app