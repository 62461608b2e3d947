"""Prediction-market price alerts: rules, cooldowns, chat-bot model and a Flask admin API."""

__version__ = "0.1.0"

__all__ = [
    "admin",
    "auth",
    "commands",
    "dedup",
    "dialogues",
    "dispatch",
    "flows",
    "keyboards",
    "replies",
    "rules",
]