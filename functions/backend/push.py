"""
Push delivery through Firebase Cloud Messaging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from firebase_admin import messaging

logger = logging.getLogger(__name__)


class StaleTokenError(Exception):
    """The device token is no longer registered and should be discarded."""


class PushSender(Protocol):
    def send(self, message: messaging.Message) -> str:
        """Sends the message and returns the FCM message id."""
        ...


@dataclass
class FirebasePushSender:
    def send(self, message: messaging.Message) -> str:
        try:
            return messaging.send(message)
        except messaging.UnregisteredError as e:
            raise StaleTokenError(str(e)) from e


@dataclass
class InMemoryPushSender:
    """Test double recording sent messages. Tokens in `stale_tokens` fail."""

    sent: list[messaging.Message] = field(default_factory=list)
    stale_tokens: set[str] = field(default_factory=set)

    def send(self, message: messaging.Message) -> str:
        if message.token in self.stale_tokens:
            raise StaleTokenError("Requested entity was not found.")
        self.sent.append(message)
        return f"projects/needyou/messages/{len(self.sent)}"
