"""Delivery channel for one-time codes."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    async def send(self, phone_number: str, message: str) -> None:
        ...


class LoggingSmsSender:
    """Writes outgoing messages to the log instead of a carrier."""

    async def send(self, phone_number: str, message: str) -> None:
        logger.info("SMS to %s: %s", phone_number, message)
