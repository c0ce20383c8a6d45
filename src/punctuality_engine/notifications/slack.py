"""Slack incoming-webhook client."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from ..core.exceptions import NotificationDeliveryError
from .model import SlackDelivery

logger = logging.getLogger(__name__)


class SlackWebhookClient:
    def __init__(self, timeout: float = 10, username: Optional[str] = None):
        self.timeout = timeout
        self.username = username

    def post(self, webhook_url: str, payload: Mapping[str, Any]) -> SlackDelivery:
        try:
            resp = requests.post(
                webhook_url,
                json=self._with_username(payload),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Slack webhook request failed: %s", e)
            raise NotificationDeliveryError(f"Slack webhook request failed: {e}") from e

        if resp.status_code == 200:
            logger.info("Slack message delivered")
            return SlackDelivery(ok=True, status_code=resp.status_code)

        logger.error("Slack error %s: %s", resp.status_code, resp.text)
        return SlackDelivery(ok=False, status_code=resp.status_code, error=f"Slack returned {resp.status_code}")

    def _with_username(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        body = dict(payload)
        if self.username:
            body["username"] = self.username
        return body
