"""Delivery of the report message to Slack."""

from abc import ABC, abstractmethod

import aiohttp
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from mrwatch.config import WatchConfig
from mrwatch.exceptions import ConfigurationError, NotificationError
from mrwatch.logging import get_logger

logger = get_logger("notifier")


class Notifier(ABC):
    """Abstract base class for report sinks."""

    @abstractmethod
    async def send(self, message: str) -> None:
        """Deliver a preformatted message, raising NotificationError on failure."""
        pass


class SlackNotifier(Notifier):
    """Posts preformatted mrkdwn messages to one Slack channel."""

    def __init__(self, channel: str, token: str | None = None, client: AsyncWebClient | None = None) -> None:
        """
        Initialize the notifier.

        Args:
            channel: Channel id or name to post to
            token: Slack bot token, used when no client is given
            client: Preconfigured Slack client (optional)
        """
        if client is None and not token:
            raise ConfigurationError("A Slack token is required")
        self.channel = channel
        self.client = client or AsyncWebClient(token=token)

    @classmethod
    def from_config(cls, config: WatchConfig) -> "SlackNotifier":
        """
        Raises:
            ConfigurationError: If the Slack token or channel is missing
        """
        if not config.slack_token or not config.slack_channel:
            raise ConfigurationError("SLACK_TOKEN and SLACK_CHANNEL must both be set")
        return cls(channel=config.slack_channel, token=config.slack_token)

    async def send(self, message: str) -> None:
        """
        Post a message.

        Raises:
            NotificationError: If Slack rejects the message or cannot be reached
        """
        logger.info("Sending message to Slack channel %s", self.channel)
        try:
            response = await self.client.chat_postMessage(channel=self.channel, text=message, mrkdwn=True)
        except (SlackClientError, aiohttp.ClientError) as e:
            raise NotificationError(f"Failed to send message to {self.channel}: {e}", cause=e) from e

        if not response.get("ok"):
            raise NotificationError(f"Failed to send message to {self.channel}: {response.get('error')}")

        logger.info("Message sent to Slack")
