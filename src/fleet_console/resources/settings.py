"""Slack notification settings."""

from __future__ import annotations

import logging
from typing import Any

from fleet_console.client.cache import QueryCache
from fleet_console.client.errors import ValidationError
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.invalidator import CacheInvalidator
from fleet_console.client.mutations import MutationExecutor
from fleet_console.client.query_keys import QueryKey
from fleet_console.resources.records import SlackFormType, SlackSettings

logger = logging.getLogger(__name__)

SLACK_CHANNELS_PATH = "/api/settings/slack-channels"
SLACK_BOT_TOKEN_PATH = "/api/settings/slack-bot-token"
SLACK_CHANNELS_KEY: QueryKey = (SLACK_CHANNELS_PATH,)


class SlackSettingsClient:
    def __init__(
        self,
        fetcher: RemoteFetcher,
        executor: MutationExecutor,
        cache: QueryCache,
        invalidator: CacheInvalidator,
    ):
        self.fetcher = fetcher
        self.executor = executor
        self.cache = cache
        self.invalidator = invalidator

    async def get(self) -> SlackSettings:
        """Channel per form type and whether a bot token is stored."""

        async def query_fn() -> SlackSettings:
            body = await self.fetcher.get_json(
                SLACK_CHANNELS_PATH, fallback="Failed to fetch Slack settings"
            )
            return SlackSettings.model_validate(body)

        return await self.cache.fetch_query(SLACK_CHANNELS_KEY, query_fn)

    async def update_channel(
        self,
        form_type: SlackFormType | str,
        channel_id: str,
        channel_name: str | None = None,
    ) -> Any:
        form_type = SlackFormType(form_type)
        fields: dict[str, Any] = {"formType": form_type.value, "channelId": channel_id.strip()}
        if channel_name:
            fields["channelName"] = channel_name.strip()
        record = await self.executor.put(
            SLACK_CHANNELS_PATH,
            fields=fields,
            fallback="Failed to update Slack channel",
        )
        logger.info("Slack channel for %s set to %s", form_type.value, channel_id)
        self.invalidator.invalidate([SLACK_CHANNELS_KEY])
        return record

    async def save_bot_token(self, bot_token: str) -> Any:
        """Store the bot token; a blank token is rejected without a request."""
        token = bot_token.strip()
        if not token:
            raise ValidationError("Enter a Slack bot token to save")
        result = await self.executor.put(
            SLACK_BOT_TOKEN_PATH,
            fields={"botToken": token},
            fallback="Failed to save Slack bot token",
        )
        self.invalidator.invalidate([SLACK_CHANNELS_KEY])
        return result
