"""Notification settings endpoints."""

import logging
from typing import Any

from fastapi import APIRouter
from sqlalchemy import select

from fleet_console.server.dependencies import AdminUser, DbSession
from fleet_console.server.models import AppSetting, SlackChannel
from fleet_console.server.schemas import SlackBotTokenUpdate, SlackChannelUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])

SLACK_BOT_TOKEN_KEY = "slack_bot_token"


async def _bot_token_setting(db: DbSession) -> AppSetting | None:
    return await db.get(AppSetting, SLACK_BOT_TOKEN_KEY)


@router.get("/slack-channels")
async def list_slack_channels(db: DbSession, user: AdminUser) -> dict[str, Any]:
    """Configured channels; the token itself is never returned."""
    result = await db.execute(select(SlackChannel).order_by(SlackChannel.form_type))
    token = await _bot_token_setting(db)
    return {
        "success": True,
        "data": [channel.to_wire() for channel in result.scalars().all()],
        "slackBotTokenConfigured": token is not None and bool(token.value),
        "slackBotTokenUpdatedAt": token.updated_at if token is not None else None,
    }


@router.put("/slack-channels")
async def update_slack_channel(
    db: DbSession,
    user: AdminUser,
    payload: SlackChannelUpdate,
) -> dict[str, Any]:
    """Set the channel of one form type."""
    result = await db.execute(
        select(SlackChannel).where(SlackChannel.form_type == payload.form_type.value)
    )
    channel = result.scalars().first()
    if channel is None:
        channel = SlackChannel(form_type=payload.form_type.value, channel_id=payload.channel_id)
        db.add(channel)
    channel.channel_id = payload.channel_id
    channel.channel_name = (payload.channel_name or "").strip() or None
    await db.commit()
    await db.refresh(channel)
    logger.info("Slack channel for %s set to %s", channel.form_type, channel.channel_id)
    return {"success": True, "data": channel.to_wire()}


@router.put("/slack-bot-token")
async def update_slack_bot_token(
    db: DbSession,
    user: AdminUser,
    payload: SlackBotTokenUpdate,
) -> dict[str, Any]:
    token = await _bot_token_setting(db)
    if token is None:
        token = AppSetting(key=SLACK_BOT_TOKEN_KEY, value=payload.bot_token)
        db.add(token)
    token.value = payload.bot_token
    await db.commit()
    await db.refresh(token)
    logger.info("Slack bot token updated")
    return {
        "success": True,
        "slackBotTokenConfigured": True,
        "slackBotTokenUpdatedAt": token.updated_at,
    }
